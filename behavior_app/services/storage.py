import logging
from pathlib import Path
from uuid import uuid4

import boto3

from behavior_app.core.config import get_settings

logger = logging.getLogger(__name__)


class StorageService:
    def __init__(self) -> None:
        self.settings = get_settings()
        self.backend = self.settings.storage_backend.lower()

        if self.backend == "s3":
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=self.settings.s3_endpoint,
                aws_access_key_id=self.settings.s3_access_key,
                aws_secret_access_key=self.settings.s3_secret_key,
                region_name=self.settings.s3_region,
            )
        else:
            self.s3_client = None
            self.settings.media_path.mkdir(parents=True, exist_ok=True)

    def save_file(self, content: bytes, filename: str, content_type: str, prefix: str) -> str:
        """Store ``content`` under a unique key and return its public download URL."""
        safe_name = Path(filename).name or "file.bin"
        object_key = f"{prefix}/{uuid4().hex}/{safe_name}"

        if self.backend == "s3":
            url = self._save_s3(object_key=object_key, content=content, content_type=content_type)
        else:
            url = self._save_local(object_key=object_key, content=content)
        logger.info("Stored %s (%d bytes) at %s.", safe_name, len(content), url)
        return url

    def _save_local(self, object_key: str, content: bytes) -> str:
        path = self.settings.media_path / object_key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        key_url = object_key.replace("\\", "/")
        return f"{self.settings.media_base_url.rstrip('/')}/{key_url}"

    def _save_s3(self, object_key: str, content: bytes, content_type: str) -> str:
        assert self.s3_client is not None
        self.s3_client.put_object(
            Bucket=self.settings.s3_bucket,
            Key=object_key,
            Body=content,
            ContentType=content_type,
            ContentDisposition=f'attachment; filename="{Path(object_key).name}"',
        )
        if self.settings.s3_public_base_url:
            return f"{self.settings.s3_public_base_url.rstrip('/')}/{object_key}"
        endpoint = self.settings.s3_endpoint.rstrip("/")
        return f"{endpoint}/{self.settings.s3_bucket}/{object_key}"
