from fastapi import APIRouter

from behavior_app.core.config import get_settings

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    settings = get_settings()
    return {"status": "ok", "version": settings.app_version}


@router.get("/system/info")
def system_info():
    settings = get_settings()
    return {
        "app_name": settings.app_name,
        "app_env": settings.app_env,
        "app_version": settings.app_version,
        "store_backend": settings.store_backend,
        "storage_backend": settings.storage_backend,
    }
