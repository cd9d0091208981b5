from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "test.db"
    media_dir = tmp_path / "media"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_file.as_posix()}")
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("MEDIA_DIR", str(media_dir))
    monkeypatch.setenv("MEDIA_BASE_URL", "http://testserver/media")
    monkeypatch.setenv("AUTO_CREATE_TEACHER", "true")
    monkeypatch.setenv("BOOTSTRAP_TEACHER_USERNAME", "admin")
    monkeypatch.setenv("BOOTSTRAP_TEACHER_PASSWORD", "admin123")
    monkeypatch.setenv("DEFAULT_INITIAL_SCORE", "100")

    from behavior_app.core.config import clear_settings_cache
    from behavior_app.db.base import Base
    from behavior_app.db.session import get_engine, reset_engine
    from behavior_app.main import create_app
    from behavior_app.schemas.classes import ClassSaveRequest
    from behavior_app.services.classes import save_class
    from behavior_app.services.store import get_store, reset_store

    clear_settings_cache()
    reset_engine()
    reset_store()

    store = get_store()
    for name in ("ม.1/1", "ม.1/2"):
        save_class(store, ClassSaveRequest(name=name))

    app = create_app()
    with TestClient(app) as client:
        yield client

    Base.metadata.drop_all(bind=get_engine())
    reset_store()
    reset_engine()
    clear_settings_cache()


@pytest.fixture()
def store(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DEFAULT_INITIAL_SCORE", "100")

    from behavior_app.core.config import clear_settings_cache
    from behavior_app.services.store import MemoryTableStore

    clear_settings_cache()
    yield MemoryTableStore()
    clear_settings_cache()


def auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["success"] is True, payload
    return {"Authorization": f"Bearer {payload['access_token']}"}
