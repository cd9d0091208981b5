from fastapi import APIRouter, Depends

from behavior_app.schemas.auth import LoginRequest
from behavior_app.services.auth import login as login_teacher
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginRequest, store: TableStore = Depends(get_store)):
    return login_teacher(store, payload.username, payload.password)
