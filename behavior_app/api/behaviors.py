from fastapi import APIRouter, Depends

from behavior_app.api.deps import get_current_teacher
from behavior_app.schemas.behaviors import BehaviorSaveRequest
from behavior_app.services import behaviors
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/behaviors", tags=["behaviors"], dependencies=[Depends(get_current_teacher)])


@router.get("")
def list_behaviors(store: TableStore = Depends(get_store)):
    return behaviors.list_behaviors(store)


@router.get("/{behavior_id}")
def get_behavior(behavior_id: str, store: TableStore = Depends(get_store)):
    return behaviors.get_behavior(store, behavior_id)


@router.post("")
def save_behavior(payload: BehaviorSaveRequest, store: TableStore = Depends(get_store)):
    return behaviors.save_behavior(store, payload)


@router.delete("/{behavior_id}")
def delete_behavior(behavior_id: str, store: TableStore = Depends(get_store)):
    return behaviors.delete_behavior(store, behavior_id)
