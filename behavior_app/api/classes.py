from fastapi import APIRouter, Depends

from behavior_app.api.deps import get_current_teacher
from behavior_app.schemas.classes import ClassSaveRequest
from behavior_app.services import classes
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/classes", tags=["classes"], dependencies=[Depends(get_current_teacher)])


@router.get("")
def list_classes(store: TableStore = Depends(get_store)):
    return classes.list_classes(store)


@router.get("/with-counts")
def list_classes_with_counts(store: TableStore = Depends(get_store)):
    return classes.list_classes_with_counts(store)


@router.post("")
def save_class(payload: ClassSaveRequest, store: TableStore = Depends(get_store)):
    return classes.save_class(store, payload)


@router.delete("/{class_id}")
def delete_class(class_id: str, store: TableStore = Depends(get_store)):
    return classes.delete_class(store, class_id)
