from fastapi import APIRouter, Depends, Query

from behavior_app.api.deps import get_current_teacher, get_storage_service
from behavior_app.services import reports
from behavior_app.services.storage import StorageService
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(get_current_teacher)])


@router.get("/students")
def report_data(store: TableStore = Depends(get_store)):
    return reports.get_report_data(store)


@router.get("/students/filter")
def filter_report(
    search: str = Query(default="", max_length=255),
    class_name: str = Query(default="", max_length=64),
    store: TableStore = Depends(get_store),
):
    return reports.filter_student_report(store, search, class_name)


@router.post("/export")
def export_report(
    export_format: str = Query(default="csv", alias="format", max_length=8),
    store: TableStore = Depends(get_store),
    storage: StorageService = Depends(get_storage_service),
):
    return reports.export_report(store, export_format, storage=storage)
