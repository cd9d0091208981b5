import logging

from fastapi import APIRouter, Depends, File, Response, UploadFile

from behavior_app.api.deps import get_current_teacher
from behavior_app.schemas.students import StudentSaveRequest
from behavior_app.services import infractions, scoring, students
from behavior_app.services.importer import import_students_from_csv
from behavior_app.services.reports import build_import_template
from behavior_app.services.results import fail
from behavior_app.services.store import TableStore, get_store

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/students", tags=["students"])
router = APIRouter(prefix="/students", tags=["students"], dependencies=[Depends(get_current_teacher)])


@public_router.get("/by-code/{code}")
def get_student_by_code(code: str, store: TableStore = Depends(get_store)):
    return students.get_student_by_code(store, code)


@router.get("")
def list_students(store: TableStore = Depends(get_store)):
    return students.list_students(store)


@router.post("")
def save_student(payload: StudentSaveRequest, store: TableStore = Depends(get_store)):
    return students.save_student(store, payload)


@router.post("/recompute")
def recompute_scores(store: TableStore = Depends(get_store)):
    return scoring.recompute_all_scores(store)


@router.get("/import/template")
def import_template():
    return Response(
        content=build_import_template(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="student-import-template.csv"'},
    )


@router.post("/import")
async def import_students(file: UploadFile = File(...), store: TableStore = Depends(get_store)):
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("Rejected import %s: not UTF-8.", file.filename)
        return fail("The file must be a UTF-8 encoded CSV")
    return import_students_from_csv(store, content)


@router.get("/{student_id}/infractions")
def list_student_infractions(student_id: str, store: TableStore = Depends(get_store)):
    return infractions.list_infractions_by_student(store, student_id)


@router.delete("/{student_id}")
def delete_student(student_id: str, store: TableStore = Depends(get_store)):
    return students.delete_student(store, student_id)
