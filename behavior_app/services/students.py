import logging

from behavior_app.core.config import get_settings
from behavior_app.models.common import new_id
from behavior_app.schemas.students import StudentOut, StudentSaveRequest
from behavior_app.services.infractions import student_history
from behavior_app.services.records import (
    count_references,
    find_row_index,
    normalize_key,
    read_classes,
    read_students,
    to_text,
)
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.store import INFRACTIONS, STUDENTS, TableStore

logger = logging.getLogger(__name__)


@operation
def list_students(store: TableStore) -> Result:
    return ok(students=[student.model_dump() for student in read_students(store)])


@operation
def get_student_by_code(store: TableStore, code: str) -> Result:
    key = normalize_key(code)
    if not key:
        raise OperationError("Student code is required")

    student = next((item for item in read_students(store) if normalize_key(item.student_code) == key), None)
    if student is None:
        raise OperationError(f"Student '{code.strip()}' not found")

    history = student_history(store, student.id)
    return ok(student=student.model_dump(), infractions=[item.model_dump() for item in history])


@operation
def save_student(store: TableStore, payload: StudentSaveRequest) -> Result:
    student_code = payload.student_code.strip()
    name = payload.name.strip()
    class_name = payload.class_name.strip()
    if not student_code or not name or not class_name:
        raise OperationError("Student code, name and class are required")
    student_id = to_text(payload.id)

    known_classes = {normalize_key(item.name): item.name for item in read_classes(store)}
    class_key = normalize_key(class_name)
    if class_key not in known_classes:
        raise OperationError(f"Class '{class_name}' does not exist")
    class_name = known_classes[class_key]

    students = read_students(store)
    code_key = normalize_key(student_code)
    for existing in students:
        if existing.id != student_id and normalize_key(existing.student_code) == code_key:
            raise OperationError(f"Student code '{student_code}' already exists")

    if student_id:
        current = next((item for item in students if item.id == student_id), None)
        index = find_row_index(store, STUDENTS, student_id)
        if current is None or index is None:
            raise OperationError("Student not found")
        initial_score = current.initial_score if payload.initial_score is None else payload.initial_score
        store.update_row(
            STUDENTS,
            index,
            {
                "student_code": student_code,
                "name": name,
                "class_name": class_name,
                "initial_score": initial_score,
            },
        )
        deducted, added = current.deducted_score, current.added_score
        message = "Student updated"
    else:
        student_id = new_id()
        initial_score = payload.initial_score
        if initial_score is None:
            initial_score = get_settings().default_initial_score
        deducted, added = 0, 0
        store.append_rows(STUDENTS, [[student_id, student_code, name, class_name, initial_score, deducted, added]])
        message = "Student created"

    logger.info("%s: %s (%s).", message, student_id, student_code)
    student = StudentOut(
        id=student_id,
        student_code=student_code,
        name=name,
        class_name=class_name,
        initial_score=initial_score,
        deducted_score=deducted,
        added_score=added,
        net_score=initial_score - deducted + added,
    )
    return ok(message=message, student=student.model_dump())


@operation
def delete_student(store: TableStore, student_id: str) -> Result:
    index = find_row_index(store, STUDENTS, student_id)
    if index is None:
        raise OperationError("Student not found")

    infractions = count_references(store, INFRACTIONS, "student_id", student_id)
    if infractions:
        raise OperationError(f"Student has {infractions} infraction(s) and cannot be deleted")

    store.delete_row(STUDENTS, index)
    logger.info("Student %s deleted.", student_id)
    return ok(message="Student deleted")
