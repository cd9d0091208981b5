import logging

from behavior_app.core.security import create_access_token, hash_password, verify_password
from behavior_app.models.common import new_id
from behavior_app.schemas.auth import TeacherOut
from behavior_app.services.records import cell, find_row_index, to_text
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.store import TEACHERS, TableStore

logger = logging.getLogger(__name__)


def read_teachers(store: TableStore) -> list[tuple[TeacherOut, str]]:
    teachers = []
    for row in store.read_rows(TEACHERS):
        if not to_text(cell(row, 0)) or not to_text(cell(row, 2)):
            continue
        teacher = TeacherOut(id=to_text(cell(row, 0)), name=to_text(cell(row, 1)), username=to_text(cell(row, 2)))
        teachers.append((teacher, to_text(cell(row, 3))))
    return teachers


def find_teacher(store: TableStore, teacher_id: str) -> TeacherOut | None:
    return next((teacher for teacher, _ in read_teachers(store) if teacher.id == teacher_id), None)


@operation
def login(store: TableStore, username: str, password: str) -> Result:
    username = username.strip()
    if not username or not password:
        raise OperationError("Username and password are required")

    for teacher, stored_password in read_teachers(store):
        if teacher.username == username and stored_password and verify_password(password, stored_password):
            logger.info("Teacher %s logged in.", teacher.username)
            return ok(
                access_token=create_access_token(subject=teacher.id),
                token_type="bearer",
                teacher=teacher.model_dump(),
            )

    logger.info("Failed login for %s.", username)
    raise OperationError("Invalid username or password")


def upsert_teacher(store: TableStore, username: str, password: str, name: str = "") -> str:
    """Create or update a Teachers row; returns ``"created"`` or ``"updated"``."""
    existing = next((teacher for teacher, _ in read_teachers(store) if teacher.username == username), None)
    if existing is not None:
        index = find_row_index(store, TEACHERS, existing.id)
        values = {"password": hash_password(password)}
        if name:
            values["name"] = name
        store.update_row(TEACHERS, index, values)
        return "updated"

    store.append_rows(TEACHERS, [[new_id(), name or username, username, hash_password(password)]])
    return "created"
