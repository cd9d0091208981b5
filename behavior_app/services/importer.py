import csv
import io
import logging

from pydantic import ValidationError

from behavior_app.core.config import get_settings
from behavior_app.models.common import new_id
from behavior_app.schemas.students import StudentSaveRequest
from behavior_app.services.records import normalize_key, read_classes, read_students
from behavior_app.services.results import Result, operation
from behavior_app.services.store import STUDENTS, TableStore

logger = logging.getLogger(__name__)

IMPORT_COLUMNS = 3
MAX_REPORTED_ERRORS = 10
FIELD_LABELS = {
    "student_code": "student code",
    "name": "name",
    "class_name": "class",
}


def _cells(row: list[str]) -> list[str]:
    cells = [value.strip() for value in row]
    while cells and not cells[-1]:
        cells.pop()
    return cells


def _length_errors(student_code: str, name: str, class_name: str) -> list[str]:
    """Check a row against the same limits the student form applies."""
    try:
        StudentSaveRequest(student_code=student_code, name=name, class_name=class_name)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            label = FIELD_LABELS.get(str(error["loc"][0]), str(error["loc"][0]))
            limit = error.get("ctx", {}).get("max_length")
            problems.append(f"{label} is too long (max {limit} characters)" if limit else f"{label}: {error['msg']}")
        return problems
    return []


@operation
def import_students_from_csv(store: TableStore, content: str) -> Result:
    """Append every valid roster row; bad rows are reported, not fatal."""
    reader = csv.reader(io.StringIO(content.lstrip("\ufeff")))
    next(reader, None)

    known_codes = {normalize_key(student.student_code) for student in read_students(store)}
    known_classes = {normalize_key(item.name): item.name for item in read_classes(store)}
    initial_score = get_settings().default_initial_score

    accepted: list[list] = []
    errors: list[str] = []
    for line_number, row in enumerate(reader, start=2):
        cells = _cells(row)
        if not cells:
            continue
        if len(cells) != IMPORT_COLUMNS or not all(cells):
            errors.append(f"Row {line_number}: expected {IMPORT_COLUMNS} non-empty columns (code, name, class)")
            continue

        student_code, name, class_name = cells
        too_long = _length_errors(student_code, name, class_name)
        if too_long:
            errors.append(f"Row {line_number}: " + "; ".join(too_long))
            continue
        code_key = normalize_key(student_code)
        if code_key in known_codes:
            errors.append(f"Row {line_number}: student code '{student_code}' already exists")
            continue
        class_key = normalize_key(class_name)
        if class_key not in known_classes:
            errors.append(f"Row {line_number}: class '{class_name}' does not exist")
            continue

        known_codes.add(code_key)
        accepted.append([new_id(), student_code, name, known_classes[class_key], initial_score, 0, 0])

    if accepted:
        store.append_rows(STUDENTS, accepted)

    remaining = max(0, len(errors) - MAX_REPORTED_ERRORS)
    message = f"Imported {len(accepted)} student(s), {len(errors)} error(s)"
    if errors:
        message += ":\n" + "\n".join(errors[:MAX_REPORTED_ERRORS])
        if remaining:
            message += f"\n...and {remaining} more error(s)"
    elif not accepted:
        message = "No student rows found in the file"

    logger.info("CSV import finished: %d imported, %d error(s).", len(accepted), len(errors))
    return {
        "success": not errors and bool(accepted),
        "message": message,
        "imported": len(accepted),
        "errors": errors[:MAX_REPORTED_ERRORS],
        "remaining_errors": remaining,
    }
