from datetime import date, datetime
from typing import Any

from behavior_app.schemas.behaviors import BehaviorOut
from behavior_app.schemas.classes import ClassOut
from behavior_app.schemas.infractions import InfractionOut
from behavior_app.schemas.students import StudentOut
from behavior_app.services.store import BEHAVIORS, CLASSES, INFRACTIONS, STUDENTS, Row, TableStore, get_schema


def cell(row: Row, index: int) -> Any:
    return row[index] if index < len(row) else None


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def to_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return default


def to_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = to_text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    text = to_text(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def normalize_key(value: Any) -> str:
    return to_text(value).casefold()


def find_row_index(store: TableStore, table: str, record_id: str) -> int | None:
    wanted = to_text(record_id)
    if not wanted:
        return None
    for index, row in enumerate(store.read_rows(table)):
        if to_text(cell(row, 0)) == wanted:
            return index
    return None


def read_behaviors(store: TableStore) -> list[BehaviorOut]:
    items = []
    for row in store.read_rows(BEHAVIORS):
        if not to_text(cell(row, 0)) or not to_text(cell(row, 1)):
            continue
        items.append(
            BehaviorOut(
                id=to_text(cell(row, 0)),
                name=to_text(cell(row, 1)),
                score=to_int(cell(row, 2)),
                type=normalize_key(cell(row, 3)),
            )
        )
    return items


def read_classes(store: TableStore) -> list[ClassOut]:
    return [
        ClassOut(id=to_text(cell(row, 0)), name=to_text(cell(row, 1)))
        for row in store.read_rows(CLASSES)
        if to_text(cell(row, 0)) and to_text(cell(row, 1))
    ]


def read_students(store: TableStore) -> list[StudentOut]:
    items = []
    for row in store.read_rows(STUDENTS):
        if not to_text(cell(row, 0)) or not to_text(cell(row, 2)):
            continue
        initial = to_int(cell(row, 4))
        deducted = to_int(cell(row, 5))
        added = to_int(cell(row, 6))
        items.append(
            StudentOut(
                id=to_text(cell(row, 0)),
                student_code=to_text(cell(row, 1)),
                name=to_text(cell(row, 2)),
                class_name=to_text(cell(row, 3)),
                initial_score=initial,
                deducted_score=deducted,
                added_score=added,
                net_score=initial - deducted + added,
            )
        )
    return items


def read_infractions(store: TableStore) -> list[InfractionOut]:
    items = []
    for row in store.read_rows(INFRACTIONS):
        if not to_text(cell(row, 0)) or not to_text(cell(row, 1)):
            continue
        items.append(
            InfractionOut(
                id=to_text(cell(row, 0)),
                student_id=to_text(cell(row, 1)),
                student_name=to_text(cell(row, 2)),
                student_class=to_text(cell(row, 3)),
                date=to_date(cell(row, 4)),
                behavior_id=to_text(cell(row, 5)),
                comment=to_text(cell(row, 6)),
                created_at=to_datetime(cell(row, 7)),
            )
        )
    return items


def count_references(store: TableStore, table: str, column: str, value: str) -> int:
    position = get_schema(table).position(column)
    wanted = normalize_key(value)
    return sum(1 for row in store.read_rows(table) if normalize_key(cell(row, position)) == wanted)
