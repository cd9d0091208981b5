import logging
from collections import Counter

from behavior_app.models.common import new_id
from behavior_app.schemas.classes import ClassOut, ClassSaveRequest, ClassWithCount
from behavior_app.services.records import (
    cell,
    count_references,
    find_row_index,
    normalize_key,
    read_classes,
    read_students,
    to_text,
)
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.store import CLASSES, STUDENTS, TableStore, get_schema

logger = logging.getLogger(__name__)


def _rename_students(store: TableStore, previous: str, name: str) -> None:
    if not previous or previous == name:
        return
    position = get_schema(STUDENTS).position("class_name")
    old_key = normalize_key(previous)
    renamed = 0
    for index, row in enumerate(store.read_rows(STUDENTS)):
        if normalize_key(cell(row, position)) == old_key:
            store.update_row(STUDENTS, index, {"class_name": name})
            renamed += 1
    if renamed:
        logger.info("Moved %d student(s) from class %s to %s.", renamed, previous, name)


@operation
def list_classes(store: TableStore) -> Result:
    return ok(classes=[item.model_dump() for item in read_classes(store)])


@operation
def list_classes_with_counts(store: TableStore) -> Result:
    counts = Counter(normalize_key(student.class_name) for student in read_students(store))
    items = [
        ClassWithCount(id=item.id, name=item.name, student_count=counts.get(normalize_key(item.name), 0))
        for item in read_classes(store)
    ]
    return ok(classes=[item.model_dump() for item in items])


@operation
def save_class(store: TableStore, payload: ClassSaveRequest) -> Result:
    name = payload.name.strip()
    if not name:
        raise OperationError("Class name is required")
    class_id = to_text(payload.id)

    key = normalize_key(name)
    for existing in read_classes(store):
        if existing.id != class_id and normalize_key(existing.name) == key:
            raise OperationError(f"Class '{name}' already exists")

    if class_id:
        index = find_row_index(store, CLASSES, class_id)
        if index is None:
            raise OperationError("Class not found")
        previous = cell(store.read_rows(CLASSES)[index], 1)
        store.update_row(CLASSES, index, {"name": name})
        _rename_students(store, to_text(previous), name)
        message = "Class updated"
    else:
        class_id = new_id()
        store.append_rows(CLASSES, [[class_id, name]])
        message = "Class created"

    logger.info("%s: %s (%s).", message, class_id, name)
    return ok(message=message, school_class=ClassOut(id=class_id, name=name).model_dump())


@operation
def delete_class(store: TableStore, class_id: str) -> Result:
    school_class = next((item for item in read_classes(store) if item.id == class_id), None)
    index = find_row_index(store, CLASSES, class_id)
    if school_class is None or index is None:
        raise OperationError("Class not found")

    in_use = count_references(store, STUDENTS, "class_name", school_class.name)
    if in_use:
        raise OperationError(f"Class '{school_class.name}' has {in_use} student(s) and cannot be deleted")

    store.delete_row(CLASSES, index)
    logger.info("Class %s deleted (%s).", class_id, school_class.name)
    return ok(message="Class deleted")
