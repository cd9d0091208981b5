import logging

from behavior_app.services.records import find_row_index, read_behaviors, read_infractions, read_students
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.store import STUDENTS, TableStore

logger = logging.getLogger(__name__)


def recompute_student_scores(store: TableStore, student_id: str) -> tuple[int, int]:
    """Rebuild a student's cached deducted/added totals from its infractions.

    Infractions pointing at a behavior that no longer exists contribute
    nothing. Returns ``(deducted, added)``.
    """
    index = find_row_index(store, STUDENTS, student_id)
    if index is None:
        raise OperationError("Student not found")

    behaviors = {behavior.id: behavior for behavior in read_behaviors(store)}
    deducted = 0
    added = 0
    for infraction in read_infractions(store):
        if infraction.student_id != student_id:
            continue
        behavior = behaviors.get(infraction.behavior_id)
        if behavior is None:
            logger.warning(
                "Infraction %s references missing behavior %s, skipped.",
                infraction.id,
                infraction.behavior_id,
            )
            continue
        if behavior.type == "negative":
            deducted += abs(behavior.score)
        elif behavior.type == "positive":
            added += abs(behavior.score)

    store.update_row(STUDENTS, index, {"deducted_score": deducted, "added_score": added})
    return deducted, added


@operation
def recompute_all_scores(store: TableStore) -> Result:
    students = read_students(store)
    for student in students:
        recompute_student_scores(store, student.id)
    logger.info("Recomputed scores for %d student(s).", len(students))
    return ok(message=f"Recomputed scores for {len(students)} student(s)", recomputed=len(students))
