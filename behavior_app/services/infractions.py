import logging
from datetime import UTC, date, datetime

from behavior_app.models.common import new_id
from behavior_app.schemas.infractions import InfractionCreateRequest, InfractionHistoryItem, InfractionOut
from behavior_app.services.records import read_behaviors, read_infractions, read_students
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.scoring import recompute_student_scores
from behavior_app.services.store import INFRACTIONS, TableStore

logger = logging.getLogger(__name__)


def student_history(store: TableStore, student_id: str) -> list[InfractionHistoryItem]:
    behaviors = {behavior.id: behavior for behavior in read_behaviors(store)}
    items = []
    for infraction in read_infractions(store):
        if infraction.student_id != student_id:
            continue
        behavior = behaviors.get(infraction.behavior_id)
        items.append(
            InfractionHistoryItem(
                **infraction.model_dump(),
                behavior_name=behavior.name if behavior else None,
                behavior_score=behavior.score if behavior else None,
                behavior_type=behavior.type if behavior else None,
            )
        )
    # Newest date first, later rows first within a day.
    items.reverse()
    items.sort(key=lambda item: item.date or date.min, reverse=True)
    return items


@operation
def save_infraction(store: TableStore, payload: InfractionCreateRequest) -> Result:
    if payload.date is None:
        raise OperationError("Date is required")

    student = next((item for item in read_students(store) if item.id == payload.student_id), None)
    if student is None:
        raise OperationError("Student not found")
    behavior = next((item for item in read_behaviors(store) if item.id == payload.behavior_id), None)
    if behavior is None:
        raise OperationError("Behavior not found")

    infraction = InfractionOut(
        id=new_id(),
        student_id=student.id,
        student_name=student.name,
        student_class=student.class_name,
        date=payload.date,
        behavior_id=behavior.id,
        comment=payload.comment.strip(),
        created_at=datetime.now(UTC),
    )
    store.append_rows(
        INFRACTIONS,
        [
            [
                infraction.id,
                infraction.student_id,
                infraction.student_name,
                infraction.student_class,
                infraction.date,
                infraction.behavior_id,
                infraction.comment,
                infraction.created_at,
            ]
        ],
    )
    logger.info("Infraction %s recorded for student %s (%s).", infraction.id, student.id, behavior.name)

    message = "Infraction recorded"
    try:
        deducted, added = recompute_student_scores(store, student.id)
    except Exception as exc:
        logger.warning("Score recompute failed for student %s after infraction %s: %s", student.id, infraction.id, exc)
        return ok(
            message=f"{message}, but the student's score could not be recalculated: {exc}",
            infraction=infraction.model_dump(),
        )

    return ok(
        message=message,
        infraction=infraction.model_dump(),
        deducted_score=deducted,
        added_score=added,
        net_score=student.initial_score - deducted + added,
    )


@operation
def list_infractions_by_student(store: TableStore, student_id: str) -> Result:
    if not any(student.id == student_id for student in read_students(store)):
        raise OperationError("Student not found")
    return ok(infractions=[item.model_dump() for item in student_history(store, student_id)])
