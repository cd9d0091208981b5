import logging

from behavior_app.models.common import new_id
from behavior_app.schemas.behaviors import BehaviorOut, BehaviorSaveRequest
from behavior_app.services.records import count_references, find_row_index, normalize_key, read_behaviors, to_text
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.store import BEHAVIORS, INFRACTIONS, TableStore

logger = logging.getLogger(__name__)

SCORE_RANGES = {
    "positive": (0, 100),
    "negative": (-100, 0),
}


def _validated(payload: BehaviorSaveRequest) -> tuple[str, int, str]:
    name = payload.name.strip()
    behavior_type = payload.type.strip().lower()
    if not name:
        raise OperationError("Behavior name is required")
    if behavior_type not in SCORE_RANGES:
        raise OperationError("Behavior type must be 'positive' or 'negative'")

    low, high = SCORE_RANGES[behavior_type]
    if not low <= payload.score <= high:
        raise OperationError(f"Score of a {behavior_type} behavior must be between {low} and {high}")
    return name, payload.score, behavior_type


@operation
def list_behaviors(store: TableStore) -> Result:
    return ok(behaviors=[behavior.model_dump() for behavior in read_behaviors(store)])


@operation
def get_behavior(store: TableStore, behavior_id: str) -> Result:
    for behavior in read_behaviors(store):
        if behavior.id == behavior_id:
            return ok(behavior=behavior.model_dump())
    raise OperationError("Behavior not found")


@operation
def save_behavior(store: TableStore, payload: BehaviorSaveRequest) -> Result:
    name, score, behavior_type = _validated(payload)
    behavior_id = to_text(payload.id)

    key = normalize_key(name)
    for existing in read_behaviors(store):
        if existing.id != behavior_id and normalize_key(existing.name) == key:
            raise OperationError(f"Behavior '{name}' already exists")

    if behavior_id:
        index = find_row_index(store, BEHAVIORS, behavior_id)
        if index is None:
            raise OperationError("Behavior not found")
        store.update_row(BEHAVIORS, index, {"name": name, "score": score, "type": behavior_type})
        message = "Behavior updated"
    else:
        behavior_id = new_id()
        store.append_rows(BEHAVIORS, [[behavior_id, name, score, behavior_type]])
        message = "Behavior created"

    logger.info("%s: %s (%s, %d).", message, behavior_id, name, score)
    behavior = BehaviorOut(id=behavior_id, name=name, score=score, type=behavior_type)
    return ok(message=message, behavior=behavior.model_dump())


@operation
def delete_behavior(store: TableStore, behavior_id: str) -> Result:
    index = find_row_index(store, BEHAVIORS, behavior_id)
    if index is None:
        raise OperationError("Behavior not found")

    in_use = count_references(store, INFRACTIONS, "behavior_id", behavior_id)
    if in_use:
        raise OperationError(f"Behavior is used by {in_use} infraction(s) and cannot be deleted")

    store.delete_row(BEHAVIORS, index)
    logger.info("Behavior %s deleted.", behavior_id)
    return ok(message="Behavior deleted")
