from collections import Counter
from datetime import date

from behavior_app.schemas.behaviors import BehaviorOut
from behavior_app.schemas.classes import ClassOut
from behavior_app.schemas.infractions import InfractionOut
from behavior_app.schemas.students import StudentOut
from behavior_app.services.records import normalize_key, read_behaviors, read_classes, read_infractions, read_students
from behavior_app.services.results import Result, ok, operation
from behavior_app.services.store import TableStore

CLASS_PALETTE = (
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
)
BEHAVIOR_COLORS = {
    "positive": "#22c55e",
    "negative": "#ef4444",
}


def top_behavior(infractions: list[InfractionOut], behaviors: list[BehaviorOut]) -> dict | None:
    counts = Counter(item.behavior_id for item in infractions if item.behavior_id)
    best_id = None
    best_count = 0
    # Counter keeps first-seen order, so the earliest recorded behavior wins ties.
    for behavior_id, count in counts.items():
        if count > best_count:
            best_id, best_count = behavior_id, count
    if best_id is None:
        return None

    names = {behavior.id: behavior.name for behavior in behaviors}
    return {"id": best_id, "name": names.get(best_id, ""), "count": best_count}


def lowest_student(students: list[StudentOut]) -> dict | None:
    lowest = None
    for student in students:
        if lowest is None or student.net_score < lowest.net_score:
            lowest = student
    return lowest.model_dump() if lowest else None


def monthly_count(infractions: list[InfractionOut], today: date) -> int:
    return sum(
        1
        for item in infractions
        if item.date is not None and item.date.year == today.year and item.date.month == today.month
    )


def behavior_distribution(infractions: list[InfractionOut], behaviors: list[BehaviorOut]) -> dict:
    counts = Counter(item.behavior_id for item in infractions)
    used = [behavior for behavior in behaviors if counts.get(behavior.id)]
    used.sort(key=lambda behavior: counts[behavior.id], reverse=True)
    return {
        "labels": [behavior.name for behavior in used],
        "data": [counts[behavior.id] for behavior in used],
        "colors": [BEHAVIOR_COLORS.get(behavior.type, "#9ca3af") for behavior in used],
    }


def class_averages(students: list[StudentOut], classes: list[ClassOut]) -> dict:
    groups: dict[str, tuple[str, list[int]]] = {}
    for school_class in classes:
        groups.setdefault(normalize_key(school_class.name), (school_class.name, []))
    for student in students:
        _, scores = groups.setdefault(normalize_key(student.class_name), (student.class_name, []))
        scores.append(student.net_score)

    labels = []
    data = []
    for label, scores in groups.values():
        labels.append(label)
        data.append(round(sum(scores) / len(scores), 2) if scores else 0)
    return {
        "labels": labels,
        "data": data,
        "colors": [CLASS_PALETTE[index % len(CLASS_PALETTE)] for index in range(len(labels))],
    }


@operation
def get_dashboard_data(store: TableStore, today: date | None = None) -> Result:
    today = today or date.today()
    behaviors = read_behaviors(store)
    students = read_students(store)
    infractions = read_infractions(store)
    classes = read_classes(store)

    return ok(
        total_students=len(students),
        total_behaviors=len(behaviors),
        total_classes=len(classes),
        total_infractions=len(infractions),
        top_behavior=top_behavior(infractions, behaviors),
        lowest_student=lowest_student(students),
        monthly_reports=monthly_count(infractions, today),
        behavior_chart=behavior_distribution(infractions, behaviors),
        class_chart=class_averages(students, classes),
    )
