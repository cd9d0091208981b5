from datetime import date

import pytest

from behavior_app.schemas.behaviors import BehaviorSaveRequest
from behavior_app.schemas.classes import ClassSaveRequest
from behavior_app.schemas.infractions import InfractionCreateRequest
from behavior_app.schemas.students import StudentSaveRequest
from behavior_app.services import behaviors, classes, infractions, scoring, students
from behavior_app.services.importer import import_students_from_csv
from behavior_app.services.records import read_behaviors, read_infractions, read_students
from behavior_app.services.store import INFRACTIONS, STUDENTS, MemoryTableStore


def _class(store: MemoryTableStore, name: str) -> str:
    result = classes.save_class(store, ClassSaveRequest(name=name))
    assert result["success"] is True, result
    return result["school_class"]["id"]


def _behavior(store: MemoryTableStore, name: str, score: int, behavior_type: str) -> str:
    result = behaviors.save_behavior(store, BehaviorSaveRequest(name=name, score=score, type=behavior_type))
    assert result["success"] is True, result
    return result["behavior"]["id"]


def _student(store: MemoryTableStore, code: str, class_name: str = "ม.1/1", initial_score: int | None = None) -> str:
    result = students.save_student(
        store,
        StudentSaveRequest(student_code=code, name=f"Student {code}", class_name=class_name, initial_score=initial_score),
    )
    assert result["success"] is True, result
    return result["student"]["id"]


def _infraction(store: MemoryTableStore, student_id: str, behavior_id: str, day: date | None = None) -> dict:
    return infractions.save_infraction(
        store,
        InfractionCreateRequest(student_id=student_id, behavior_id=behavior_id, date=day or date(2026, 10, 1)),
    )


@pytest.mark.parametrize(
    ("behavior_type", "score", "accepted"),
    [
        ("positive", 150, False),
        ("positive", 100, True),
        ("positive", 0, True),
        ("positive", -1, False),
        ("negative", 5, False),
        ("negative", -5, True),
        ("negative", -101, False),
    ],
)
def test_behavior_score_range_depends_on_type(store, behavior_type, score, accepted):
    result = behaviors.save_behavior(store, BehaviorSaveRequest(name="Rule", score=score, type=behavior_type))
    assert result["success"] is accepted


def test_behavior_requires_known_type_and_name(store):
    assert behaviors.save_behavior(store, BehaviorSaveRequest(name="Rule", score=1, type="neutral"))["success"] is False
    assert behaviors.save_behavior(store, BehaviorSaveRequest(name="  ", score=1, type="positive"))["success"] is False


def test_behavior_name_unique_case_insensitive(store):
    first = _behavior(store, "Late", -5, "negative")
    duplicate = behaviors.save_behavior(store, BehaviorSaveRequest(name="LATE", score=-3, type="negative"))
    assert duplicate["success"] is False
    assert "already exists" in duplicate["message"]

    # Saving the same record under its own name is not a conflict.
    same = behaviors.save_behavior(store, BehaviorSaveRequest(id=first, name="late", score=-3, type="negative"))
    assert same["success"] is True
    assert [item.score for item in read_behaviors(store)] == [-3]


def test_update_unknown_behavior_fails(store):
    result = behaviors.save_behavior(store, BehaviorSaveRequest(id="missing", name="Late", score=-1, type="negative"))
    assert result == {"success": False, "message": "Behavior not found"}


def test_behavior_delete_blocked_while_referenced(store):
    _class(store, "ม.1/1")
    used = _behavior(store, "Late", -5, "negative")
    unused = _behavior(store, "Kind", 2, "positive")
    student_id = _student(store, "S1")
    assert _infraction(store, student_id, used)["success"] is True

    blocked = behaviors.delete_behavior(store, used)
    assert blocked["success"] is False
    assert "1 infraction" in blocked["message"]

    assert behaviors.delete_behavior(store, unused)["success"] is True
    assert [item["id"] for item in behaviors.list_behaviors(store)["behaviors"]] == [used]


def test_get_behavior(store):
    behavior_id = _behavior(store, "Late", -5, "negative")
    assert behaviors.get_behavior(store, behavior_id)["behavior"]["name"] == "Late"
    assert behaviors.get_behavior(store, "nope")["success"] is False


def test_list_drops_rows_without_id_or_name(store):
    store.append_rows("Behaviors", [["", "No id", 1, "positive"], ["b1", "", 1, "positive"], ["b2", "Ok", 1, "positive"]])
    assert [item["id"] for item in behaviors.list_behaviors(store)["behaviors"]] == ["b2"]


def test_class_delete_blocked_while_students_reference_it(store):
    used = _class(store, "ม.1/1")
    empty = _class(store, "ม.1/2")
    _student(store, "S1", class_name="ม.1/1")

    assert classes.delete_class(store, used)["success"] is False
    assert classes.delete_class(store, empty)["success"] is True
    assert [item["name"] for item in classes.list_classes(store)["classes"]] == ["ม.1/1"]


def test_class_name_unique_case_insensitive(store):
    _class(store, "Room A")
    assert classes.save_class(store, ClassSaveRequest(name="room a"))["success"] is False


def test_class_rename_moves_students(store):
    class_id = _class(store, "ม.1/1")
    _student(store, "S1", class_name="ม.1/1")

    result = classes.save_class(store, ClassSaveRequest(id=class_id, name="ม.2/1"))
    assert result["success"] is True
    assert [item.class_name for item in read_students(store)] == ["ม.2/1"]


def test_classes_with_counts(store):
    _class(store, "ม.1/1")
    _class(store, "ม.1/2")
    _student(store, "S1", class_name="ม.1/1")
    _student(store, "S2", class_name="ม.1/1")

    result = classes.list_classes_with_counts(store)
    assert [(item["name"], item["student_count"]) for item in result["classes"]] == [("ม.1/1", 2), ("ม.1/2", 0)]


def test_student_requires_existing_class(store):
    _class(store, "ม.1/1")
    result = students.save_student(store, StudentSaveRequest(student_code="S1", name="A", class_name="ม.6/6"))
    assert result["success"] is False
    assert result["message"] == "Class 'ม.6/6' does not exist"
    assert read_students(store) == []


def test_student_class_matched_case_insensitively(store):
    _class(store, "Room A")
    _student(store, "S1", class_name="room a")
    assert read_students(store)[0].class_name == "Room A"


def test_student_code_unique_and_defaults(store):
    _class(store, "ม.1/1")
    student_id = _student(store, "S1")
    created = read_students(store)[0]
    assert (created.initial_score, created.deducted_score, created.added_score) == (100, 0, 0)

    duplicate = students.save_student(store, StudentSaveRequest(student_code="s1", name="B", class_name="ม.1/1"))
    assert duplicate["success"] is False

    updated = students.save_student(
        store,
        StudentSaveRequest(id=student_id, student_code="S1", name="Renamed", class_name="ม.1/1"),
    )
    assert updated["success"] is True
    assert updated["student"]["initial_score"] == 100
    assert read_students(store)[0].name == "Renamed"


def test_student_requires_fields(store):
    result = students.save_student(store, StudentSaveRequest(student_code="S1", name="", class_name="ม.1/1"))
    assert result["success"] is False


def test_student_delete_blocked_with_infractions(store):
    _class(store, "ม.1/1")
    behavior_id = _behavior(store, "Late", -5, "negative")
    with_history = _student(store, "S1")
    clean = _student(store, "S2")
    _infraction(store, with_history, behavior_id)

    assert students.delete_student(store, with_history)["success"] is False
    assert students.delete_student(store, clean)["success"] is True
    assert [item.student_code for item in read_students(store)] == ["S1"]


def test_recompute_matches_infraction_sums(store):
    _class(store, "ม.1/1")
    late = _behavior(store, "Late", -5, "negative")
    fight = _behavior(store, "Fight", -20, "negative")
    helped = _behavior(store, "Helped", 10, "positive")
    first = _student(store, "S1")
    second = _student(store, "S2")

    for student_id, behavior_id in ((first, late), (first, fight), (first, helped), (second, helped), (second, helped)):
        assert _infraction(store, student_id, behavior_id)["success"] is True

    by_id = {behavior.id: behavior for behavior in read_behaviors(store)}
    for student in read_students(store):
        own = [by_id[item.behavior_id] for item in read_infractions(store) if item.student_id == student.id]
        assert student.deducted_score == sum(abs(b.score) for b in own if b.type == "negative")
        assert student.added_score == sum(b.score for b in own if b.type == "positive")

    totals = {item.student_code: (item.deducted_score, item.added_score, item.net_score) for item in read_students(store)}
    assert totals == {"S1": (25, 10, 85), "S2": (0, 20, 120)}


def test_recompute_skips_missing_behaviors(store):
    _class(store, "ม.1/1")
    late = _behavior(store, "Late", -5, "negative")
    student_id = _student(store, "S1")
    _infraction(store, student_id, late)
    store.append_rows(INFRACTIONS, [["i-x", student_id, "", "", date(2026, 10, 1), "gone", "", None]])

    assert scoring.recompute_student_scores(store, student_id) == (5, 0)


def test_recompute_all_repairs_cached_columns(store):
    _class(store, "ม.1/1")
    late = _behavior(store, "Late", -5, "negative")
    student_id = _student(store, "S1")
    _infraction(store, student_id, late)
    store.update_row(STUDENTS, 0, {"deducted_score": 99, "added_score": 7})

    result = scoring.recompute_all_scores(store)
    assert result["success"] is True
    assert result["recomputed"] == 1
    student = read_students(store)[0]
    assert (student.deducted_score, student.added_score) == (5, 0)


def test_infraction_snapshot_and_validation(store):
    _class(store, "ม.1/1")
    behavior_id = _behavior(store, "Late", -5, "negative")
    student_id = _student(store, "S1")

    result = _infraction(store, student_id, behavior_id)
    assert result["success"] is True
    assert result["infraction"]["student_name"] == "Student S1"
    assert result["infraction"]["student_class"] == "ม.1/1"
    assert result["net_score"] == 95

    assert _infraction(store, "nobody", behavior_id)["success"] is False
    assert _infraction(store, student_id, "nothing")["success"] is False
    no_date = infractions.save_infraction(
        store,
        InfractionCreateRequest(student_id=student_id, behavior_id=behavior_id),
    )
    assert no_date == {"success": False, "message": "Date is required"}


def test_infraction_saved_even_if_recompute_fails(store, monkeypatch):
    _class(store, "ม.1/1")
    behavior_id = _behavior(store, "Late", -5, "negative")
    student_id = _student(store, "S1")

    def broken_recompute(*_args, **_kwargs):
        raise RuntimeError("sheet locked")

    monkeypatch.setattr(infractions, "recompute_student_scores", broken_recompute)
    result = _infraction(store, student_id, behavior_id)

    assert result["success"] is True
    assert "sheet locked" in result["message"]
    assert len(read_infractions(store)) == 1
    assert read_students(store)[0].deducted_score == 0


def test_infraction_history_newest_first(store):
    _class(store, "ม.1/1")
    late = _behavior(store, "Late", -5, "negative")
    helped = _behavior(store, "Helped", 3, "positive")
    student_id = _student(store, "S1")
    _infraction(store, student_id, late, date(2026, 9, 1))
    _infraction(store, student_id, helped, date(2026, 10, 2))
    _infraction(store, student_id, late, date(2026, 10, 2))

    result = infractions.list_infractions_by_student(store, student_id)
    assert [(item["date"], item["behavior_name"]) for item in result["infractions"]] == [
        (date(2026, 10, 2), "Late"),
        (date(2026, 10, 2), "Helped"),
        (date(2026, 9, 1), "Late"),
    ]
    assert infractions.list_infractions_by_student(store, "nobody")["success"] is False


def test_student_by_code_includes_history(store):
    _class(store, "ม.1/1")
    late = _behavior(store, "Late", -5, "negative")
    student_id = _student(store, "S1")
    _infraction(store, student_id, late)

    result = students.get_student_by_code(store, " s1 ")
    assert result["success"] is True
    assert result["student"]["net_score"] == 95
    assert [item["behavior_score"] for item in result["infractions"]] == [-5]


def test_import_partial_success(store):
    _class(store, "ม.1/1")
    _student(store, "S1")

    content = "รหัสนักเรียน,ชื่อ-สกุล,ชั้น\nS2,Anong,ม.1/1\nS1,Boon,ม.1/1\nS3,Chai,ม.1/1\n"
    result = import_students_from_csv(store, content)

    assert result["success"] is False
    assert result["imported"] == 2
    assert result["message"].startswith("Imported 2 student(s), 1 error(s)")
    assert result["errors"] == ["Row 3: student code 'S1' already exists"]
    assert [item.student_code for item in read_students(store)] == ["S1", "S2", "S3"]


def test_import_checks_duplicates_within_file_and_classes(store):
    _class(store, "ม.1/1")
    content = "\ufeffcode,name,class\nS1,A,ม.1/1\ns1,B,ม.1/1\nS2,C,ม.9/9\nS3,D\n\nS4,E,ม.1/1,,\n"
    result = import_students_from_csv(store, content)

    assert result["imported"] == 2
    assert result["errors"] == [
        "Row 3: student code 's1' already exists",
        "Row 4: class 'ม.9/9' does not exist",
        "Row 5: expected 3 non-empty columns (code, name, class)",
    ]
    imported = read_students(store)
    assert [item.student_code for item in imported] == ["S1", "S4"]
    assert all(item.initial_score == 100 for item in imported)


def test_import_reports_first_ten_errors(store):
    _class(store, "ม.1/1")
    rows = "\n".join(f"S{index},Name,ม.404" for index in range(12))
    result = import_students_from_csv(store, "header\n" + rows)

    assert result["success"] is False
    assert len(result["errors"]) == 10
    assert result["remaining_errors"] == 2
    assert "...and 2 more error(s)" in result["message"]


def test_import_all_valid_and_empty(store):
    _class(store, "ม.1/1")
    assert import_students_from_csv(store, "header\nS1,A,ม.1/1\n")["success"] is True

    empty = import_students_from_csv(store, "header\n")
    assert empty["success"] is False
    assert empty["imported"] == 0


def test_unexpected_errors_become_failure_results(store, monkeypatch):
    def exploding_read(_table):
        raise RuntimeError("backend offline")

    monkeypatch.setattr(store, "read_rows", exploding_read)
    result = students.list_students(store)
    assert result["success"] is False
    assert "backend offline" in result["message"]


def test_import_rejects_overlong_cells(store):
    _class(store, "ม.1/1")
    content = "header\nS1,Anong,ม.1/1\n" + "X" * 300 + ",Boon,ม.1/1\nS3," + "N" * 256 + ",ม.1/1\n"
    result = import_students_from_csv(store, content)

    assert result["imported"] == 1
    assert result["errors"] == [
        "Row 3: student code is too long (max 64 characters)",
        "Row 4: name is too long (max 255 characters)",
    ]
    assert [item.student_code for item in read_students(store)] == ["S1"]


def test_unparseable_numbers_read_as_zero(store):
    store.append_rows(STUDENTS, [["s1", "S1", "Anong", "ม.1/1", "1e400", "abc", None]])
    result = students.list_students(store)

    assert result["success"] is True
    student = result["students"][0]
    assert (student["initial_score"], student["deducted_score"], student["added_score"]) == (0, 0, 0)
