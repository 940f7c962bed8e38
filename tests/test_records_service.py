# /tests/test_records_service.py

import pytest
from types import SimpleNamespace

from gradebook.core.errors import RecordNotFoundError
from gradebook.db.models.run_models import Group, Section
from gradebook.models.group_model import GroupUpdate
from gradebook.models.section_model import SectionUpdate
from gradebook.models.student_model import StudentUpdate
from gradebook.services import records_service, run_service

# --- Pure grouping helpers ---

def _student_row(student_id, section_id=None, section_name=None, letter=None, run_id=1):
    return SimpleNamespace(
        student_id=student_id, run_id=run_id, run_name="R1", first_name="Jane", last_name="Doe",
        cumulative_gpa=3.0, section_id=section_id, section_name=section_name, credit_hours=3.0,
        letter_grade=letter, numeric_grade=None,
    )

def test_format_student_name():
    assert records_service.format_student_name("Jane", "Doe") == "Doe, Jane"
    assert records_service.format_student_name("", "Doe") == "Doe"
    assert records_service.format_student_name(None, None) == ""

def test_group_student_rows_nests_grades():
    rows = [
        _student_row("1", 10, "BIO1", "A"),
        _student_row("1", 11, "CHEM1", "B"),
        _student_row("2"),
    ]
    students = records_service._group_student_rows(rows)

    assert [s["student_id"] for s in students] == ["1", "2"]
    assert [g["section_name"] for g in students[0]["grades"]] == ["BIO1", "CHEM1"]
    assert students[0]["student_name"] == "Doe, Jane"
    # A student without grades comes back with an empty list.
    assert students[1]["grades"] == []

def test_group_student_rows_keeps_runs_apart():
    rows = [_student_row("1", 10, "BIO1", "A", run_id=1), _student_row("1", 20, "BIO1", "C", run_id=2)]
    students = records_service._group_student_rows(rows)
    assert [(s["student_id"], s["run_id"]) for s in students] == [("1", 1), ("1", 2)]

def test_group_section_rows_dedupes_students():
    base = dict(run_id=1, run_name="R1", section_name="BIO1", credit_hours=3.0, section_gpa=None,
                first_name="Jane", last_name="Doe", numeric_grade=None)
    rows = [
        SimpleNamespace(section_id=10, student_id="1", letter_grade="A", **base),
        SimpleNamespace(section_id=10, student_id="1", letter_grade="A", **base),
        SimpleNamespace(section_id=11, student_id=None, letter_grade=None, **base),
    ]
    sections = records_service._group_section_rows(rows)
    assert len(sections) == 2
    assert len(sections[0]["students"]) == 1
    assert sections[1]["students"] == []

def test_group_group_rows_dedupes_sections():
    base = dict(run_id=1, run_name="R1", group_name="Science", group_gpa=None,
                section_name="BIO1", credit_hours=3.0, section_gpa=None)
    rows = [
        SimpleNamespace(group_id=1, section_id=10, **base),
        SimpleNamespace(group_id=1, section_id=10, **base),
        SimpleNamespace(group_id=2, section_id=None, **base),
    ]
    groups = records_service._group_group_rows(rows)
    assert len(groups[0]["sections"]) == 1
    assert groups[1]["sections"] == []

# --- Bulk fetches against an imported run ---

def test_list_students(db_service, imported_run):
    students = records_service.list_students(db_service)

    assert [s["student_name"] for s in students] == ["Doe, Jane", "Smith, John", "Lee, Ann"]
    jane = students[0]
    assert jane["run_name"] == "Fall 2024"
    assert [g["section_name"] for g in jane["grades"]] == ["COMSC110", "COMSC200", "MATH101"]
    assert [g["letter_grade"] for g in jane["grades"]] == ["A", "A", "B+"]

def test_list_sections(db_service, imported_run):
    sections = records_service.list_sections(db_service, run_id=imported_run["run_id"])
    assert [s["section_name"] for s in sections] == ["COMSC110", "COMSC200", "MATH101"]
    assert [st["student_id"] for st in sections[0]["students"]] == ["1001", "1002", "1003"]

def test_list_groups_includes_shared_section(db_service, imported_run):
    groups = records_service.list_groups(db_service)
    by_name = {g["group_name"]: g for g in groups}
    assert [s["section_name"] for s in by_name["Computer Science"]["sections"]] == ["COMSC110", "COMSC200"]
    assert [s["section_name"] for s in by_name["Mathematics"]["sections"]] == ["COMSC110", "MATH101"]

def test_list_grade_rows_is_one_row_per_grade(db_service, imported_run):
    rows = records_service.list_grade_rows(db_service)
    assert len(rows) == 7
    assert {"student_id", "run_id", "first_name", "last_name", "section_name", "letter_grade"} <= set(rows[0])

def test_bulk_fetch_filters_by_run(db_service, imported_run):
    assert records_service.list_students(db_service, run_id=imported_run["run_id"] + 1) == []

# --- Lookups ---

def test_get_student_returns_latest_run(db_service, run_dir, imported_run):
    (run_dir / "SPRING2025.RUN").write_text("Spring 2025\nCS.GRP\n", encoding="utf-8")
    run_service.import_run(db_service, str(run_dir / "SPRING2025.RUN"))

    latest = records_service.get_student(db_service, "1001")
    assert latest["run_name"] == "Spring 2025"
    assert len(latest["grades"]) == 2

    older = records_service.get_student(db_service, "1001", run_id=imported_run["run_id"])
    assert older["run_name"] == "Fall 2024"
    assert len(older["grades"]) == 3

def test_get_student_not_found(db_service):
    with pytest.raises(RecordNotFoundError, match="Student with ID 9 not found"):
        records_service.get_student(db_service, "9")

def test_get_group_not_found(db_service):
    with pytest.raises(RecordNotFoundError, match="Group with ID 4 not found"):
        records_service.get_group(db_service, 4)

# --- Updates ---

def test_update_student_name_in_every_run(db_service, run_dir, imported_run):
    (run_dir / "SPRING2025.RUN").write_text("Spring 2025\nCS.GRP\n", encoding="utf-8")
    run_service.import_run(db_service, str(run_dir / "SPRING2025.RUN"))

    updated = records_service.update_student(db_service, "1001", StudentUpdate(last_name="Roe"))

    assert updated["student_name"] == "Roe, Jane"
    assert all(s.last_name == "Roe" for s in db_service.get_students_by_student_id("1001"))

def test_update_student_without_data(db_service, imported_run):
    with pytest.raises(ValueError, match="No update data provided."):
        records_service.update_student(db_service, "1001", StudentUpdate())

def test_update_unknown_student(db_service):
    with pytest.raises(RecordNotFoundError):
        records_service.update_student(db_service, "404", StudentUpdate(first_name="X"))

def test_update_section_credit_hours_recomputes_gpas(db_service, session, imported_run):
    """COMSC110 drops from 4 to 1 credit, which reweights every cumulative GPA."""
    comsc110 = session.query(Section).filter(Section.section_name == "COMSC110").one()

    updated = records_service.update_section(db_service, comsc110.section_id, SectionUpdate(credit_hours=1))

    assert updated["credit_hours"] == 1.0
    students = {s["student_id"]: s for s in records_service.list_students(db_service)}
    # (4*1 + 4*3 + 3.3*3) / 7
    assert students["1001"]["cumulative_gpa"] == pytest.approx(3.7)
    # (0*1 + 1*3) / 4
    assert students["1003"]["cumulative_gpa"] == pytest.approx(0.75)

def test_update_section_name_only(db_service, session, imported_run):
    math101 = session.query(Section).filter(Section.section_name == "MATH101").one()
    updated = records_service.update_section(db_service, math101.section_id, SectionUpdate(section_name="MATH102"))
    assert updated["section_name"] == "MATH102"
    assert updated["section_gpa"] == pytest.approx(2.15)

def test_update_group(db_service, session, imported_run):
    math = session.query(Group).filter(Group.group_name == "Mathematics").one()
    updated = records_service.update_group(db_service, math.group_id, GroupUpdate(group_name="Maths"))
    assert updated["group_name"] == "Maths"
    assert len(updated["sections"]) == 2
