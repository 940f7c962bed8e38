# /tests/test_statistics.py

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from gradebook.core.errors import RecordNotFoundError
from gradebook.db.models.run_models import Group
from gradebook.services import stats_service
from gradebook.services.stats_helpers import descriptive, grade_scale
from gradebook.services.stats_helpers.gpa_computation import compute_run_gpas

# --- Grade scale ---

def test_normalize_letter_grade():
    assert grade_scale.normalize_letter_grade(" a+ ") == "A"
    assert grade_scale.normalize_letter_grade("b-") == "B-"
    assert grade_scale.normalize_letter_grade(None) is None

def test_grade_points():
    assert grade_scale.grade_points("A") == 4.0
    assert grade_scale.grade_points("D-") == 0.7
    assert grade_scale.grade_points("F") == 0.0
    for letter in ("I", "W", "P", "NP", None):
        assert grade_scale.grade_points(letter) is None

def test_empty_distribution_has_every_letter():
    distribution = grade_scale.empty_distribution()
    assert list(distribution) == list(grade_scale.GRADE_LETTERS)
    assert sum(distribution.values()) == 0

# --- Descriptive helpers ---

@pytest.fixture
def student_records():
    """Nested student records as produced by records_service.list_students."""
    return [
        {"student_id": "1", "cumulative_gpa": 3.5, "grades": [{"letter_grade": "A"}, {"letter_grade": "B+"}]},
        {"student_id": "2", "cumulative_gpa": 2.5, "grades": [{"letter_grade": "C"}, {"letter_grade": "A"}]},
        {"student_id": "3", "cumulative_gpa": None, "grades": [{"letter_grade": "W"}]},
    ]

def test_calculate_average_gpa_skips_missing(student_records):
    assert descriptive.calculate_average_gpa(student_records) == 3.0

def test_calculate_average_gpa_empty():
    assert descriptive.calculate_average_gpa([]) == 0
    assert descriptive.calculate_average_gpa([{"cumulative_gpa": None}]) == 0

def test_calculate_grade_distribution(student_records):
    distribution = descriptive.calculate_grade_distribution(student_records)
    assert distribution["A"] == 2
    assert distribution["B+"] == 1
    assert distribution["C"] == 1
    assert distribution["W"] == 1
    assert sum(distribution.values()) == 5

def test_unknown_letters_are_not_counted():
    students = [{"grades": [{"letter_grade": "Z"}, {"letter_grade": None}, {"letter_grade": "F"}]}]
    distribution = descriptive.calculate_grade_distribution(students)
    assert sum(distribution.values()) == 1
    assert distribution["F"] == 1

def test_calculate_group_distribution_pools_member_sections():
    group = {"group_id": 1, "sections": [{"section_id": 10}, {"section_id": 11}]}
    sections = [
        {"section_id": 10, "students": [{"letter_grade": "A"}, {"letter_grade": "B"}]},
        {"section_id": 11, "students": [{"letter_grade": "A"}]},
        {"section_id": 12, "students": [{"letter_grade": "F"}]},
    ]
    distribution = descriptive.calculate_group_distribution(group, sections)
    assert distribution["A"] == 2
    assert distribution["B"] == 1
    assert distribution["F"] == 0

def test_z_scores_use_population_std():
    result = descriptive.calculate_z_scores([2.0, 4.0])
    assert result["mean"] == 3.0
    assert result["std"] == 1.0
    assert result["scores"] == [-1.0, 1.0]

def test_z_scores_constant_values_are_zero():
    result = descriptive.calculate_z_scores([3.0, 3.0, None])
    assert result["std"] == 0.0
    assert result["scores"] == [0.0, 0.0, None]

def test_z_scores_all_missing():
    result = descriptive.calculate_z_scores([None, None])
    assert result == {"mean": None, "std": None, "scores": [None, None]}

def test_flag_z_score():
    assert descriptive.flag_z_score(-1.2, 1.0) == "under"
    assert descriptive.flag_z_score(1.0, 1.0) == "over"
    assert descriptive.flag_z_score(0.99, 1.0) is None
    assert descriptive.flag_z_score(None, 1.0) is None

# --- GPA computation ---

def test_compute_run_gpas_weights_by_credits():
    """A 4-credit A and a 1-credit F give (16 + 0) / 5 = 3.2."""
    grade_rows = [
        SimpleNamespace(grade_id=1, student_id="s1", section_id=10, letter_grade="A", credit_hours=4.0),
        SimpleNamespace(grade_id=2, student_id="s1", section_id=11, letter_grade="F", credit_hours=1.0),
        SimpleNamespace(grade_id=3, student_id="s2", section_id=11, letter_grade="P", credit_hours=1.0),
    ]
    links = [SimpleNamespace(section_id=10, group_id=100), SimpleNamespace(section_id=11, group_id=100)]
    entity_ids = {"students": ["s1", "s2"], "sections": [10, 11, 12], "groups": [100, 101]}

    updates = compute_run_gpas(7, grade_rows, links, entity_ids)

    assert updates["grade_points"] == [
        {"grade_id": 1, "numeric_grade": 4.0},
        {"grade_id": 2, "numeric_grade": 0.0},
        {"grade_id": 3, "numeric_grade": None},
    ]
    assert updates["section_gpas"] == [
        {"section_id": 10, "section_gpa": 4.0},
        {"section_id": 11, "section_gpa": 0.0},
        {"section_id": 12, "section_gpa": None},
    ]
    assert updates["group_gpas"] == [
        {"group_id": 100, "group_gpa": 2.0},
        {"group_id": 101, "group_gpa": None},
    ]
    assert updates["student_gpas"] == [
        {"student_id": "s1", "run_id": 7, "cumulative_gpa": 3.2},
        {"student_id": "s2", "run_id": 7, "cumulative_gpa": None},
    ]

def test_compute_run_gpas_without_grades():
    updates = compute_run_gpas(1, [], [], {"students": ["s1"], "sections": [10], "groups": [100]})
    assert updates["grade_points"] == []
    assert updates["section_gpas"] == [{"section_id": 10, "section_gpa": None}]
    assert updates["group_gpas"] == [{"group_id": 100, "group_gpa": None}]
    assert updates["student_gpas"] == [{"student_id": "s1", "run_id": 1, "cumulative_gpa": None}]

# --- Stats service against an imported run ---

def test_dashboard_summary(db_service, imported_run):
    summary = stats_service.get_dashboard_summary(db_service)

    assert summary.totalStudents == 3
    assert summary.totalSections == 3
    assert summary.totalGroups == 2
    assert summary.totalRuns == 1
    # (3.79 + 3.0 + 0.43) / 3
    assert summary.averageGPA == pytest.approx(2.41)
    assert summary.gradeDistribution["A"] == 2
    assert summary.gradeDistribution["W"] == 1
    assert sum(summary.gradeDistribution.values()) == 7
    print("\n✅ SUCCESS: test_dashboard_summary passed.")

def test_dashboard_summary_for_unknown_run(db_service, imported_run):
    summary = stats_service.get_dashboard_summary(db_service, run_id=999)
    assert summary.totalStudents == 0
    assert summary.totalRuns == 0
    assert summary.averageGPA == 0

def test_dashboard_summary_reraises_repository_errors():
    """Errors are logged and propagated to the global handler."""
    mock_db = MagicMock()
    mock_db.get_student_grade_rows.side_effect = RuntimeError("connection lost")
    with pytest.raises(RuntimeError, match="connection lost"):
        stats_service.get_dashboard_summary(mock_db)

def test_section_distribution_uses_mocked_rows():
    mock_db = MagicMock()
    mock_db.get_section_student_rows.return_value = [
        SimpleNamespace(
            section_id=5, run_id=1, run_name="R", section_name="BIO1", credit_hours=3.0, section_gpa=3.5,
            student_id=sid, first_name="F", last_name="L", letter_grade=letter, numeric_grade=None,
        )
        for sid, letter in (("1", "A"), ("2", "B"), ("3", "A"))
    ]
    result = stats_service.get_section_distribution(mock_db, 5)
    mock_db.get_section_student_rows.assert_called_once_with(section_id=5)
    assert result["name"] == "BIO1"
    assert result["total"] == 3
    assert result["distribution"]["A"] == 2

def test_group_distribution(db_service, session, imported_run):
    math = session.query(Group).filter(Group.group_name == "Mathematics").one()

    result = stats_service.get_group_distribution(db_service, math.group_id)

    # MATH101 (B+, D) and COMSC110 (A, B, F).
    assert result["total"] == 5
    assert result["distribution"]["B+"] == 1
    assert result["distribution"]["F"] == 1

def test_distribution_unknown_section(db_service):
    with pytest.raises(RecordNotFoundError, match="Class with ID 1 not found"):
        stats_service.get_section_distribution(db_service, 1)

def test_run_z_scores(db_service, imported_run):
    report = stats_service.get_run_z_scores(db_service, imported_run["run_id"], threshold=1.0)

    assert [e.name for e in report.sections] == ["COMSC110", "COMSC200", "MATH101"]
    # COMSC200 (4.0) is well above its peers (2.33, 2.15).
    assert [e.flag for e in report.sections] == [None, "over", None]
    assert report.sections[1].z_score == pytest.approx(1.409, abs=1e-3)

    groups = {e.name: e for e in report.groups}
    assert groups["Computer Science"].z_score == pytest.approx(1.0)
    assert groups["Mathematics"].z_score == pytest.approx(-1.0)
    assert report.group_std == pytest.approx(0.245)

def test_run_z_scores_unknown_run(db_service):
    with pytest.raises(RecordNotFoundError):
        stats_service.get_run_z_scores(db_service, 3, threshold=1.0)

def test_good_list(db_service, imported_run):
    good_list = stats_service.get_good_list(db_service)
    assert [(g["student_name"], g["section_name"], g["letter_grade"]) for g in good_list] == [
        ("Doe, Jane", "COMSC110", "A"),
        ("Doe, Jane", "COMSC200", "A"),
    ]
    assert all(g["run_name"] == "Fall 2024" for g in good_list)

def test_work_list(db_service, imported_run):
    work_list = stats_service.get_work_list(db_service)
    assert len(work_list) == 1
    entry = work_list[0]
    assert entry["student_id"] == "1003"
    assert entry["student_name"] == "Lee, Ann"
    assert [c["label"] for c in entry["classes"]] == ["COMSC110 (F)", "MATH101 (D)"]
