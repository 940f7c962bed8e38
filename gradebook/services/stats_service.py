# /gradebook/services/stats_service.py

"""
This service module computes the dashboard statistics: totals, average GPA,
grade histograms, per-run z-scores and the good list / work list views.

Data is fetched through `records_service` in its nested form and handed to
the pure helpers in `stats_helpers`.
"""

import logging
from typing import List, Dict, Optional

from ..core.errors import RecordNotFoundError
from ..models.stats_model import DashboardSummary, ZScoreReport, ZScoreEntry
from . import records_service
from .database_service import DatabaseService
from .stats_helpers import descriptive
from .stats_helpers.grade_scale import GOOD_LIST_GRADES, WORK_LIST_GRADES

logger = logging.getLogger(__name__)


def get_dashboard_summary(db: DatabaseService, run_id: Optional[int] = None) -> DashboardSummary:
    """
    Totals for the overview cards plus the average GPA and grade histogram,
    optionally restricted to a single run.
    """
    try:
        students = records_service.list_students(db, run_id=run_id)

        return DashboardSummary(
            totalStudents=db.count_students(run_id=run_id),
            totalSections=db.count_sections(run_id=run_id),
            totalGroups=db.count_groups(run_id=run_id),
            totalRuns=db.count_runs() if run_id is None else int(db.get_run_by_id(run_id) is not None),
            averageGPA=descriptive.calculate_average_gpa(students),
            gradeDistribution=descriptive.calculate_grade_distribution(students),
        )
    except Exception:
        logger.exception("Error calculating dashboard summary (run_id=%s)", run_id)
        raise


def get_section_distribution(db: DatabaseService, section_id: int) -> Dict:
    section = records_service.get_section(db, section_id)
    distribution = descriptive.calculate_section_distribution(section)
    return {
        "id": section["section_id"],
        "name": section["section_name"],
        "total": sum(distribution.values()),
        "distribution": distribution,
    }


def get_group_distribution(db: DatabaseService, group_id: int) -> Dict:
    group = records_service.get_group(db, group_id)
    sections = records_service.list_sections(db, run_id=group["run_id"])
    distribution = descriptive.calculate_group_distribution(group, sections)
    return {
        "id": group["group_id"],
        "name": group["group_name"],
        "total": sum(distribution.values()),
        "distribution": distribution,
    }


def _z_score_entries(items: List[Dict], id_key: str, name_key: str, gpa_key: str, threshold: float):
    result = descriptive.calculate_z_scores([item[gpa_key] for item in items])
    entries = [
        ZScoreEntry(
            id=item[id_key],
            name=item[name_key],
            gpa=item[gpa_key],
            z_score=z,
            flag=descriptive.flag_z_score(z, threshold),
        )
        for item, z in zip(items, result["scores"])
    ]
    return entries, result["mean"], result["std"]


def get_run_z_scores(db: DatabaseService, run_id: int, threshold: float) -> ZScoreReport:
    """
    Z-scores of section GPAs and of group GPAs relative to their peers in the
    same run. Entries at or beyond the threshold are flagged.
    """
    if db.get_run_by_id(run_id) is None:
        raise RecordNotFoundError(f"Run with ID {run_id} not found")

    sections = records_service.list_sections(db, run_id=run_id)
    groups = records_service.list_groups(db, run_id=run_id)

    section_entries, section_mean, section_std = _z_score_entries(
        sections, "section_id", "section_name", "section_gpa", threshold
    )
    group_entries, group_mean, group_std = _z_score_entries(
        groups, "group_id", "group_name", "group_gpa", threshold
    )

    flagged = [e.name for e in section_entries + group_entries if e.flag]
    if flagged:
        logger.info("Run %s: %d entries beyond |z| >= %s: %s", run_id, len(flagged), threshold, flagged)

    return ZScoreReport(
        run_id=run_id,
        threshold=threshold,
        section_mean=section_mean,
        section_std=section_std,
        group_mean=group_mean,
        group_std=group_std,
        sections=section_entries,
        groups=group_entries,
    )


def get_good_list(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    """One row per (student, section, run) with an A or A-."""
    good_list = []
    seen = set()
    for section in records_service.list_sections(db, run_id=run_id):
        for student in section["students"]:
            if student["letter_grade"] not in GOOD_LIST_GRADES:
                continue
            key = (student["student_id"], section["section_name"], section["run_id"])
            if key in seen:
                continue
            seen.add(key)
            good_list.append({
                "student_id": student["student_id"],
                "student_name": student["student_name"],
                "section_name": section["section_name"],
                "letter_grade": student["letter_grade"],
                "run_name": section["run_name"],
            })
    return good_list


def get_work_list(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    """
    One row per student with at least one D+, D, D- or F, listing each
    offending class as "<section> (<letter>)" with the run it came from.
    """
    students: Dict[str, Dict] = {}
    for section in records_service.list_sections(db, run_id=run_id):
        for student in section["students"]:
            if student["letter_grade"] not in WORK_LIST_GRADES:
                continue
            entry = students.setdefault(student["student_id"], {
                "student_id": student["student_id"],
                "student_name": student["student_name"],
                "classes": [],
            })
            label = f"{section['section_name']} ({student['letter_grade']})"
            if not any(c["label"] == label and c["run_name"] == section["run_name"] for c in entry["classes"]):
                entry["classes"].append({"label": label, "run_name": section["run_name"]})
    return list(students.values())
