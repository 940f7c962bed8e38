# /gradebook/services/records_service.py

"""
This service module is the business logic layer behind the bulk fetch,
lookup and update endpoints for students, sections (classes) and groups.

The repositories hand back flat joined rows; the `_group_*` helpers fold them
into the nested shapes the front-ends render. The helpers are pure functions
over row-like objects (anything with the selected columns as attributes), so
they are tested without a database.
"""

import logging
from typing import List, Dict, Optional, Iterable

from ..core.errors import RecordNotFoundError
from ..models import student_model, section_model, group_model
from .database_service import DatabaseService
from . import gpa_service

logger = logging.getLogger(__name__)


def format_student_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """'Last, First' as in the source rosters; just the last name when no first name is known."""
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    if first_name and last_name:
        return f"{last_name}, {first_name}"
    return last_name or first_name


# --- Row grouping helpers ---

def _group_student_rows(rows: Iterable) -> List[Dict]:
    students: Dict[tuple, Dict] = {}
    for row in rows:
        key = (row.student_id, row.run_id)
        student = students.get(key)
        if student is None:
            student = {
                "student_id": row.student_id,
                "run_id": row.run_id,
                "run_name": row.run_name,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "student_name": format_student_name(row.first_name, row.last_name),
                "cumulative_gpa": row.cumulative_gpa,
                "grades": [],
            }
            students[key] = student

        # A LEFT JOIN without a matching grade yields NULL section columns.
        if row.section_id is not None:
            student["grades"].append({
                "section_id": row.section_id,
                "section_name": row.section_name,
                "credit_hours": row.credit_hours,
                "letter_grade": row.letter_grade,
                "numeric_grade": row.numeric_grade,
            })
    return list(students.values())


def _group_section_rows(rows: Iterable) -> List[Dict]:
    sections: Dict[int, Dict] = {}
    seen_students: Dict[int, set] = {}
    for row in rows:
        section = sections.get(row.section_id)
        if section is None:
            section = {
                "section_id": row.section_id,
                "run_id": row.run_id,
                "run_name": row.run_name,
                "section_name": row.section_name,
                "credit_hours": row.credit_hours,
                "section_gpa": row.section_gpa,
                "students": [],
            }
            sections[row.section_id] = section
            seen_students[row.section_id] = set()

        if row.student_id is not None and row.student_id not in seen_students[row.section_id]:
            seen_students[row.section_id].add(row.student_id)
            section["students"].append({
                "student_id": row.student_id,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "student_name": format_student_name(row.first_name, row.last_name),
                "letter_grade": row.letter_grade,
                "numeric_grade": row.numeric_grade,
            })
    return list(sections.values())


def _group_group_rows(rows: Iterable) -> List[Dict]:
    groups: Dict[int, Dict] = {}
    for row in rows:
        group = groups.get(row.group_id)
        if group is None:
            group = {
                "group_id": row.group_id,
                "run_id": row.run_id,
                "run_name": row.run_name,
                "group_name": row.group_name,
                "group_gpa": row.group_gpa,
                "sections": [],
            }
            groups[row.group_id] = group

        if row.section_id is not None and not any(s["section_id"] == row.section_id for s in group["sections"]):
            group["sections"].append({
                "section_id": row.section_id,
                "section_name": row.section_name,
                "credit_hours": row.credit_hours,
                "section_gpa": row.section_gpa,
            })
    return list(groups.values())


def _flatten_student_records(students: List[Dict]) -> List[Dict]:
    """One row per (student, grade), as shown on the grade records page."""
    return [
        {
            "student_id": student["student_id"],
            "run_id": student["run_id"],
            "first_name": student["first_name"],
            "last_name": student["last_name"],
            "section_name": grade["section_name"],
            "credit_hours": grade["credit_hours"],
            "letter_grade": grade["letter_grade"],
            "numeric_grade": grade["numeric_grade"],
        }
        for student in students
        for grade in student["grades"]
    ]


# --- Bulk fetches ---

def list_students(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    return _group_student_rows(db.get_student_grade_rows(run_id=run_id))


def list_sections(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    return _group_section_rows(db.get_section_student_rows(run_id=run_id))


def list_groups(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    return _group_group_rows(db.get_group_section_rows(run_id=run_id))


def list_grade_rows(db: DatabaseService, run_id: Optional[int] = None) -> List[Dict]:
    return _flatten_student_records(list_students(db, run_id=run_id))


# --- Single lookups ---

def get_student(db: DatabaseService, student_id: str, run_id: Optional[int] = None) -> Dict:
    """
    Returns one student record. A student id can appear in several runs; when
    `run_id` is not given the most recent run's record is returned.
    """
    records = _group_student_rows(db.get_student_grade_rows(run_id=run_id, student_id=student_id))
    if not records:
        raise RecordNotFoundError(f"Student with ID {student_id} not found")
    return max(records, key=lambda r: r["run_id"])


def get_section(db: DatabaseService, section_id: int) -> Dict:
    records = _group_section_rows(db.get_section_student_rows(section_id=section_id))
    if not records:
        raise RecordNotFoundError(f"Class with ID {section_id} not found")
    return records[0]


def get_group(db: DatabaseService, group_id: int) -> Dict:
    records = _group_group_rows(db.get_group_section_rows(group_id=group_id))
    if not records:
        raise RecordNotFoundError(f"Group with ID {group_id} not found")
    return records[0]


# --- Updates ---

def update_student(
    db: DatabaseService,
    student_id: str,
    student_update: student_model.StudentUpdate,
    run_id: Optional[int] = None,
) -> Dict:
    update_data = student_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValueError("No update data provided.")
    updated = db.update_students(student_id, update_data, run_id=run_id)
    if not updated:
        raise RecordNotFoundError(f"Student with ID {student_id} not found")
    logger.info("Updated student %s in %d run(s): %s", student_id, len(updated), sorted(update_data))
    return get_student(db, student_id, run_id=run_id)


def update_section(db: DatabaseService, section_id: int, section_update: section_model.SectionUpdate) -> Dict:
    update_data = section_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValueError("No update data provided.")
    updated_section = db.update_section(section_id, update_data)
    if updated_section is None:
        raise RecordNotFoundError(f"Class with ID {section_id} not found")
    logger.info("Updated class %s: %s", section_id, sorted(update_data))
    # Credit hours weight every cumulative GPA in the run.
    if "credit_hours" in update_data:
        gpa_service.recompute_run_gpas(db, updated_section.run_id)
    return get_section(db, section_id)


def update_group(db: DatabaseService, group_id: int, group_update: group_model.GroupUpdate) -> Dict:
    update_data = group_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValueError("No update data provided.")
    if db.update_group(group_id, update_data) is None:
        raise RecordNotFoundError(f"Group with ID {group_id} not found")
    logger.info("Updated group %s: %s", group_id, sorted(update_data))
    return get_group(db, group_id)
