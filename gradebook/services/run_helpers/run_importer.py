# /gradebook/services/run_helpers/run_importer.py

"""
Writes a parsed run into the database.

The whole run, including its computed GPAs, is staged with `flush()`es and
committed once at the end; any failure rolls the session back so no partial
run is left behind.
"""

import logging
from typing import Dict, Tuple

from ...core.errors import DuplicateRunError
from ...models.run_model import ParsedRun, ParsedSection
from .. import gpa_service
from ..database_service import DatabaseService
from ..stats_helpers.grade_scale import normalize_letter_grade
from .run_file_parser import check_unique_section_names

logger = logging.getLogger(__name__)


def split_student_name(name: str) -> Tuple[str, str]:
    """'Last, First' -> ('First', 'Last'). A name without a comma is all last name."""
    if "," in name:
        last, first = name.split(",", 1)
        return first.strip(), last.strip()
    return "", name.strip()


def _section_key(section: ParsedSection) -> str:
    return section.source_file or section.name


def import_parsed_run(db: DatabaseService, parsed: ParsedRun) -> Dict[str, int]:
    """
    Inserts the run, its groups, sections, section-group links, students and
    grades, then computes the run's GPAs. A SEC file listed by several groups
    is stored once and linked to each of them; a student id is stored once
    per run.
    """
    if db.get_run_by_name(parsed.name) is not None:
        raise DuplicateRunError(f"Run '{parsed.name}' already exists in the database.")
    check_unique_section_names(parsed)

    try:
        run = db.add_run(parsed.name)
        run_id = run.run_id

        section_ids: Dict[str, int] = {}
        student_ids = set()
        group_count = 0
        grade_count = 0

        for group in parsed.groups:
            db_group = db.add_group(run_id, group.name)
            group_count += 1
            linked = set()

            for section in group.sections:
                key = _section_key(section)
                if key in section_ids:
                    section_id = section_ids[key]
                    is_new_section = False
                    logger.info("Section '%s' already imported for run %s; linking only", section.name, run_id)
                else:
                    db_section = db.add_section(run_id, section.name, section.num_credits)
                    section_id = db_section.section_id
                    section_ids[key] = section_id
                    is_new_section = True

                if section_id not in linked:
                    db.link_section_to_group(section_id, db_group.group_id, run_id)
                    linked.add(section_id)

                if not is_new_section:
                    continue

                for student in section.students:
                    if student.id not in student_ids and not db.student_exists(student.id, run_id):
                        first_name, last_name = split_student_name(student.name)
                        db.add_student({
                            "student_id": student.id,
                            "run_id": run_id,
                            "first_name": first_name,
                            "last_name": last_name,
                            "cumulative_gpa": None,
                        })
                    else:
                        logger.debug("Student %s is already added for run %s", student.id, run_id)
                    student_ids.add(student.id)

                    db.add_grade({
                        "student_id": student.id,
                        "section_id": section_id,
                        "run_id": run_id,
                        "letter_grade": normalize_letter_grade(student.grade),
                        "numeric_grade": None,
                    })
                    grade_count += 1

        db.flush()
        gpa_service.recompute_run_gpas(db, run_id, commit=False)
        db.commit()
    except Exception:
        logger.exception("Error importing run '%s'; rolling back", parsed.name)
        db.rollback()
        raise

    logger.info(
        "Imported run '%s' (id=%s): %d groups, %d sections, %d students, %d grades",
        parsed.name, run_id, group_count, len(section_ids), len(student_ids), grade_count,
    )
    return {
        "run_id": run_id,
        "run_name": parsed.name,
        "group_count": group_count,
        "section_count": len(section_ids),
        "student_count": len(student_ids),
        "grade_count": grade_count,
    }
