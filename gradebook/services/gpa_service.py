# /gradebook/services/gpa_service.py

import logging
from typing import Dict

from ..core.errors import RecordNotFoundError
from .database_service import DatabaseService
from .stats_helpers.gpa_computation import compute_run_gpas

logger = logging.getLogger(__name__)


def recompute_run_gpas(db: DatabaseService, run_id: int, commit: bool = True) -> Dict[str, int]:
    """
    Recomputes and stores numeric grades, section, group and cumulative GPAs
    for every record of one run. The import passes `commit=False` so the GPAs
    land in the same transaction as the run itself.
    """
    if db.get_run_by_id(run_id) is None:
        raise RecordNotFoundError(f"Run with ID {run_id} not found")

    updates = compute_run_gpas(
        run_id=run_id,
        grade_rows=db.get_run_grade_rows(run_id),
        section_group_links=db.get_run_section_group_links(run_id),
        entity_ids=db.get_run_entity_ids(run_id),
    )
    db.apply_gpa_updates(**updates, commit=commit)

    logger.info(
        "Recomputed GPAs for run %s: %d grades, %d sections, %d groups, %d students",
        run_id,
        len(updates["grade_points"]),
        len(updates["section_gpas"]),
        len(updates["group_gpas"]),
        len(updates["student_gpas"]),
    )
    return {
        "run_id": run_id,
        "students_updated": len(updates["student_gpas"]),
        "sections_updated": len(updates["section_gpas"]),
        "groups_updated": len(updates["group_gpas"]),
    }
