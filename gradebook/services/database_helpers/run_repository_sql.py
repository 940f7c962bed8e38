# /gradebook/services/database_helpers/run_repository_sql.py

"""
This module contains the SQLAlchemy queries for runs: listing, the inserts
performed by a .RUN import, the ordered wipe of a run and the GPA write-back.

Insert helpers only `flush()` so that a whole import is committed by the
caller in one go; the wipe commits itself, and so does the GPA write-back
unless the import asks it not to.
"""

import logging
from typing import List, Dict, Optional
from sqlalchemy import func, update
from sqlalchemy.orm import Session

from gradebook.db.models.run_models import Run, Group, Section, SectionGroup
from gradebook.db.models.student_grade_models import Student, Grade

logger = logging.getLogger(__name__)


class RunRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Reads ---

    def get_all_runs_with_group_counts(self) -> List:
        return (
            self.db.query(
                Run.run_id,
                Run.name.label("run_name"),
                Run.created_at,
                func.count(func.distinct(Group.group_id)).label("group_count"),
            )
            .outerjoin(Group, Group.run_id == Run.run_id)
            .group_by(Run.run_id, Run.name, Run.created_at)
            .order_by(Run.run_id)
            .all()
        )

    def count_runs(self) -> int:
        return self.db.query(func.count(Run.run_id)).scalar() or 0

    def get_run_by_id(self, run_id: int) -> Optional[Run]:
        return self.db.query(Run).filter(Run.run_id == run_id).first()

    def get_run_by_name(self, name: str) -> Optional[Run]:
        return self.db.query(Run).filter(Run.name == name).first()

    def student_exists(self, student_id: str, run_id: int) -> bool:
        return (
            self.db.query(Student.student_id)
            .filter(Student.student_id == student_id, Student.run_id == run_id)
            .first()
            is not None
        )

    def get_run_grade_rows(self, run_id: int) -> List:
        """Every grade of a run joined with its section's credit hours."""
        return (
            self.db.query(
                Grade.grade_id,
                Grade.student_id,
                Grade.section_id,
                Grade.letter_grade,
                Section.credit_hours,
            )
            .join(Section, Section.section_id == Grade.section_id)
            .filter(Grade.run_id == run_id)
            .all()
        )

    def get_run_section_group_links(self, run_id: int) -> List:
        return (
            self.db.query(SectionGroup.section_id, SectionGroup.group_id)
            .filter(SectionGroup.run_id == run_id)
            .all()
        )

    def get_run_entity_ids(self, run_id: int) -> Dict[str, List]:
        return {
            "students": [row.student_id for row in self.db.query(Student.student_id).filter(Student.run_id == run_id)],
            "sections": [row.section_id for row in self.db.query(Section.section_id).filter(Section.run_id == run_id)],
            "groups": [row.group_id for row in self.db.query(Group.group_id).filter(Group.run_id == run_id)],
        }

    # --- Import inserts (flush only) ---

    def add_run(self, name: str) -> Run:
        new_run = Run(name=name)
        self.db.add(new_run)
        self.db.flush()
        return new_run

    def add_group(self, run_id: int, group_name: str) -> Group:
        new_group = Group(run_id=run_id, group_name=group_name, group_gpa=None)
        self.db.add(new_group)
        self.db.flush()
        return new_group

    def add_section(self, run_id: int, section_name: str, credit_hours: float) -> Section:
        new_section = Section(run_id=run_id, section_name=section_name, credit_hours=credit_hours, section_gpa=None)
        self.db.add(new_section)
        self.db.flush()
        return new_section

    def link_section_to_group(self, section_id: int, group_id: int, run_id: int) -> None:
        self.db.add(SectionGroup(section_id=section_id, group_id=group_id, run_id=run_id))
        self.db.flush()

    def add_student(self, record: Dict) -> Student:
        new_student = Student(**record)
        self.db.add(new_student)
        self.db.flush()
        return new_student

    def add_grade(self, record: Dict) -> Grade:
        new_grade = Grade(**record)
        self.db.add(new_grade)
        return new_grade

    def flush(self) -> None:
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # --- Wipe ---

    def delete_run_cascade(self, run_id: int) -> Dict[str, int]:
        """
        Removes a run and everything scoped by it. The deletes run child first
        (grades, students, section_groups, sections, groups, runs) so no
        foreign key is ever left dangling.
        """
        deleted = {}
        try:
            for label, model in (
                ("grades", Grade),
                ("students", Student),
                ("section_groups", SectionGroup),
                ("sections", Section),
                ("groups", Group),
                ("runs", Run),
            ):
                deleted[label] = (
                    self.db.query(model)
                    .filter(model.run_id == run_id)
                    .delete(synchronize_session=False)
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return deleted

    # --- GPA write-back ---

    def apply_gpa_updates(
        self,
        grade_points: List[Dict],
        section_gpas: List[Dict],
        group_gpas: List[Dict],
        student_gpas: List[Dict],
        commit: bool = True,
    ) -> None:
        """
        Writes recomputed values by primary key. Each list holds mappings that
        include the primary key column(s) and the new value. With
        `commit=False` the caller owns the transaction (used by the import).
        """
        for model, mappings in (
            (Grade, grade_points),
            (Section, section_gpas),
            (Group, group_gpas),
            (Student, student_gpas),
        ):
            if mappings:
                self.db.execute(update(model), mappings)
        if commit:
            self.db.commit()
