# /gradebook/services/database_helpers/records_repository_sql.py

"""
This module contains the SQLAlchemy queries behind the bulk fetch and lookup
endpoints for students, sections (classes) and groups.

The bulk queries return *flat* joined rows, one per
(parent, child) pair, exactly as the SQL join produces them. Grouping those
rows into nested JSON shapes is the job of `records_service`.
"""

from typing import List, Dict, Optional
from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from gradebook.db.models.run_models import Run, Group, Section, SectionGroup
from gradebook.db.models.student_grade_models import Student, Grade


class RecordsRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Bulk joined reads ---

    def get_student_grade_rows(self, run_id: Optional[int] = None, student_id: Optional[str] = None) -> List:
        """
        students LEFT JOIN grades LEFT JOIN sections, one row per grade
        (or a single row with NULL grade columns for a student without grades).
        """
        query = (
            self.db.query(
                Student.student_id,
                Student.run_id,
                Run.name.label("run_name"),
                Student.first_name,
                Student.last_name,
                Student.cumulative_gpa,
                Section.section_id,
                Section.section_name,
                Section.credit_hours,
                Grade.letter_grade,
                Grade.numeric_grade,
            )
            .join(Run, Run.run_id == Student.run_id)
            .outerjoin(Grade, and_(Grade.student_id == Student.student_id, Grade.run_id == Student.run_id))
            .outerjoin(Section, and_(Section.section_id == Grade.section_id, Section.run_id == Grade.run_id))
        )
        if run_id is not None:
            query = query.filter(Student.run_id == run_id)
        if student_id is not None:
            query = query.filter(Student.student_id == student_id)
        return query.order_by(Student.student_id, Student.run_id, Section.section_name).all()

    def get_section_student_rows(self, run_id: Optional[int] = None, section_id: Optional[int] = None) -> List:
        """sections LEFT JOIN grades LEFT JOIN students, one row per enrolled student."""
        query = (
            self.db.query(
                Section.section_id,
                Section.run_id,
                Run.name.label("run_name"),
                Section.section_name,
                Section.credit_hours,
                Section.section_gpa,
                Student.student_id,
                Student.first_name,
                Student.last_name,
                Grade.letter_grade,
                Grade.numeric_grade,
            )
            .join(Run, Run.run_id == Section.run_id)
            .outerjoin(Grade, and_(Grade.section_id == Section.section_id, Grade.run_id == Section.run_id))
            .outerjoin(Student, and_(Student.student_id == Grade.student_id, Student.run_id == Grade.run_id))
        )
        if run_id is not None:
            query = query.filter(Section.run_id == run_id)
        if section_id is not None:
            query = query.filter(Section.section_id == section_id)
        return query.order_by(Section.section_id, Student.student_id).all()

    def get_group_section_rows(self, run_id: Optional[int] = None, group_id: Optional[int] = None) -> List:
        """groups LEFT JOIN runs LEFT JOIN section_groups LEFT JOIN sections."""
        query = (
            self.db.query(
                Group.group_id,
                Group.run_id,
                Run.name.label("run_name"),
                Group.group_name,
                Group.group_gpa,
                Section.section_id,
                Section.section_name,
                Section.credit_hours,
                Section.section_gpa,
            )
            .outerjoin(Run, Run.run_id == Group.run_id)
            .outerjoin(SectionGroup, SectionGroup.group_id == Group.group_id)
            .outerjoin(Section, Section.section_id == SectionGroup.section_id)
        )
        if run_id is not None:
            query = query.filter(Group.run_id == run_id)
        if group_id is not None:
            query = query.filter(Group.group_id == group_id)
        return query.order_by(Group.group_id, Section.section_id).all()

    # --- Single entity reads & updates ---

    def get_students_by_student_id(self, student_id: str, run_id: Optional[int] = None) -> List[Student]:
        query = self.db.query(Student).filter(Student.student_id == student_id)
        if run_id is not None:
            query = query.filter(Student.run_id == run_id)
        return query.order_by(Student.run_id.desc()).all()

    def get_section_by_id(self, section_id: int) -> Optional[Section]:
        return self.db.query(Section).filter(Section.section_id == section_id).first()

    def get_group_by_id(self, group_id: int) -> Optional[Group]:
        return self.db.query(Group).filter(Group.group_id == group_id).first()

    def update_students(self, student_id: str, data: Dict, run_id: Optional[int] = None) -> List[Student]:
        """
        Updates every record of a student id (every run, unless `run_id`
        narrows it). The same person keeps the same name across runs.
        """
        students = self.get_students_by_student_id(student_id, run_id=run_id)
        if students:
            for student in students:
                for key, value in data.items():
                    setattr(student, key, value)
            self.db.commit()
            for student in students:
                self.db.refresh(student)
        return students

    def update_section(self, section_id: int, data: Dict) -> Optional[Section]:
        db_section = self.get_section_by_id(section_id)
        if db_section:
            for key, value in data.items():
                setattr(db_section, key, value)
            self.db.commit()
            self.db.refresh(db_section)
        return db_section

    def update_group(self, group_id: int, data: Dict) -> Optional[Group]:
        db_group = self.get_group_by_id(group_id)
        if db_group:
            for key, value in data.items():
                setattr(db_group, key, value)
            self.db.commit()
            self.db.refresh(db_group)
        return db_group

    # --- Counts for the dashboard ---

    def count_students(self, run_id: Optional[int] = None) -> int:
        query = self.db.query(func.count()).select_from(Student)
        if run_id is not None:
            query = query.filter(Student.run_id == run_id)
        return query.scalar() or 0

    def count_sections(self, run_id: Optional[int] = None) -> int:
        query = self.db.query(func.count()).select_from(Section)
        if run_id is not None:
            query = query.filter(Section.run_id == run_id)
        return query.scalar() or 0

    def count_groups(self, run_id: Optional[int] = None) -> int:
        query = self.db.query(func.count()).select_from(Group)
        if run_id is not None:
            query = query.filter(Group.run_id == run_id)
        return query.scalar() or 0
