# /gradebook/services/database_service.py

from typing import List, Dict, Optional, Generator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from gradebook.db.database import get_db

# --- Repository Imports ---
from .database_helpers.records_repository_sql import RecordsRepositorySQL
from .database_helpers.run_repository_sql import RunRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Facade over the SQL repositories. Services talk to this object only,
        never to a Session directly.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.records_repo = RecordsRepositorySQL(db_session)
        self.run_repo = RunRepositorySQL(db_session)

    # --- BULK JOINED READS (DELEGATED) ---
    def get_student_grade_rows(self, run_id: Optional[int] = None, student_id: Optional[str] = None) -> List: return self.records_repo.get_student_grade_rows(run_id=run_id, student_id=student_id)
    def get_section_student_rows(self, run_id: Optional[int] = None, section_id: Optional[int] = None) -> List: return self.records_repo.get_section_student_rows(run_id=run_id, section_id=section_id)
    def get_group_section_rows(self, run_id: Optional[int] = None, group_id: Optional[int] = None) -> List: return self.records_repo.get_group_section_rows(run_id=run_id, group_id=group_id)

    # --- STUDENT / SECTION / GROUP METHODS (DELEGATED) ---
    def get_students_by_student_id(self, student_id: str, run_id: Optional[int] = None) -> List: return self.records_repo.get_students_by_student_id(student_id, run_id=run_id)
    def get_section_by_id(self, section_id: int): return self.records_repo.get_section_by_id(section_id)
    def get_group_by_id(self, group_id: int): return self.records_repo.get_group_by_id(group_id)
    def update_students(self, student_id: str, data: Dict, run_id: Optional[int] = None) -> List: return self.records_repo.update_students(student_id, data, run_id=run_id)
    def update_section(self, section_id: int, data: Dict): return self.records_repo.update_section(section_id, data)
    def update_group(self, group_id: int, data: Dict): return self.records_repo.update_group(group_id, data)
    def count_students(self, run_id: Optional[int] = None) -> int: return self.records_repo.count_students(run_id=run_id)
    def count_sections(self, run_id: Optional[int] = None) -> int: return self.records_repo.count_sections(run_id=run_id)
    def count_groups(self, run_id: Optional[int] = None) -> int: return self.records_repo.count_groups(run_id=run_id)

    # --- RUN METHODS (DELEGATED) ---
    def get_all_runs(self) -> List: return self.run_repo.get_all_runs_with_group_counts()
    def count_runs(self) -> int: return self.run_repo.count_runs()
    def get_run_by_id(self, run_id: int): return self.run_repo.get_run_by_id(run_id)
    def get_run_by_name(self, name: str): return self.run_repo.get_run_by_name(name)
    def student_exists(self, student_id: str, run_id: int) -> bool: return self.run_repo.student_exists(student_id, run_id)
    def add_run(self, name: str): return self.run_repo.add_run(name)
    def add_group(self, run_id: int, group_name: str): return self.run_repo.add_group(run_id, group_name)
    def add_section(self, run_id: int, section_name: str, credit_hours: float): return self.run_repo.add_section(run_id, section_name, credit_hours)
    def link_section_to_group(self, section_id: int, group_id: int, run_id: int): self.run_repo.link_section_to_group(section_id, group_id, run_id)
    def add_student(self, record: Dict): return self.run_repo.add_student(record)
    def add_grade(self, record: Dict): return self.run_repo.add_grade(record)
    def flush(self): self.run_repo.flush()
    def commit(self): self.run_repo.commit()
    def rollback(self): self.run_repo.rollback()
    def delete_run_cascade(self, run_id: int) -> Dict[str, int]: return self.run_repo.delete_run_cascade(run_id)
    def get_run_grade_rows(self, run_id: int) -> List: return self.run_repo.get_run_grade_rows(run_id)
    def get_run_section_group_links(self, run_id: int) -> List: return self.run_repo.get_run_section_group_links(run_id)
    def get_run_entity_ids(self, run_id: int) -> Dict[str, List]: return self.run_repo.get_run_entity_ids(run_id)
    def apply_gpa_updates(self, grade_points: List[Dict], section_gpas: List[Dict], group_gpas: List[Dict], student_gpas: List[Dict], commit: bool = True):
        self.run_repo.apply_gpa_updates(grade_points, section_gpas, group_gpas, student_gpas, commit=commit)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService bound to the request's
    session.
    """
    yield DatabaseService(db_session=db)
