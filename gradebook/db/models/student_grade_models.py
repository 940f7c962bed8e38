# /gradebook/db/models/student_grade_models.py

"""
This module defines the SQLAlchemy ORM models for the `Student` and `Grade`
entities.

A student is identified by the institution's student id *within a run*, so the
primary key is the pair (student_id, run_id). A grade links one student to one
section of the same run.
"""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, ForeignKeyConstraint

from ..database import Base


class Student(Base):
    __tablename__ = "students"

    student_id = Column(String(64), primary_key=True)
    run_id = Column(Integer, ForeignKey("runs.run_id"), primary_key=True)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    # Stored redundantly; recomputed from grades after every import.
    cumulative_gpa = Column(Float, nullable=True)


class Grade(Base):
    __tablename__ = "grades"
    __table_args__ = (
        ForeignKeyConstraint(
            ["student_id", "run_id"],
            ["students.student_id", "students.run_id"],
        ),
    )

    grade_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String(64), nullable=False, index=True)
    section_id = Column(Integer, ForeignKey("sections.section_id"), nullable=False, index=True)
    run_id = Column(Integer, ForeignKey("runs.run_id"), nullable=False, index=True)
    letter_grade = Column(String(4), nullable=True)
    numeric_grade = Column(Float, nullable=True)
