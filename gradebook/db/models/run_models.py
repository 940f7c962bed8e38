# /gradebook/db/models/run_models.py

"""
This module defines the SQLAlchemy ORM models for an import batch (`Run`) and
the structures scoped by it: `Group`, `Section` and the `SectionGroup`
association between them.

Every row carries the `run_id` of the run it was imported with, so several
runs can coexist and be wiped independently.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Run(Base):
    """A single imported snapshot of groups, sections, students and grades."""
    __tablename__ = "runs"

    run_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    groups = relationship("Group", back_populates="run")
    sections = relationship("Section", back_populates="run")


class Group(Base):
    """A named collection of sections within one run."""
    __tablename__ = "groups"

    group_id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Integer, ForeignKey("runs.run_id"), nullable=False, index=True)
    group_name = Column(String(255), nullable=False)
    group_gpa = Column(Float, nullable=True)

    run = relationship("Run", back_populates="groups")


class Section(Base):
    """
    A class section. The REST routes call this a "class"; the stored average
    is `section_gpa` and is recomputed from the section's grades.
    """
    __tablename__ = "sections"

    section_id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Integer, ForeignKey("runs.run_id"), nullable=False, index=True)
    section_name = Column(String(255), nullable=False)
    credit_hours = Column(Float, nullable=False, default=0)
    section_gpa = Column(Float, nullable=True)

    run = relationship("Run", back_populates="sections")


class SectionGroup(Base):
    __tablename__ = "section_groups"

    section_id = Column(Integer, ForeignKey("sections.section_id"), primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.group_id"), primary_key=True)
    run_id = Column(Integer, ForeignKey("runs.run_id"), nullable=False, index=True)
