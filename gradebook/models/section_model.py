# /gradebook/models/section_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


class SectionStudentEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    first_name: str
    last_name: str
    student_name: str
    letter_grade: Optional[str] = None
    numeric_grade: Optional[float] = None


class SectionRecord(BaseModel):
    """A class section with every student enrolled in it and their grade."""
    model_config = ConfigDict(from_attributes=True)

    section_id: int
    run_id: int
    run_name: Optional[str] = None
    section_name: str
    credit_hours: Optional[float] = None
    section_gpa: Optional[float] = None
    students: List[SectionStudentEntry] = Field(default_factory=list)


class SectionUpdate(BaseModel):
    section_name: Optional[str] = Field(default=None, min_length=1)
    credit_hours: Optional[float] = Field(default=None, ge=0)
