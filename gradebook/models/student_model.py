# /gradebook/models/student_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List

# --- Model Definitions ---

class StudentGradeEntry(BaseModel):
    """One grade on a student's record, joined with the section it was earned in."""
    model_config = ConfigDict(from_attributes=True)

    section_id: int
    section_name: str
    credit_hours: Optional[float] = None
    letter_grade: Optional[str] = None
    numeric_grade: Optional[float] = None


class StudentRecord(BaseModel):
    """
    The full representation of a student as returned by the bulk fetch and
    single lookup endpoints: personal details plus every grade.
    """
    model_config = ConfigDict(from_attributes=True)

    student_id: str = Field(..., description="The institution's student id.")
    run_id: int = Field(..., description="The run this student record was imported with.")
    run_name: Optional[str] = None
    first_name: str
    last_name: str
    student_name: str = Field(..., description="Display name in 'Last, First' form.")
    cumulative_gpa: Optional[float] = None
    grades: List[StudentGradeEntry] = Field(default_factory=list)


class StudentUpdate(BaseModel):
    """
    The model for updating a student. All fields are optional to allow for
    partial updates.
    """
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)


class GradeRow(BaseModel):
    """A single flattened row of the grade records table."""
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    run_id: int
    first_name: str
    last_name: str
    section_name: str
    credit_hours: Optional[float] = None
    letter_grade: Optional[str] = None
    numeric_grade: Optional[float] = None
