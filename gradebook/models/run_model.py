# /gradebook/models/run_model.py

"""
Data contracts for runs: listing, the parsed contents of a .RUN file and its
GRP / SEC children, validation and import results.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


class RunSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    run_id: int
    run_name: str
    group_count: int = 0
    created_at: Optional[datetime] = None


# --- Parsed .RUN file contents ---

class ParsedStudent(BaseModel):
    name: str = Field(..., description="Student name as written in the SEC file ('Last, First').")
    id: str
    grade: str


class ParsedSection(BaseModel):
    name: str
    num_credits: float
    source_file: Optional[str] = Field(default=None, description="Resolved path of the SEC file.")
    students: List[ParsedStudent] = Field(default_factory=list)


class ParsedGroup(BaseModel):
    name: str
    sections: List[ParsedSection] = Field(default_factory=list)


class ParsedRun(BaseModel):
    name: str
    groups: List[ParsedGroup] = Field(default_factory=list)


# --- Requests & responses ---

class RunFileRequest(BaseModel):
    run_file_path: str = Field(..., min_length=1, description="Path to the .RUN file on the server.")


class RunValidationResult(BaseModel):
    valid: bool
    message: str
    contents: Optional[ParsedRun] = None


class RunImportResponse(BaseModel):
    run_id: int
    run_name: str
    group_count: int
    section_count: int
    student_count: int
    grade_count: int


class FilesFolderStatus(BaseModel):
    path: str
    exists: bool
