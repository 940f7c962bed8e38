# /gradebook/models/stats_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

# --- Model Definitions ---

class DashboardSummary(BaseModel):
    """
    Defines the data contract for the dashboard summary endpoint: the counts
    shown on the overview cards, the average GPA and the grade histogram.
    """

    totalStudents: int = Field(..., description="Number of student records.", examples=[112])
    totalSections: int = Field(..., description="Number of class sections.", examples=[9])
    totalGroups: int = Field(..., description="Number of groups.", examples=[3])
    totalRuns: int = Field(..., description="Number of imported runs.", examples=[1])
    averageGPA: float = Field(..., description="Mean cumulative GPA over students with a GPA.", examples=[3.12])
    gradeDistribution: Dict[str, int] = Field(
        ...,
        description="Count of each letter grade, in scale order.",
    )


class GradeDistributionResponse(BaseModel):
    id: int
    name: str
    total: int
    distribution: Dict[str, int]


class ZScoreEntry(BaseModel):
    id: int
    name: str
    gpa: Optional[float] = None
    z_score: Optional[float] = None
    flag: Optional[str] = Field(default=None, description="'under', 'over' or null.")


class ZScoreReport(BaseModel):
    run_id: int
    threshold: float
    section_mean: Optional[float] = None
    section_std: Optional[float] = None
    group_mean: Optional[float] = None
    group_std: Optional[float] = None
    sections: List[ZScoreEntry] = Field(default_factory=list)
    groups: List[ZScoreEntry] = Field(default_factory=list)


class GoodListEntry(BaseModel):
    student_id: str
    student_name: str
    section_name: str
    letter_grade: str
    run_name: Optional[str] = None


class WorkListClass(BaseModel):
    label: str = Field(..., description="'<section name> (<letter grade>)'")
    run_name: Optional[str] = None


class WorkListEntry(BaseModel):
    student_id: str
    student_name: str
    classes: List[WorkListClass] = Field(default_factory=list)


class RecomputeResponse(BaseModel):
    run_id: int
    students_updated: int
    sections_updated: int
    groups_updated: int
