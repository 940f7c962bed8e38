# /gradebook/models/group_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


class GroupSectionEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    section_id: int
    section_name: str
    credit_hours: Optional[float] = None
    section_gpa: Optional[float] = None


class GroupRecord(BaseModel):
    """A group together with the sections it collects."""
    model_config = ConfigDict(from_attributes=True)

    group_id: int
    run_id: int
    run_name: Optional[str] = None
    group_name: str
    group_gpa: Optional[float] = None
    sections: List[GroupSectionEntry] = Field(default_factory=list)


class GroupUpdate(BaseModel):
    group_name: Optional[str] = Field(default=None, min_length=1)
