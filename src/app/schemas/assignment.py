# File: src/app/schemas/assignment.py

from pydantic import BaseModel, Field
from typing import Optional, List


class GenerateAssignmentsRequest(BaseModel):
    syllabus: Optional[str] = None
    subject: Optional[str] = None
    number_of_assignments: Optional[int] = Field(default=None, alias="numberOfAssignments")

    class Config:
        populate_by_name = True


class GeneratedAssignment(BaseModel):
    title: str = Field(min_length=1)
    description: str
    max_score: int = 100


class GeneratedAssignmentsPayload(BaseModel):
    assignments: List[GeneratedAssignment] = Field(min_length=1)


class GenerateAssignmentsResponse(BaseModel):
    success: bool = True
    assignments: List[GeneratedAssignment]
