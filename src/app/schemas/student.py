# src/app/schemas/student.py
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Level = Literal["high", "medium", "low"]

# --- Learning path ---

class SubjectPerformance(BaseModel):
    subject: str
    assignment_average: Optional[int] = Field(default=None, alias="assignmentAverage")
    assignment_count: int = Field(default=0, alias="assignmentCount")
    recent_grades: List[str] = Field(default_factory=list, alias="recentGrades")

    class Config:
        populate_by_name = True

class PerformanceGap(BaseModel):
    subject: str
    issue: str
    severity: Level

class LearningRecommendation(BaseModel):
    subject: str
    title: str
    description: str
    type: Literal["video", "practice", "reading", "tutorial", "exercise"]
    priority: Level
    estimated_time: str = Field(alias="estimatedTime")

    class Config:
        populate_by_name = True

class LearningPathPayload(BaseModel):
    performance_gaps: List[PerformanceGap] = Field(alias="performanceGaps")
    recommendations: List[LearningRecommendation]
    encouragement: str = ""

    class Config:
        populate_by_name = True

# --- Eligibility / GPA ---

class SubjectEligibility(BaseModel):
    subject: str
    completed_assignments: int
    total_assignments: int
    percentage: float
    is_eligible: bool

class EligibilityResponse(BaseModel):
    threshold: float
    subjects: List[SubjectEligibility]

class GpaResponse(BaseModel):
    gpa: float
    standing: str
    total_credits: float
    grade_count: int
