# File: src/app/schemas/submission.py

from pydantic import BaseModel, Field
from typing import Optional, List, Union
from uuid import UUID
from datetime import datetime


class SubmissionTargetRequest(BaseModel):
    submission_id: Optional[UUID] = Field(default=None, alias="submissionId")

    class Config:
        populate_by_name = True

# --- Model output contracts ---

class EvaluationPayload(BaseModel):
    follows_instructions: bool = Field(alias="followsInstructions")
    instruction_score: float = Field(alias="instructionScore")
    answer_correctness: float = Field(alias="answerCorrectness")
    strengths: List[str]
    improvements: List[str]
    detailed_feedback: str = Field(alias="detailedFeedback")
    suggested_score: float = Field(alias="suggestedScore")

    class Config:
        allow_inf_nan = False


class PlagiarismPayload(BaseModel):
    similarity_percentage: float
    is_flagged: bool = False
    # Ordinals ("Submission 2" or 2) into the comparison list sent in the prompt
    matched_submissions: List[Union[int, str]] = []
    analysis_details: str = ""

    class Config:
        allow_inf_nan = False

# --- Read schemas ---

class SubmissionEvaluationRead(BaseModel):
    id: UUID
    submission_id: UUID
    follows_instructions: bool
    instruction_score: float
    answer_correctness: float
    strengths: List[str]
    improvements: List[str]
    detailed_feedback: str
    suggested_score: float
    evaluated_by: Optional[UUID]
    evaluated_at: datetime

    class Config:
        from_attributes = True


class PlagiarismReportRead(BaseModel):
    id: UUID
    submission_id: UUID
    similarity_percentage: float
    is_flagged: bool
    matched_submissions: List[str]
    analysis_details: str
    analyzed_by: Optional[UUID]
    analyzed_at: datetime

    class Config:
        from_attributes = True


class EvaluationResponse(BaseModel):
    success: bool = True
    evaluation: SubmissionEvaluationRead


class PlagiarismResponse(BaseModel):
    success: bool = True
    report: PlagiarismReportRead
