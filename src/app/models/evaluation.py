# evaluation.py
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
import uuid
from datetime import datetime
from src.app.utils.time import utc_now
from typing import List, Optional


class SubmissionEvaluation(SQLModel, table=True):
    """AI evaluation of a submission. Re-evaluation overwrites the row."""
    __tablename__ = "submission_evaluations"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    submission_id: uuid.UUID = Field(foreign_key="submission.id", unique=True, index=True)
    follows_instructions: bool = Field(default=False)
    instruction_score: float = Field(default=0)
    answer_correctness: float = Field(default=0)
    strengths: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    improvements: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    detailed_feedback: str = Field(default="")
    suggested_score: float = Field(default=0)
    evaluated_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    evaluated_at: datetime = Field(default_factory=utc_now)


class PlagiarismReport(SQLModel, table=True):
    __tablename__ = "plagiarism_reports"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    submission_id: uuid.UUID = Field(foreign_key="submission.id", unique=True, index=True)
    similarity_percentage: float = Field(default=0)
    is_flagged: bool = Field(default=False)
    # ids of the compared submissions the analysis matched
    matched_submissions: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    analysis_details: str = Field(default="")
    analyzed_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    analyzed_at: datetime = Field(default_factory=utc_now)
