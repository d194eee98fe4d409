# assignment.py
from sqlmodel import SQLModel, Field, Relationship
import uuid
from datetime import datetime
from src.app.utils.time import utc_now
from typing import List, Optional


class Assignment(SQLModel, table=True):
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str
    subject: str = Field(index=True)
    due_date: datetime
    max_score: int = Field(default=100)
    created_by: uuid.UUID = Field(foreign_key="user.id")
    created_at: datetime = Field(default_factory=utc_now)

    submissions: List["Submission"] = Relationship(back_populates="assignment", sa_relationship_kwargs={"cascade": "all, delete-orphan"})


class Submission(SQLModel, table=True):
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(foreign_key="assignment.id", index=True)
    student_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    typed_content: Optional[str] = Field(default=None, nullable=True)
    file_url: Optional[str] = Field(default=None, nullable=True)
    submitted_at: datetime = Field(default_factory=utc_now)
    score: Optional[float] = Field(default=None, nullable=True)
    feedback: Optional[str] = Field(default=None, nullable=True)
    is_late: bool = Field(default=False)

    assignment: Assignment = Relationship(back_populates="submissions")
