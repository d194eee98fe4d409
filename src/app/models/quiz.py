# quiz.py
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
import uuid
from typing import List, Optional
from datetime import datetime
from src.app.utils.time import utc_now


class Quiz(SQLModel, table=True):
    __tablename__ = "quizzes"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    topic: str
    subject: str
    description: Optional[str] = None
    time_limit_minutes: int = Field(default=15)
    is_published: bool = Field(default=False)
    created_by: uuid.UUID = Field(foreign_key="user.id")
    created_at: datetime = Field(default_factory=utc_now)

    questions: List["QuizQuestion"] = Relationship(
        back_populates="quiz",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "QuizQuestion.question_order"},
    )


class QuizQuestion(SQLModel, table=True):
    __tablename__ = "quiz_questions"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    quiz_id: uuid.UUID = Field(foreign_key="quizzes.id", index=True)
    question: str
    options: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    correct_answer: str
    points: int = Field(default=1)  # Points for a correct answer
    question_order: int = Field(default=0)

    quiz: Quiz = Relationship(back_populates="questions")
