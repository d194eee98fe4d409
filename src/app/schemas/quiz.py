# src/app/schemas/quiz.py
from pydantic import BaseModel, Field, model_validator
import uuid
from typing import List, Optional
from datetime import datetime

# --- Request ---

class GenerateQuizRequest(BaseModel):
    topic: Optional[str] = None
    subject: Optional[str] = None
    # Forwarded to the prompt as-is; no range check
    number_of_questions: Optional[int] = Field(default=None, alias="numberOfQuestions")
    title: Optional[str] = None
    description: Optional[str] = None
    time_limit_minutes: Optional[int] = Field(default=None, alias="timeLimitMinutes")

    class Config:
        populate_by_name = True

# --- Model output contract ---

class GeneratedQuestion(BaseModel):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: str
    points: int = 1

    @model_validator(mode="after")
    def _answer_is_an_option(self):
        if self.correct_answer not in self.options:
            raise ValueError("correct_answer must be one of the options")
        if self.points < 1:
            self.points = 1
        return self

class GeneratedQuizPayload(BaseModel):
    questions: List[GeneratedQuestion] = Field(min_length=1)

# --- Read schemas ---

class QuizQuestionRead(BaseModel):
    id: uuid.UUID
    question: str
    options: List[str]
    correct_answer: str
    points: int
    question_order: int

    class Config:
        from_attributes = True

class QuizRead(BaseModel):
    id: uuid.UUID
    title: str
    topic: str
    subject: str
    description: Optional[str] = None
    time_limit_minutes: int
    is_published: bool
    created_by: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True

class GeneratedQuestionOut(BaseModel):
    question: str
    options: List[str]
    correct_answer: str
    points: int

class GenerateQuizResponse(BaseModel):
    success: bool = True
    quiz: QuizRead
    questions: List[GeneratedQuestionOut]
