# grade.py
from sqlmodel import SQLModel, Field
import uuid
from typing import Optional


class Grade(SQLModel, table=True):
    __tablename__ = "grades"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    subject: str
    semester: str
    grade_letter: str
    grade_points: float = Field(default=0)
    credits: float = Field(default=3)
    remarks: Optional[str] = None
    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
