# user.py
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime
from enum import Enum
from src.app.utils.time import utc_now


class AppRole(str, Enum):
    admin = "admin"
    faculty = "faculty"
    student = "student"
    parent = "parent"


class User(SQLModel, table=True):
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    full_name: str
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class UserRole(SQLModel, table=True):
    """Role assignment table; one role per user."""
    __tablename__ = "user_roles"
    __table_args__ = {"extend_existing": True}
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", unique=True, index=True)
    role: AppRole
