from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"


class User(SQLModel, table=True):
    """User model represents a student, teacher or admin account."""
    id: int = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password: str = Field(exclude=True)
    full_name: str
    role: UserRole = Field(default=UserRole.student)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
