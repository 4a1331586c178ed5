from datetime import date as date_type, datetime, UTC
from typing import Optional

from sqlmodel import SQLModel, Field


class Lesson(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    teacher_id: int = Field(foreign_key="user.id", index=True)
    title: str
    date: date_type
    time: str  # HH:MM, 24h
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class LessonSignup(SQLModel, table=True):
    """Enrollment of a student in a lesson; ``present`` is the attendance flag."""
    __tablename__ = "lesson_signup"
    lesson_id: Optional[int] = Field(default=None, foreign_key="lesson.id", primary_key=True)
    student_id: Optional[int] = Field(default=None, foreign_key="user.id", primary_key=True)
    present: Optional[bool] = None  # None until a teacher marks it
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
