from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Grade(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("lesson_id", "student_id", name="uq_grade_lesson_student"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    lesson_id: int = Field(foreign_key="lesson.id", index=True)
    student_id: int = Field(foreign_key="user.id", index=True)
    teacher_id: int = Field(foreign_key="user.id", index=True)
    grade: float
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: Optional[datetime] = None
