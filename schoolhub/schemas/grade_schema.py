from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from schoolhub.utils.utils import check_grade_range


class GradeCreateRequest(BaseModel):
    lesson_id: int
    student_id: int
    teacher_id: int
    grade: float
    comment: Optional[str] = None

    @field_validator("grade", mode="before")
    @classmethod
    def grade_in_range(cls, value):
        return check_grade_range(value)

    @field_validator("comment")
    @classmethod
    def empty_comment_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class GradeResponse(BaseModel):
    id: int
    lesson_id: int
    student_id: int
    teacher_id: int
    grade: float
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentGradeRow(GradeResponse):
    lesson_title: str
    date: date_type
    time: str
    teacher_name: str


class TeacherGradeRow(BaseModel):
    id: int
    lesson_id: int
    student_id: int
    grade: float
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    lesson_title: str
    date: date_type
    student_name: str


class LessonGradeRow(BaseModel):
    student_id: int
    full_name: str
    grade: float


class GradeStats(BaseModel):
    count: int
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


class ClassStats(BaseModel):
    """Anonymous aggregate for one lesson as seen by one student."""
    my_grade: Optional[float] = None
    class_avg: float
    class_count: int
    my_rank: Optional[int] = None
