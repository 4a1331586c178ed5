from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from schoolhub.schemas.common import NonBlankStr
from schoolhub.utils.utils import is_valid_time


class LessonCreateRequest(BaseModel):
    teacher_id: int
    title: NonBlankStr
    date: date_type
    time: str
    description: Optional[str] = None
    location: Optional[str] = None

    @field_validator("time")
    @classmethod
    def time_is_24h(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError("time must be HH:MM in 24-hour format")
        return value


class LessonResponse(BaseModel):
    id: int
    teacher_id: int
    title: str
    date: date_type
    time: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    teacher_name: Optional[str] = None


class SignupRequest(BaseModel):
    student_id: int


class SignupResponse(BaseModel):
    message: str
    lesson_id: int
    student_id: int
    already_signed_up: bool = False
