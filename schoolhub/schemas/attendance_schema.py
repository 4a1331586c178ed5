from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, StrictBool


class AttendanceMarkRequest(BaseModel):
    lesson_id: int
    student_id: int
    teacher_id: int
    present: StrictBool


class StudentAttendanceRow(BaseModel):
    lesson_id: int
    title: str
    date: date_type
    time: str
    present: Optional[bool] = None


class LessonAttendanceRow(BaseModel):
    student_id: int
    full_name: str
    email: str
    present: Optional[bool] = None
