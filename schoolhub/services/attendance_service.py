import logging
from typing import List

from fastapi import HTTPException
from sqlmodel import Session, select

from schoolhub.models import Lesson, LessonSignup, User
from schoolhub.schemas.attendance_schema import AttendanceMarkRequest, StudentAttendanceRow, LessonAttendanceRow
from schoolhub.services.lesson_service import get_lesson

logger = logging.getLogger(__name__)


def list_for_student(db: Session, student_id: int) -> List[StudentAttendanceRow]:
    statement = (
        select(LessonSignup.lesson_id, Lesson.title, Lesson.date, Lesson.time, LessonSignup.present)
        .join(Lesson, Lesson.id == LessonSignup.lesson_id)
        .where(LessonSignup.student_id == student_id)
        .order_by(Lesson.date, Lesson.time)
    )
    return [StudentAttendanceRow.model_validate(row._asdict()) for row in db.exec(statement).all()]


def list_for_lesson(db: Session, lesson_id: int) -> List[LessonAttendanceRow]:
    get_lesson(db, lesson_id)
    statement = (
        select(User.id.label("student_id"), User.full_name, User.email, LessonSignup.present)
        .join(LessonSignup, LessonSignup.student_id == User.id)
        .where(LessonSignup.lesson_id == lesson_id)
        .order_by(User.full_name)
    )
    return [LessonAttendanceRow.model_validate(row._asdict()) for row in db.exec(statement).all()]


def mark(db: Session, req: AttendanceMarkRequest) -> LessonSignup:
    lesson = get_lesson(db, req.lesson_id)
    if lesson.teacher_id != req.teacher_id:
        raise HTTPException(status_code=403, detail="Forbidden: this teacher does not own the lesson")
    signup = db.get(LessonSignup, (req.lesson_id, req.student_id))
    if not signup:
        raise HTTPException(status_code=404, detail="Student is not signed up for this lesson")
    signup.present = req.present
    db.add(signup)
    db.commit()
    db.refresh(signup)
    logger.info(f"Attendance for student {req.student_id} in lesson {req.lesson_id} set to {req.present}")
    return signup
