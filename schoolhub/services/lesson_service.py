import logging
from datetime import date
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from schoolhub.models import Lesson, LessonSignup, User, UserRole
from schoolhub.schemas.lesson_schema import LessonCreateRequest, LessonResponse, SignupResponse
from schoolhub.schemas.user_schema import StudentSummary
from schoolhub.services.user_service import require_user

logger = logging.getLogger(__name__)


def create_lesson(db: Session, lesson_req: LessonCreateRequest) -> LessonResponse:
    teacher = require_user(db, lesson_req.teacher_id, UserRole.teacher, "Teacher")
    lesson = Lesson(**lesson_req.model_dump())
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    logger.info(f"Lesson {lesson.id} '{lesson.title}' created by teacher {teacher.id}")
    return LessonResponse.model_validate({**lesson.model_dump(), "teacher_name": teacher.full_name})


def get_lesson(db: Session, lesson_id: int) -> Lesson:
    lesson = db.get(Lesson, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson


def _with_teacher():
    return (
        select(Lesson, User.full_name)
        .join(User, Lesson.teacher_id == User.id)
        .order_by(Lesson.date, Lesson.time, Lesson.id)
    )


def _to_responses(rows) -> List[LessonResponse]:
    return [
        LessonResponse.model_validate({**lesson.model_dump(), "teacher_name": teacher_name})
        for lesson, teacher_name in rows
    ]


def list_lessons(db: Session) -> List[LessonResponse]:
    return _to_responses(db.exec(_with_teacher()).all())


def list_lessons_for_teacher(db: Session, teacher_id: int) -> List[LessonResponse]:
    return _to_responses(db.exec(_with_teacher().where(Lesson.teacher_id == teacher_id)).all())


def list_lessons_for_student(db: Session, student_id: int, upcoming_only: bool = False,
                             today: Optional[date] = None) -> List[LessonResponse]:
    statement = (
        _with_teacher()
        .join(LessonSignup, LessonSignup.lesson_id == Lesson.id)
        .where(LessonSignup.student_id == student_id)
    )
    if upcoming_only:
        statement = statement.where(Lesson.date >= (today or date.today()))
    return _to_responses(db.exec(statement).all())


def list_students_for_lesson(db: Session, lesson_id: int) -> List[StudentSummary]:
    statement = (
        select(User.id, User.full_name, User.email)
        .join(LessonSignup, LessonSignup.student_id == User.id)
        .where(LessonSignup.lesson_id == lesson_id)
        .order_by(User.full_name)
    )
    return [StudentSummary(id=row.id, full_name=row.full_name, email=row.email) for row in db.exec(statement).all()]


def is_signed_up(db: Session, lesson_id: int, student_id: int) -> bool:
    return db.get(LessonSignup, (lesson_id, student_id)) is not None


def sign_up(db: Session, lesson_id: int, student_id: int) -> SignupResponse:
    """Enroll a student. Enrollments form a set keyed by (lesson, student)."""
    get_lesson(db, lesson_id)
    require_user(db, student_id, UserRole.student, "Student")
    if is_signed_up(db, lesson_id, student_id):
        return SignupResponse(message="Already signed up", lesson_id=lesson_id, student_id=student_id,
                              already_signed_up=True)
    db.add(LessonSignup(lesson_id=lesson_id, student_id=student_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent retry inserted the same pair first
        db.rollback()
        return SignupResponse(message="Already signed up", lesson_id=lesson_id, student_id=student_id,
                              already_signed_up=True)
    logger.info(f"Student {student_id} signed up for lesson {lesson_id}")
    return SignupResponse(message="Signed up for lesson", lesson_id=lesson_id, student_id=student_id)


def unsign(db: Session, lesson_id: int, student_id: int) -> bool:
    """Remove an enrollment. Returns whether a row was removed; absence is not an error."""
    statement = delete(LessonSignup).where(
        (LessonSignup.lesson_id == lesson_id) & (LessonSignup.student_id == student_id)
    )
    removed = db.exec(statement).rowcount
    db.commit()
    if removed:
        logger.info(f"Student {student_id} left lesson {lesson_id}")
    return bool(removed)
