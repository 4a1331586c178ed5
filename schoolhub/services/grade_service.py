import logging
from datetime import datetime, UTC
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from schoolhub.models import Grade, Lesson, User
from schoolhub.schemas.grade_schema import (
    GradeCreateRequest, GradeResponse, StudentGradeRow, TeacherGradeRow, LessonGradeRow, GradeStats, ClassStats,
)
from schoolhub.services.lesson_service import get_lesson, is_signed_up

logger = logging.getLogger(__name__)


def _owned_lesson(db: Session, lesson_id: int, teacher_id: int) -> Lesson:
    lesson = get_lesson(db, lesson_id)
    if lesson.teacher_id != teacher_id:
        raise HTTPException(status_code=403, detail="Not your lesson")
    return lesson


def record_grade(db: Session, req: GradeCreateRequest) -> GradeResponse:
    """Insert or overwrite the grade of one student for one lesson."""
    _owned_lesson(db, req.lesson_id, req.teacher_id)
    if not is_signed_up(db, req.lesson_id, req.student_id):
        raise HTTPException(status_code=400, detail="Student not signed up to this lesson")

    grade = _find(db, req.lesson_id, req.student_id)
    if grade is None:
        grade = Grade(**req.model_dump())
        db.add(grade)
        try:
            db.commit()
        except IntegrityError:
            # lost a race with another insert for the same pair, update that row instead
            db.rollback()
            grade = _find(db, req.lesson_id, req.student_id)
            if grade is None:
                raise
            _overwrite(db, grade, req)
    else:
        _overwrite(db, grade, req)
    db.refresh(grade)
    logger.info(f"Grade {grade.grade} recorded for student {req.student_id} in lesson {req.lesson_id}")
    return GradeResponse.model_validate(grade.model_dump())


def _find(db: Session, lesson_id: int, student_id: int) -> Optional[Grade]:
    statement = select(Grade).where((Grade.lesson_id == lesson_id) & (Grade.student_id == student_id))
    return db.exec(statement).first()


def _overwrite(db: Session, grade: Grade, req: GradeCreateRequest) -> None:
    grade.grade = req.grade
    grade.comment = req.comment
    grade.teacher_id = req.teacher_id
    grade.updated_at = datetime.now(UTC)
    db.add(grade)
    db.commit()


def list_for_student(db: Session, student_id: int) -> List[StudentGradeRow]:
    statement = (
        select(Grade, Lesson.title, Lesson.date, Lesson.time, User.full_name)
        .join(Lesson, Lesson.id == Grade.lesson_id)
        .join(User, User.id == Grade.teacher_id)
        .where(Grade.student_id == student_id)
        .order_by(Lesson.date.desc(), Lesson.time.desc())
    )
    return [
        StudentGradeRow.model_validate({
            **grade.model_dump(), "lesson_title": title, "date": day, "time": time, "teacher_name": teacher_name,
        })
        for grade, title, day, time, teacher_name in db.exec(statement).all()
    ]


def list_for_teacher(db: Session, teacher_id: int, lesson_id: Optional[int] = None) -> List[TeacherGradeRow]:
    statement = (
        select(Grade, Lesson.title, Lesson.date, User.full_name)
        .join(Lesson, Lesson.id == Grade.lesson_id)
        .join(User, User.id == Grade.student_id)
        .where(Grade.teacher_id == teacher_id)
        .order_by(Lesson.date.desc(), Lesson.time.desc(), Grade.created_at.desc())
    )
    if lesson_id is not None:
        statement = statement.where(Grade.lesson_id == lesson_id)
    return [
        TeacherGradeRow.model_validate({
            **grade.model_dump(), "lesson_title": title, "date": day, "student_name": student_name,
        })
        for grade, title, day, student_name in db.exec(statement).all()
    ]


def teacher_stats(db: Session, teacher_id: int, lesson_id: Optional[int] = None) -> GradeStats:
    statement = select(
        func.count(Grade.id), func.avg(Grade.grade), func.min(Grade.grade), func.max(Grade.grade)
    ).where(Grade.teacher_id == teacher_id)
    if lesson_id is not None:
        statement = statement.where(Grade.lesson_id == lesson_id)
    count, avg, low, high = db.exec(statement).one()
    return GradeStats(
        count=count or 0,
        avg=round(float(avg), 2) if avg is not None else None,
        min=float(low) if low is not None else None,
        max=float(high) if high is not None else None,
    )


def list_for_lesson(db: Session, lesson_id: int, teacher_id: int) -> List[LessonGradeRow]:
    """Named per-student grades; only the teacher giving the lesson may read them."""
    _owned_lesson(db, lesson_id, teacher_id)
    statement = (
        select(Grade.student_id, User.full_name, Grade.grade)
        .join(User, User.id == Grade.student_id)
        .where(Grade.lesson_id == lesson_id)
        .order_by(User.full_name)
    )
    return [LessonGradeRow.model_validate(row._asdict()) for row in db.exec(statement).all()]


def class_stats(db: Session, lesson_id: int, student_id: int) -> ClassStats:
    """Aggregate view of one lesson for one student.

    Rank is standard competition ranking: 1 + the number of grades in the
    lesson strictly above the student's, so tied students share a rank and the
    next rank is skipped. No other student's identity or grade leaves here.
    """
    mine = _find(db, lesson_id, student_id)
    my_grade = mine.grade if mine else None

    count, avg = db.exec(
        select(func.count(Grade.id), func.avg(Grade.grade)).where(Grade.lesson_id == lesson_id)
    ).one()

    my_rank = None
    if my_grade is not None:
        above = db.exec(
            select(func.count(Grade.id)).where((Grade.lesson_id == lesson_id) & (Grade.grade > my_grade))
        ).one()
        my_rank = 1 + above

    return ClassStats(
        my_grade=my_grade,
        class_avg=float(avg) if avg is not None else 0.0,
        class_count=count or 0,
        my_rank=my_rank,
    )
