from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from schoolhub.configs.database import get_db
from schoolhub.schemas.grade_schema import StudentGradeRow, TeacherGradeRow, GradeStats
from schoolhub.schemas.lesson_schema import LessonResponse
from schoolhub.schemas.user_schema import TeacherSummary, StudentSummary
from schoolhub.services import user_service, lesson_service, grade_service

teacher_router = APIRouter(prefix="/teachers", tags=["teachers"])
student_router = APIRouter(prefix="/students", tags=["students"])


@teacher_router.get("", response_model=List[TeacherSummary])
def list_teachers(db: Session = Depends(get_db)):
    return user_service.list_teachers(db)


@teacher_router.get("/{teacher_id}/students", response_model=List[StudentSummary])
def list_students_of_teacher(teacher_id: int, db: Session = Depends(get_db)):
    return user_service.list_students_of_teacher(teacher_id, db)


@teacher_router.get("/{teacher_id}/lessons", response_model=List[LessonResponse])
def list_lessons_of_teacher(teacher_id: int, db: Session = Depends(get_db)):
    return lesson_service.list_lessons_for_teacher(db, teacher_id)


@teacher_router.get("/{teacher_id}/grades", response_model=List[TeacherGradeRow])
def list_grades_of_teacher(teacher_id: int, lesson_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    return grade_service.list_for_teacher(db, teacher_id, lesson_id)


@teacher_router.get("/{teacher_id}/grades/stats", response_model=GradeStats)
def grade_stats_of_teacher(teacher_id: int, lesson_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    return grade_service.teacher_stats(db, teacher_id, lesson_id)


@student_router.get("", response_model=List[StudentSummary])
def list_students(db: Session = Depends(get_db)):
    return user_service.list_students(db)


@student_router.get("/{student_id}/lessons", response_model=List[LessonResponse])
def list_lessons_of_student(student_id: int, upcoming_only: bool = Query(False), db: Session = Depends(get_db)):
    return lesson_service.list_lessons_for_student(db, student_id, upcoming_only)


@student_router.get("/{student_id}/grades", response_model=List[StudentGradeRow])
def list_grades_of_student(student_id: int, db: Session = Depends(get_db)):
    return grade_service.list_for_student(db, student_id)
