from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Body, status
from sqlmodel import Session

from schoolhub.configs.database import get_db
from schoolhub.schemas.attendance_schema import LessonAttendanceRow
from schoolhub.schemas.grade_schema import ClassStats, LessonGradeRow
from schoolhub.schemas.lesson_schema import LessonCreateRequest, LessonResponse, SignupRequest, SignupResponse
from schoolhub.schemas.user_schema import StudentSummary
from schoolhub.services import lesson_service, grade_service, attendance_service

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.post("", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
def create_lesson(lesson_req: LessonCreateRequest, db: Session = Depends(get_db)):
    return lesson_service.create_lesson(db, lesson_req)


@router.get("", response_model=List[LessonResponse])
def list_lessons(db: Session = Depends(get_db)):
    return lesson_service.list_lessons(db)


@router.get("/{lesson_id}/students", response_model=List[StudentSummary])
def list_students_for_lesson(lesson_id: int, db: Session = Depends(get_db)):
    return lesson_service.list_students_for_lesson(db, lesson_id)


@router.post("/{lesson_id}/signup", response_model=SignupResponse)
def sign_up(lesson_id: int, signup: SignupRequest, db: Session = Depends(get_db)):
    return lesson_service.sign_up(db, lesson_id, signup.student_id)


@router.delete("/{lesson_id}/unsign")
def unsign(
        lesson_id: int,
        signup: Optional[SignupRequest] = Body(None),
        student_id: Optional[int] = Query(None),
        db: Session = Depends(get_db),
):
    """student_id comes in the JSON body, or as a query parameter for clients that cannot send a DELETE body."""
    if signup is not None:
        student_id = signup.student_id
    if student_id is None:
        raise HTTPException(status_code=400, detail="Missing student_id")
    removed = lesson_service.unsign(db, lesson_id, student_id)
    return {"message": "Unregistered from lesson" if removed else "Not signed up for this lesson", "removed": removed}


@router.get("/{lesson_id}/attendance", response_model=List[LessonAttendanceRow])
def list_attendance_for_lesson(lesson_id: int, db: Session = Depends(get_db)):
    return attendance_service.list_for_lesson(db, lesson_id)


@router.get("/{lesson_id}/grades", response_model=List[LessonGradeRow])
def list_grades_for_lesson(lesson_id: int, teacher_id: int = Query(...), db: Session = Depends(get_db)):
    return grade_service.list_for_lesson(db, lesson_id, teacher_id)


@router.get("/{lesson_id}/grade-stats", response_model=ClassStats)
def grade_stats(lesson_id: int, student_id: int = Query(...), db: Session = Depends(get_db)):
    return grade_service.class_stats(db, lesson_id, student_id)
