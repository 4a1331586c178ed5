from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from schoolhub.configs.database import get_db
from schoolhub.schemas.attendance_schema import AttendanceMarkRequest, StudentAttendanceRow
from schoolhub.services import attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("", response_model=List[StudentAttendanceRow])
def list_attendance(student_id: int = Query(...), db: Session = Depends(get_db)):
    return attendance_service.list_for_student(db, student_id)


@router.post("/mark")
def mark_attendance(mark_req: AttendanceMarkRequest, db: Session = Depends(get_db)):
    signup = attendance_service.mark(db, mark_req)
    return {"message": "Attendance updated", "lesson_id": signup.lesson_id,
            "student_id": signup.student_id, "present": signup.present}
