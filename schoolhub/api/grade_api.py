from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from schoolhub.configs.database import get_db
from schoolhub.schemas.grade_schema import GradeCreateRequest, GradeResponse
from schoolhub.services import grade_service

router = APIRouter(prefix="/grades", tags=["grades"])


@router.post("", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
def record_grade(grade_req: GradeCreateRequest, db: Session = Depends(get_db)):
    return grade_service.record_grade(db, grade_req)
