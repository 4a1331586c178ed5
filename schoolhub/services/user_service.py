import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from schoolhub.auth.auth_handler import get_password_hash
from schoolhub.models import User, UserRole, Lesson, LessonSignup
from schoolhub.schemas.user_schema import RegisterRequest, UserResponse, TeacherSummary, StudentSummary

logger = logging.getLogger(__name__)


def create_user(user_req: RegisterRequest, db: Session) -> UserResponse:
    user = User(
        email=user_req.email,
        password=get_password_hash(user_req.password),
        full_name=user_req.full_name,
        role=user_req.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # duplicate email: surface the store's message as the original API did
        raise HTTPException(status_code=400, detail=str(e.orig))
    db.refresh(user)
    logger.info(f"Registered user {user.id} with role {user.role.value}")
    return UserResponse.from_user(user)


def list_users(db: Session) -> List[UserResponse]:
    statement = select(User).order_by(User.created_at.desc(), User.id.desc())
    users = db.exec(statement).all()
    return [UserResponse.from_user(user) for user in users]


def list_teachers(db: Session) -> List[TeacherSummary]:
    statement = select(User.id, User.full_name).where(User.role == UserRole.teacher).order_by(User.full_name)
    return [TeacherSummary(id=row.id, full_name=row.full_name) for row in db.exec(statement).all()]


def list_students(db: Session) -> List[StudentSummary]:
    statement = select(User.id, User.full_name, User.email).where(User.role == UserRole.student).order_by(User.full_name)
    return [StudentSummary(id=row.id, full_name=row.full_name, email=row.email) for row in db.exec(statement).all()]


def list_students_of_teacher(teacher_id: int, db: Session) -> List[StudentSummary]:
    """Distinct students signed up to any lesson the teacher gives."""
    statement = (
        select(User.id, User.full_name, User.email)
        .join(LessonSignup, LessonSignup.student_id == User.id)
        .join(Lesson, Lesson.id == LessonSignup.lesson_id)
        .where(Lesson.teacher_id == teacher_id)
        .distinct()
        .order_by(User.full_name)
    )
    return [StudentSummary(id=row.id, full_name=row.full_name, email=row.email) for row in db.exec(statement).all()]


def require_user(db: Session, user_id: int, role: UserRole | None = None, label: str = "User") -> User:
    user = db.get(User, user_id)
    if not user or (role is not None and user.role != role):
        raise HTTPException(status_code=400, detail=f"{label} {user_id} does not exist")
    return user
