import logging

from fastapi import HTTPException
from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from schoolhub.models import User, Ticket, Lesson, LessonSignup, Grade

logger = logging.getLogger(__name__)


def delete_user(db: Session, user_id: int) -> None:
    """Delete a user and everything that references it, all or nothing.

    Removes tickets where the user is either party, the user's enrollments and
    grades, the lessons the user teaches with their enrollments and grades, and
    finally the user row, then commits once.
    """
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    taught = db.exec(select(Lesson.id).where(Lesson.teacher_id == user_id)).all()
    try:
        db.exec(delete(Ticket).where(or_(Ticket.student_id == user_id, Ticket.teacher_id == user_id)))
        db.exec(delete(Grade).where(or_(
            Grade.student_id == user_id, Grade.teacher_id == user_id, Grade.lesson_id.in_(taught)
        )))
        db.exec(delete(LessonSignup).where(or_(
            LessonSignup.student_id == user_id, LessonSignup.lesson_id.in_(taught)
        )))
        db.exec(delete(Lesson).where(Lesson.teacher_id == user_id))
        db.exec(delete(User).where(User.id == user_id))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Deleting user {user_id} failed, transaction rolled back")
        raise
    logger.info(f"User {user_id} deleted")
