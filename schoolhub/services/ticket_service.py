import logging
from datetime import datetime, UTC
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from schoolhub.models import Ticket, User, UserRole
from schoolhub.schemas.ticket_schema import TicketResponse
from schoolhub.services.user_service import require_user

logger = logging.getLogger(__name__)

Student = aliased(User)
Teacher = aliased(User)


def create_ticket(
        db: Session,
        student_id: int,
        teacher_id: int,
        subject: str,
        message: str,
        attachment: Optional[str] = None,
) -> TicketResponse:
    require_user(db, student_id, UserRole.student, "Student")
    require_user(db, teacher_id, UserRole.teacher, "Teacher")
    ticket = Ticket(
        student_id=student_id,
        teacher_id=teacher_id,
        subject=subject,
        message=message,
        attachment=attachment,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    logger.info(f"Ticket {ticket.id} created by student {student_id} for teacher {teacher_id}")
    return TicketResponse.model_validate(ticket.model_dump())


def _listing():
    return (
        select(Ticket, Student.full_name, Teacher.full_name)
        .join(Student, Ticket.student_id == Student.id)
        .join(Teacher, Ticket.teacher_id == Teacher.id)
        .order_by(Ticket.created_at.desc(), Ticket.id.desc())
    )


def _to_responses(rows) -> List[TicketResponse]:
    return [
        TicketResponse.model_validate({**ticket.model_dump(), "student_name": student_name, "teacher_name": teacher_name})
        for ticket, student_name, teacher_name in rows
    ]


def list_for_student(db: Session, student_id: int) -> List[TicketResponse]:
    return _to_responses(db.exec(_listing().where(Ticket.student_id == student_id)).all())


def list_for_teacher(db: Session, teacher_id: int) -> List[TicketResponse]:
    return _to_responses(db.exec(_listing().where(Ticket.teacher_id == teacher_id)).all())


def list_all(db: Session) -> List[TicketResponse]:
    return _to_responses(db.exec(_listing()).all())


def reply(db: Session, ticket_id: int, response: str) -> TicketResponse:
    # single UPDATE so response and responded_at can never diverge
    statement = (
        update(Ticket)
        .where(Ticket.id == ticket_id)
        .values(response=response, responded_at=datetime.now(UTC))
    )
    result = db.exec(statement)
    if result.rowcount == 0:
        db.rollback()
        raise HTTPException(status_code=404, detail="Ticket not found")
    db.commit()
    ticket = db.get(Ticket, ticket_id)
    db.refresh(ticket)
    logger.info(f"Ticket {ticket_id} answered")
    return TicketResponse.model_validate(ticket.model_dump())
