from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Form, File, UploadFile, status
from sqlmodel import Session

from schoolhub.configs import storage
from schoolhub.configs.database import get_db
from schoolhub.schemas.ticket_schema import TicketResponse, TicketReplyRequest
from schoolhub.services import ticket_service

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
        student_id: int = Form(...),
        teacher_id: int = Form(...),
        subject: str = Form(...),
        message: str = Form(...),
        attachment: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
):
    subject, message = subject.strip(), message.strip()
    if not subject or not message:
        raise HTTPException(status_code=400, detail="Missing fields")

    file_name = None
    if attachment is not None and attachment.filename:
        file_name = storage.save_upload(attachment)
    try:
        return ticket_service.create_ticket(db, student_id, teacher_id, subject, message, file_name)
    except Exception:
        if file_name:
            storage.delete_upload(file_name)
        raise


@router.get("/student/{student_id}", response_model=List[TicketResponse])
def list_tickets_for_student(student_id: int, db: Session = Depends(get_db)):
    return ticket_service.list_for_student(db, student_id)


@router.get("/teacher/{teacher_id}", response_model=List[TicketResponse])
def list_tickets_for_teacher(teacher_id: int, db: Session = Depends(get_db)):
    return ticket_service.list_for_teacher(db, teacher_id)


@router.put("/{ticket_id}/reply", response_model=TicketResponse)
def reply_to_ticket(ticket_id: int, reply: TicketReplyRequest, db: Session = Depends(get_db)):
    return ticket_service.reply(db, ticket_id, reply.response)
