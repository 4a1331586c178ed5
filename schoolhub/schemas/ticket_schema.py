from datetime import datetime
from typing import Optional

from pydantic import BaseModel, computed_field

from schoolhub.models import TicketStatus, ticket_status
from schoolhub.schemas.common import NonBlankStr


class TicketReplyRequest(BaseModel):
    response: NonBlankStr


class TicketResponse(BaseModel):
    id: int
    student_id: int
    teacher_id: int
    subject: str
    message: str
    attachment: Optional[str] = None
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime
    student_name: Optional[str] = None
    teacher_name: Optional[str] = None

    @computed_field
    @property
    def status(self) -> TicketStatus:
        return ticket_status(self)
