from datetime import datetime, UTC
from enum import Enum
from typing import Any, Optional

from sqlmodel import SQLModel, Field


class TicketStatus(str, Enum):
    pending = "pending"
    answered = "answered"


class Ticket(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: int = Field(foreign_key="user.id", index=True)
    teacher_id: int = Field(foreign_key="user.id", index=True)
    subject: str
    message: str
    attachment: Optional[str] = None  # stored filename, never a full path
    # response and responded_at are always written together
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def ticket_status(ticket: Any) -> TicketStatus:
    """Pending until a response exists. Accepts a Ticket, a schema or a plain dict."""
    if isinstance(ticket, dict):
        response = ticket.get("response")
    else:
        response = getattr(ticket, "response", None)
    return TicketStatus.answered if response else TicketStatus.pending
