from .user import User, UserRole
from .ticket import Ticket, TicketStatus, ticket_status
from .lesson import Lesson, LessonSignup
from .grade import Grade
