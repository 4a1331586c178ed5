"""Response shaping the app screens do locally: counts, filters, reminders."""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

import httpx

from schoolhub.client.api_client import ApiError, SchoolClient
from schoolhub.models.ticket import TicketStatus, ticket_status
from schoolhub.utils.utils import check_grade_range

logger = logging.getLogger(__name__)

ALREADY_STARTED = "already started"


@dataclass
class TicketSummary:
    total: int
    pending: int
    answered: int


@dataclass
class UserSummary:
    total: int
    students: int
    teachers: int
    admins: int


@dataclass
class GradeSummary:
    count: int
    average: Optional[float]
    min: Optional[float]
    max: Optional[float]


@dataclass
class LessonReminder:
    lesson_id: Optional[int]
    title: str
    time: str
    time_until: str
    location: Optional[str] = None
    teacher_name: Optional[str] = None


# tickets

def summarize_tickets(tickets: Iterable[Dict]) -> TicketSummary:
    tickets = list(tickets)
    pending = sum(1 for t in tickets if ticket_status(t) == TicketStatus.pending)
    return TicketSummary(total=len(tickets), pending=pending, answered=len(tickets) - pending)


def filter_tickets(tickets: Iterable[Dict], status: Optional[str] = None,
                   teacher_id: Optional[int] = None, student_id: Optional[int] = None) -> List[Dict]:
    wanted = TicketStatus(status) if status else None
    return [
        t for t in tickets
        if (wanted is None or ticket_status(t) == wanted)
        and (teacher_id is None or t.get("teacher_id") == teacher_id)
        and (student_id is None or t.get("student_id") == student_id)
    ]


# users

def summarize_users(users: Iterable[Dict]) -> UserSummary:
    users = list(users)
    roles = [u.get("role") for u in users]
    return UserSummary(
        total=len(users),
        students=roles.count("student"),
        teachers=roles.count("teacher"),
        admins=roles.count("admin"),
    )


def filter_users(users: Iterable[Dict], role: Optional[str] = None) -> List[Dict]:
    return [u for u in users if not role or u.get("role") == role]


# lessons

def lessons_on(lessons: Iterable[Dict], day: date | str, teacher_id: Optional[int] = None) -> List[Dict]:
    day = day.isoformat() if isinstance(day, date) else day
    return [
        l for l in lessons
        if l.get("date") == day and (teacher_id is None or l.get("teacher_id") == teacher_id)
    ]


def lesson_start(lesson: Dict) -> datetime:
    return datetime.fromisoformat(f"{lesson['date']}T{lesson.get('time') or '00:00'}")


def format_time_until(start: datetime, now: datetime) -> str:
    """``in {H}h {M}m`` for a future start (hours dropped when zero), else ``already started``."""
    remaining = start - now
    if remaining.total_seconds() <= 0:
        return ALREADY_STARTED
    minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    if hours > 0:
        return f"in {hours}h {minutes}m"
    return f"in {minutes}m"


def todays_lesson_reminders(lessons: Iterable[Dict], now: Optional[datetime] = None) -> List[LessonReminder]:
    """Reminders for lessons dated today, each computed once against ``now`` (local time).

    A lesson whose date or time cannot be parsed is logged and left out.
    """
    now = now or datetime.now()
    reminders = []
    for l in lessons_on(lessons, now.date()):
        try:
            start = lesson_start(l)
        except ValueError:
            logger.warning(f"Skipping reminder for lesson {l.get('id')}: bad time {l.get('time')!r}")
            continue
        reminders.append(LessonReminder(
            lesson_id=l.get("id"),
            title=l.get("title") or "Lesson",
            time=l.get("time") or "00:00",
            time_until=format_time_until(start, now),
            location=l.get("location"),
            teacher_name=l.get("teacher_name"),
        ))
    return reminders


def format_reminders(reminders: Iterable[LessonReminder]) -> str:
    blocks = []
    for r in reminders:
        text = f"• {r.title} - {r.time} ({r.time_until})"
        if r.location:
            text += f"\n  Location: {r.location}"
        if r.teacher_name:
            text += f"\n  Teacher: {r.teacher_name}"
        blocks.append(text)
    return "\n\n".join(blocks)


def notify_todays_lessons(client: SchoolClient, student_id: int, now: Optional[datetime] = None) -> List[LessonReminder]:
    """Fetch the student's lessons after login and build today's reminders.

    A failed fetch is logged and yields no reminders, a malformed lesson only
    drops its own reminder; the login itself is unaffected.
    """
    try:
        lessons = client.list_lessons_for_student(student_id)
    except (ApiError, httpx.HTTPError) as e:
        logger.warning(f"Could not load lessons for reminders: {e}")
        return []
    return todays_lesson_reminders(lessons, now)


# grades

def summarize_grades(grades: Iterable[Dict]) -> GradeSummary:
    values = [float(g["grade"]) for g in grades if g.get("grade") is not None]
    if not values:
        return GradeSummary(count=0, average=None, min=None, max=None)
    return GradeSummary(
        count=len(values),
        average=round(sum(values) / len(values), 2),
        min=min(values),
        max=max(values),
    )


def filter_grades_by_lesson(grades: Iterable[Dict], lesson_id: Optional[int]) -> List[Dict]:
    return [g for g in grades if lesson_id is None or g.get("lesson_id") == lesson_id]


def validate_grade_input(raw) -> float:
    """Parse what the user typed; raises ValueError naming the 0-100 range."""
    if isinstance(raw, str):
        raw = raw.strip()
    return check_grade_range(raw)
