import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """Non-2xx answer from the API; ``detail`` is the server's reason."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


@dataclass
class UserProfile:
    id: int
    email: str
    full_name: str
    role: str
    created_at: Optional[str] = None


@dataclass
class ClientSession:
    """What a logged-in app session carries between screens."""
    user: UserProfile
    access_token: str
    refresh_token: str
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def auth_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


class SchoolClient:
    """Thin wrapper over the SchoolHub HTTP API.

    The base URL and timeout are passed in explicitly; an existing
    ``httpx.Client`` (for instance a test client) can be handed over instead.
    """

    def __init__(self, base_url: str = "", timeout: float = DEFAULT_TIMEOUT, http: Optional[httpx.Client] = None):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.session: Optional[ClientSession] = None

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, url: str, auth: bool = False, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if auth and self.session:
            headers.update(self.session.auth_header)
        response = self.http.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _detail(response))
        if not response.content:
            return None
        return response.json()

    # auth
    def register(self, email: str, password: str, full_name: str, role: str) -> Dict:
        return self._request("POST", "/register", json={
            "email": email, "password": password, "full_name": full_name, "role": role,
        })

    def login(self, email: str, password: str) -> ClientSession:
        data = self._request("POST", "/login", json={"email": email, "password": password})
        self.session = ClientSession(
            user=UserProfile(**data["user"]),
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
        )
        logger.info(f"Logged in as {self.session.user.email} ({self.session.user.role})")
        return self.session

    def logout(self):
        self.session = None

    # directory
    def list_teachers(self) -> List[Dict]:
        return self._request("GET", "/teachers")

    def list_students(self) -> List[Dict]:
        return self._request("GET", "/students")

    def list_students_of_teacher(self, teacher_id: int) -> List[Dict]:
        return self._request("GET", f"/teachers/{teacher_id}/students")

    def list_lessons_of_teacher(self, teacher_id: int) -> List[Dict]:
        return self._request("GET", f"/teachers/{teacher_id}/lessons")

    # tickets
    def create_ticket(self, student_id: int, teacher_id: int, subject: str, message: str,
                      attachment: Optional[Tuple[str, BinaryIO, str]] = None) -> Dict:
        """``attachment`` is a ``(filename, file object, content type)`` tuple."""
        files = {"attachment": attachment} if attachment else None
        return self._request("POST", "/tickets", data={
            "student_id": str(student_id), "teacher_id": str(teacher_id), "subject": subject, "message": message,
        }, files=files)

    def list_tickets_for_student(self, student_id: int) -> List[Dict]:
        return self._request("GET", f"/tickets/student/{student_id}")

    def list_tickets_for_teacher(self, teacher_id: int) -> List[Dict]:
        return self._request("GET", f"/tickets/teacher/{teacher_id}")

    def reply_to_ticket(self, ticket_id: int, response: str) -> Dict:
        return self._request("PUT", f"/tickets/{ticket_id}/reply", json={"response": response})

    def attachment_url(self, file_name: Optional[str]) -> Optional[str]:
        if not file_name:
            return None
        return f"{str(self.http.base_url).rstrip('/')}/uploads/{file_name}"

    # lessons
    def create_lesson(self, teacher_id: int, title: str, date: str, time: str,
                      description: Optional[str] = None, location: Optional[str] = None) -> Dict:
        return self._request("POST", "/lessons", json={
            "teacher_id": teacher_id, "title": title, "date": date, "time": time,
            "description": description, "location": location,
        })

    def list_lessons(self) -> List[Dict]:
        return self._request("GET", "/lessons")

    def list_lessons_for_student(self, student_id: int, upcoming_only: bool = False) -> List[Dict]:
        params = {"upcoming_only": "true"} if upcoming_only else None
        return self._request("GET", f"/students/{student_id}/lessons", params=params)

    def list_students_for_lesson(self, lesson_id: int) -> List[Dict]:
        return self._request("GET", f"/lessons/{lesson_id}/students")

    def sign_up(self, lesson_id: int, student_id: int) -> Dict:
        return self._request("POST", f"/lessons/{lesson_id}/signup", json={"student_id": student_id})

    def unsign(self, lesson_id: int, student_id: int) -> Dict:
        return self._request("DELETE", f"/lessons/{lesson_id}/unsign", json={"student_id": student_id})

    # attendance
    def list_attendance(self, student_id: int) -> List[Dict]:
        return self._request("GET", "/attendance", params={"student_id": student_id})

    def list_attendance_for_lesson(self, lesson_id: int) -> List[Dict]:
        return self._request("GET", f"/lessons/{lesson_id}/attendance")

    def mark_attendance(self, lesson_id: int, student_id: int, teacher_id: int, present: bool) -> Dict:
        return self._request("POST", "/attendance/mark", json={
            "lesson_id": lesson_id, "student_id": student_id, "teacher_id": teacher_id, "present": present,
        })

    # grades
    def record_grade(self, lesson_id: int, student_id: int, teacher_id: int, grade: float,
                     comment: Optional[str] = None) -> Dict:
        return self._request("POST", "/grades", json={
            "lesson_id": lesson_id, "student_id": student_id, "teacher_id": teacher_id,
            "grade": grade, "comment": comment,
        })

    def list_grades_for_student(self, student_id: int) -> List[Dict]:
        return self._request("GET", f"/students/{student_id}/grades")

    def list_grades_for_teacher(self, teacher_id: int, lesson_id: Optional[int] = None) -> List[Dict]:
        params = {"lesson_id": lesson_id} if lesson_id is not None else None
        return self._request("GET", f"/teachers/{teacher_id}/grades", params=params)

    def grade_stats_for_teacher(self, teacher_id: int, lesson_id: Optional[int] = None) -> Dict:
        params = {"lesson_id": lesson_id} if lesson_id is not None else None
        return self._request("GET", f"/teachers/{teacher_id}/grades/stats", params=params)

    def list_grades_for_lesson(self, lesson_id: int, teacher_id: int) -> List[Dict]:
        return self._request("GET", f"/lessons/{lesson_id}/grades", params={"teacher_id": teacher_id})

    def class_stats(self, lesson_id: int, student_id: int) -> Dict:
        return self._request("GET", f"/lessons/{lesson_id}/grade-stats", params={"student_id": student_id})

    # admin
    def list_users(self) -> List[Dict]:
        return self._request("GET", "/admin/users", auth=True)

    def list_all_tickets(self) -> List[Dict]:
        return self._request("GET", "/admin/tickets", auth=True)

    def delete_user(self, user_id: int) -> Dict:
        return self._request("DELETE", f"/admin/users/{user_id}", auth=True)


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)
