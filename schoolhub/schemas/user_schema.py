from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from schoolhub.models import UserRole, User
from schoolhub.schemas.common import NonBlankStr


class RegisterRequest(BaseModel):
    email: NonBlankStr
    password: str
    full_name: NonBlankStr
    role: UserRole

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        # passwords are kept verbatim, only rejected when blank
        if not value or not value.strip():
            raise ValueError("password must not be blank")
        return value


class LoginRequest(BaseModel):
    email: NonBlankStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: UserRole
    created_at: Optional[datetime] = None

    @staticmethod
    def from_user(user: User | None) -> Optional['UserResponse']:
        if user is None:
            return None
        return UserResponse.model_validate(user.model_dump())


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TeacherSummary(BaseModel):
    id: int
    full_name: str


class StudentSummary(BaseModel):
    id: int
    full_name: str
    email: str
