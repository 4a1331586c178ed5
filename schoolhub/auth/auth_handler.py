from datetime import datetime, timedelta, UTC
from typing import Dict

from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session, select

from schoolhub.configs import settings
from schoolhub.models import User, UserRole
from schoolhub.schemas.user_schema import UserResponse

ALGORITHM = "HS256"
BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login")

USER_NOT_FOUND = "User not found"
WRONG_PASSWORD = "Wrong password"
INVALID_CREDENTIALS = "Invalid email or password"


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def authenticate_user(db_session: Session, email: str, password: str) -> User:
    """Return the user for valid credentials, raise 401 otherwise.

    Unknown email and wrong password keep their own messages unless
    LOGIN_GENERIC_ERRORS is enabled.
    """
    statement = select(User).where(User.email == email)
    user = db_session.exec(statement).first()
    if not user:
        raise _login_failure(USER_NOT_FOUND)
    if not verify_password(password, user.password):
        raise _login_failure(WRONG_PASSWORD)
    return user


def _login_failure(reason: str) -> HTTPException:
    detail = INVALID_CREDENTIALS if settings.LOGIN_GENERIC_ERRORS else reason
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _claims(user: Dict) -> Dict:
    # works for a dumped User as well as a decoded refresh token payload
    user_id = user.get("id") or int(user["sub"])
    return {
        "sub": str(user_id),
        "id": user_id,
        "email": user["email"],
        "full_name": user["full_name"],
        "role": str(UserRole(user["role"]).value),
    }


def create_access_token(user: Dict, expires_delta: timedelta | None = None):
    to_encode = _claims(user)
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_ACCESS_SECRET, algorithm=ALGORITHM)


def create_refresh_token(user: Dict):
    to_encode = _claims(user)
    to_encode["exp"] = datetime.now(UTC) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return jwt.encode(to_encode, settings.JWT_REFRESH_SECRET, algorithm=ALGORITHM)


def verify_refresh_token(token: str):
    try:
        return jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")


def get_current_user(token: str = Depends(oauth2_scheme)) -> UserResponse:
    try:
        payload = jwt.decode(token, settings.JWT_ACCESS_SECRET, algorithms=[ALGORITHM])
        return UserResponse.model_validate({
            "id": payload.get("id"),
            "email": payload.get("email"),
            "full_name": payload.get("full_name"),
            "role": payload.get("role"),
        })
    except (JWTError, ValueError):
        raise credentials_exception


def require_role(*roles: UserRole):
    """Dependency factory: the bearer token must belong to one of ``roles``."""
    def checker(current_user: UserResponse = Depends(get_current_user)) -> UserResponse:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return current_user
    return checker


credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)
