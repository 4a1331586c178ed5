from fastapi import Depends, APIRouter, Body, status
from sqlmodel import Session

from schoolhub.auth.auth_handler import authenticate_user, create_access_token, create_refresh_token, verify_refresh_token
from schoolhub.configs.database import get_db
from schoolhub.schemas.token import Token
from schoolhub.schemas.user_schema import RegisterRequest, LoginRequest, LoginResponse, UserResponse
from schoolhub.services import user_service

router = APIRouter(tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_req: RegisterRequest, db: Session = Depends(get_db)):
    user_service.create_user(user_req, db)
    return {"message": "User registered"}


@router.post("/login", response_model=LoginResponse)
def login(login_req: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, login_req.email, login_req.password)
    claims = user.model_dump()
    return LoginResponse(
        user=UserResponse.from_user(user),
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
    )


@router.post("/auth/refresh", response_model=Token)
def refresh_token(refresh_token: str = Body(..., embed=True)):
    payload = verify_refresh_token(refresh_token)
    return {
        "access_token": create_access_token(payload),
        "refresh_token": refresh_token,
        "token_type": "bearer"
    }
