from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from schoolhub.auth.auth_handler import require_role
from schoolhub.configs.database import get_db
from schoolhub.models import UserRole
from schoolhub.schemas.ticket_schema import TicketResponse
from schoolhub.schemas.user_schema import UserResponse
from schoolhub.services import user_service, ticket_service, admin_service

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_role(UserRole.admin))])


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get("/tickets", response_model=List[TicketResponse])
def list_all_tickets(db: Session = Depends(get_db)):
    return ticket_service.list_all(db)


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    admin_service.delete_user(db, user_id)
    return {"message": "User deleted successfully"}
