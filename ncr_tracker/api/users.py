from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.deps import get_current_user, require_role
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.pagination import Page
from ncr_tracker.schemas.users import (
    PasswordChange,
    PasswordReset,
    UserCreate,
    UserOut,
    UsernameUpdate,
    UserRoleUpdate,
)
from ncr_tracker.services import users as users_service

router = APIRouter()
admin_only = require_role("admin")


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), admin=Depends(admin_only)):
    return users_service.list_users(db)


@router.get("/page", response_model=Page[UserOut])
def users_page(
    page: int = 1,
    limit: int = settings.PAGINATION_DEFAULT_LIMIT,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    admin=Depends(admin_only),
):
    return users_service.users_page(db, page=page, limit=limit, search=search)


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db), admin=Depends(admin_only)):
    return users_service.create_user(db, payload)


@router.post("/me/password", status_code=204)
def change_own_password(payload: PasswordChange, db: Session = Depends(get_db), user=Depends(get_current_user)):
    users_service.change_password(db, UUID(str(user["sub"])), payload.old_password, payload.new_password)


@router.patch("/{user_id}/role", response_model=UserOut)
def update_role(user_id: UUID, payload: UserRoleUpdate, db: Session = Depends(get_db), admin=Depends(admin_only)):
    return users_service.update_role(db, user_id, payload.role)


@router.patch("/{user_id}/username", response_model=UserOut)
def update_username(user_id: UUID, payload: UsernameUpdate, db: Session = Depends(get_db), admin=Depends(admin_only)):
    return users_service.update_username(db, user_id, payload.username)


@router.patch("/{user_id}/password", status_code=204)
def reset_password(user_id: UUID, payload: PasswordReset, db: Session = Depends(get_db), admin=Depends(admin_only)):
    users_service.reset_password(db, user_id, payload.new_password)


@router.delete("/{user_id}")
def delete_user(user_id: UUID, db: Session = Depends(get_db), admin=Depends(admin_only)):
    return {"deleted": users_service.delete_user(db, user_id)}
