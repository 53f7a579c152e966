from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.users import LoginIn, LoginOut, UserOut
from ncr_tracker.services import users as users_service

router = APIRouter()


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return users_service.login(db, payload.username, payload.password)


@router.get("/me", response_model=UserOut)
def me(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return users_service.get_user(db, UUID(str(user["sub"])))
