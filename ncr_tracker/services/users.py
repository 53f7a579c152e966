from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.errors import StorageError, ValidationError
from ncr_tracker.core.security import create_access_token, hash_password, verify_password
from ncr_tracker.models.user import User
from ncr_tracker.schemas.pagination import Page, PageRequest
from ncr_tracker.schemas.users import LoginOut, UserCreate, UserInfo, UserOut
from ncr_tracker.services.filter_predicates import FilterField, FilterKind
from ncr_tracker.services.pagination import Listing, driver_message, paginate
from ncr_tracker.services.persistence import commit_or_raise, delete_by_ids, fetch_all, get_or_404

_LOG = logging.getLogger("ncr_tracker.users")

USERS_LISTING: Listing[UserOut] = Listing(
    name="users",
    statement=select(User),
    count_statement=select(func.count(User.id)),
    order_by=(User.created_at.desc(), User.id.asc()),
    row_mapper=lambda row: UserOut.model_validate(row[0]),
    filters=(FilterField("search", FilterKind.TEXT, (User.username, User.role)),),
)


def normalize_username(raw: str | None) -> str:
    return str(raw or "").strip()


def get_user_by_username(db: Session, username: str) -> User | None:
    normalized = normalize_username(username)
    if not normalized:
        return None
    try:
        return db.execute(select(User).where(User.username == normalized)).scalars().first()
    except SQLAlchemyError as exc:
        _LOG.error("user_lookup_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc


def ensure_bootstrap_admin(db: Session, username: str, password: str) -> User | None:
    """Create the bootstrap admin the first time its credentials are used.

    An existing account with that username is left untouched.
    """
    if not settings.BOOTSTRAP_ADMIN_ENABLED:
        return None
    if normalize_username(username) != settings.BOOTSTRAP_ADMIN_USERNAME:
        return None
    if str(password or "") != settings.BOOTSTRAP_ADMIN_PASSWORD:
        return None
    existing = get_user_by_username(db, username)
    if existing is not None:
        return existing
    user = User(
        username=settings.BOOTSTRAP_ADMIN_USERNAME,
        password_hash=hash_password(settings.BOOTSTRAP_ADMIN_PASSWORD),
        role="admin",
    )
    db.add(user)
    commit_or_raise(db, conflict="Bootstrap admin could not be created")
    db.refresh(user)
    _LOG.info("bootstrap_admin_created username=%s", user.username)
    return user


def login(db: Session, username: str, password: str) -> LoginOut:
    user = ensure_bootstrap_admin(db, username, password) or get_user_by_username(db, username)
    if user is None:
        return LoginOut(success=False, message="User not found")
    if not verify_password(password, user.password_hash):
        return LoginOut(success=False, message="Invalid password")
    token = create_access_token(user_id=str(user.id), username=user.username, role=user.role)
    return LoginOut(
        success=True,
        user=UserInfo(id=user.id, username=user.username, role=user.role),
        message="Login successful",
        access_token=token,
    )


def list_users(db: Session) -> list[UserOut]:
    rows = fetch_all(db, select(User).order_by(User.created_at.desc(), User.id.asc()))
    return [UserOut.model_validate(r) for r in rows]


def users_page(db: Session, *, page: int, limit: int, search: str | None = None) -> Page[UserOut]:
    return paginate(db, USERS_LISTING, PageRequest(page=page, limit=limit, filters={"search": search}))


def get_user(db: Session, user_id: uuid.UUID) -> UserOut:
    return UserOut.model_validate(get_or_404(db, User, user_id, "User"))


def create_user(db: Session, payload: UserCreate) -> UserOut:
    username = normalize_username(payload.username)
    if not username:
        raise ValidationError("Username is required")
    user = User(username=username, password_hash=hash_password(payload.password), role=payload.role)
    db.add(user)
    commit_or_raise(db, conflict=f'Username "{username}" is already taken')
    db.refresh(user)
    return UserOut.model_validate(user)


def update_role(db: Session, user_id: uuid.UUID, role: str) -> UserOut:
    user = get_or_404(db, User, user_id, "User")
    user.role = role
    db.add(user)
    commit_or_raise(db)
    db.refresh(user)
    return UserOut.model_validate(user)


def update_username(db: Session, user_id: uuid.UUID, username: str) -> UserOut:
    normalized = normalize_username(username)
    if not normalized:
        raise ValidationError("Username is required")
    user = get_or_404(db, User, user_id, "User")
    user.username = normalized
    db.add(user)
    commit_or_raise(db, conflict=f'Username "{normalized}" is already taken')
    db.refresh(user)
    return UserOut.model_validate(user)


def reset_password(db: Session, user_id: uuid.UUID, new_password: str) -> None:
    user = get_or_404(db, User, user_id, "User")
    user.password_hash = hash_password(new_password)
    db.add(user)
    commit_or_raise(db)


def change_password(db: Session, user_id: uuid.UUID, old_password: str, new_password: str) -> None:
    user = get_or_404(db, User, user_id, "User")
    if not verify_password(old_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.add(user)
    commit_or_raise(db)


def delete_user(db: Session, user_id: uuid.UUID) -> bool:
    return delete_by_ids(db, User, [user_id]) > 0
