from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, TypeVar

from sqlalchemy import Select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ncr_tracker.core.errors import NotFoundError, StorageError, ValidationError
from ncr_tracker.services.pagination import driver_message

M = TypeVar("M")

_LOG = logging.getLogger("ncr_tracker.persistence")


def commit_or_raise(db: Session, *, conflict: str = "Data constraint violated") -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        _LOG.info("integrity_error detail=%s", driver_message(exc))
        raise ValidationError(conflict) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        _LOG.error("commit_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc


def fetch_all(db: Session, statement: Select) -> list[Any]:
    try:
        return list(db.execute(statement).scalars().all())
    except SQLAlchemyError as exc:
        _LOG.error("query_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc


def get_or_404(db: Session, model: type[M], row_id: uuid.UUID | int, label: str) -> M:
    try:
        row = db.get(model, row_id)
    except SQLAlchemyError as exc:
        _LOG.error("query_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc
    if row is None:
        raise NotFoundError(f"{label} not found")
    return row


def delete_by_ids(db: Session, model: Any, ids: Iterable[uuid.UUID]) -> int:
    id_list = list(dict.fromkeys(ids))
    if not id_list:
        return 0
    try:
        result = db.execute(delete(model).where(model.id.in_(id_list)))
    except SQLAlchemyError as exc:
        db.rollback()
        _LOG.error("delete_failed table=%s detail=%s", model.__tablename__, driver_message(exc))
        raise StorageError(driver_message(exc)) from exc
    commit_or_raise(db, conflict=f"Rows of {model.__tablename__} are still referenced")
    return int(result.rowcount or 0)
