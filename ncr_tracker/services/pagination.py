from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, TypeVar

from sqlalchemy import Select
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.errors import StorageError, ValidationError
from ncr_tracker.schemas.pagination import Page, PageRequest
from ncr_tracker.services.filter_predicates import FilterField, Predicate, build_predicates

T = TypeVar("T")

_LOG = logging.getLogger("ncr_tracker.pagination")


@dataclass(frozen=True)
class Listing(Generic[T]):
    """Everything needed to page through one entity.

    ``statement`` selects the rows (with display joins), ``count_statement``
    counts the same filtered set and must join every table a filter column
    comes from. ``order_by`` has to end on a unique key so pages never overlap.
    """

    name: str
    statement: Select
    count_statement: Select
    order_by: tuple[Any, ...]
    row_mapper: Callable[[Row], T]
    filters: tuple[FilterField, ...] = ()

    def bind_filters(self, raw: Mapping[str, Any]) -> list[FilterField]:
        known = {f.name for f in self.filters}
        unknown = sorted(name for name in raw if name not in known)
        if unknown:
            raise ValidationError(f'Unknown filter for {self.name}: {", ".join(unknown)}')
        return [f.with_raw(raw.get(f.name)) for f in self.filters]


def validate_window(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValidationError(f"limit must be >= 1, got {limit}")
    if limit > settings.PAGINATION_MAX_LIMIT:
        raise ValidationError(f"limit must be <= {settings.PAGINATION_MAX_LIMIT}, got {limit}")


def driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc).strip() or exc.__class__.__name__


def apply_predicates(statement: Select, predicates: list[Predicate]) -> Select:
    if not predicates:
        return statement
    return statement.where(*(p.clause for p in predicates))


def paginate(db: Session, listing: Listing[T], request: PageRequest) -> Page[T]:
    """Run the page query and the count query for ``listing``.

    Validation happens before any statement is sent. The two statements share
    the request's session but not a transaction snapshot, so ``total`` may
    disagree with ``data`` under concurrent writes.
    """
    validate_window(request.page, request.limit)
    predicates = build_predicates(listing.bind_filters(request.filters))

    page_stmt = (
        apply_predicates(listing.statement, predicates)
        .order_by(*listing.order_by)
        .limit(request.limit)
        .offset(request.offset)
    )
    count_stmt = apply_predicates(listing.count_statement, predicates)

    try:
        rows = db.execute(page_stmt).all()
        total = db.execute(count_stmt).scalar_one()
    except SQLAlchemyError as exc:
        _LOG.error("listing_query_failed listing=%s detail=%s", listing.name, driver_message(exc))
        raise StorageError(driver_message(exc)) from exc

    _LOG.debug(
        "listing=%s page=%s limit=%s filters=%s total=%s",
        listing.name,
        request.page,
        request.limit,
        [p.field for p in predicates],
        total,
    )
    return Page(
        data=[listing.row_mapper(row) for row in rows],
        total=int(total or 0),
        page=request.page,
        limit=request.limit,
    )
