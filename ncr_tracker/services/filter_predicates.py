"""Turn raw listing filter values into SQL predicates.

Every user-supplied value travels as a bind parameter; clause text is built
from column objects only. Builders are pure: nothing here touches a session.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable

from sqlalchemy import String, bindparam, or_
from sqlalchemy.sql.elements import ColumnElement

from ncr_tracker.core.errors import ValidationError

LIKE_ESCAPE = "\\"
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class FilterKind(str, Enum):
    TEXT = "text"
    EXACT_ID = "exact_id"
    DATE_FROM = "date_from"
    DATE_TO = "date_to"
    CHOICE = "choice"


@dataclass(frozen=True)
class FilterField:
    name: str
    kind: FilterKind
    columns: tuple[ColumnElement[Any], ...]
    raw: str | None = None
    choices: tuple[str, ...] = ()

    @property
    def value(self) -> str | None:
        text = str(self.raw or "").strip()
        return text or None

    def with_raw(self, raw: Any) -> "FilterField":
        return replace(self, raw=None if raw is None else str(raw))


@dataclass(frozen=True)
class Predicate:
    field: str
    clause: ColumnElement[bool]
    values: tuple[Any, ...]


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def parse_uuid(field_name: str, value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(f'Invalid identifier for filter "{field_name}": {value!r}')


def parse_iso_date(field_name: str, value: str) -> date:
    if not _ISO_DATE_RE.fullmatch(value):
        raise ValidationError(f'Invalid date for filter "{field_name}", expected YYYY-MM-DD: {value!r}')
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'Invalid date for filter "{field_name}", expected YYYY-MM-DD: {value!r}')


def _text_predicate(field: FilterField, value: str) -> Predicate:
    pattern = f"%{escape_like(value)}%"
    # One bind parameter, referenced by every target column.
    param = bindparam(f"{field.name}_pattern", value=pattern, type_=String())
    clause = or_(*(col.ilike(param, escape=LIKE_ESCAPE) for col in field.columns))
    return Predicate(field=field.name, clause=clause, values=(pattern,))


def _exact_id_predicate(field: FilterField, value: str) -> Predicate:
    parsed = parse_uuid(field.name, value)
    clause = or_(*(col == parsed for col in field.columns))
    return Predicate(field=field.name, clause=clause, values=(parsed,))


def _date_from_predicate(field: FilterField, value: str) -> Predicate:
    parsed = parse_iso_date(field.name, value)
    clause = or_(*(col >= parsed for col in field.columns))
    return Predicate(field=field.name, clause=clause, values=(parsed,))


def _date_to_predicate(field: FilterField, value: str) -> Predicate:
    parsed = parse_iso_date(field.name, value)
    clause = or_(*(col <= parsed for col in field.columns))
    return Predicate(field=field.name, clause=clause, values=(parsed,))


def _choice_predicate(field: FilterField, value: str) -> Predicate:
    by_key = {choice.lower(): choice for choice in field.choices}
    canonical = by_key.get(value.lower())
    if canonical is None:
        allowed = ", ".join(field.choices)
        raise ValidationError(f'Invalid value for filter "{field.name}": {value!r} (allowed: {allowed})')
    clause = or_(*(col == canonical for col in field.columns))
    return Predicate(field=field.name, clause=clause, values=(canonical,))


_BUILDERS: dict[FilterKind, Callable[[FilterField, str], Predicate]] = {
    FilterKind.TEXT: _text_predicate,
    FilterKind.EXACT_ID: _exact_id_predicate,
    FilterKind.DATE_FROM: _date_from_predicate,
    FilterKind.DATE_TO: _date_to_predicate,
    FilterKind.CHOICE: _choice_predicate,
}


def build_predicates(fields: Iterable[FilterField]) -> list[Predicate]:
    """Build one predicate per non-blank field, in input order.

    Raises ``ValidationError`` for the first identifier, date or choice value
    that does not parse; in that case no predicate list is returned at all.
    """
    predicates: list[Predicate] = []
    for field in fields:
        value = field.value
        if value is None:
            continue
        if not field.columns:
            raise ValueError(f'Filter "{field.name}" has no target columns')
        predicates.append(_BUILDERS[field.kind](field, value))
    return predicates
