from sqlalchemy import select
from sqlalchemy.orm import Session

from ncr_tracker.models.reference import DescriptionType, Format
from ncr_tracker.schemas.catalog import DescriptionTypeOut, FormatOut
from ncr_tracker.services.persistence import fetch_all


def list_description_types(db: Session) -> list[DescriptionTypeOut]:
    rows = fetch_all(db, select(DescriptionType).order_by(DescriptionType.name.asc()))
    return [DescriptionTypeOut.model_validate(r) for r in rows]


def list_formats(db: Session) -> list[FormatOut]:
    rows = fetch_all(db, select(Format).order_by(Format.format_index.asc()))
    return [FormatOut.model_validate(r) for r in rows]
