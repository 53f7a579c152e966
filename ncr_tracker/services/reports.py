from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import String, cast, func, select
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ncr_tracker.core.errors import NotFoundError, StorageError, ValidationError
from ncr_tracker.models.client import Client
from ncr_tracker.models.common import CLAIM_ORIGINS, REPORT_STATUSES
from ncr_tracker.models.product import Product
from ncr_tracker.models.production_line import ProductionLine
from ncr_tracker.models.reference import Format
from ncr_tracker.models.report import NonConformityReport
from ncr_tracker.schemas.pagination import Page, PageRequest
from ncr_tracker.schemas.reports import ReportCreate, ReportFields, ReportOut, ReportUpdate
from ncr_tracker.services.filter_predicates import FilterField, FilterKind
from ncr_tracker.services.pagination import Listing, driver_message, paginate
from ncr_tracker.services.persistence import commit_or_raise, delete_by_ids, get_or_404

_LOG = logging.getLogger("ncr_tracker.reports")

REPORT_NUMBER_PREFIX = "NC"

FORMAT_DISPLAY = (cast(Format.format_index, String) + " " + Format.format_unit).label("format_display")


def _with_display_joins(statement):
    return (
        statement.select_from(NonConformityReport)
        .outerjoin(ProductionLine, NonConformityReport.line_id == ProductionLine.id)
        .outerjoin(Product, NonConformityReport.product_id == Product.id)
        .outerjoin(Format, NonConformityReport.format_id == Format.id)
    )


def report_to_out(
    report: NonConformityReport,
    *,
    line_name: str | None = None,
    product_name: str | None = None,
    format_display: str | None = None,
) -> ReportOut:
    return ReportOut(
        id=report.id,
        report_number=report.report_number,
        report_date=report.report_date,
        line_id=report.line_id,
        product_id=report.product_id,
        format_id=report.format_id,
        production_date=report.production_date,
        team=report.team,
        time=report.time,
        description_type=report.description_type,
        description_details=report.description_details,
        quantity=report.quantity,
        claim_origin=report.claim_origin,
        claim_origin_detail=report.claim_origin_detail,
        claim_origin_client_id=report.claim_origin_client_id,
        valuation=float(report.valuation),
        performance=report.performance,
        status=report.status,
        reported_by=report.reported_by,
        created_at=report.created_at,
        updated_at=report.updated_at,
        line_name=line_name,
        product_name=product_name,
        format_display=format_display,
    )


def _row_to_out(row: Row) -> ReportOut:
    return report_to_out(
        row[0],
        line_name=row.line_name,
        product_name=row.product_name,
        format_display=row.format_display,
    )


REPORTS_LISTING: Listing[ReportOut] = Listing(
    name="reports",
    statement=_with_display_joins(
        select(
            NonConformityReport,
            ProductionLine.name.label("line_name"),
            Product.designation.label("product_name"),
            FORMAT_DISPLAY,
        )
    ),
    # Only the product join is needed: the text search reads the designation.
    count_statement=select(func.count(NonConformityReport.id))
    .select_from(NonConformityReport)
    .outerjoin(Product, NonConformityReport.product_id == Product.id),
    order_by=(NonConformityReport.created_at.desc(), NonConformityReport.id.asc()),
    row_mapper=_row_to_out,
    filters=(
        FilterField(
            "search",
            FilterKind.TEXT,
            (NonConformityReport.report_number, NonConformityReport.description_details, Product.designation),
        ),
        FilterField("product_id", FilterKind.EXACT_ID, (NonConformityReport.product_id,)),
        FilterField("line_id", FilterKind.EXACT_ID, (NonConformityReport.line_id,)),
        FilterField("claim_origin", FilterKind.CHOICE, (NonConformityReport.claim_origin,), choices=CLAIM_ORIGINS),
        FilterField("status", FilterKind.CHOICE, (NonConformityReport.status,), choices=REPORT_STATUSES),
        FilterField("start_date", FilterKind.DATE_FROM, (NonConformityReport.report_date,)),
        FilterField("end_date", FilterKind.DATE_TO, (NonConformityReport.report_date,)),
    ),
)


def reports_page(db: Session, *, page: int, limit: int, **filters: Any) -> Page[ReportOut]:
    """Page through reports, newest first.

    ``filters`` accepts search, product_id, line_id, claim_origin, status,
    start_date and end_date. An end date before the start date is not an error;
    it simply matches nothing.
    """
    return paginate(db, REPORTS_LISTING, PageRequest(page=page, limit=limit, filters=filters))


def list_reports(db: Session) -> list[ReportOut]:
    statement = REPORTS_LISTING.statement.order_by(*REPORTS_LISTING.order_by)
    try:
        rows = db.execute(statement).all()
    except SQLAlchemyError as exc:
        _LOG.error("report_list_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc
    return [_row_to_out(r) for r in rows]


def get_report(db: Session, report_id: uuid.UUID) -> ReportOut:
    statement = REPORTS_LISTING.statement.where(NonConformityReport.id == report_id)
    try:
        row = db.execute(statement).first()
    except SQLAlchemyError as exc:
        _LOG.error("report_get_failed detail=%s", driver_message(exc))
        raise StorageError(driver_message(exc)) from exc
    if row is None:
        raise NotFoundError("Report not found")
    return _row_to_out(row)


def next_report_number(db: Session, today: date | None = None) -> str:
    """``NC-YYYYMMDD-XXXX``, XXXX continuing the highest number issued that day."""
    day = today or datetime.now(timezone.utc).date()
    prefix = f"{REPORT_NUMBER_PREFIX}-{day:%Y%m%d}-"
    try:
        # Longer suffixes are larger numbers: "-10000" must outrank "-9999".
        last = db.execute(
            select(NonConformityReport.report_number)
            .where(NonConformityReport.report_number.startswith(prefix, autoescape=True))
            .order_by(func.length(NonConformityReport.report_number).desc(), NonConformityReport.report_number.desc())
            .limit(1)
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise StorageError(driver_message(exc)) from exc
    sequence = 1
    if last:
        try:
            sequence = int(str(last)[len(prefix):]) + 1
        except ValueError:
            sequence = 1
    return f"{prefix}{sequence:04d}"


def _check_references(db: Session, payload: ReportFields) -> None:
    try:
        _check_references_exist(db, payload)
    except SQLAlchemyError as exc:
        raise StorageError(driver_message(exc)) from exc


def _check_references_exist(db: Session, payload: ReportFields) -> None:
    if db.get(ProductionLine, payload.line_id) is None:
        raise ValidationError(f"Production line {payload.line_id} does not exist")
    if db.get(Product, payload.product_id) is None:
        raise ValidationError(f"Product {payload.product_id} does not exist")
    if payload.format_id is not None and db.get(Format, payload.format_id) is None:
        raise ValidationError(f"Format {payload.format_id} does not exist")
    if payload.claim_origin_client_id is not None and db.get(Client, payload.claim_origin_client_id) is None:
        raise ValidationError(f"Client {payload.claim_origin_client_id} does not exist")


def _apply_fields(report: NonConformityReport, payload: ReportFields) -> None:
    report.line_id = payload.line_id
    report.product_id = payload.product_id
    report.format_id = payload.format_id
    report.production_date = payload.production_date
    report.team = payload.team
    report.time = payload.time
    report.description_type = payload.description_type
    report.description_details = payload.description_details.strip()
    report.quantity = payload.quantity
    report.claim_origin = payload.claim_origin
    report.claim_origin_detail = (payload.claim_origin_detail or "").strip() or None
    report.claim_origin_client_id = payload.claim_origin_client_id
    report.valuation = payload.valuation
    report.performance = payload.performance


def create_report(db: Session, payload: ReportCreate, reported_by: uuid.UUID) -> ReportOut:
    _check_references(db, payload)
    today = datetime.now(timezone.utc).date()
    report = NonConformityReport(
        report_number=next_report_number(db, today),
        report_date=today,
        status="open",
        reported_by=reported_by,
    )
    _apply_fields(report, payload)
    db.add(report)
    commit_or_raise(db, conflict="Report could not be saved, please retry")
    _LOG.info("report_created number=%s id=%s", report.report_number, report.id)
    return get_report(db, report.id)


def update_report(db: Session, report_id: uuid.UUID, payload: ReportUpdate) -> ReportOut:
    report = get_or_404(db, NonConformityReport, report_id, "Report")
    _check_references(db, payload)
    _apply_fields(report, payload)
    report.report_date = payload.report_date
    db.add(report)
    commit_or_raise(db, conflict="Report could not be saved")
    return get_report(db, report_id)


def update_status(db: Session, report_id: uuid.UUID, status: str) -> ReportOut:
    report = get_or_404(db, NonConformityReport, report_id, "Report")
    report.status = status
    db.add(report)
    commit_or_raise(db)
    return get_report(db, report_id)


def update_performance(db: Session, report_id: uuid.UUID, performance: str) -> bool:
    report = get_or_404(db, NonConformityReport, report_id, "Report")
    report.performance = performance
    db.add(report)
    commit_or_raise(db)
    return True


def delete_report(db: Session, report_id: uuid.UUID) -> bool:
    return delete_by_ids(db, NonConformityReport, [report_id]) > 0
