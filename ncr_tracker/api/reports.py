from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.pagination import Page
from ncr_tracker.schemas.reports import (
    ReportCreate,
    ReportOut,
    ReportPerformanceUpdate,
    ReportStatusUpdate,
    ReportUpdate,
)
from ncr_tracker.services import reports as reports_service

router = APIRouter()


@router.get("", response_model=List[ReportOut])
def list_reports(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reports_service.list_reports(db)


@router.get("/page", response_model=Page[ReportOut])
def reports_page(
    page: int = 1,
    limit: int = settings.PAGINATION_DEFAULT_LIMIT,
    search: Optional[str] = None,
    product_id: Optional[str] = None,
    line_id: Optional[str] = None,
    claim_origin: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    # Filter values stay raw strings; the filter builder parses and validates them.
    return reports_service.reports_page(
        db,
        page=page,
        limit=limit,
        search=search,
        product_id=product_id,
        line_id=line_id,
        claim_origin=claim_origin,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )


@router.post("", response_model=ReportOut, status_code=201)
def create_report(payload: ReportCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reports_service.create_report(db, payload, reported_by=UUID(str(user["sub"])))


@router.get("/{report_id}", response_model=ReportOut)
def get_report(report_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reports_service.get_report(db, report_id)


@router.put("/{report_id}", response_model=ReportOut)
def update_report(report_id: UUID, payload: ReportUpdate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reports_service.update_report(db, report_id, payload)


@router.patch("/{report_id}/status", response_model=ReportOut)
def update_status(
    report_id: UUID, payload: ReportStatusUpdate, db: Session = Depends(get_db), user=Depends(get_current_user)
):
    return reports_service.update_status(db, report_id, payload.status)


@router.patch("/{report_id}/performance")
def update_performance(
    report_id: UUID, payload: ReportPerformanceUpdate, db: Session = Depends(get_db), user=Depends(get_current_user)
):
    return {"updated": reports_service.update_performance(db, report_id, payload.performance)}


@router.delete("/{report_id}")
def delete_report(report_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"deleted": reports_service.delete_report(db, report_id)}
