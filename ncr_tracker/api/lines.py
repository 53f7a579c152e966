from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.catalog import DeletedOut, IdsIn, LineBulkCreate, LineOut, LineUpsert
from ncr_tracker.schemas.pagination import Page
from ncr_tracker.services import catalog

router = APIRouter()


@router.get("", response_model=List[LineOut])
def list_lines(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.list_lines(db)


@router.get("/page", response_model=Page[LineOut])
def lines_page(
    page: int = 1,
    limit: int = settings.PAGINATION_DEFAULT_LIMIT,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return catalog.lines_page(db, page=page, limit=limit, search=search)


@router.post("", response_model=LineOut, status_code=201)
def create_line(payload: LineUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.create_line(db, payload)


@router.post("/bulk", response_model=List[LineOut], status_code=201)
def bulk_create_lines(payload: LineBulkCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.bulk_create_lines(db, payload.lines)


@router.post("/delete", response_model=DeletedOut)
def delete_lines(payload: IdsIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return DeletedOut(deleted=catalog.delete_lines(db, payload.ids))


@router.get("/{line_id}", response_model=LineOut)
def get_line(line_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.get_line(db, line_id)


@router.put("/{line_id}", response_model=LineOut)
def update_line(line_id: UUID, payload: LineUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.update_line(db, line_id, payload)


@router.delete("/{line_id}")
def delete_line(line_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"deleted": catalog.delete_line(db, line_id)}
