from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.catalog import DeletedOut, IdsIn, ClientBulkCreate, ClientOut, ClientUpsert
from ncr_tracker.schemas.pagination import Page
from ncr_tracker.services import catalog

router = APIRouter()


@router.get("", response_model=List[ClientOut])
def list_clients(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.list_clients(db)


@router.get("/page", response_model=Page[ClientOut])
def clients_page(
    page: int = 1,
    limit: int = settings.PAGINATION_DEFAULT_LIMIT,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return catalog.clients_page(db, page=page, limit=limit, search=search)


@router.post("", response_model=ClientOut, status_code=201)
def create_client(payload: ClientUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.create_client(db, payload)


@router.post("/bulk", response_model=List[ClientOut], status_code=201)
def bulk_create_clients(payload: ClientBulkCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.bulk_create_clients(db, payload.clients)


@router.post("/delete", response_model=DeletedOut)
def delete_clients(payload: IdsIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return DeletedOut(deleted=catalog.delete_clients(db, payload.ids))


@router.get("/{client_id}", response_model=ClientOut)
def get_client(client_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.get_client(db, client_id)


@router.put("/{client_id}", response_model=ClientOut)
def update_client(client_id: UUID, payload: ClientUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.update_client(db, client_id, payload)


@router.delete("/{client_id}")
def delete_client(client_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"deleted": catalog.delete_client(db, client_id)}
