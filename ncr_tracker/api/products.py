from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.config import settings
from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.catalog import DeletedOut, IdsIn, ProductBulkCreate, ProductOut, ProductUpsert
from ncr_tracker.schemas.pagination import Page
from ncr_tracker.services import catalog

router = APIRouter()


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.list_products(db)


@router.get("/page", response_model=Page[ProductOut])
def products_page(
    page: int = 1,
    limit: int = settings.PAGINATION_DEFAULT_LIMIT,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return catalog.products_page(db, page=page, limit=limit, search=search)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.create_product(db, payload)


@router.post("/bulk", response_model=List[ProductOut], status_code=201)
def bulk_create_products(payload: ProductBulkCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.bulk_create_products(db, payload.products)


@router.post("/delete", response_model=DeletedOut)
def delete_products(payload: IdsIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return DeletedOut(deleted=catalog.delete_products(db, payload.ids))


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: UUID, payload: ProductUpsert, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return catalog.update_product(db, product_id, payload)


@router.delete("/{product_id}")
def delete_product(product_id: UUID, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"deleted": catalog.delete_product(db, product_id)}
