"""Reference data: production lines, products and clients."""

from __future__ import annotations

import uuid
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ncr_tracker.core.errors import ValidationError
from ncr_tracker.models.client import Client
from ncr_tracker.models.product import Product
from ncr_tracker.models.production_line import ProductionLine
from ncr_tracker.schemas.catalog import ClientOut, ClientUpsert, LineOut, LineUpsert, ProductOut, ProductUpsert
from ncr_tracker.schemas.pagination import Page, PageRequest
from ncr_tracker.services.filter_predicates import FilterField, FilterKind
from ncr_tracker.services.pagination import Listing, paginate
from ncr_tracker.services.persistence import commit_or_raise, delete_by_ids, fetch_all, get_or_404

LINES_LISTING: Listing[LineOut] = Listing(
    name="lines",
    statement=select(ProductionLine),
    count_statement=select(func.count(ProductionLine.id)),
    order_by=(ProductionLine.name.asc(), ProductionLine.id.asc()),
    row_mapper=lambda row: LineOut.model_validate(row[0]),
    filters=(
        FilterField("search", FilterKind.TEXT, (ProductionLine.name, ProductionLine.description)),
    ),
)

PRODUCTS_LISTING: Listing[ProductOut] = Listing(
    name="products",
    statement=select(Product),
    count_statement=select(func.count(Product.id)),
    order_by=(Product.designation.asc(), Product.id.asc()),
    row_mapper=lambda row: ProductOut.model_validate(row[0]),
    filters=(
        FilterField("search", FilterKind.TEXT, (Product.designation, Product.code)),
    ),
)

CLIENTS_LISTING: Listing[ClientOut] = Listing(
    name="clients",
    statement=select(Client),
    count_statement=select(func.count(Client.id)),
    order_by=(Client.name.asc(), Client.id.asc()),
    row_mapper=lambda row: ClientOut.model_validate(row[0]),
    filters=(FilterField("search", FilterKind.TEXT, (Client.name,)),),
)


def _required(value: str, label: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


# Production lines


def list_lines(db: Session) -> list[LineOut]:
    rows = fetch_all(db, select(ProductionLine).order_by(ProductionLine.name.asc(), ProductionLine.id.asc()))
    return [LineOut.model_validate(r) for r in rows]


def lines_page(db: Session, *, page: int, limit: int, search: str | None = None) -> Page[LineOut]:
    return paginate(db, LINES_LISTING, PageRequest(page=page, limit=limit, filters={"search": search}))


def get_line(db: Session, line_id: uuid.UUID) -> LineOut:
    return LineOut.model_validate(get_or_404(db, ProductionLine, line_id, "Production line"))


def _new_line(payload: LineUpsert) -> ProductionLine:
    return ProductionLine(
        name=_required(payload.name, "Name"),
        description=payload.description,
        is_active=payload.is_active,
    )


def create_line(db: Session, payload: LineUpsert) -> LineOut:
    row = _new_line(payload)
    db.add(row)
    commit_or_raise(db, conflict="Production line could not be saved")
    db.refresh(row)
    return LineOut.model_validate(row)


def bulk_create_lines(db: Session, payloads: Iterable[LineUpsert]) -> list[LineOut]:
    rows = [_new_line(p) for p in payloads]
    db.add_all(rows)
    commit_or_raise(db, conflict="Production lines could not be saved")
    for row in rows:
        db.refresh(row)
    return [LineOut.model_validate(r) for r in rows]


def update_line(db: Session, line_id: uuid.UUID, payload: LineUpsert) -> LineOut:
    row = get_or_404(db, ProductionLine, line_id, "Production line")
    row.name = _required(payload.name, "Name")
    row.description = payload.description
    row.is_active = payload.is_active
    db.add(row)
    commit_or_raise(db, conflict="Production line could not be saved")
    db.refresh(row)
    return LineOut.model_validate(row)


def delete_line(db: Session, line_id: uuid.UUID) -> bool:
    return delete_by_ids(db, ProductionLine, [line_id]) > 0


def delete_lines(db: Session, line_ids: Iterable[uuid.UUID]) -> int:
    return delete_by_ids(db, ProductionLine, line_ids)


# Products


def list_products(db: Session) -> list[ProductOut]:
    rows = fetch_all(db, select(Product).order_by(Product.designation.asc(), Product.id.asc()))
    return [ProductOut.model_validate(r) for r in rows]


def products_page(db: Session, *, page: int, limit: int, search: str | None = None) -> Page[ProductOut]:
    return paginate(db, PRODUCTS_LISTING, PageRequest(page=page, limit=limit, filters={"search": search}))


def get_product(db: Session, product_id: uuid.UUID) -> ProductOut:
    return ProductOut.model_validate(get_or_404(db, Product, product_id, "Product"))


def _new_product(payload: ProductUpsert) -> Product:
    return Product(designation=_required(payload.designation, "Designation"), code=_required(payload.code, "Code"))


def create_product(db: Session, payload: ProductUpsert) -> ProductOut:
    row = _new_product(payload)
    db.add(row)
    commit_or_raise(db, conflict="Product could not be saved")
    db.refresh(row)
    return ProductOut.model_validate(row)


def bulk_create_products(db: Session, payloads: Iterable[ProductUpsert]) -> list[ProductOut]:
    rows = [_new_product(p) for p in payloads]
    db.add_all(rows)
    commit_or_raise(db, conflict="Products could not be saved")
    for row in rows:
        db.refresh(row)
    return [ProductOut.model_validate(r) for r in rows]


def update_product(db: Session, product_id: uuid.UUID, payload: ProductUpsert) -> ProductOut:
    row = get_or_404(db, Product, product_id, "Product")
    row.designation = _required(payload.designation, "Designation")
    row.code = _required(payload.code, "Code")
    db.add(row)
    commit_or_raise(db, conflict="Product could not be saved")
    db.refresh(row)
    return ProductOut.model_validate(row)


def delete_product(db: Session, product_id: uuid.UUID) -> bool:
    return delete_by_ids(db, Product, [product_id]) > 0


def delete_products(db: Session, product_ids: Iterable[uuid.UUID]) -> int:
    return delete_by_ids(db, Product, product_ids)


# Clients


def list_clients(db: Session) -> list[ClientOut]:
    rows = fetch_all(db, select(Client).order_by(Client.name.asc(), Client.id.asc()))
    return [ClientOut.model_validate(r) for r in rows]


def clients_page(db: Session, *, page: int, limit: int, search: str | None = None) -> Page[ClientOut]:
    return paginate(db, CLIENTS_LISTING, PageRequest(page=page, limit=limit, filters={"search": search}))


def get_client(db: Session, client_id: uuid.UUID) -> ClientOut:
    return ClientOut.model_validate(get_or_404(db, Client, client_id, "Client"))


def create_client(db: Session, payload: ClientUpsert) -> ClientOut:
    name = _required(payload.name, "Name")
    row = Client(name=name)
    db.add(row)
    commit_or_raise(db, conflict=f'Client "{name}" already exists')
    db.refresh(row)
    return ClientOut.model_validate(row)


def bulk_create_clients(db: Session, payloads: Iterable[ClientUpsert]) -> list[ClientOut]:
    rows = [Client(name=_required(p.name, "Name")) for p in payloads]
    db.add_all(rows)
    commit_or_raise(db, conflict="One of the clients already exists")
    for row in rows:
        db.refresh(row)
    return [ClientOut.model_validate(r) for r in rows]


def update_client(db: Session, client_id: uuid.UUID, payload: ClientUpsert) -> ClientOut:
    row = get_or_404(db, Client, client_id, "Client")
    name = _required(payload.name, "Name")
    row.name = name
    db.add(row)
    commit_or_raise(db, conflict=f'Client "{name}" already exists')
    db.refresh(row)
    return ClientOut.model_validate(row)


def delete_client(db: Session, client_id: uuid.UUID) -> bool:
    return delete_by_ids(db, Client, [client_id]) > 0


def delete_clients(db: Session, client_ids: Iterable[uuid.UUID]) -> int:
    return delete_by_ids(db, Client, client_ids)
