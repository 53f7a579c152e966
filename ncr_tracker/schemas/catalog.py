from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints

# Whitespace-only values are rejected, not stored as "".
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Code = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class LineUpsert(BaseModel):
    name: Name
    description: Optional[str] = None
    is_active: bool = True


class LineBulkCreate(BaseModel):
    lines: List[LineUpsert]


class LineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductUpsert(BaseModel):
    designation: Name
    code: Code


class ProductBulkCreate(BaseModel):
    products: List[ProductUpsert]


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    designation: str
    code: str
    created_at: datetime
    updated_at: datetime


class ClientUpsert(BaseModel):
    name: Name


class ClientBulkCreate(BaseModel):
    clients: List[ClientUpsert]


class ClientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime


class IdsIn(BaseModel):
    ids: List[UUID]


class DeletedOut(BaseModel):
    deleted: int


class FormatOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    format_index: int
    format_unit: str


class DescriptionTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
