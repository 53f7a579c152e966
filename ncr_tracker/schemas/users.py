from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["Réclamation client", "Retour client", "site01", "site02", "performance", "admin", "consommateur"]


class LoginIn(BaseModel):
    username: str
    password: str


class UserInfo(BaseModel):
    id: UUID
    username: str
    role: str


class LoginOut(BaseModel):
    success: bool
    user: Optional[UserInfo] = None
    message: str
    access_token: Optional[str] = None
    token_type: str = "Bearer"


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    role: str
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    role: UserRole


class UserRoleUpdate(BaseModel):
    role: UserRole


class UsernameUpdate(BaseModel):
    username: str = Field(min_length=1, max_length=255)


class PasswordReset(BaseModel):
    new_password: str = Field(min_length=1)


class PasswordChange(BaseModel):
    old_password: str
    new_password: str = Field(min_length=1)
