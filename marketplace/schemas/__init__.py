"""Pydantic schemas used by the HTTP layer."""
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from marketplace.core.validation import Quantity

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Wrapper placed around every response body."""

    success: bool = True
    message: str = ""
    payload: Optional[T] = None


class TokenData(BaseModel):
    user_id: str
    email: str
    role: str


# Users

class UserRegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class UserUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)
    role: Optional[str] = None
    store_id: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    balance: int
    store_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# Stores

class StoreCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1, max_length=500)


class StoreUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    address: Optional[str] = Field(default=None, max_length=500)


class StoreResponse(BaseModel):
    id: str
    name: str
    address: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Items

class ItemResponse(BaseModel):
    id: str
    name: str
    price: int
    store_id: str
    stock: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaginationInfo(BaseModel):
    total_items: int
    total_pages: int
    current_page: int
    items_per_page: int


class ItemPageResponse(BaseModel):
    items: list[ItemResponse] = Field(default_factory=list)
    pagination: PaginationInfo


# Transactions

class TransactionCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    quantity: Quantity


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    item_id: str
    quantity: int
    total: int
    status: str
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionDetailResponse(TransactionResponse):
    user: Optional[UserSummary] = None
    item: Optional[ItemResponse] = None


# System

class HealthResponse(BaseModel):
    status: str
    database: str
    version: str
    details: dict[str, Any] = Field(default_factory=dict)
