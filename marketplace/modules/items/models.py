"""Domain models for store items."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from marketplace.modules.common import UNSET

SORTABLE_FIELDS = frozenset({"created_at", "name", "price", "stock"})
SORT_ORDERS = frozenset({"asc", "desc"})


@dataclass(slots=True)
class Item:
    id: str
    name: str
    price: int
    store_id: str
    stock: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class ItemCreateInput:
    name: str
    price: int
    store_id: str
    stock: int = 0


@dataclass(slots=True)
class ItemUpdateInput:
    name: Optional[str] | object = UNSET
    price: Optional[int] | object = UNSET
    store_id: Optional[str] | object = UNSET
    stock: Optional[int] | object = UNSET


@dataclass(slots=True)
class ItemListQuery:
    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    sort_order: str = "desc"
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    name: Optional[str] = None
    store_id: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
