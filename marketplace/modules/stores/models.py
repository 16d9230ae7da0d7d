"""Domain models for stores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from marketplace.modules.common import UNSET


@dataclass(slots=True)
class Store:
    id: str
    name: str
    address: str
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class StoreCreateInput:
    name: str
    address: str


@dataclass(slots=True)
class StoreUpdateInput:
    name: Optional[str] | object = UNSET
    address: Optional[str] | object = UNSET
