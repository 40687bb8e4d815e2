"""Inventory stock check schemas."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class InventoryCheckRequest(BaseModel):
    """Stock count for one inventory item."""

    item_id: Optional[UUID] = None
    current_stock: Optional[float] = None
    notes: Optional[str] = None


class InventoryStock(BaseModel):
    """Stock figures of an inventory item after a check."""

    id: UUID
    name: str
    unit: Optional[str] = None
    current_stock: int
    min_stock: int


class InventoryCheckResponse(BaseModel):
    """Result of a stock check."""

    previous_stock: int
    stock_change: int
    item: InventoryStock


class StaleInventoryItem(BaseModel):
    """Inventory item that has not been checked recently."""

    id: UUID
    name: str
    category: Optional[str] = None
    current_stock: float
    min_stock: float
    unit: Optional[str] = None
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_checked_by: Optional[str] = None
    days_since_update: int


class StaleInventoryResponse(BaseModel):
    """Stale inventory items, least recently updated first."""

    items: List[StaleInventoryItem] = Field(default_factory=list)
