"""Checklist progress schemas."""
from __future__ import annotations

from datetime import date as DateType, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from restops.models.checklist import ConnectionItemType


class ConnectionNode(BaseModel):
    """Connection with its resolved progress."""

    connection_id: UUID
    item_type: ConnectionItemType
    item_id: UUID
    is_completed: bool = False
    notes: Optional[str] = None
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class ItemNode(BaseModel):
    """Checklist item with derived completion, connections and children."""

    id: UUID
    content: str
    instructions: Optional[str] = None
    is_completed: bool = False
    notes: Optional[str] = None
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    connections: List[ConnectionNode] = Field(default_factory=list)
    children: List["ItemNode"] = Field(default_factory=list)


class FlatItem(BaseModel):
    """Flat view of one item and its explicit progress row."""

    id: UUID
    content: str
    instructions: Optional[str] = None
    parent_id: Optional[UUID] = None
    has_children: bool = False
    is_completed: bool = False
    notes: Optional[str] = None
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class ProgressSummary(BaseModel):
    """Aggregate counters; only true leaves count as main items."""

    total_main: int = 0
    completed_main: int = 0
    total_connected: int = 0
    completed_connected: int = 0
    percentage: int = 0


class InstanceSummary(BaseModel):
    """Instance header shown above the tree."""

    id: UUID
    template_id: UUID
    template_name: str
    date: DateType
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    is_submitted: bool
    is_completed: bool
    submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None


class ConnectedProgressEntry(BaseModel):
    """Raw connection progress row."""

    id: UUID
    connection_id: UUID
    item_id: UUID
    is_completed: bool
    notes: Optional[str] = None
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class ProgressResponse(BaseModel):
    """Full progress view of one instance."""

    instance: InstanceSummary
    progress: ProgressSummary
    items: List[FlatItem]
    items_tree: List[ItemNode]
    connected_items: List[ConnectedProgressEntry]


class ToggleRequest(BaseModel):
    """Toggle one item or one connection.

    Fields are optional so that missing values surface as 400 rather than
    a schema error.
    """

    instance_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    connection_id: Optional[UUID] = None
    is_completed: Optional[bool] = None
    notes: Optional[str] = None


class ToggleItemResponse(BaseModel):
    """Result of an item toggle."""

    success: bool = True
    progress_id: UUID


class ToggleConnectionResponse(BaseModel):
    """Result of a connection toggle."""

    success: bool = True
    connection_progress_id: UUID


ItemNode.model_rebuild()
