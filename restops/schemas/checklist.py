"""Employee checklist list schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class ChecklistStatus(str, Enum):
    """Day status of a template."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ChecklistSummary(BaseModel):
    """Active template with the state of its instance for the day."""

    id: UUID
    name: str
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    category: Optional[str] = None
    item_count: int
    completed_count: int
    total_progress: int
    status: ChecklistStatus
    instance_id: Optional[UUID] = None
    is_completed: bool = False
    created_at: Optional[datetime] = None
