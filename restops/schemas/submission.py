"""Submission schemas."""
from datetime import date as DateType, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel


class SubmitRequest(BaseModel):
    """Submit an instance."""

    instance_id: Optional[UUID] = None
    notes: Optional[str] = None
    require_connected_complete: bool = False


class SubmitResponse(BaseModel):
    """Submission outcome, including the notification dispatch result."""

    success: bool = True
    instance_id: UUID
    submitted_at: datetime
    email_sent: bool = False
    email_recipient_count: int = 0
    email_error: Optional[str] = None


class SubmissionFilter(BaseModel):
    """Filters for the submission report."""

    template_id: Optional[UUID] = None
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    date: Optional[DateType] = None
    start_date: Optional[DateType] = None
    end_date: Optional[DateType] = None
    is_completed: Optional[bool] = None
    is_submitted: Optional[bool] = None


class SubmissionProgress(BaseModel):
    """Ledger aggregates for one instance."""

    total_main_items: int
    completed_main_items: int
    total_connected_items: int
    completed_connected_items: int
    percentage: int


class SubmissionEntry(BaseModel):
    """One row of the submission report."""

    id: UUID
    date: DateType
    template_id: UUID
    template_name: str
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    category: Optional[str] = None
    is_completed: bool
    is_submitted: bool
    completed_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    notes: Optional[str] = None
    progress: SubmissionProgress


class SubmissionListResponse(BaseModel):
    """Submission report."""

    total: int
    items: List[SubmissionEntry]
