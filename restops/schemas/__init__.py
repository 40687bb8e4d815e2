"""Schema modules."""
from restops.schemas.auth import LoginRequest, TokenResponse, EmployeeResponse
from restops.schemas.connection import (
    ConnectionTarget,
    InventoryTarget,
    ManualTarget,
    PrecautionTarget,
    make_target,
)
from restops.schemas.progress import (
    ConnectionNode,
    ItemNode,
    FlatItem,
    ProgressSummary,
    ProgressResponse,
    ToggleRequest,
    ToggleItemResponse,
    ToggleConnectionResponse,
)
from restops.schemas.submission import SubmitRequest, SubmitResponse, SubmissionFilter, SubmissionListResponse
from restops.schemas.checklist import ChecklistStatus, ChecklistSummary
from restops.schemas.inventory import (
    InventoryCheckRequest,
    InventoryCheckResponse,
    StaleInventoryResponse,
)

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "EmployeeResponse",
    "ConnectionTarget",
    "InventoryTarget",
    "ManualTarget",
    "PrecautionTarget",
    "make_target",
    "ConnectionNode",
    "ItemNode",
    "FlatItem",
    "ProgressSummary",
    "ProgressResponse",
    "ToggleRequest",
    "ToggleItemResponse",
    "ToggleConnectionResponse",
    "SubmitRequest",
    "SubmitResponse",
    "SubmissionFilter",
    "SubmissionListResponse",
    "ChecklistStatus",
    "ChecklistSummary",
    "InventoryCheckRequest",
    "InventoryCheckResponse",
    "StaleInventoryResponse",
]
