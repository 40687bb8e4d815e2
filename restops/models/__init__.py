"""Model modules."""
from restops.models.tenant import Tenant, Employee
from restops.models.checklist import (
    ChecklistTemplate,
    ChecklistItem,
    ChecklistItemConnection,
    ChecklistInstance,
    ConnectionItemType,
)
from restops.models.progress import ChecklistItemProgress, ConnectedItemProgress
from restops.models.catalog import InventoryItem, InventoryCheck, Manual, Precaution, ManualPrecautionRelation

__all__ = [
    "Tenant",
    "Employee",
    "ChecklistTemplate",
    "ChecklistItem",
    "ChecklistItemConnection",
    "ChecklistInstance",
    "ConnectionItemType",
    "ChecklistItemProgress",
    "ConnectedItemProgress",
    "InventoryItem",
    "InventoryCheck",
    "Manual",
    "Precaution",
    "ManualPrecautionRelation",
]
