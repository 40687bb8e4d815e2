"""Connection target variants and connected entity schemas."""
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from restops.models.checklist import ConnectionItemType


class InventoryTarget(BaseModel):
    """Connection pointing at an inventory item."""

    kind: Literal["inventory"] = "inventory"
    id: UUID


class ManualTarget(BaseModel):
    """Connection pointing at a manual."""

    kind: Literal["manual"] = "manual"
    id: UUID


class PrecautionTarget(BaseModel):
    """Connection pointing at a precaution."""

    kind: Literal["precaution"] = "precaution"
    id: UUID


ConnectionTarget = Annotated[
    Union[InventoryTarget, ManualTarget, PrecautionTarget],
    Field(discriminator="kind"),
]

_TARGET_TYPES = {
    ConnectionItemType.INVENTORY: InventoryTarget,
    ConnectionItemType.MANUAL: ManualTarget,
    ConnectionItemType.PRECAUTION: PrecautionTarget,
}


def make_target(item_type, item_id) -> Union[InventoryTarget, ManualTarget, PrecautionTarget]:
    """Build the typed target for a stored ``(item_type, item_id)`` pair.

    Raises ``ValueError`` for unknown item types.
    """
    return _TARGET_TYPES[ConnectionItemType(item_type)](id=item_id)


class InventoryItemResponse(BaseModel):
    """Inventory item detail."""

    kind: Literal["inventory"] = "inventory"
    id: UUID
    name: str
    category: Optional[str] = None
    current_stock: float
    min_stock: float
    unit: Optional[str] = None
    last_updated: Optional[datetime] = None
    last_checked_by: Optional[str] = None

    class Config:
        from_attributes = True


class PrecautionResponse(BaseModel):
    """Precaution detail."""

    kind: Literal["precaution"] = "precaution"
    id: UUID
    title: str
    content: str
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    priority: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ManualResponse(BaseModel):
    """Manual detail with its ordered precautions."""

    kind: Literal["manual"] = "manual"
    id: UUID
    title: str
    content: str
    workplace: Optional[str] = None
    time_slot: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    precautions: List[PrecautionResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


ConnectedEntityResponse = Annotated[
    Union[InventoryItemResponse, ManualResponse, PrecautionResponse],
    Field(discriminator="kind"),
]
