"""Connection target resolution.

Each target variant has its own loader; the dispatch table is keyed by the
target class so adding a variant is a matter of adding a loader.
"""
from typing import Awaitable, Callable, Dict, Optional, Type, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.exceptions import NotFoundError, ValidationError
from restops.core.tenant import TenantScope
from restops.localization.helpers import get_translation
from restops.models.catalog import InventoryItem, Manual, ManualPrecautionRelation, Precaution
from restops.schemas.connection import (
    InventoryItemResponse,
    InventoryTarget,
    ManualResponse,
    ManualTarget,
    PrecautionResponse,
    PrecautionTarget,
    make_target,
)

Target = Union[InventoryTarget, ManualTarget, PrecautionTarget]
EntityResponse = Union[InventoryItemResponse, ManualResponse, PrecautionResponse]
Loader = Callable[[AsyncSession, UUID, UUID], Awaitable[Optional[EntityResponse]]]


async def _load_inventory(db: AsyncSession, tenant_id: UUID, item_id: UUID) -> Optional[InventoryItemResponse]:
    result = await db.execute(
        select(InventoryItem).where(InventoryItem.id == item_id, InventoryItem.tenant_id == tenant_id)
    )
    entity = result.scalar_one_or_none()
    return InventoryItemResponse.model_validate(entity) if entity else None


async def _load_precaution(db: AsyncSession, tenant_id: UUID, item_id: UUID) -> Optional[PrecautionResponse]:
    result = await db.execute(
        select(Precaution).where(Precaution.id == item_id, Precaution.tenant_id == tenant_id)
    )
    entity = result.scalar_one_or_none()
    return PrecautionResponse.model_validate(entity) if entity else None


async def _load_manual(db: AsyncSession, tenant_id: UUID, item_id: UUID) -> Optional[ManualResponse]:
    result = await db.execute(select(Manual).where(Manual.id == item_id, Manual.tenant_id == tenant_id))
    manual = result.scalar_one_or_none()
    if manual is None:
        return None

    # Related precautions in relation order, restricted to the same tenant
    precautions = await db.execute(
        select(Precaution)
        .join(ManualPrecautionRelation, ManualPrecautionRelation.precaution_id == Precaution.id)
        .where(ManualPrecautionRelation.manual_id == manual.id, Precaution.tenant_id == tenant_id)
        .order_by(ManualPrecautionRelation.order)
    )
    return ManualResponse(
        id=manual.id,
        title=manual.title,
        content=manual.content,
        workplace=manual.workplace,
        time_slot=manual.time_slot,
        category=manual.category,
        created_at=manual.created_at,
        precautions=[PrecautionResponse.model_validate(p) for p in precautions.scalars().all()],
    )


_LOADERS: Dict[Type, Loader] = {
    InventoryTarget: _load_inventory,
    ManualTarget: _load_manual,
    PrecautionTarget: _load_precaution,
}


class ConnectionService:
    """Loads the entity a checklist connection points at."""

    @staticmethod
    async def resolve_target(
        db: AsyncSession,
        *,
        scope: TenantScope,
        target: Target,
        locale: str = "en",
    ) -> EntityResponse:
        loader = _LOADERS[type(target)]
        entity = await loader(db, scope.tenant_id, target.id)
        if entity is None:
            raise NotFoundError(get_translation("errors.connected_entity_not_found", locale, item_type=target.kind))
        return entity

    @staticmethod
    async def resolve(
        db: AsyncSession,
        *,
        scope: TenantScope,
        item_type: str,
        item_id: UUID,
        locale: str = "en",
    ) -> EntityResponse:
        """Resolve a raw ``(item_type, item_id)`` pair; 400 for unknown types."""
        try:
            target = make_target(item_type, item_id)
        except (KeyError, ValueError):
            raise ValidationError(get_translation("errors.unsupported_item_type", locale, item_type=item_type))
        return await ConnectionService.resolve_target(db, scope=scope, target=target, locale=locale)


connection_service = ConnectionService()
