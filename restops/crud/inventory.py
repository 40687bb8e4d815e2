"""Inventory item queries."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_, select
from restops.core.tenant import TenantScope
from restops.crud.base import CRUDBase
from restops.models.catalog import InventoryItem


class CRUDInventoryItem(CRUDBase[InventoryItem]):
    """Tenant-scoped access to inventory items."""

    async def get_for_scope(self, db: AsyncSession, *, scope: TenantScope, item_id: UUID) -> Optional[InventoryItem]:
        """Active item owned by the scope's tenant, or None."""
        result = await db.execute(
            select(InventoryItem).where(
                InventoryItem.id == item_id,
                InventoryItem.tenant_id == scope.tenant_id,
                InventoryItem.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def list_stale(
        self,
        db: AsyncSession,
        *,
        scope: TenantScope,
        cutoff: datetime,
        limit: int = 20,
    ) -> List[InventoryItem]:
        """Active items updated before ``cutoff`` or never checked, oldest first."""
        result = await db.execute(
            select(InventoryItem)
            .where(
                InventoryItem.tenant_id == scope.tenant_id,
                InventoryItem.is_active.is_(True),
                or_(InventoryItem.last_updated < cutoff, ~InventoryItem.checks.any()),
            )
            .order_by(InventoryItem.last_updated.asc(), InventoryItem.name.asc())
            .limit(limit)
        )
        return list(result.scalars().all())


inventory_item = CRUDInventoryItem(InventoryItem)
