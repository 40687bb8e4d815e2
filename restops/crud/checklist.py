"""Item catalog and connection registry queries."""
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from restops.core.tenant import TenantScope
from restops.crud.base import CRUDBase
from restops.models.checklist import ChecklistItem, ChecklistItemConnection, ChecklistTemplate


class CRUDChecklistItem(CRUDBase[ChecklistItem]):
    """Read access to the item tree of a template."""

    async def get_active_for_template(self, db: AsyncSession, *, template_id: UUID) -> List[ChecklistItem]:
        """All active items of a template, flat, in sibling order."""
        result = await db.execute(
            select(ChecklistItem)
            .where(ChecklistItem.template_id == template_id, ChecklistItem.is_active.is_(True))
            .order_by(ChecklistItem.order.asc(), ChecklistItem.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_active_children(self, db: AsyncSession, *, parent_id: UUID) -> List[ChecklistItem]:
        result = await db.execute(
            select(ChecklistItem)
            .where(ChecklistItem.parent_id == parent_id, ChecklistItem.is_active.is_(True))
            .order_by(ChecklistItem.order.asc(), ChecklistItem.created_at.asc())
        )
        return list(result.scalars().all())

    async def has_active_children(self, db: AsyncSession, *, item_id: UUID) -> bool:
        result = await db.execute(
            select(ChecklistItem.id)
            .where(ChecklistItem.parent_id == item_id, ChecklistItem.is_active.is_(True))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_parent_id(self, db: AsyncSession, *, item_id: UUID) -> Optional[UUID]:
        result = await db.execute(select(ChecklistItem.parent_id).where(ChecklistItem.id == item_id))
        return result.scalar_one_or_none()


class CRUDConnection(CRUDBase[ChecklistItemConnection]):
    """Read access to the connection registry."""

    async def get_for_items(self, db: AsyncSession, *, item_ids: Iterable[UUID]) -> List[ChecklistItemConnection]:
        item_ids = list(item_ids)
        if not item_ids:
            return []
        result = await db.execute(
            select(ChecklistItemConnection)
            .where(ChecklistItemConnection.checklist_item_id.in_(item_ids))
            .order_by(ChecklistItemConnection.order.asc(), ChecklistItemConnection.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_siblings(self, db: AsyncSession, *, checklist_item_id: UUID) -> List[ChecklistItemConnection]:
        """Connections sharing the same owning item, the given one included."""
        return await self.get_for_items(db, item_ids=[checklist_item_id])


checklist_item = CRUDChecklistItem(ChecklistItem)
connection = CRUDConnection(ChecklistItemConnection)


class CRUDTemplate(CRUDBase[ChecklistTemplate]):
    """Read access to checklist templates."""

    async def list_active_for_scope(
        self,
        db: AsyncSession,
        *,
        scope: TenantScope,
        workplace: Optional[str] = None,
        time_slot: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[ChecklistTemplate]:
        query = select(ChecklistTemplate).where(
            ChecklistTemplate.tenant_id == scope.tenant_id,
            ChecklistTemplate.is_active.is_(True),
        )
        if workplace:
            query = query.where(ChecklistTemplate.workplace == workplace)
        if time_slot:
            query = query.where(ChecklistTemplate.time_slot == time_slot)
        if category:
            query = query.where(ChecklistTemplate.category == category)
        result = await db.execute(
            query.order_by(
                ChecklistTemplate.time_slot.asc(),
                ChecklistTemplate.workplace.asc(),
                ChecklistTemplate.name.asc(),
            )
        )
        return list(result.scalars().all())

    async def count_active_roots(self, db: AsyncSession, *, template_ids: Iterable[UUID]) -> Dict[UUID, int]:
        """``{template_id: number of active top-level items}``."""
        template_ids = list(template_ids)
        counts: Dict[UUID, int] = {template_id: 0 for template_id in template_ids}
        if not template_ids:
            return counts
        result = await db.execute(
            select(ChecklistItem.template_id, func.count(ChecklistItem.id))
            .where(
                ChecklistItem.template_id.in_(template_ids),
                ChecklistItem.parent_id.is_(None),
                ChecklistItem.is_active.is_(True),
            )
            .group_by(ChecklistItem.template_id)
        )
        for template_id, count in result.all():
            counts[template_id] = count
        return counts


checklist_template = CRUDTemplate(ChecklistTemplate)
