"""Instance store queries."""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from restops.core.tenant import TenantScope
from restops.crud.base import CRUDBase
from restops.models.checklist import ChecklistInstance, ChecklistTemplate
from restops.schemas.submission import SubmissionFilter


class CRUDInstance(CRUDBase[ChecklistInstance]):
    """CRUD operations for ChecklistInstance."""

    async def get_for_scope(
        self,
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
    ) -> Optional[ChecklistInstance]:
        """Instance with its template, or None when missing or owned by another tenant."""
        result = await db.execute(
            select(ChecklistInstance)
            .where(ChecklistInstance.id == instance_id, ChecklistInstance.tenant_id == scope.tenant_id)
            .options(selectinload(ChecklistInstance.template))
        )
        return result.scalar_one_or_none()

    async def list_for_scope(
        self,
        db: AsyncSession,
        *,
        scope: TenantScope,
        filters: SubmissionFilter,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ChecklistInstance]:
        query = (
            select(ChecklistInstance)
            .join(ChecklistTemplate, ChecklistInstance.template_id == ChecklistTemplate.id)
            .where(ChecklistInstance.tenant_id == scope.tenant_id)
            .options(selectinload(ChecklistInstance.template))
        )
        if filters.template_id:
            query = query.where(ChecklistInstance.template_id == filters.template_id)
        if filters.workplace:
            query = query.where(ChecklistTemplate.workplace == filters.workplace)
        if filters.time_slot:
            query = query.where(ChecklistTemplate.time_slot == filters.time_slot)
        if filters.date:
            query = query.where(ChecklistInstance.date == filters.date)
        else:
            if filters.start_date:
                query = query.where(ChecklistInstance.date >= filters.start_date)
            if filters.end_date:
                query = query.where(ChecklistInstance.date < filters.end_date + timedelta(days=1))
        if filters.is_completed is not None:
            query = query.where(ChecklistInstance.is_completed.is_(filters.is_completed))
        if filters.is_submitted is not None:
            query = query.where(ChecklistInstance.is_submitted.is_(filters.is_submitted))

        result = await db.execute(
            query.order_by(ChecklistInstance.date.desc(), ChecklistInstance.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_for_templates_on(
        self,
        db: AsyncSession,
        *,
        scope: TenantScope,
        template_ids: Iterable[UUID],
        on_date: date,
    ) -> Dict[UUID, ChecklistInstance]:
        """``{template_id: instance}`` for the given day; the earliest created wins."""
        template_ids = list(template_ids)
        if not template_ids:
            return {}
        result = await db.execute(
            select(ChecklistInstance)
            .where(
                ChecklistInstance.tenant_id == scope.tenant_id,
                ChecklistInstance.template_id.in_(template_ids),
                ChecklistInstance.date == on_date,
            )
            .order_by(ChecklistInstance.created_at.asc())
        )
        by_template: Dict[UUID, ChecklistInstance] = {}
        for inst in result.scalars().all():
            by_template.setdefault(inst.template_id, inst)
        return by_template


instance = CRUDInstance(ChecklistInstance)
