"""Progress ledger: explicit completion rows per (instance, item) and (instance, connection)."""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from restops.core.tenant import TenantScope
from restops.crud.base import CRUDBase
from restops.models.checklist import ChecklistItemConnection
from restops.models.progress import ChecklistItemProgress, ConnectedItemProgress

ProgressRow = Union[ChecklistItemProgress, ConnectedItemProgress]


def stamp_completion(row: ProgressRow, *, is_completed: bool, actor: TenantScope, now: datetime) -> None:
    """Apply a completion flag and its completer stamp.

    Re-completing an already completed row keeps the original stamp so that
    repeated toggles leave the row unchanged.
    """
    if is_completed:
        if not row.is_completed or row.completed_at is None:
            row.completed_by = actor.employee_name
            row.completed_by_id = actor.employee_id
            row.completed_at = now
    else:
        row.completed_by = None
        row.completed_by_id = None
        row.completed_at = None
    row.is_completed = is_completed


async def _count_by_flag(db: AsyncSession, model, instance_id: UUID) -> Tuple[int, int]:
    result = await db.execute(
        select(model.is_completed, func.count(model.id))
        .where(model.instance_id == instance_id)
        .group_by(model.is_completed)
    )
    total = 0
    completed = 0
    for flag, count in result.all():
        total += count
        if flag:
            completed += count
    return total, completed


async def _count_by_instance(db: AsyncSession, model, instance_ids: List[UUID]) -> Dict[UUID, Tuple[int, int]]:
    """``{instance_id: (total, completed)}`` for several instances in one query."""
    counts: Dict[UUID, Tuple[int, int]] = {instance_id: (0, 0) for instance_id in instance_ids}
    if not instance_ids:
        return counts
    result = await db.execute(
        select(model.instance_id, model.is_completed, func.count(model.id))
        .where(model.instance_id.in_(instance_ids))
        .group_by(model.instance_id, model.is_completed)
    )
    for instance_id, flag, count in result.all():
        total, completed = counts.get(instance_id, (0, 0))
        counts[instance_id] = (total + count, completed + (count if flag else 0))
    return counts


class CRUDItemProgress(CRUDBase[ChecklistItemProgress]):
    """Item-level ledger rows."""

    async def get_for_instance(self, db: AsyncSession, *, instance_id: UUID) -> List[ChecklistItemProgress]:
        result = await db.execute(
            select(ChecklistItemProgress).where(ChecklistItemProgress.instance_id == instance_id)
        )
        return list(result.scalars().all())

    async def get_row(self, db: AsyncSession, *, instance_id: UUID, item_id: UUID) -> Optional[ChecklistItemProgress]:
        result = await db.execute(
            select(ChecklistItemProgress).where(
                ChecklistItemProgress.instance_id == instance_id,
                ChecklistItemProgress.item_id == item_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        db: AsyncSession,
        *,
        instance_id: UUID,
        item_id: UUID,
        is_completed: bool,
        actor: TenantScope,
        notes: Optional[str] = None,
    ) -> ChecklistItemProgress:
        """Create the row if absent, else update it; ``notes`` is only written when given."""
        row = await self.get_row(db, instance_id=instance_id, item_id=item_id)
        if row is None:
            row = ChecklistItemProgress(instance_id=instance_id, item_id=item_id, is_completed=False)
        stamp_completion(row, is_completed=is_completed, actor=actor, now=datetime.now(timezone.utc))
        if notes is not None:
            row.notes = notes
        db.add(row)
        await db.commit()
        await db.refresh(row)
        return row

    async def count(self, db: AsyncSession, *, instance_id: UUID) -> Tuple[int, int]:
        """``(total, completed)`` over every item-level row of the instance."""
        return await _count_by_flag(db, ChecklistItemProgress, instance_id)

    async def count_for_instances(self, db: AsyncSession, *, instance_ids: List[UUID]) -> Dict[UUID, Tuple[int, int]]:
        return await _count_by_instance(db, ChecklistItemProgress, instance_ids)

    async def count_completed(self, db: AsyncSession, *, instance_id: UUID, item_ids: Iterable[UUID]) -> int:
        item_ids = list(item_ids)
        if not item_ids:
            return 0
        result = await db.execute(
            select(func.count(ChecklistItemProgress.id)).where(
                ChecklistItemProgress.instance_id == instance_id,
                ChecklistItemProgress.item_id.in_(item_ids),
                ChecklistItemProgress.is_completed.is_(True),
            )
        )
        return result.scalar_one()


class CRUDConnectionProgress(CRUDBase[ConnectedItemProgress]):
    """Connection-level ledger rows."""

    async def get_for_instance(
        self,
        db: AsyncSession,
        *,
        instance_id: UUID,
        connection_ids: Optional[Iterable[UUID]] = None,
    ) -> List[ConnectedItemProgress]:
        query = select(ConnectedItemProgress).where(ConnectedItemProgress.instance_id == instance_id)
        if connection_ids is not None:
            connection_ids = list(connection_ids)
            if not connection_ids:
                return []
            query = query.where(ConnectedItemProgress.connection_id.in_(connection_ids))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def upsert(
        self,
        db: AsyncSession,
        *,
        instance_id: UUID,
        connection: ChecklistItemConnection,
        is_completed: bool,
        actor: TenantScope,
        notes: Optional[str] = None,
    ) -> ConnectedItemProgress:
        result = await db.execute(
            select(ConnectedItemProgress).where(
                ConnectedItemProgress.instance_id == instance_id,
                ConnectedItemProgress.connection_id == connection.id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = ConnectedItemProgress(
                instance_id=instance_id,
                connection_id=connection.id,
                item_id=connection.checklist_item_id,
                is_completed=False,
            )
        stamp_completion(row, is_completed=is_completed, actor=actor, now=datetime.now(timezone.utc))
        if notes is not None:
            row.notes = notes
        db.add(row)
        await db.commit()
        await db.refresh(row)
        return row

    async def count(self, db: AsyncSession, *, instance_id: UUID) -> Tuple[int, int]:
        return await _count_by_flag(db, ConnectedItemProgress, instance_id)

    async def count_for_instances(self, db: AsyncSession, *, instance_ids: List[UUID]) -> Dict[UUID, Tuple[int, int]]:
        return await _count_by_instance(db, ConnectedItemProgress, instance_ids)


item_progress = CRUDItemProgress(ChecklistItemProgress)
connection_progress = CRUDConnectionProgress(ConnectedItemProgress)
