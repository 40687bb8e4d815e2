"""Completion propagation engine.

Every write commits on its own; there is no transaction spanning the
upsert chain. Ancestor state is recomputed from fresh reads on each toggle,
so a transient inconsistency left by concurrent toggles is corrected by the
next one.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from restops.config import settings
from restops.core.exceptions import NotFoundError, ValidationError
from restops.core.tenant import TenantScope
from restops.crud.checklist import checklist_item as item_crud, connection as connection_crud
from restops.crud.progress import item_progress as item_progress_crud, connection_progress as connection_progress_crud
from restops.localization.helpers import get_translation
from restops.middleware.metrics import progress_toggles_total
from restops.models.checklist import ChecklistInstance
from restops.models.progress import ChecklistItemProgress, ConnectedItemProgress
from restops.services.tree_service import tree_service

logger = logging.getLogger(__name__)


def _state_label(is_completed: bool) -> str:
    return "completed" if is_completed else "cleared"


class ProgressService:
    """Toggles ledger rows and propagates completion upward."""

    @staticmethod
    def _ensure_open(instance: ChecklistInstance, locale: str) -> None:
        if instance.is_submitted:
            raise ValidationError(get_translation("errors.instance_already_submitted", locale))

    @staticmethod
    async def toggle_item(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        item_id: UUID,
        is_completed: bool,
        notes: Optional[str] = None,
        strict_leaf: Optional[bool] = None,
        locale: str = "en",
    ) -> ChecklistItemProgress:
        """Set a leaf item's completion, then walk the parent chain.

        With ``strict_leaf`` (default ``settings.STRICT_LEAF_TOGGLE``) items
        that have active children or connections are rejected, since their
        completion is derived.
        """
        instance = await tree_service.get_instance(db, scope=scope, instance_id=instance_id, locale=locale)
        ProgressService._ensure_open(instance, locale)

        item = await item_crud.get(db, id=item_id)
        if item is None or item.template_id != instance.template_id or not item.is_active:
            raise NotFoundError(get_translation("errors.item_not_found", locale))

        if settings.STRICT_LEAF_TOGGLE if strict_leaf is None else strict_leaf:
            has_children = await item_crud.has_active_children(db, item_id=item.id)
            has_connections = bool(await connection_crud.get_for_items(db, item_ids=[item.id]))
            if has_children or has_connections:
                raise ValidationError(get_translation("errors.item_not_leaf", locale))

        progress = await item_progress_crud.upsert(
            db,
            instance_id=instance.id,
            item_id=item.id,
            is_completed=is_completed,
            actor=scope,
            notes=notes,
        )
        await ProgressService.propagate_to_ancestors(db, scope=scope, instance_id=instance.id, parent_id=item.parent_id)
        await ProgressService.refresh_instance_completion(db, scope=scope, instance=instance)

        progress_toggles_total.labels(kind="item", state=_state_label(is_completed)).inc()
        logger.info(
            "Item progress %s",
            _state_label(is_completed),
            extra={**scope.log_extra(), "instance_id": instance.id, "item_id": item.id},
        )
        return progress

    @staticmethod
    async def propagate_to_ancestors(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        parent_id: Optional[UUID],
    ) -> None:
        """Recompute each ancestor from its children's item-level rows.

        An ancestor is complete when every active child has a completed
        progress row. Connection progress is not consulted here.
        """
        visited = set()
        while parent_id is not None and parent_id not in visited:
            visited.add(parent_id)
            children = await item_crud.get_active_children(db, parent_id=parent_id)
            child_ids = [child.id for child in children]
            completed_children = await item_progress_crud.count_completed(
                db, instance_id=instance_id, item_ids=child_ids
            )
            all_children_done = len(child_ids) > 0 and completed_children == len(child_ids)
            await item_progress_crud.upsert(
                db,
                instance_id=instance_id,
                item_id=parent_id,
                is_completed=all_children_done,
                actor=scope,
            )
            parent_id = await item_crud.get_parent_id(db, item_id=parent_id)

    @staticmethod
    async def refresh_instance_completion(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance: ChecklistInstance,
    ) -> ChecklistInstance:
        """Mark the instance complete when every item-level row is complete."""
        total, completed = await item_progress_crud.count(db, instance_id=instance.id)
        all_done = total > 0 and total == completed

        if all_done and not instance.is_completed:
            instance.is_completed = True
            instance.completed_at = datetime.now(timezone.utc)
            instance.completed_by = scope.employee_name
            instance.completed_by_id = scope.employee_id
        elif not all_done and instance.is_completed:
            instance.is_completed = False
            instance.completed_at = None
            instance.completed_by = None
            instance.completed_by_id = None
        else:
            return instance

        db.add(instance)
        await db.commit()
        return instance

    @staticmethod
    async def toggle_connection(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        connection_id: UUID,
        is_completed: bool,
        notes: Optional[str] = None,
        locale: str = "en",
    ) -> ConnectedItemProgress:
        """Set a connection's completion and sync its owning item.

        The owning item's row becomes complete exactly when all of its
        connections are complete. This goes one level only; grandparents
        are not revisited until an item-level toggle walks the chain.
        """
        instance = await tree_service.get_instance(db, scope=scope, instance_id=instance_id, locale=locale)
        ProgressService._ensure_open(instance, locale)

        conn = await connection_crud.get(db, id=connection_id)
        owner = await item_crud.get(db, id=conn.checklist_item_id) if conn is not None else None
        if conn is None or owner is None or owner.template_id != instance.template_id or not owner.is_active:
            raise NotFoundError(get_translation("errors.connection_not_found", locale))

        progress = await connection_progress_crud.upsert(
            db,
            instance_id=instance.id,
            connection=conn,
            is_completed=is_completed,
            actor=scope,
            notes=notes,
        )

        siblings = await connection_crud.get_siblings(db, checklist_item_id=conn.checklist_item_id)
        sibling_rows = await connection_progress_crud.get_for_instance(
            db,
            instance_id=instance.id,
            connection_ids=[sibling.id for sibling in siblings],
        )
        all_connected_done = (
            len(siblings) > 0
            and len(sibling_rows) == len(siblings)
            and all(row.is_completed for row in sibling_rows)
        )
        await item_progress_crud.upsert(
            db,
            instance_id=instance.id,
            item_id=conn.checklist_item_id,
            is_completed=all_connected_done,
            actor=scope,
        )
        await ProgressService.refresh_instance_completion(db, scope=scope, instance=instance)

        progress_toggles_total.labels(kind="connection", state=_state_label(is_completed)).inc()
        logger.info(
            "Connection progress %s",
            _state_label(is_completed),
            extra={
                **scope.log_extra(),
                "instance_id": instance.id,
                "item_id": conn.checklist_item_id,
                "connection_id": conn.id,
            },
        )
        return progress


progress_service = ProgressService()
