"""Tree materializer: rebuilds an instance's checklist tree with derived completion.

The tree is assembled from four flat reads (active items, their connections,
item-level progress, connection-level progress) indexed in memory, so the
cost is linear in the number of items whatever the nesting depth.

Derived completion of a node, first match wins:

1. an explicit item progress row exists -> its ``is_completed``
2. the node has connections -> all connections completed
3. the node has children -> all children (derived) completed
4. otherwise -> ``False``

Only true leaves (no children, no connections) count toward the main
totals. Every connection counts toward the connected totals at any depth.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.exceptions import NotFoundError
from restops.core.tenant import TenantScope
from restops.crud.checklist import checklist_item as item_crud, connection as connection_crud
from restops.crud.instance import instance as instance_crud
from restops.crud.progress import item_progress as item_progress_crud, connection_progress as connection_progress_crud
from restops.localization.helpers import get_translation
from restops.models.checklist import ChecklistInstance
from restops.schemas.progress import (
    ConnectedProgressEntry,
    ConnectionNode,
    FlatItem,
    InstanceSummary,
    ItemNode,
    ProgressResponse,
    ProgressSummary,
)
from restops.services.identity_service import NameResolver, build_name_resolver, passthrough


def completion_percentage(completed: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return int(math.floor(100 * completed / total + 0.5))


@dataclass
class _Counters:
    total_main: int = 0
    completed_main: int = 0
    total_connected: int = 0
    completed_connected: int = 0

    def summary(self) -> ProgressSummary:
        return ProgressSummary(
            total_main=self.total_main,
            completed_main=self.completed_main,
            total_connected=self.total_connected,
            completed_connected=self.completed_connected,
            percentage=completion_percentage(
                self.completed_main + self.completed_connected,
                self.total_main + self.total_connected,
            ),
        )


@dataclass
class ProgressTree:
    """Result of :func:`build_progress_tree`."""

    nodes: List[ItemNode]
    summary: ProgressSummary
    flat_items: List[FlatItem] = field(default_factory=list)


def _sibling_order(rows: Iterable[Any]) -> List[Any]:
    # Stable sort: equal ``order`` values keep their load (insertion) order
    return sorted(rows, key=lambda row: row.order if row.order is not None else 0)


def build_progress_tree(
    items: Sequence[Any],
    connections: Sequence[Any],
    item_progress: Sequence[Any],
    connection_progress: Sequence[Any],
    resolve_name: NameResolver = passthrough,
) -> ProgressTree:
    """Assemble the nested completion tree from flat rows.

    ``items`` must already be restricted to active items of one template.
    Items whose parent is not among them are unreachable and ignored.
    """
    roots: List[Any] = []
    children_by_parent: Dict[UUID, List[Any]] = defaultdict(list)
    for item in _sibling_order(items):
        if item.parent_id is None:
            roots.append(item)
        else:
            children_by_parent[item.parent_id].append(item)

    connections_by_item: Dict[UUID, List[Any]] = defaultdict(list)
    for conn in _sibling_order(connections):
        connections_by_item[conn.checklist_item_id].append(conn)

    progress_by_item = {row.item_id: row for row in item_progress}
    progress_by_connection = {row.connection_id: row for row in connection_progress}

    counters = _Counters()
    flat_items: List[FlatItem] = []

    def build_connection(conn: Any) -> ConnectionNode:
        row = progress_by_connection.get(conn.id)
        return ConnectionNode(
            connection_id=conn.id,
            item_type=conn.item_type,
            item_id=conn.item_id,
            is_completed=bool(row.is_completed) if row else False,
            notes=row.notes if row else None,
            completed_by=resolve_name(row.completed_by) if row else None,
            completed_at=row.completed_at if row else None,
        )

    def build_node(item: Any, parent_id: Any) -> ItemNode:
        row = progress_by_item.get(item.id)
        raw_children = children_by_parent.get(item.id, [])
        flat_items.append(
            FlatItem(
                id=item.id,
                content=item.content,
                instructions=item.instructions or None,
                parent_id=parent_id,
                has_children=bool(raw_children),
                is_completed=bool(row.is_completed) if row else False,
                notes=row.notes if row else None,
                completed_by=resolve_name(row.completed_by) if row else None,
                completed_at=row.completed_at if row else None,
            )
        )

        node_connections = [build_connection(conn) for conn in connections_by_item.get(item.id, [])]
        children = [build_node(child, item.id) for child in raw_children]

        if row is not None:
            is_completed = bool(row.is_completed)
        elif node_connections:
            is_completed = all(conn.is_completed for conn in node_connections)
        elif children:
            is_completed = all(child.is_completed for child in children)
        else:
            is_completed = False

        counters.total_connected += len(node_connections)
        counters.completed_connected += sum(1 for conn in node_connections if conn.is_completed)
        if not children and not node_connections:
            counters.total_main += 1
            if is_completed:
                counters.completed_main += 1

        return ItemNode(
            id=item.id,
            content=item.content,
            instructions=item.instructions or None,
            is_completed=is_completed,
            notes=row.notes if row else None,
            completed_by=resolve_name(row.completed_by) if row else None,
            completed_at=row.completed_at if row else None,
            connections=node_connections,
            children=children,
        )

    nodes = [build_node(root, None) for root in roots]
    return ProgressTree(nodes=nodes, summary=counters.summary(), flat_items=flat_items)


def _instance_summary(instance: ChecklistInstance, resolve_name: NameResolver) -> InstanceSummary:
    return InstanceSummary(
        id=instance.id,
        template_id=instance.template_id,
        template_name=instance.template.name if instance.template else "",
        date=instance.date,
        workplace=instance.workplace,
        time_slot=instance.time_slot,
        is_submitted=instance.is_submitted,
        is_completed=instance.is_completed,
        submitted_at=instance.submitted_at,
        completed_at=instance.completed_at,
        completed_by=resolve_name(instance.completed_by),
    )


class TreeService:
    """Loads the stores for one instance and materializes its progress view."""

    @staticmethod
    async def get_instance(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        locale: str = "en",
    ) -> ChecklistInstance:
        """Instance owned by the scope's tenant; NotFoundError otherwise."""
        instance = await instance_crud.get_for_scope(db, scope=scope, instance_id=instance_id)
        if instance is None:
            raise NotFoundError(get_translation("errors.instance_not_found", locale))
        return instance

    @staticmethod
    async def build_tree(db: AsyncSession, *, scope: TenantScope, instance: ChecklistInstance) -> ProgressTree:
        tree, _, _ = await TreeService._load_and_build(db, scope=scope, instance=instance)
        return tree

    @staticmethod
    async def _load_and_build(db: AsyncSession, *, scope: TenantScope, instance: ChecklistInstance):
        items = await item_crud.get_active_for_template(db, template_id=instance.template_id)
        connections = await connection_crud.get_for_items(db, item_ids=[item.id for item in items])
        item_rows = await item_progress_crud.get_for_instance(db, instance_id=instance.id)
        connection_rows = await connection_progress_crud.get_for_instance(db, instance_id=instance.id)

        resolve_name = await build_name_resolver(
            db,
            tenant_id=scope.tenant_id,
            values=[row.completed_by for row in item_rows]
            + [row.completed_by for row in connection_rows]
            + [instance.completed_by],
        )
        tree = build_progress_tree(items, connections, item_rows, connection_rows, resolve_name)
        return tree, connection_rows, resolve_name

    @staticmethod
    async def materialize(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        locale: str = "en",
    ) -> ProgressResponse:
        """Full progress view of one instance for the scope's tenant."""
        instance = await TreeService.get_instance(db, scope=scope, instance_id=instance_id, locale=locale)
        tree, connection_rows, resolve_name = await TreeService._load_and_build(db, scope=scope, instance=instance)

        return ProgressResponse(
            instance=_instance_summary(instance, resolve_name),
            progress=tree.summary,
            items=tree.flat_items,
            items_tree=tree.nodes,
            connected_items=[
                ConnectedProgressEntry(
                    id=row.id,
                    connection_id=row.connection_id,
                    item_id=row.item_id,
                    is_completed=row.is_completed,
                    notes=row.notes,
                    completed_by=resolve_name(row.completed_by),
                    completed_at=row.completed_at,
                )
                for row in connection_rows
            ],
        )


tree_service = TreeService()
