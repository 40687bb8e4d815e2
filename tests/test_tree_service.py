"""Tests for the tree materializer."""
import uuid
from types import SimpleNamespace

import pytest

from restops.models.checklist import ConnectionItemType
from restops.services.tree_service import build_progress_tree, completion_percentage, tree_service
from restops.core.exceptions import NotFoundError


def make_item(content, parent=None, order=0, **kwargs):
    return SimpleNamespace(
        id=uuid.uuid4(),
        parent_id=parent.id if parent else None,
        content=content,
        instructions=kwargs.get("instructions"),
        order=order,
    )


def make_connection(item, order=0, item_type=ConnectionItemType.INVENTORY):
    return SimpleNamespace(
        id=uuid.uuid4(),
        checklist_item_id=item.id,
        item_type=item_type,
        item_id=uuid.uuid4(),
        order=order,
    )


def item_row(item, is_completed=True, completed_by="Kim Minji"):
    return SimpleNamespace(
        item_id=item.id,
        is_completed=is_completed,
        notes=None,
        completed_by=completed_by if is_completed else None,
        completed_at=None,
    )


def connection_row(conn, is_completed=True):
    return SimpleNamespace(
        connection_id=conn.id,
        is_completed=is_completed,
        notes=None,
        completed_by="Kim Minji" if is_completed else None,
        completed_at=None,
    )


@pytest.mark.parametrize(
    "completed,total,expected",
    [
        (0, 0, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 2, 50),
        (1, 8, 13),  # 12.5 rounds half up
        (3, 3, 100),
    ],
)
def test_completion_percentage(completed, total, expected):
    """Percentage is rounded half up and 0 for an empty denominator."""
    assert completion_percentage(completed, total) == expected


def test_only_leaves_count_as_main_items():
    """Items with children or connections never count toward main totals."""
    root = make_item("root")
    leaf = make_item("leaf", parent=root)
    with_connections = make_item("with connections", parent=root, order=1)
    conn = make_connection(with_connections)
    plain = make_item("plain root", order=1)

    tree = build_progress_tree([root, leaf, with_connections, plain], [conn], [], [])

    assert tree.summary.total_main == 2
    assert tree.summary.completed_main == 0
    assert tree.summary.total_connected == 1


def test_connections_count_at_any_depth():
    """Connected totals include connections of nested items."""
    root = make_item("root")
    child = make_item("child", parent=root)
    grandchild = make_item("grandchild", parent=child)
    conns = [make_connection(root), make_connection(grandchild), make_connection(grandchild, order=1)]

    tree = build_progress_tree([root, child, grandchild], conns, [], [connection_row(conns[1])])

    assert tree.summary.total_connected == 3
    assert tree.summary.completed_connected == 1
    assert tree.summary.total_main == 0


def test_explicit_row_wins_over_derivation():
    """A stored row decides completion even if children disagree."""
    parent = make_item("parent")
    child = make_item("child", parent=parent)

    tree = build_progress_tree([parent, child], [], [item_row(parent, is_completed=True)], [])

    assert tree.nodes[0].is_completed is True
    assert tree.nodes[0].children[0].is_completed is False
    assert tree.summary.completed_main == 0


def test_connections_take_precedence_over_children():
    """Without a row, a node with connections derives from them, not from children."""
    parent = make_item("parent")
    child = make_item("child", parent=parent)
    conn = make_connection(parent)

    tree = build_progress_tree([parent, child], [conn], [item_row(child)], [])

    assert tree.nodes[0].is_completed is False
    assert tree.nodes[0].children[0].is_completed is True


def test_parent_derives_from_children():
    parent = make_item("parent")
    first = make_item("first", parent=parent)
    second = make_item("second", parent=parent, order=1)

    partial = build_progress_tree([parent, first, second], [], [item_row(first)], [])
    complete = build_progress_tree([parent, first, second], [], [item_row(first), item_row(second)], [])

    assert partial.nodes[0].is_completed is False
    assert complete.nodes[0].is_completed is True


def test_closing_checklist_scenario():
    """A, B(B1, B2): completing A gives 33%, completing everything gives 100%."""
    a = make_item("A")
    b = make_item("B", order=1)
    b1 = make_item("B1", parent=b)
    b2 = make_item("B2", parent=b, order=1)
    items = [a, b, b1, b2]

    after_a = build_progress_tree(items, [], [item_row(a)], [])
    assert after_a.summary.total_main == 3
    assert after_a.summary.completed_main == 1
    assert after_a.summary.percentage == 33

    after_all = build_progress_tree(items, [], [item_row(a), item_row(b1), item_row(b2)], [])
    assert after_all.nodes[1].is_completed is True
    assert after_all.summary.completed_main == 3
    assert after_all.summary.percentage == 100


def test_siblings_follow_order_then_load_order():
    """Siblings sort by ``order``; ties keep their input order."""
    first = make_item("first", order=1)
    second = make_item("second", order=1)
    zeroth = make_item("zeroth", order=0)

    tree = build_progress_tree([first, second, zeroth], [], [], [])

    assert [node.content for node in tree.nodes] == ["zeroth", "first", "second"]


def test_flat_items_are_preorder_with_parent_links():
    parent = make_item("parent")
    child = make_item("child", parent=parent)
    other = make_item("other", order=1)

    tree = build_progress_tree([other, child, parent], [], [item_row(child)], [])

    assert [flat.content for flat in tree.flat_items] == ["parent", "child", "other"]
    assert tree.flat_items[0].has_children is True
    assert tree.flat_items[1].parent_id == parent.id
    assert tree.flat_items[1].is_completed is True


def test_orphans_of_missing_parents_are_ignored():
    """Items whose parent is not in the active set are unreachable."""
    missing_parent = make_item("inactive parent")
    orphan = make_item("orphan", parent=missing_parent)
    root = make_item("root")

    tree = build_progress_tree([orphan, root], [], [], [])

    assert [node.content for node in tree.nodes] == ["root"]
    assert tree.summary.total_main == 1


def test_completer_names_are_resolved():
    leaf = make_item("leaf")
    legacy_id = str(uuid.uuid4())

    tree = build_progress_tree(
        [leaf],
        [],
        [item_row(leaf, completed_by=legacy_id)],
        [],
        resolve_name=lambda value: "Kim Minji" if value == legacy_id else value,
    )

    assert tree.nodes[0].completed_by == "Kim Minji"


@pytest.mark.asyncio
async def test_materialize_returns_tree_for_instance(db_session, scope, closing_checklist):
    view = await tree_service.materialize(db_session, scope=scope, instance_id=closing_checklist.instance.id)

    assert view.instance.template_name == "Closing Checklist"
    assert [node.content for node in view.items_tree] == ["A", "B"]
    assert [node.content for node in view.items_tree[1].children] == ["B1", "B2"]
    assert view.progress.total_main == 3
    assert view.progress.percentage == 0
    assert view.connected_items == []


@pytest.mark.asyncio
async def test_materialize_skips_inactive_items(db_session, scope, closing_checklist):
    closing_checklist.b2.is_active = False
    db_session.add(closing_checklist.b2)
    await db_session.commit()

    view = await tree_service.materialize(db_session, scope=scope, instance_id=closing_checklist.instance.id)

    assert [node.content for node in view.items_tree[1].children] == ["B1"]
    assert view.progress.total_main == 2


@pytest.mark.asyncio
async def test_materialize_hides_other_tenants_instances(db_session, other_scope, closing_checklist):
    with pytest.raises(NotFoundError):
        await tree_service.materialize(db_session, scope=other_scope, instance_id=closing_checklist.instance.id)
