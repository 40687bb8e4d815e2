"""Tests for connection target resolution."""
import uuid

import pytest

from restops.core.exceptions import NotFoundError, ValidationError
from restops.models.catalog import Manual, ManualPrecautionRelation, Precaution
from restops.models.checklist import ConnectionItemType
from restops.schemas.connection import InventoryTarget, ManualTarget, PrecautionTarget, make_target
from restops.services.connection_service import connection_service


def test_make_target_builds_tagged_variants():
    target_id = uuid.uuid4()

    assert make_target(ConnectionItemType.INVENTORY, target_id) == InventoryTarget(id=target_id)
    assert make_target("manual", target_id) == ManualTarget(id=target_id)
    assert make_target("precaution", target_id).kind == "precaution"
    with pytest.raises(ValueError):
        make_target("tag", target_id)


@pytest.mark.asyncio
async def test_connection_exposes_typed_target(prep_checklist):
    target = prep_checklist.c1.target

    assert isinstance(target, InventoryTarget)
    assert target.id == prep_checklist.stock.id


@pytest.mark.asyncio
async def test_resolve_inventory(db_session, scope, prep_checklist):
    entity = await connection_service.resolve_target(
        db_session, scope=scope, target=InventoryTarget(id=prep_checklist.stock.id)
    )

    assert entity.kind == "inventory"
    assert entity.name == "Olive oil"
    assert entity.unit == "L"


@pytest.mark.asyncio
async def test_resolve_precaution_by_raw_type(db_session, scope, prep_checklist):
    entity = await connection_service.resolve(
        db_session, scope=scope, item_type="precaution", item_id=prep_checklist.caution.id
    )

    assert entity.kind == "precaution"
    assert entity.title == "Hot oil"


@pytest.mark.asyncio
async def test_resolve_manual_with_ordered_precautions(db_session, scope, tenant, other_tenant):
    manual = Manual(id=uuid.uuid4(), tenant_id=tenant.id, title="Fryer shutdown", content="Steps")
    second = Precaution(id=uuid.uuid4(), tenant_id=tenant.id, title="Gloves", content="Wear gloves")
    first = Precaution(id=uuid.uuid4(), tenant_id=tenant.id, title="Power off", content="Cut power first")
    foreign = Precaution(id=uuid.uuid4(), tenant_id=other_tenant.id, title="Foreign", content="Other tenant")
    db_session.add_all([manual, first, second, foreign])
    db_session.add_all(
        [
            ManualPrecautionRelation(manual_id=manual.id, precaution_id=second.id, order=2),
            ManualPrecautionRelation(manual_id=manual.id, precaution_id=first.id, order=1),
            ManualPrecautionRelation(manual_id=manual.id, precaution_id=foreign.id, order=0),
        ]
    )
    await db_session.commit()
    for obj in (manual, first, second, foreign):
        await db_session.refresh(obj)

    entity = await connection_service.resolve_target(db_session, scope=scope, target=ManualTarget(id=manual.id))

    assert entity.kind == "manual"
    assert [p.title for p in entity.precautions] == ["Power off", "Gloves"]


@pytest.mark.asyncio
async def test_missing_target_is_not_found(db_session, scope):
    with pytest.raises(NotFoundError):
        await connection_service.resolve_target(db_session, scope=scope, target=PrecautionTarget(id=uuid.uuid4()))


@pytest.mark.asyncio
async def test_other_tenants_target_is_not_found(db_session, other_scope, prep_checklist):
    with pytest.raises(NotFoundError):
        await connection_service.resolve_target(
            db_session, scope=other_scope, target=InventoryTarget(id=prep_checklist.stock.id)
        )


@pytest.mark.asyncio
async def test_unsupported_type_is_rejected(db_session, scope):
    with pytest.raises(ValidationError):
        await connection_service.resolve(db_session, scope=scope, item_type="tag", item_id=uuid.uuid4())
