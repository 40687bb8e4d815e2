"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import date
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite://"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("LOG_FORMAT", "text")

from restops.main import app  # noqa: E402
from restops.database import Base, get_db  # noqa: E402
from restops.core.tenant import TenantScope  # noqa: E402
from restops.models import (  # noqa: E402
    ChecklistInstance,
    ChecklistItem,
    ChecklistItemConnection,
    ChecklistTemplate,
    ConnectionItemType,
    Employee,
    InventoryItem,
    Precaution,
    Tenant,
)
from restops.services.auth_service import AuthService  # noqa: E402
from restops.utils.security import create_access_token  # noqa: E402


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession):
    """HTTP client bound to the app with the test session injected."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession):
    """Tenant with one configured submission recipient."""
    obj = Tenant(
        id=uuid.uuid4(),
        name="Bistro Seoul",
        owner_email="owner@bistro.test",
        settings={"submission_emails": ["manager@bistro.test"]},
    )
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession):
    obj = Tenant(id=uuid.uuid4(), name="Harbor Grill", owner_email="owner@harbor.test", settings={})
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def employee(db_session: AsyncSession, tenant: Tenant):
    obj = Employee(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        employee_code="E001",
        name="Kim Minji",
        email="minji@bistro.test",
        password_hash=AuthService.hash_password("testpassword"),
        is_active=True,
    )
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def other_employee(db_session: AsyncSession, other_tenant: Tenant):
    obj = Employee(
        id=uuid.uuid4(),
        tenant_id=other_tenant.id,
        employee_code="E001",
        name="Park Jisoo",
        password_hash=AuthService.hash_password("otherpassword"),
        is_active=True,
    )
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest.fixture
def scope(employee: Employee) -> TenantScope:
    return TenantScope(tenant_id=employee.tenant_id, employee_id=employee.id, employee_name=employee.name)


@pytest.fixture
def other_scope(other_employee: Employee) -> TenantScope:
    return TenantScope(
        tenant_id=other_employee.tenant_id,
        employee_id=other_employee.id,
        employee_name=other_employee.name,
    )


def _item(template_id, content, order=0, parent_id=None, **kwargs):
    return ChecklistItem(
        id=uuid.uuid4(),
        template_id=template_id,
        parent_id=parent_id,
        content=content,
        order=order,
        **kwargs,
    )


@pytest_asyncio.fixture
async def closing_checklist(db_session: AsyncSession, tenant: Tenant):
    """Closing Checklist template: A (leaf), B with leaves B1 and B2."""
    template = ChecklistTemplate(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        name="Closing Checklist",
        workplace="hall",
        time_slot="close",
        category="closing",
    )
    a = _item(template.id, "A", order=0)
    b = _item(template.id, "B", order=1)
    b1 = _item(template.id, "B1", order=0, parent_id=b.id)
    b2 = _item(template.id, "B2", order=1, parent_id=b.id)
    instance = ChecklistInstance(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        template_id=template.id,
        date=date(2024, 3, 15),
        workplace="hall",
        time_slot="close",
    )
    db_session.add_all([template, a, b, b1, b2, instance])
    await db_session.commit()
    return SimpleNamespace(template=template, instance=instance, a=a, b=b, b1=b1, b2=b2)


@pytest_asyncio.fixture
async def prep_checklist(db_session: AsyncSession, tenant: Tenant):
    """Prep Checklist template: C connected to an inventory item (C1) and a precaution (C2)."""
    stock = InventoryItem(id=uuid.uuid4(), tenant_id=tenant.id, name="Olive oil", current_stock=3, min_stock=5, unit="L")
    caution = Precaution(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        title="Hot oil",
        content="Let the fryer cool before draining.",
        priority=1,
    )
    template = ChecklistTemplate(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        name="Prep Checklist",
        workplace="kitchen",
        time_slot="open",
    )
    c = _item(template.id, "C", order=0)
    c1 = ChecklistItemConnection(
        id=uuid.uuid4(),
        checklist_item_id=c.id,
        item_type=ConnectionItemType.INVENTORY,
        item_id=stock.id,
        order=0,
    )
    c2 = ChecklistItemConnection(
        id=uuid.uuid4(),
        checklist_item_id=c.id,
        item_type=ConnectionItemType.PRECAUTION,
        item_id=caution.id,
        order=1,
    )
    instance = ChecklistInstance(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        template_id=template.id,
        date=date(2024, 3, 16),
        workplace="kitchen",
        time_slot="open",
    )
    db_session.add_all([stock, caution, template, c, c1, c2, instance])
    await db_session.commit()
    for obj in (stock, caution):
        await db_session.refresh(obj)
    return SimpleNamespace(
        template=template,
        instance=instance,
        c=c,
        c1=c1,
        c2=c2,
        stock=stock,
        caution=caution,
    )


@pytest.fixture
def auth_headers(employee: Employee):
    """Get authentication headers."""
    token = create_access_token({"sub": str(employee.id), "tenant_id": str(employee.tenant_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_employee: Employee):
    token = create_access_token({"sub": str(other_employee.id), "tenant_id": str(other_employee.tenant_id)})
    return {"Authorization": f"Bearer {token}"}
