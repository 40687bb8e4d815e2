"""Script to create a demo tenant, employee and closing checklist."""
import asyncio
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from restops.database import AsyncSessionLocal, init_db
from restops.models import ChecklistInstance, ChecklistItem, ChecklistTemplate, Employee, Tenant
from restops.services.auth_service import AuthService

DEMO_TENANT_NAME = "Demo Bistro"
DEMO_EMPLOYEE_CODE = "admin"
DEMO_PASSWORD = "admin123"

CLOSING_ITEMS = [
    ("Turn off grill and fryer", []),
    ("Clean hall", ["Wipe tables", "Stack chairs", "Mop floor"]),
    ("Lock back door", []),
]


async def init_demo_tenant():
    """Create the demo tenant and its data if they don't exist."""
    await init_db()
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Tenant).where(Tenant.name == DEMO_TENANT_NAME))
        tenant = result.scalar_one_or_none()
        if tenant:
            print(f"✓ Tenant '{DEMO_TENANT_NAME}' already exists ({tenant.id})")
            return

        tenant = Tenant(name=DEMO_TENANT_NAME, owner_email="owner@example.com", settings={})
        db.add(tenant)
        await db.flush()

        db.add(
            Employee(
                tenant_id=tenant.id,
                employee_code=DEMO_EMPLOYEE_CODE,
                name="Demo Manager",
                password_hash=AuthService.hash_password(DEMO_PASSWORD),
            )
        )

        template = ChecklistTemplate(tenant_id=tenant.id, name="Closing Checklist", workplace="hall", time_slot="close")
        db.add(template)
        await db.flush()

        for order, (content, children) in enumerate(CLOSING_ITEMS):
            parent = ChecklistItem(template_id=template.id, content=content, order=order)
            db.add(parent)
            await db.flush()
            for child_order, child in enumerate(children):
                db.add(ChecklistItem(template_id=template.id, parent_id=parent.id, content=child, order=child_order))

        instance = ChecklistInstance(
            tenant_id=tenant.id,
            template_id=template.id,
            date=date.today(),
            workplace=template.workplace,
            time_slot=template.time_slot,
        )
        db.add(instance)
        await db.commit()

        print("✓ Demo tenant created")
        print("\n" + "=" * 50)
        print("Login:")
        print(f"  Tenant ID: {tenant.id}")
        print(f"  Employee code: {DEMO_EMPLOYEE_CODE}")
        print(f"  Password: {DEMO_PASSWORD}")
        print(f"  Instance ID: {instance.id}")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(init_demo_tenant())
