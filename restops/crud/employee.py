"""Employee queries."""
from typing import Dict, Iterable, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from restops.crud.base import CRUDBase
from restops.models.tenant import Employee


class CRUDEmployee(CRUDBase[Employee]):
    """CRUD operations for Employee."""

    async def get_by_code(self, db: AsyncSession, *, tenant_id: UUID, employee_code: str) -> Optional[Employee]:
        result = await db.execute(
            select(Employee).where(Employee.tenant_id == tenant_id, Employee.employee_code == employee_code)
        )
        return result.scalar_one_or_none()

    async def get_names(self, db: AsyncSession, *, tenant_id: UUID, employee_ids: Iterable[UUID]) -> Dict[UUID, str]:
        """Current names of the given employees within one tenant."""
        employee_ids = list(employee_ids)
        if not employee_ids:
            return {}
        result = await db.execute(
            select(Employee.id, Employee.name).where(
                Employee.tenant_id == tenant_id,
                Employee.id.in_(employee_ids),
            )
        )
        return {row.id: row.name for row in result.all()}


employee = CRUDEmployee(Employee)
