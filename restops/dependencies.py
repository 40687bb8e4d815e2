"""FastAPI dependencies for authentication and tenant scoping."""
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.exceptions import UnauthorizedError
from restops.core.tenant import TenantScope
from restops.crud.employee import employee as employee_crud
from restops.database import get_db
from restops.localization.helpers import get_locale_from_request
from restops.models.tenant import Employee
from restops.utils.security import decode_token

# auto_error=False so a missing token gets the same 401 body as a bad one
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_current_employee(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Get current authenticated employee from the bearer token."""
    credentials_exception = UnauthorizedError(locale=get_locale_from_request(request))
    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
        employee_id = UUID(str(payload.get("sub")))
        tenant_id = UUID(str(payload.get("tenant_id")))
        if payload.get("type") != "access":
            raise credentials_exception
    except ValueError:
        raise credentials_exception

    employee = await employee_crud.get(db, id=employee_id)
    if employee is None or employee.tenant_id != tenant_id or not employee.is_active:
        raise credentials_exception

    return employee


async def get_tenant_scope(
    current_employee: Employee = Depends(get_current_employee),
) -> TenantScope:
    """Tenant scope for the authenticated employee."""
    return TenantScope(
        tenant_id=current_employee.tenant_id,
        employee_id=current_employee.id,
        employee_name=current_employee.name,
    )
