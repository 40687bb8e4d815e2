"""Authentication service."""
from datetime import timedelta
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from restops.config import settings
from restops.crud.employee import employee as employee_crud
from restops.models.tenant import Employee
from restops.utils.security import create_access_token, get_password_hash, verify_password


class AuthService:
    """Authentication service."""

    @staticmethod
    async def authenticate_employee(
        db: AsyncSession,
        tenant_id: UUID,
        employee_code: str,
        password: str,
    ) -> Optional[Employee]:
        """Authenticate an employee by tenant, employee code and password."""
        employee = await employee_crud.get_by_code(db, tenant_id=tenant_id, employee_code=employee_code)
        if not employee:
            return None

        if not verify_password(password, employee.password_hash):
            return None

        if not employee.is_active:
            return None

        return employee

    @staticmethod
    def create_token(employee: Employee) -> dict:
        """Create an access token for an employee."""
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": str(employee.id), "tenant_id": str(employee.tenant_id)},
            expires_delta=expires,
        )
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password."""
        return get_password_hash(password)
