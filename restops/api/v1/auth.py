"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_current_employee
from restops.models.tenant import Employee
from restops.services.auth_service import AuthService
from restops.schemas.auth import LoginRequest, TokenResponse, EmployeeResponse
from restops.core.exceptions import UnauthorizedError
from restops.localization.helpers import get_locale_from_request, get_translation

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Login endpoint - returns an access token scoped to the employee's tenant."""
    locale = get_locale_from_request(request)
    employee = await AuthService.authenticate_employee(
        db, credentials.tenant_id, credentials.employee_code, credentials.password
    )
    if not employee:
        raise UnauthorizedError(get_translation("errors.invalid_credentials", locale))

    return TokenResponse(**AuthService.create_token(employee))


@router.get("/me", response_model=EmployeeResponse)
async def get_current_employee_info(
    current_employee: Employee = Depends(get_current_employee),
):
    """Get current authenticated employee information."""
    return current_employee
