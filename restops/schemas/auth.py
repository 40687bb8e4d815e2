"""Authentication schemas."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Employee login request."""

    tenant_id: UUID
    employee_code: str
    password: str


class TokenResponse(BaseModel):
    """Access token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class EmployeeResponse(BaseModel):
    """Current employee."""

    id: UUID
    tenant_id: UUID
    employee_code: str
    name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True
