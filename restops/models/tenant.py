"""Tenant and Employee models."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from restops.database import Base
from restops.db.types import JSONBType, GUID


class Tenant(Base):
    """One restaurant/organization; every other row is filtered by its id."""

    __tablename__ = "tenants"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    owner_email = Column(String(255), nullable=True)
    settings = Column(JSONBType(), nullable=False, default=dict)  # e.g. {"submission_emails": [...]}
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    employees = relationship("Employee", back_populates="tenant", cascade="all, delete-orphan")

    @property
    def submission_recipients(self) -> list:
        """Addresses notified on checklist submission."""
        configured = (self.settings or {}).get("submission_emails") or []
        recipients = [email.strip() for email in configured if isinstance(email, str) and email.strip()]
        if not recipients and self.owner_email:
            recipients = [self.owner_email]
        return recipients


class Employee(Base):
    """Employee model."""

    __tablename__ = "employees"
    __table_args__ = (UniqueConstraint("tenant_id", "employee_code", name="uq_employee_tenant_code"),)

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_code = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="employees")
