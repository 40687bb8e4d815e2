"""Checklist catalog and instance models."""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Enum as SQLEnum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from enum import Enum
from restops.database import Base
from restops.db.types import GUID


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionItemType(str, Enum):
    """Kind of auxiliary entity a checklist item can be connected to."""

    INVENTORY = "inventory"
    MANUAL = "manual"
    PRECAUTION = "precaution"


class ChecklistTemplate(Base):
    """Reusable checklist definition."""

    __tablename__ = "checklist_templates"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    workplace = Column(String(100), nullable=True, index=True)
    time_slot = Column(String(100), nullable=True, index=True)
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    items = relationship("ChecklistItem", back_populates="template", cascade="all, delete-orphan")
    instances = relationship("ChecklistInstance", back_populates="template")


class ChecklistItem(Base):
    """Node of a template's item tree."""

    __tablename__ = "checklist_items"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    template_id = Column(GUID(), ForeignKey("checklist_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(GUID(), ForeignKey("checklist_items.id", ondelete="CASCADE"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    instructions = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    # Python-side default keeps sub-second resolution for tie-breaking on SQLite
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    template = relationship("ChecklistTemplate", back_populates="items")
    connections = relationship(
        "ChecklistItemConnection",
        back_populates="checklist_item",
        cascade="all, delete-orphan",
    )


class ChecklistItemConnection(Base):
    """Link from a checklist item to an inventory item, manual or precaution.

    ``item_id`` is a weak reference; no foreign key spans the three tables.
    """

    __tablename__ = "checklist_item_connections"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    checklist_item_id = Column(GUID(), ForeignKey("checklist_items.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(SQLEnum(ConnectionItemType), nullable=False)
    item_id = Column(GUID(), nullable=False, index=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    checklist_item = relationship("ChecklistItem", back_populates="connections")

    @property
    def target(self):
        """Typed reference to the connected entity."""
        from restops.schemas.connection import make_target

        return make_target(self.item_type, self.item_id)


class ChecklistInstance(Base):
    """Dated run of a template for one workplace and time slot."""

    __tablename__ = "checklist_instances"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    template_id = Column(GUID(), ForeignKey("checklist_templates.id", ondelete="RESTRICT"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    workplace = Column(String(100), nullable=True)
    time_slot = Column(String(100), nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(String(255), nullable=True)  # display name
    completed_by_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    is_submitted = Column(Boolean, default=False, nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    template = relationship("ChecklistTemplate", back_populates="instances")
