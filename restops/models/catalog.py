"""Auxiliary entities that checklist items can be connected to."""
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from restops.database import Base
from restops.db.types import GUID


class InventoryItem(Base):
    """Stocked ingredient or supply."""

    __tablename__ = "inventory_items"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    current_stock = Column(Float, nullable=False, default=0)
    min_stock = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_checked_by = Column(String(255), nullable=True)  # display name
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    checks = relationship("InventoryCheck", back_populates="item", cascade="all, delete-orphan")


class InventoryCheck(Base):
    """Stock count recorded by an employee."""

    __tablename__ = "inventory_checks"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    item_id = Column(GUID(), ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True)
    checked_by = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    current_stock = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    item = relationship("InventoryItem", back_populates="checks")


class Manual(Base):
    """Operating manual."""

    __tablename__ = "manuals"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    workplace = Column(String(100), nullable=True)
    time_slot = Column(String(100), nullable=True)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    precaution_relations = relationship(
        "ManualPrecautionRelation",
        back_populates="manual",
        cascade="all, delete-orphan",
        order_by="ManualPrecautionRelation.order",
    )


class Precaution(Base):
    """Safety or handling precaution."""

    __tablename__ = "precautions"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(GUID(), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    workplace = Column(String(100), nullable=True)
    time_slot = Column(String(100), nullable=True)
    priority = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ManualPrecautionRelation(Base):
    """Ordered precautions attached to a manual."""

    __tablename__ = "manual_precaution_relations"

    manual_id = Column(GUID(), ForeignKey("manuals.id", ondelete="CASCADE"), primary_key=True)
    precaution_id = Column(GUID(), ForeignKey("precautions.id", ondelete="CASCADE"), primary_key=True)
    order = Column(Integer, nullable=False, default=0)

    # Relationships
    manual = relationship("Manual", back_populates="precaution_relations")
    precaution = relationship("Precaution")
