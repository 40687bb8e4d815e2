"""Progress ledger models."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func
import uuid
from restops.database import Base
from restops.db.types import GUID


class ChecklistItemProgress(Base):
    """Explicit completion state of one item within one instance."""

    __tablename__ = "checklist_item_progress"
    __table_args__ = (UniqueConstraint("instance_id", "item_id", name="uq_item_progress_instance_item"),)

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    instance_id = Column(GUID(), ForeignKey("checklist_instances.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(GUID(), ForeignKey("checklist_items.id", ondelete="CASCADE"), nullable=False, index=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    completed_by = Column(String(255), nullable=True)  # display name at write time
    completed_by_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ConnectedItemProgress(Base):
    """Explicit completion state of one connection within one instance."""

    __tablename__ = "connected_item_progress"
    __table_args__ = (UniqueConstraint("instance_id", "connection_id", name="uq_connection_progress_instance_connection"),)

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    instance_id = Column(GUID(), ForeignKey("checklist_instances.id", ondelete="CASCADE"), nullable=False, index=True)
    connection_id = Column(
        GUID(), ForeignKey("checklist_item_connections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(GUID(), nullable=False, index=True)  # owning checklist item, denormalized
    is_completed = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    completed_by = Column(String(255), nullable=True)
    completed_by_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
