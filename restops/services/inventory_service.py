"""Employee stock checks on connected inventory items."""
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.exceptions import NotFoundError, ValidationError
from restops.core.tenant import TenantScope
from restops.crud.inventory import inventory_item as inventory_crud
from restops.localization.helpers import get_translation
from restops.middleware.metrics import inventory_checks_total
from restops.models.catalog import InventoryCheck
from restops.schemas.inventory import (
    InventoryCheckResponse,
    InventoryStock,
    StaleInventoryItem,
    StaleInventoryResponse,
)

logger = logging.getLogger(__name__)

STALE_LIMIT = 20


def _round_stock(value: float) -> int:
    # Half up, stock is counted in whole units
    return int(math.floor(value + 0.5))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive UTC timestamps
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class InventoryService:
    """Records stock checks and lists items due for one."""

    @staticmethod
    async def record_check(
        db: AsyncSession,
        *,
        scope: TenantScope,
        item_id: UUID,
        current_stock: float,
        notes: Optional[str] = None,
        locale: str = "en",
    ) -> InventoryCheckResponse:
        """Set the counted stock and append a check row.

        The item's ``last_checked_by`` and ``last_updated`` are stamped with
        the acting employee and the current time.
        """
        if current_stock < 0:
            raise ValidationError(get_translation("errors.inventory_stock_invalid", locale))

        item = await inventory_crud.get_for_scope(db, scope=scope, item_id=item_id)
        if item is None:
            raise NotFoundError(get_translation("errors.inventory_item_not_found", locale))

        previous_stock = _round_stock(item.current_stock)
        new_stock = _round_stock(current_stock)

        item.current_stock = new_stock
        item.last_checked_by = scope.employee_name
        item.last_updated = datetime.now(timezone.utc)
        db.add(item)
        db.add(InventoryCheck(item_id=item.id, checked_by=scope.employee_id, current_stock=new_stock, notes=notes))
        await db.commit()

        inventory_checks_total.inc()
        logger.info(
            "Inventory stock checked: %s -> %s",
            previous_stock,
            new_stock,
            extra={**scope.log_extra(), "item_id": item.id},
        )
        return InventoryCheckResponse(
            previous_stock=previous_stock,
            stock_change=new_stock - previous_stock,
            item=InventoryStock(
                id=item.id,
                name=item.name,
                unit=item.unit,
                current_stock=new_stock,
                min_stock=_round_stock(item.min_stock),
            ),
        )

    @staticmethod
    async def list_stale(
        db: AsyncSession,
        *,
        scope: TenantScope,
        days: int = 2,
        now: Optional[datetime] = None,
    ) -> StaleInventoryResponse:
        """Items not updated for ``days`` days (at least one) or never checked."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=max(1, days))
        items = await inventory_crud.list_stale(db, scope=scope, cutoff=cutoff, limit=STALE_LIMIT)

        stale = []
        for item in items:
            last = _as_utc(item.last_updated or item.created_at)
            stale.append(
                StaleInventoryItem(
                    id=item.id,
                    name=item.name,
                    category=item.category,
                    current_stock=item.current_stock,
                    min_stock=item.min_stock,
                    unit=item.unit,
                    last_updated=item.last_updated,
                    created_at=item.created_at,
                    last_checked_by=item.last_checked_by,
                    days_since_update=max(0, (now - last).days),
                )
            )
        return StaleInventoryResponse(items=stale)


inventory_service = InventoryService()
