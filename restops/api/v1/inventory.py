"""Employee inventory API endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_tenant_scope
from restops.core.exceptions import ValidationError
from restops.core.tenant import TenantScope
from restops.schemas.inventory import InventoryCheckRequest, InventoryCheckResponse, StaleInventoryResponse
from restops.services.inventory_service import inventory_service
from restops.utils.http_cache import cached_json_response
from restops.localization.helpers import get_locale_from_request, get_translation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("", response_model=InventoryCheckResponse)
async def record_stock_check(
    payload: InventoryCheckRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Record a stock count for a connected inventory item."""
    locale = get_locale_from_request(request)
    if payload.item_id is None or payload.current_stock is None:
        raise ValidationError(get_translation("errors.inventory_fields_required", locale))
    try:
        return await inventory_service.record_check(
            db,
            scope=scope,
            item_id=payload.item_id,
            current_stock=payload.current_stock,
            notes=payload.notes,
            locale=locale,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Inventory update failed", extra={**scope.log_extra(), "item_id": payload.item_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.inventory_update_failed", locale),
        )


@router.get("/stale", response_model=StaleInventoryResponse)
async def list_stale_inventory(
    request: Request,
    days: int = 2,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Items not counted in the last ``days`` days, or never counted."""
    locale = get_locale_from_request(request)
    try:
        stale = await inventory_service.list_stale(db, scope=scope, days=days)
        return cached_json_response(request, stale)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Stale inventory fetch failed", extra=scope.log_extra())
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.inventory_fetch_failed", locale),
        )
