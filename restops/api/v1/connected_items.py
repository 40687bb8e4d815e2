"""Connected item detail API endpoints."""
import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_tenant_scope
from restops.core.tenant import TenantScope
from restops.schemas.connection import ConnectedEntityResponse
from restops.services.connection_service import connection_service
from restops.localization.helpers import get_locale_from_request, get_translation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{item_type}/{item_id}", response_model=ConnectedEntityResponse)
async def get_connected_item(
    item_type: str,
    item_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Inventory item, manual or precaution a checklist item links to."""
    locale = get_locale_from_request(request)
    try:
        return await connection_service.resolve(
            db, scope=scope, item_type=item_type, item_id=item_id, locale=locale
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Connected item fetch failed", extra=scope.log_extra())
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.connected_item_fetch_failed", locale),
        )
