"""Employee checklist list API endpoints."""
import logging
from datetime import date as DateType
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_tenant_scope
from restops.core.tenant import TenantScope
from restops.schemas.checklist import ChecklistSummary
from restops.services.checklist_service import checklist_service
from restops.localization.helpers import get_locale_from_request, get_translation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ChecklistSummary])
async def list_checklists(
    request: Request,
    workplace: Optional[str] = None,
    time_slot: Optional[str] = None,
    category: Optional[str] = None,
    date: Optional[DateType] = None,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Active templates with today's instance (or ``date``'s) and its status."""
    locale = get_locale_from_request(request)
    try:
        return await checklist_service.list_for_day(
            db,
            scope=scope,
            on_date=date,
            workplace=workplace,
            time_slot=time_slot,
            category=category,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Checklist list failed", extra=scope.log_extra())
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.checklist_list_failed", locale),
        )
