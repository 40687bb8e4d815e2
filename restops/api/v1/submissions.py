"""Checklist submission API endpoints."""
import logging
from datetime import date as DateType
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_tenant_scope
from restops.core.exceptions import ValidationError
from restops.core.tenant import TenantScope
from restops.schemas.submission import SubmitRequest, SubmitResponse, SubmissionFilter, SubmissionListResponse
from restops.services.submission_service import submission_service
from restops.services.report_service import report_service
from restops.localization.helpers import get_locale_from_request, get_translation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SubmitResponse)
async def submit_checklist(
    payload: SubmitRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Submit a fully completed instance and notify the tenant's recipients."""
    locale = get_locale_from_request(request)
    if payload.instance_id is None:
        raise ValidationError(get_translation("errors.instance_id_required", locale))
    try:
        return await submission_service.submit(
            db,
            scope=scope,
            instance_id=payload.instance_id,
            notes=payload.notes,
            require_connected_complete=payload.require_connected_complete,
            locale=locale,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Submission failed", extra={**scope.log_extra(), "instance_id": payload.instance_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.submission_failed", locale),
        )


@router.get("", response_model=SubmissionListResponse)
async def list_submissions(
    request: Request,
    template_id: Optional[UUID] = None,
    workplace: Optional[str] = None,
    time_slot: Optional[str] = None,
    date: Optional[DateType] = None,
    start_date: Optional[DateType] = None,
    end_date: Optional[DateType] = None,
    is_completed: Optional[bool] = None,
    is_submitted: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Instances of the current tenant with their ledger aggregates."""
    locale = get_locale_from_request(request)
    filters = SubmissionFilter(
        template_id=template_id,
        workplace=workplace,
        time_slot=time_slot,
        date=date,
        start_date=start_date,
        end_date=end_date,
        is_completed=is_completed,
        is_submitted=is_submitted,
    )
    try:
        return await report_service.list_submissions(db, scope=scope, filters=filters, skip=skip, limit=limit)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Submission list failed", extra=scope.log_extra())
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.submission_list_failed", locale),
        )
