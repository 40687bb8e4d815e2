"""Checklist progress API endpoints."""
import logging
from typing import Optional, Union
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from restops.database import get_db
from restops.dependencies import get_tenant_scope
from restops.core.exceptions import ValidationError
from restops.core.tenant import TenantScope
from restops.schemas.progress import ProgressResponse, ToggleRequest, ToggleItemResponse, ToggleConnectionResponse
from restops.services.progress_service import progress_service
from restops.services.tree_service import tree_service
from restops.utils.http_cache import cached_json_response
from restops.localization.helpers import get_locale_from_request, get_translation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProgressResponse)
async def get_progress(
    request: Request,
    instance_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Materialized progress tree of one instance.

    Responses carry a weak ETag; a matching ``If-None-Match`` yields 304.
    """
    locale = get_locale_from_request(request)
    if instance_id is None:
        raise ValidationError(get_translation("errors.instance_id_required", locale))
    try:
        view = await tree_service.materialize(db, scope=scope, instance_id=instance_id, locale=locale)
        return cached_json_response(request, view)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Progress fetch failed", extra={**scope.log_extra(), "instance_id": instance_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.progress_fetch_failed", locale),
        )


@router.put("", response_model=Union[ToggleConnectionResponse, ToggleItemResponse])
async def update_progress(
    payload: ToggleRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    scope: TenantScope = Depends(get_tenant_scope),
):
    """Toggle one item (``item_id``) or one connection (``connection_id``)."""
    locale = get_locale_from_request(request)
    if payload.instance_id is None or payload.is_completed is None:
        raise ValidationError(get_translation("errors.toggle_fields_required", locale))
    if payload.connection_id is None and payload.item_id is None:
        raise ValidationError(get_translation("errors.toggle_target_required", locale))

    try:
        if payload.connection_id is not None:
            row = await progress_service.toggle_connection(
                db,
                scope=scope,
                instance_id=payload.instance_id,
                connection_id=payload.connection_id,
                is_completed=payload.is_completed,
                notes=payload.notes,
                locale=locale,
            )
            return ToggleConnectionResponse(connection_progress_id=row.id)

        row = await progress_service.toggle_item(
            db,
            scope=scope,
            instance_id=payload.instance_id,
            item_id=payload.item_id,
            is_completed=payload.is_completed,
            notes=payload.notes,
            locale=locale,
        )
        return ToggleItemResponse(progress_id=row.id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Progress update failed", extra={**scope.log_extra(), "instance_id": payload.instance_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_translation("errors.progress_update_failed", locale),
        )
