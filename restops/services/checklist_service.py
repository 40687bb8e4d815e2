"""Employee checklist list for one day."""
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.tenant import TenantScope
from restops.crud.checklist import checklist_template as template_crud
from restops.crud.instance import instance as instance_crud
from restops.crud.progress import item_progress as item_progress_crud
from restops.schemas.checklist import ChecklistStatus, ChecklistSummary
from restops.services.tree_service import completion_percentage


class ChecklistService:
    """Lists the tenant's active templates with their instance for the day."""

    @staticmethod
    async def list_for_day(
        db: AsyncSession,
        *,
        scope: TenantScope,
        on_date: Optional[date] = None,
        workplace: Optional[str] = None,
        time_slot: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[ChecklistSummary]:
        """One entry per active template, ordered by time slot, workplace, name.

        ``item_count`` is the number of active top-level items and
        ``completed_count`` the number of completed ledger rows of the day's
        instance, so ``total_progress`` is a coarse indicator capped at 100.
        Use GetProgress for the exact figures.
        """
        on_date = on_date or date.today()
        templates = await template_crud.list_active_for_scope(
            db, scope=scope, workplace=workplace, time_slot=time_slot, category=category
        )
        template_ids = [template.id for template in templates]
        root_counts = await template_crud.count_active_roots(db, template_ids=template_ids)
        instances = await instance_crud.get_for_templates_on(
            db, scope=scope, template_ids=template_ids, on_date=on_date
        )
        item_counts = await item_progress_crud.count_for_instances(
            db, instance_ids=[inst.id for inst in instances.values()]
        )

        summaries = []
        for template in templates:
            inst = instances.get(template.id)
            item_count = root_counts.get(template.id, 0)
            completed_count = item_counts.get(inst.id, (0, 0))[1] if inst else 0

            status = ChecklistStatus.PENDING
            if inst is not None and inst.is_completed:
                status = ChecklistStatus.COMPLETED
            elif completed_count > 0:
                status = ChecklistStatus.IN_PROGRESS

            summaries.append(
                ChecklistSummary(
                    id=template.id,
                    name=template.name,
                    workplace=template.workplace,
                    time_slot=template.time_slot,
                    category=template.category,
                    item_count=item_count,
                    completed_count=completed_count,
                    total_progress=min(100, completion_percentage(completed_count, item_count)),
                    status=status,
                    instance_id=inst.id if inst else None,
                    is_completed=bool(inst and inst.is_completed),
                    created_at=template.created_at,
                )
            )
        return summaries


checklist_service = ChecklistService()
