"""Submission report over the progress ledger."""
from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.tenant import TenantScope
from restops.crud.instance import instance as instance_crud
from restops.crud.progress import item_progress as item_progress_crud, connection_progress as connection_progress_crud
from restops.schemas.submission import SubmissionEntry, SubmissionFilter, SubmissionListResponse, SubmissionProgress
from restops.services.identity_service import build_name_resolver
from restops.services.tree_service import completion_percentage


class ReportService:
    """Lists instances with ledger aggregates."""

    @staticmethod
    async def list_submissions(
        db: AsyncSession,
        *,
        scope: TenantScope,
        filters: SubmissionFilter,
        skip: int = 0,
        limit: int = 100,
    ) -> SubmissionListResponse:
        """Instances of the tenant matching ``filters``, newest date first.

        Counts come straight from the ledger rows, not from the materialized
        tree, so one report costs a fixed number of queries.
        """
        instances = await instance_crud.list_for_scope(db, scope=scope, filters=filters, skip=skip, limit=limit)
        instance_ids = [inst.id for inst in instances]
        item_counts = await item_progress_crud.count_for_instances(db, instance_ids=instance_ids)
        connection_counts = await connection_progress_crud.count_for_instances(db, instance_ids=instance_ids)
        resolve_name = await build_name_resolver(
            db, tenant_id=scope.tenant_id, values=[inst.completed_by for inst in instances]
        )

        entries = []
        for inst in instances:
            total_main, completed_main = item_counts.get(inst.id, (0, 0))
            total_connected, completed_connected = connection_counts.get(inst.id, (0, 0))
            entries.append(
                SubmissionEntry(
                    id=inst.id,
                    date=inst.date,
                    template_id=inst.template_id,
                    template_name=inst.template.name if inst.template else "",
                    workplace=inst.workplace,
                    time_slot=inst.time_slot,
                    category=inst.template.category if inst.template else None,
                    is_completed=inst.is_completed,
                    is_submitted=inst.is_submitted,
                    completed_at=inst.completed_at,
                    submitted_at=inst.submitted_at,
                    completed_by=resolve_name(inst.completed_by),
                    notes=inst.notes,
                    progress=SubmissionProgress(
                        total_main_items=total_main,
                        completed_main_items=completed_main,
                        total_connected_items=total_connected,
                        completed_connected_items=completed_connected,
                        percentage=completion_percentage(
                            completed_main + completed_connected,
                            total_main + total_connected,
                        ),
                    ),
                )
            )

        return SubmissionListResponse(total=len(entries), items=entries)


report_service = ReportService()
