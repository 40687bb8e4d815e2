"""Instance submission gate."""
import logging
from datetime import datetime, timezone
from html import escape
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from restops.core.exceptions import ValidationError
from restops.core.tenant import TenantScope
from restops.crud.progress import item_progress as item_progress_crud, connection_progress as connection_progress_crud
from restops.localization.helpers import get_translation
from restops.middleware.metrics import checklist_submissions_total
from restops.models.checklist import ChecklistInstance
from restops.models.tenant import Tenant
from restops.schemas.progress import ItemNode, ProgressSummary
from restops.schemas.submission import SubmitResponse
from restops.services.notification_service import DispatchResult, NotificationService, notification_service
from restops.services.tree_service import tree_service

logger = logging.getLogger(__name__)


def _render_nodes(nodes: List[ItemNode]) -> str:
    if not nodes:
        return ""
    rows = []
    for node in nodes:
        mark = "&#10003;" if node.is_completed else "&#10007;"
        line = f"{mark} {escape(node.content)}"
        if node.completed_by:
            line += f' <span style="color:#64748b">({escape(node.completed_by)})</span>'
        if node.notes:
            line += f'<br><em style="color:#64748b">{escape(node.notes)}</em>'
        for conn in node.connections:
            conn_mark = "&#10003;" if conn.is_completed else "&#10007;"
            line += f"<br>&nbsp;&nbsp;{conn_mark} [{escape(conn.item_type.value)}]"
        rows.append(f"<li>{line}{_render_nodes(node.children)}</li>")
    return "<ul>" + "".join(rows) + "</ul>"


def render_submission_html(
    *,
    tenant_name: str,
    template_name: str,
    instance: ChecklistInstance,
    submitted_by: str,
    summary: ProgressSummary,
    nodes: List[ItemNode],
) -> str:
    """HTML summary of a submitted instance."""
    notes = f"<p><strong>Notes:</strong> {escape(instance.notes)}</p>" if instance.notes else ""
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 640px;">'
        f"<h2>{escape(tenant_name)}: {escape(template_name)}</h2>"
        f"<p>Date: {instance.date.isoformat()}"
        f" | Workplace: {escape(instance.workplace or '-')}"
        f" | Time slot: {escape(instance.time_slot or '-')}</p>"
        f"<p>Submitted by {escape(submitted_by)}</p>"
        f"<p>Progress: {summary.percentage}% "
        f"(items {summary.completed_main}/{summary.total_main}, "
        f"connected {summary.completed_connected}/{summary.total_connected})</p>"
        f"{notes}"
        f"{_render_nodes(nodes)}"
        "</div>"
    )


class SubmissionService:
    """Validates completion and marks instances submitted."""

    @staticmethod
    async def submit(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance_id: UUID,
        notes: Optional[str] = None,
        require_connected_complete: bool = False,
        notifier: Optional[NotificationService] = None,
        locale: str = "en",
    ) -> SubmitResponse:
        """Submit an instance whose item-level progress is fully complete.

        The notification is best-effort: its outcome is reported in the
        response and never turns a successful submission into a failure.
        """
        instance = await tree_service.get_instance(db, scope=scope, instance_id=instance_id, locale=locale)
        if instance.is_submitted:
            raise ValidationError(get_translation("errors.instance_already_submitted", locale))

        total, completed = await item_progress_crud.count(db, instance_id=instance.id)
        if total == 0 or completed < total:
            raise ValidationError(get_translation("errors.items_incomplete", locale))

        if require_connected_complete:
            conn_total, conn_completed = await connection_progress_crud.count(db, instance_id=instance.id)
            if conn_total > 0 and conn_completed < conn_total:
                raise ValidationError(get_translation("errors.connections_incomplete", locale))

        template_name = instance.template.name if instance.template else ""
        instance.is_submitted = True
        instance.submitted_at = datetime.now(timezone.utc)
        if notes is not None:
            instance.notes = notes
        db.add(instance)
        await db.commit()

        recipients, result = await SubmissionService._notify(
            db,
            scope=scope,
            instance=instance,
            template_name=template_name,
            notifier=notifier or notification_service,
            locale=locale,
        )

        checklist_submissions_total.labels(email_sent=str(result.sent).lower()).inc()
        logger.info(
            "Checklist submitted (email_sent=%s recipients=%d)",
            result.sent,
            len(recipients),
            extra={**scope.log_extra(), "instance_id": instance.id},
        )
        return SubmitResponse(
            success=True,
            instance_id=instance.id,
            submitted_at=instance.submitted_at,
            email_sent=result.sent,
            email_recipient_count=len(recipients),
            email_error=result.error,
        )

    @staticmethod
    async def _notify(
        db: AsyncSession,
        *,
        scope: TenantScope,
        instance: ChecklistInstance,
        template_name: str,
        notifier: NotificationService,
        locale: str,
    ):
        recipients: List[str] = []
        try:
            tenant = await db.get(Tenant, scope.tenant_id)
            recipients = tenant.submission_recipients if tenant else []
            if not recipients:
                return recipients, DispatchResult(sent=False, error="NO_RECIPIENTS")

            tree = await tree_service.build_tree(db, scope=scope, instance=instance)
            subject = get_translation(
                "mail.submission_subject",
                locale,
                tenant=tenant.name,
                template=template_name,
                date=instance.date.isoformat(),
            )
            html = render_submission_html(
                tenant_name=tenant.name,
                template_name=template_name,
                instance=instance,
                submitted_by=scope.employee_name,
                summary=tree.summary,
                nodes=tree.nodes,
            )
            return recipients, await notifier.send_email(recipients, subject, html)
        except Exception as exc:  # notification must not fail the submission
            logger.warning(
                "Submission notification failed",
                exc_info=True,
                extra={**scope.log_extra(), "instance_id": instance.id},
            )
            return recipients, DispatchResult(sent=False, error=type(exc).__name__)


submission_service = SubmissionService()
