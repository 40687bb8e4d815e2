"""Per-request tenant scope."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class TenantScope:
    """Tenant and actor a request runs on behalf of.

    Built once per request from the authenticated employee and passed to
    every repository call that touches tenant data.
    """

    tenant_id: UUID
    employee_id: UUID
    employee_name: str

    def log_extra(self) -> dict:
        return {"tenant_id": self.tenant_id, "employee_id": self.employee_id}
