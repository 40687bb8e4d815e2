"""Completer display-name resolution.

``completed_by`` columns hold display names. Older rows may hold an
employee id instead; those are mapped to the employee's current name when
the id belongs to the same tenant. Anything else is already a name.
"""
from typing import Callable, Iterable, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from restops.crud.employee import employee as employee_crud

NameResolver = Callable[[Optional[str]], Optional[str]]


def _as_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        return None


async def build_name_resolver(db: AsyncSession, *, tenant_id: UUID, values: Iterable[Optional[str]]) -> NameResolver:
    """Return a resolver for the given ``completed_by`` values."""
    candidates = {}
    for value in values:
        if not value:
            continue
        parsed = _as_uuid(value)
        if parsed is not None:
            candidates[value] = parsed

    id_to_name = {}
    if candidates:
        names = await employee_crud.get_names(db, tenant_id=tenant_id, employee_ids=set(candidates.values()))
        id_to_name = {raw: names[parsed] for raw, parsed in candidates.items() if parsed in names}

    def resolve(value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return id_to_name.get(value, value)

    return resolve


def passthrough(value: Optional[str]) -> Optional[str]:
    """Resolver that leaves values untouched."""
    return value or None
