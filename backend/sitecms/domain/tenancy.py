"""
Tenant scoping rules shared by every read and write in the CMS core.

Rows with ``tenant_id IS NULL`` are *master* rows: a shared baseline that
every tenant can read but none can mutate. A tenant-specific row with the
same logical key (e.g. the same page slug) shadows the master row.
"""
from typing import Any, Callable, Iterable, List, Mapping, Optional

from sqlalchemy import case, or_

from .exceptions import ForbiddenMasterWriteError, NotFoundError

SUPER_ADMIN_ROLE = "super_admin"


def resolve_read_scope(query, model, tenant_id: Optional[str]):
    """
    Restrict ``query`` to rows visible to ``tenant_id``.

    Visible rows are the tenant's own rows plus master rows. Tenant rows are
    ordered first so callers that take ``.first()`` (or shadow by key)
    always prefer the tenant-specific row.

    ``tenant_id=None`` means "master rows only".
    """
    if tenant_id is None:
        return query.filter(model.tenant_id.is_(None))

    return query.filter(
        or_(model.tenant_id == tenant_id, model.tenant_id.is_(None))
    ).order_by(
        case((model.tenant_id == tenant_id, 0), else_=1)
    )


def shadow_by(rows: Iterable[Any], key: Callable[[Any], Any]) -> List[Any]:
    """Keep the first row per logical key, preserving order."""
    seen = set()
    kept = []
    for row in rows:
        marker = key(row)
        if marker in seen:
            continue
        seen.add(marker)
        kept.append(row)
    return kept


def is_master(row) -> bool:
    return getattr(row, "tenant_id", None) is None


def assert_writable(row, tenant_id: Optional[str]) -> None:
    """
    Guard a mutation of ``row`` on behalf of ``tenant_id``.

    - master rows are never writable, with or without a tenant
    - a write without a tenant is refused
    - rows owned by another tenant are reported as missing, never as forbidden
    """
    if row is None:
        raise NotFoundError("Resource not found")

    if is_master(row):
        raise ForbiddenMasterWriteError()

    if tenant_id is None:
        raise ForbiddenMasterWriteError("Writes require a tenant")

    if row.tenant_id != tenant_id:
        raise NotFoundError("Resource not found")


def _claim(user: Any, name: str) -> Any:
    if isinstance(user, Mapping):
        return user.get(name)
    return getattr(user, name, None)


def is_super_admin(user: Any) -> bool:
    if not user:
        return False
    return _claim(user, "role") == SUPER_ADMIN_ROLE or _claim(user, "is_super_admin") is True


def can_access_tenant(user: Any, tenant_id: Optional[str]) -> bool:
    """True for super-admins, or when the user belongs to ``tenant_id``."""
    if not user:
        return False
    if is_super_admin(user):
        return True
    return tenant_id is not None and _claim(user, "tenant_id") == tenant_id
