from flask import g, has_request_context
from sitecms.extensions import db
from sitecms.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    tenant_id: Optional[str] = None,
    actor_id: Optional[str] = None,
    payload: dict | None = None
) -> AuditLog:
    """
    Append an audit entry to the current session.

    The caller owns the transaction; actor and tenant fall back to the
    request context when not given.
    """
    if has_request_context():
        actor_id = actor_id or g.get("actor_id")
        tenant_id = tenant_id or g.get("tenant_id")

    log = AuditLog()

    log.actor_id = actor_id
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id) if entity_id is not None else "*"
    log.payload = payload or {}

    db.session.add(log)
    return log
