from typing import Any, Dict, List, Optional
from sitecms.models.audit_log import AuditLog
from sitecms.models.page import Page
from sitecms.domain.exceptions import ConflictError, NotFoundError
from sitecms.domain.identifiers import normalize_page_id
from sitecms.domain.invariants.page import normalize_slug, validate_slug
from sitecms.domain.tenancy import assert_writable
from sitecms.normalizers.audit import normalize_audit_log
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional

SLUG_CHANGE_ACTION = "page.slug_change"
BLOG_SLUG = "/blog"
BLOG_SLUG_NOTE = "Blog slug changed - manual blog post update required"


def update_page_slug(
    *,
    page_id: Any,
    page_type: str,
    new_slug: str,
    tenant_id: Optional[str],
    old_slug: Optional[str] = None,
    actor_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Change the slug of one tenant page of a given type.

    Edge cases handled:
    - Leading slash added, slug validated
    - New slug already used by another page of the tenant
    - No row matching (id, tenant, page_type)
    - Master pages
    - Renaming ``/blog`` leaves an advisory audit note: blog post URLs are
      not rewritten automatically
    """

    pid = normalize_page_id(page_id)
    new_slug = validate_slug(new_slug)

    page = Page.query.filter_by(id=pid, page_type=page_type).first()
    if not page:
        raise NotFoundError(f"No {page_type} page with id {pid}")
    assert_writable(page, tenant_id)

    previous = normalize_slug(old_slug) if old_slug else page.slug

    clash = Page.query.filter(
        Page.tenant_id == tenant_id,
        Page.slug == new_slug,
        Page.id != pid,
    ).first()
    if clash:
        raise ConflictError(f"A page with slug '{new_slug}' already exists")

    payload = {
        "page_type": page_type,
        "old_slug": previous,
        "new_slug": new_slug,
    }
    if previous == BLOG_SLUG and new_slug != BLOG_SLUG:
        payload["note"] = BLOG_SLUG_NOTE

    with transactional():
        page.slug = new_slug
        log_action(
            action=SLUG_CHANGE_ACTION,
            entity_type="page",
            entity_id=pid,
            tenant_id=tenant_id,
            actor_id=actor_id,
            payload=payload,
        )

    return {"page_id": pid, **payload}


def get_slug_change_history(
    *,
    page_id: Any = None,
    page_type: Optional[str] = None,
    tenant_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Slug change audit entries, newest first."""
    query = AuditLog.query.filter_by(action=SLUG_CHANGE_ACTION)
    if page_id is not None:
        query = query.filter(AuditLog.entity_id == str(normalize_page_id(page_id)))
    if tenant_id is not None:
        query = query.filter(AuditLog.tenant_id == tenant_id)

    entries = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).all()
    if page_type:
        entries = [e for e in entries if (e.payload or {}).get("page_type") == page_type]

    return [normalize_audit_log(entry) for entry in entries]
