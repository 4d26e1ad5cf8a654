from typing import Any, Dict, Optional
from sitecms.models.page import Page
from sitecms.domain.exceptions import ConflictError, ValidationError
from sitecms.domain.invariants.page import coerce_review_date, validate_slug
from sitecms.domain.lifecycle.page import assert_page_transition
from sitecms.domain.tenancy import assert_writable
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .get_pages import find_page


ALLOWED_UPDATE_FIELDS = (
    "page_name",
    "slug",
    "page_type",
    "status",
    "theme_id",
    "meta_title",
    "meta_description",
    "seo_index",
    "campaign_source",
    "conversion_goal",
    "legal_type",
    "last_reviewed_date",
    "legal_version",
)


def update_page(
    *,
    tenant_id: Optional[str],
    page_id: Any,
    data: Dict[str, Any],
    actor_id: Optional[str] = None,
) -> Page:
    """
    Update mutable fields on a tenant page.

    Design rules:
    - Only whitelisted fields are mutable; ``None`` means "keep"
    - Master pages are read-only
    - No silent no-op requests: at least one field must be provided
    """

    page = find_page(page_id=page_id, tenant_id=tenant_id)
    assert_writable(page, tenant_id)

    changes = {
        field: data[field]
        for field in ALLOWED_UPDATE_FIELDS
        if data.get(field) is not None
    }
    if not changes:
        raise ValidationError("No valid fields provided for update")

    if "slug" in changes:
        changes["slug"] = validate_slug(changes["slug"])
        if changes["slug"] != page.slug:
            clash = Page.query.filter(
                Page.tenant_id == page.tenant_id,
                Page.slug == changes["slug"],
                Page.id != page.id,
            ).first()
            if clash:
                raise ConflictError(f"A page with slug '{changes['slug']}' already exists")

    if "status" in changes:
        assert_page_transition(from_status=page.status, to_status=changes["status"])

    if "last_reviewed_date" in changes:
        changes["last_reviewed_date"] = coerce_review_date(changes["last_reviewed_date"])

    if "seo_index" in changes:
        changes["seo_index"] = bool(changes["seo_index"])

    changed_fields: list[str] = []

    with transactional():
        for field, value in changes.items():
            if getattr(page, field) != value:
                setattr(page, field, value)
                changed_fields.append(field)

        if changed_fields:
            log_action(
                action="page.update",
                entity_type="page",
                entity_id=page.id,
                tenant_id=page.tenant_id,
                actor_id=actor_id,
                payload={
                    "fields": changed_fields,
                },
            )

    return page
