from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from sitecms.extensions import db
from sitecms.models.page import Page
from sitecms.domain.exceptions import ConflictError
from sitecms.domain.invariants.page import (
    DEFAULT_LEGAL_VERSION,
    LEGAL_PAGE_TYPE,
    assert_page_fields,
    coerce_review_date,
    default_seo_index,
    validate_slug,
)
from sitecms.domain.lifecycle.page import assert_page_transition
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional

OPTIONAL_PAGE_FIELDS = (
    "theme_id",
    "meta_title",
    "meta_description",
    "campaign_source",
    "conversion_goal",
    "legal_type",
    "legal_version",
)


def create_page(
    *,
    tenant_id: Optional[str],
    data: Dict[str, Any],
    actor_id: Optional[str] = None,
) -> Page:
    """
    Create a page for a tenant (or a master page when ``tenant_id`` is None).

    Edge cases handled:
    - Missing page_name / slug
    - Slug normalization and validation
    - Duplicate slug per tenant
    - SEO and legal defaults by page type
    """

    assert_page_fields(data)

    slug = validate_slug(data["slug"])
    page_type = data.get("page_type") or "page"
    status = data.get("status") or "draft"
    assert_page_transition(from_status="draft", to_status=status)

    existing = Page.query.filter_by(tenant_id=tenant_id, slug=slug).first()
    if existing:
        raise ConflictError(f"A page with slug '{slug}' already exists")

    page = Page()
    page.tenant_id = tenant_id
    page.page_name = data["page_name"]
    page.slug = slug
    page.page_type = page_type
    page.status = status

    for field in OPTIONAL_PAGE_FIELDS:
        if data.get(field) is not None:
            setattr(page, field, data[field])

    seo_index = data.get("seo_index")
    page.seo_index = default_seo_index(page_type) if seo_index is None else bool(seo_index)
    page.last_reviewed_date = coerce_review_date(data.get("last_reviewed_date"))

    if page_type == LEGAL_PAGE_TYPE and not page.legal_version:
        page.legal_version = DEFAULT_LEGAL_VERSION

    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                tenant_id=tenant_id,
                actor_id=actor_id,
                payload={
                    "page_name": page.page_name,
                    "slug": page.slug,
                    "page_type": page.page_type,
                    "status": page.status,
                },
            )

        return page

    except IntegrityError as exc:
        # Raised by the (tenant_id, slug) constraint when a concurrent insert wins
        raise ConflictError(f"A page with slug '{slug}' already exists") from exc
