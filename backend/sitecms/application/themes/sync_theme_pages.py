"""
Promotion of filesystem theme pages into the database.

Syncing is idempotent: a page is only inserted when the tenant has no page
with the same slug yet. The theme homepage also receives the theme's
starter layout at version 1.
"""
import logging
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from sitecms.extensions import db
from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.models.tenant import Tenant
from sitecms.domain.exceptions import ValidationError
from sitecms.domain.invariants.layout import DEFAULT_LANGUAGE
from sitecms.domain.invariants.page import (
    DEFAULT_LEGAL_VERSION,
    LEGAL_PAGE_TYPE,
    coerce_review_date,
    default_seo_index,
    validate_slug,
)
from sitecms.services.themes.filesystem import (
    get_default_layout_for_theme,
    get_theme_pages_from_filesystem,
)
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional

logger = logging.getLogger(__name__)

HOMEPAGE_SLUGS = {"/", "/home", "/index"}

COPIED_FIELDS = (
    "meta_title",
    "meta_description",
    "campaign_source",
    "conversion_goal",
    "legal_type",
    "legal_version",
)


def _page_from_entry(entry: Dict[str, Any], slug: str, theme_slug: str, tenant_id: Optional[str]) -> Page:
    page_type = entry.get("page_type") or "page"

    page = Page()
    page.tenant_id = tenant_id
    page.theme_id = theme_slug
    page.page_name = entry["page_name"]
    page.slug = slug
    page.page_type = page_type
    page.status = entry.get("status") or "published"

    for field in COPIED_FIELDS:
        if entry.get(field) is not None:
            setattr(page, field, entry[field])

    seo_index = entry.get("seo_index")
    page.seo_index = default_seo_index(page_type) if seo_index is None else bool(seo_index)
    page.last_reviewed_date = coerce_review_date(entry.get("last_reviewed_date"))
    if page_type == LEGAL_PAGE_TYPE and not page.legal_version:
        page.legal_version = DEFAULT_LEGAL_VERSION
    return page


def sync_theme_pages(
    *,
    theme_slug: str,
    tenant_id: Optional[str] = None,
    pages: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Insert the theme's pages for ``tenant_id`` (master pages when None).

    Returns:
        dict: ``{success, synced, skipped}``
    """
    if pages is None:
        pages = get_theme_pages_from_filesystem(theme_slug)

    synced = 0
    skipped = 0

    try:
        with transactional():
            for entry in pages:
                if not entry.get("page_name") or not entry.get("slug"):
                    skipped += 1
                    continue

                try:
                    slug = validate_slug(entry["slug"])
                    page = _page_from_entry(entry, slug, theme_slug, tenant_id)
                except ValidationError as exc:
                    logger.warning("Skipping theme page %r of %s: %s", entry["slug"], theme_slug, exc)
                    skipped += 1
                    continue

                existing = Page.query.filter_by(tenant_id=tenant_id, slug=slug).first()
                if existing:
                    skipped += 1
                    continue

                db.session.add(page)
                db.session.flush()

                if slug in HOMEPAGE_SLUGS:
                    layout = PageLayout()
                    layout.page_id = page.id
                    layout.language = DEFAULT_LANGUAGE
                    layout.layout_json = get_default_layout_for_theme(theme_slug)
                    layout.version = 1
                    db.session.add(layout)

                synced += 1

            if synced:
                log_action(
                    action="theme.sync",
                    entity_type="theme",
                    entity_id=theme_slug,
                    tenant_id=tenant_id,
                    payload={"synced": synced, "skipped": skipped},
                )
    except IntegrityError:
        # A concurrent sync inserted the same pages first
        logger.warning("Theme sync of %s for %s lost a race, nothing written", theme_slug, tenant_id)
        return {"success": False, "synced": 0, "skipped": len(pages)}

    logger.info(
        "Synced theme %s for %s: %s inserted, %s skipped",
        theme_slug,
        tenant_id or "master",
        synced,
        skipped,
    )
    return {"success": True, "synced": synced, "skipped": skipped}


def ensure_demo_tenant_has_theme_pages(
    *,
    theme_slug: str,
    pages: Optional[List[Dict[str, Any]]] = None,
    tenant_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Best-effort sync of a theme's pages into the demo tenant."""
    tenant_id = tenant_id or current_app.config["DEMO_TENANT_ID"]

    if not db.session.get(Tenant, tenant_id):
        logger.warning("Demo tenant %s does not exist, skipping theme sync", tenant_id)
        return {"success": False, "synced": 0, "skipped": 0}

    return sync_theme_pages(theme_slug=theme_slug, tenant_id=tenant_id, pages=pages)
