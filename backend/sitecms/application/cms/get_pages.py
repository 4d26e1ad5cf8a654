"""
Read side of the page registry.

Every lookup goes through the tenant read scope: the tenant's own pages plus
master pages, with the tenant page winning when both share a slug.
"""
import logging
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import String, cast, or_

from sitecms.models.page import Page
from sitecms.domain.exceptions import NotFoundError, ValidationError
from sitecms.domain.identifiers import is_synthetic_page_id, normalize_page_id
from sitecms.domain.tenancy import resolve_read_scope, shadow_by
from sitecms.normalizers.page import normalize_page
from sitecms.services.themes.filesystem import get_theme_pages_from_filesystem

logger = logging.getLogger(__name__)

CUSTOM_THEME_ID = "custom"


def find_page(*, page_id: Any, tenant_id: Optional[str]) -> Optional[Page]:
    """Visible page by id, or None."""
    pid = normalize_page_id(page_id)
    query = Page.query.filter(Page.id == pid)
    return resolve_read_scope(query, Page, tenant_id).first()


def get_page(*, page_id: Any, tenant_id: Optional[str]) -> Page:
    page = find_page(page_id=page_id, tenant_id=tenant_id)
    if not page:
        raise NotFoundError("Page not found")
    return page


def get_page_by_slug(*, slug: str, tenant_id: Optional[str]) -> Page:
    query = Page.query.filter(Page.slug == slug)
    page = resolve_read_scope(query, Page, tenant_id).first()
    if not page:
        raise NotFoundError(f"No page with slug '{slug}'")
    return page


def _newest_first_by_type(pages: List[Page]) -> List[Page]:
    pages = sorted(pages, key=lambda p: (p.created_at is not None, p.created_at), reverse=True)
    return sorted(pages, key=lambda p: p.page_type or "")


def get_pages(*, tenant_id: Optional[str], page_type: Optional[str] = None) -> List[Page]:
    """Visible pages, master pages shadowed by tenant pages with the same slug."""
    query = Page.query
    if page_type:
        query = query.filter(Page.page_type == page_type)

    rows = resolve_read_scope(query, Page, tenant_id).order_by(Page.id).all()
    return _newest_first_by_type(shadow_by(rows, key=lambda p: p.slug))


def ensure_page_exists(
    *,
    page_id: Any,
    tenant_id: Optional[str],
    theme_id: Optional[str] = None,
) -> Page:
    """
    Resolve a page id coming from a request.

    Numeric ids (int or string) match the primary key; any other string is
    compared with the textual form of the id in the same single query.
    """
    if is_synthetic_page_id(page_id):
        raise ValidationError("Theme pages must be saved before they can be edited")

    try:
        query = Page.query.filter(Page.id == normalize_page_id(page_id))
    except ValidationError:
        if not isinstance(page_id, str):
            raise
        query = Page.query.filter(cast(Page.id, String) == page_id)

    if theme_id:
        query = query.filter(Page.theme_id == theme_id)

    page = resolve_read_scope(query, Page, tenant_id).first()
    if not page:
        raise NotFoundError("Page not found")
    return page


def is_demo_tenant(tenant_id: Optional[str]) -> bool:
    return tenant_id is not None and tenant_id == current_app.config.get("DEMO_TENANT_ID")


def get_all_pages_with_types(
    *,
    tenant_id: Optional[str],
    theme_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Every visible page as API dicts, ordered by type then newest first.

    Without a theme, only pages not bound to a theme (or bound to ``custom``)
    are listed. The demo tenant falls back to the theme's pages on disk when
    the database has none, and schedules a sync so the next call finds them.
    """
    query = Page.query
    if theme_id and theme_id != CUSTOM_THEME_ID:
        query = query.filter(Page.theme_id == theme_id)
    else:
        query = query.filter(or_(Page.theme_id.is_(None), Page.theme_id == CUSTOM_THEME_ID))

    rows = resolve_read_scope(query, Page, tenant_id).order_by(Page.id).all()
    pages = [
        normalize_page(page)
        for page in _newest_first_by_type(shadow_by(rows, key=lambda p: p.slug))
    ]

    if pages or not theme_id or theme_id == CUSTOM_THEME_ID or not is_demo_tenant(tenant_id):
        return pages

    fs_pages = get_theme_pages_from_filesystem(theme_id)
    if not fs_pages:
        return pages

    logger.info(
        "Serving %s filesystem page(s) of theme %s to demo tenant %s",
        len(fs_pages),
        theme_id,
        tenant_id,
    )
    _schedule_theme_sync(theme_id, tenant_id)
    return fs_pages


def _schedule_theme_sync(theme_id: str, tenant_id: str) -> None:
    from sitecms.tasks.theme_tasks import schedule_demo_theme_sync

    try:
        schedule_demo_theme_sync(theme_slug=theme_id, tenant_id=tenant_id)
    except Exception:
        logger.exception("Could not schedule theme sync for %s", theme_id)
