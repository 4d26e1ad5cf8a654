from typing import Any, Dict, List, Optional
from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.domain.invariants.layout import (
    DEFAULT_LANGUAGE,
    empty_layout,
    normalize_layout_language,
)
from sitecms.domain.invariants.page import normalize_slug
from sitecms.normalizers.layout import normalize_layout
from sitecms.normalizers.page import normalize_page
from sitecms.application.settings.languages import get_default_language
from .get_pages import get_page, get_page_by_slug


def _candidate_languages(language: str, site_language: str) -> List[str]:
    """Lookup order for ``language``; ``default`` and the site language stand in for each other."""
    defaults = [DEFAULT_LANGUAGE, site_language]
    if language in defaults:
        return [language] + [code for code in defaults if code != language]
    return [language] + defaults


def resolve_layout(page: Page, language: Optional[str], tenant_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Layout of ``page`` in ``language``.

    A missing translation falls back to the default language, stored either
    as ``default`` or under the tenant's site language. A page with no
    layout at all gets an empty layout at version 1.
    """
    language = normalize_layout_language(language)
    site_language = get_default_language(tenant_id=tenant_id if tenant_id is not None else page.tenant_id)
    candidates = _candidate_languages(language, site_language)

    rows = {
        row.language: row
        for row in PageLayout.query.filter(
            PageLayout.page_id == page.id,
            PageLayout.language.in_(candidates),
        )
    }

    row = next((rows[code] for code in candidates if code in rows), None)
    if row is not None:
        data = normalize_layout(row)
        data["requested_language"] = language
        same_language = row.language == language or {row.language, language} <= {DEFAULT_LANGUAGE, site_language}
        data["fallback"] = not same_language
        return data

    return {
        "id": None,
        "page_id": page.id,
        "language": language,
        "requested_language": language,
        "layout_json": empty_layout(),
        "version": 1,
        "updated_at": None,
        "fallback": True,
    }


def get_page_layout(
    *,
    page_id: Any,
    tenant_id: Optional[str],
    language: Optional[str] = DEFAULT_LANGUAGE,
) -> Dict[str, Any]:
    page = get_page(page_id=page_id, tenant_id=tenant_id)
    return resolve_layout(page, language, tenant_id)


def get_layout_by_slug(
    *,
    slug: str,
    tenant_id: Optional[str],
    language: Optional[str] = DEFAULT_LANGUAGE,
) -> Dict[str, Any]:
    """Resolve the visible page for ``slug`` (tenant before master), then its layout."""
    page = get_page_by_slug(slug=normalize_slug(slug), tenant_id=tenant_id)
    data = resolve_layout(page, language, tenant_id)
    data["slug"] = page.slug
    data["is_master"] = page.tenant_id is None
    return data


def get_page_with_layout(
    *,
    page_id: Any,
    tenant_id: Optional[str],
    language: Optional[str] = DEFAULT_LANGUAGE,
) -> Dict[str, Any]:
    page = get_page(page_id=page_id, tenant_id=tenant_id)
    data = normalize_page(page)
    data["layout"] = resolve_layout(page, language, tenant_id)
    return data
