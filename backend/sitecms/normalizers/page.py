from typing import Any, Dict


def _iso(value):
    return value.isoformat() if value is not None else None


def normalize_page(page, admin=False) -> Dict[str, Any]:
    data = {
        "id": page.id,
        "page_name": page.page_name,
        "slug": page.slug,
        "page_type": page.page_type,
        "status": page.status,
        "tenant_id": page.tenant_id,
        "theme_id": page.theme_id,
        "is_master": page.tenant_id is None,
        "from_filesystem": False,
        "meta_title": page.meta_title,
        "meta_description": page.meta_description,
        "seo_index": page.seo_index,
        "created_at": _iso(page.created_at),
        "updated_at": _iso(page.updated_at),
    }

    if page.campaign_source or page.conversion_goal:
        data["campaign_source"] = page.campaign_source
        data["conversion_goal"] = page.conversion_goal

    if page.legal_type or page.legal_version or page.last_reviewed_date:
        data["legal_type"] = page.legal_type
        data["legal_version"] = page.legal_version
        data["last_reviewed_date"] = _iso(page.last_reviewed_date)

    if admin:
        data["languages"] = sorted(layout.language for layout in page.layouts)

    return data
