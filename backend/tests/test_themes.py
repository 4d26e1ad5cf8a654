from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.application.cms.get_pages import get_all_pages_with_types
from sitecms.application.themes.sync_theme_pages import (
    ensure_demo_tenant_has_theme_pages,
    sync_theme_pages,
)
from sitecms.services.themes.filesystem import (
    format_theme_name,
    get_default_layout_for_theme,
    get_theme_pages_from_filesystem,
    get_themes_from_filesystem,
    read_theme_config,
    sanitize_page_slug,
)


# ------------------------
# Filesystem
# ------------------------

def test_themes_are_listed_with_config_or_derived_names(app):
    themes = get_themes_from_filesystem()

    assert [(t["slug"], t["name"]) for t in themes] == [
        ("dark-mode_v2", "Dark Mode V2"),
        ("landingpage", "Landing Page"),
    ]
    assert all(t["from_filesystem"] for t in themes)


def test_read_theme_config_handles_bad_files(app, themes_dir):
    assert read_theme_config("landingpage")["name"] == "Landing Page"
    assert read_theme_config("missing") is None
    assert read_theme_config("dark-mode_v2") is None

    (themes_dir / "dark-mode_v2" / "theme.json").write_text("{not json")
    assert read_theme_config("dark-mode_v2") is None

    (themes_dir / "dark-mode_v2" / "theme.json").write_text('{"description": "no name"}')
    assert read_theme_config("dark-mode_v2") is None


def test_theme_pages_get_synthetic_ids(app):
    pages = get_theme_pages_from_filesystem("landingpage")

    assert [p["id"] for p in pages] == [
        "theme-landingpage-homepage",
        "theme-landingpage-contact",
        "theme-landingpage-privacy",
    ]
    home = pages[0]
    assert home["theme_id"] == "landingpage"
    assert home["from_filesystem"] is True
    assert home["status"] == "published"
    assert pages[1]["page_type"] == "page"


def test_theme_pages_are_deterministic(app):
    assert get_theme_pages_from_filesystem("landingpage") == get_theme_pages_from_filesystem("landingpage")


def test_missing_theme_has_no_pages(app):
    assert get_theme_pages_from_filesystem("nope") == []
    assert get_theme_pages_from_filesystem("dark-mode_v2") == []


def test_format_and_sanitize_helpers():
    assert format_theme_name("landingpage") == "Landing Page"
    assert format_theme_name("darkMode") == "Dark Mode"
    assert sanitize_page_slug("/About Us/") == "about-us"
    assert sanitize_page_slug("/") == "homepage"


def test_default_layouts():
    assert get_default_layout_for_theme("landingpage")["components"]
    assert get_default_layout_for_theme("unknown") == {"components": []}

    # Callers get their own copy
    layout = get_default_layout_for_theme("landingpage")
    layout["components"].clear()
    assert get_default_layout_for_theme("landingpage")["components"]


# ------------------------
# Sync
# ------------------------

def test_sync_inserts_pages_once(app):
    first = sync_theme_pages(theme_slug="landingpage", tenant_id="t1")
    second = sync_theme_pages(theme_slug="landingpage", tenant_id="t1")

    assert first == {"success": True, "synced": 3, "skipped": 0}
    assert second == {"success": True, "synced": 0, "skipped": 3}

    pages = Page.query.filter_by(tenant_id="t1", theme_id="landingpage").all()
    assert sorted(p.slug for p in pages) == ["/", "/contact", "/privacy"]

    privacy = next(p for p in pages if p.slug == "/privacy")
    assert privacy.seo_index is False
    assert privacy.legal_version == "1.0"
    assert privacy.last_reviewed_date.isoformat() == "2025-11-03"


def test_homepage_gets_the_theme_layout(app):
    sync_theme_pages(theme_slug="landingpage", tenant_id="t1")

    home = Page.query.filter_by(tenant_id="t1", slug="/").one()
    layout = PageLayout.query.filter_by(page_id=home.id).one()

    assert layout.language == "default"
    assert layout.version == 1
    assert layout.layout_json == get_default_layout_for_theme("landingpage")

    contact = Page.query.filter_by(tenant_id="t1", slug="/contact").one()
    assert PageLayout.query.filter_by(page_id=contact.id).count() == 0


def test_sync_for_unknown_demo_tenant_is_skipped(app):
    result = ensure_demo_tenant_has_theme_pages(theme_slug="landingpage", tenant_id="ghost")

    assert result == {"success": False, "synced": 0, "skipped": 0}
    assert Page.query.count() == 0


def test_demo_tenant_falls_back_to_filesystem_and_syncs(app):
    pages = get_all_pages_with_types(tenant_id="demo", theme_id="landingpage")

    assert all(p["from_filesystem"] for p in pages)
    assert len(pages) == 3

    # The background sync (eager in tests) promoted the pages
    synced = get_all_pages_with_types(tenant_id="demo", theme_id="landingpage")
    assert {p["from_filesystem"] for p in synced} == {False}
    assert sorted(p["slug"] for p in synced) == ["/", "/contact", "/privacy"]


def test_regular_tenants_get_no_filesystem_fallback(app):
    assert get_all_pages_with_types(tenant_id="t1", theme_id="landingpage") == []
    assert Page.query.filter_by(tenant_id="t1").count() == 0
