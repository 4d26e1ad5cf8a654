"""
Theme pages and layouts read straight from disk.

Each theme lives in ``<THEMES_DIR>/<slug>/`` with a ``theme.json`` (metadata,
``name`` required) and an optional ``pages.json`` (list of page entries).
Nothing here touches the database; every reader returns ``None``/``[]`` on a
missing or broken file instead of raising.
"""
import copy
import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context

from sitecms.domain.identifiers import SYNTHETIC_PAGE_ID_PREFIX
from sitecms.domain.invariants.layout import empty_layout

logger = logging.getLogger(__name__)

THEME_CONFIG_FILE = "theme.json"
THEME_PAGES_FILE = "pages.json"

KNOWN_THEME_NAMES = {
    "landingpage": "Landing Page",
    "homepage": "Home Page",
    "aboutpage": "About Page",
    "contactpage": "Contact Page",
}

# Canned starter layouts, keyed by theme slug
DEFAULT_THEME_LAYOUTS: Dict[str, List[Dict[str, Any]]] = {
    "landingpage": [
        {
            "id": "hero-1",
            "type": "HeroSection",
            "props": {
                "heading": "Grow your business with confidence",
                "subheading": "Accounting, tax and advisory services for ambitious companies.",
                "ctaText": "Get started",
                "link": "/contact",
                "image": "/theme/landingpage/assets/hero.jpg",
            },
        },
        {
            "id": "services-1",
            "type": "ServicesGrid",
            "props": {
                "title": "What we do",
                "items": [
                    {"title": "Bookkeeping", "description": "Accurate books, every month."},
                    {"title": "Tax filing", "description": "On time and fully compliant."},
                    {"title": "Advisory", "description": "Clear numbers for better decisions."},
                ],
            },
        },
        {
            "id": "contact-1",
            "type": "ContactForm",
            "props": {
                "title": "Talk to us",
                "buttonText": "Send message",
                "email": "hello@example.com",
            },
        },
    ],
}

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def themes_root(themes_dir: Optional[str] = None) -> str:
    if themes_dir:
        return themes_dir
    if has_app_context():
        return current_app.config["THEMES_DIR"]
    raise RuntimeError("THEMES_DIR is only available inside an application context")


def format_theme_name(slug: str) -> str:
    """``"landingpage"`` -> ``"Landing Page"``, ``"dark-mode_v2"`` -> ``"Dark Mode V2"``."""
    known = KNOWN_THEME_NAMES.get(slug.lower())
    if known:
        return known

    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", slug)
    return " ".join(
        word[:1].upper() + word[1:].lower()
        for word in re.split(r"[-_\s]+", spaced)
        if word
    )


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def read_theme_config(slug: str, themes_dir: Optional[str] = None) -> Optional[Dict[str, Any]]:
    theme_path = os.path.join(themes_root(themes_dir), slug)
    config_path = os.path.join(theme_path, THEME_CONFIG_FILE)

    if not os.path.isdir(theme_path):
        logger.debug("Theme folder does not exist: %s", theme_path)
        return None

    if not os.path.isfile(config_path):
        logger.debug("%s not found for theme %s", THEME_CONFIG_FILE, slug)
        return None

    try:
        config = _read_json(config_path)
    except (OSError, ValueError) as exc:
        logger.error("Error reading %s for %s: %s", THEME_CONFIG_FILE, slug, exc)
        return None

    if not isinstance(config, dict) or not config.get("name"):
        logger.warning("%s for %s is missing required 'name' field", THEME_CONFIG_FILE, slug)
        return None

    return config


def get_themes_from_filesystem(themes_dir: Optional[str] = None) -> List[Dict[str, Any]]:
    """List every theme folder, sorted by slug."""
    root = themes_root(themes_dir)
    if not os.path.isdir(root):
        logger.info("Themes directory does not exist: %s", root)
        return []

    themes = []
    for slug in sorted(os.listdir(root)):
        if not os.path.isdir(os.path.join(root, slug)):
            continue

        config = read_theme_config(slug, root)
        if config:
            themes.append({
                "id": slug,
                "slug": slug,
                "name": config["name"],
                "description": config.get("description") or f"Theme: {config['name']}",
                "version": config.get("version"),
                "author": config.get("author"),
                "is_active": config.get("is_active", True),
                "from_filesystem": True,
            })
        else:
            name = format_theme_name(slug)
            themes.append({
                "id": slug,
                "slug": slug,
                "name": name,
                "description": f"Theme: {name}",
                "is_active": True,
                "from_filesystem": True,
            })

    return themes


def read_theme_pages(theme_slug: str, themes_dir: Optional[str] = None) -> List[Dict[str, Any]]:
    """Raw entries of ``pages.json``; ``[]`` when missing or malformed."""
    pages_path = os.path.join(themes_root(themes_dir), theme_slug, THEME_PAGES_FILE)
    if not os.path.isfile(pages_path):
        return []

    try:
        data = _read_json(pages_path)
    except (OSError, ValueError) as exc:
        logger.error("Error reading %s for %s: %s", THEME_PAGES_FILE, theme_slug, exc)
        return []

    if isinstance(data, dict):
        data = data.get("pages", [])
    if not isinstance(data, list):
        logger.warning("%s for %s is not a list of pages", THEME_PAGES_FILE, theme_slug)
        return []

    return [entry for entry in data if isinstance(entry, dict)]


def sanitize_page_slug(slug: str) -> str:
    sanitized = _NON_ALNUM.sub("-", str(slug).lower()).strip("-")
    return sanitized or "homepage"


def synthetic_page_id(theme_slug: str, page_slug: str) -> str:
    return f"{SYNTHETIC_PAGE_ID_PREFIX}{theme_slug}-{sanitize_page_slug(page_slug)}"


def get_theme_pages_from_filesystem(
    theme_slug: str,
    themes_dir: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Page records for a theme, shaped like database pages.

    Ids are synthetic (``theme-<slug>-<pageSlug>``) and stable for an
    unchanged ``pages.json``. Entries without ``page_name`` or ``slug`` are
    skipped.
    """
    pages = []
    for entry in read_theme_pages(theme_slug, themes_dir):
        if not entry.get("page_name") or not entry.get("slug"):
            logger.warning("Skipping theme page without page_name/slug in %s", theme_slug)
            continue

        page = dict(entry)
        page["id"] = synthetic_page_id(theme_slug, entry["slug"])
        page["theme_id"] = theme_slug
        page["tenant_id"] = None
        page["status"] = entry.get("status") or "published"
        page["page_type"] = entry.get("page_type") or "page"
        page["from_filesystem"] = True
        pages.append(page)

    return pages


def get_default_layout_for_theme(theme_slug: str) -> Dict[str, Any]:
    components = DEFAULT_THEME_LAYOUTS.get(theme_slug)
    if not components:
        return empty_layout()
    return {"components": copy.deepcopy(components)}
