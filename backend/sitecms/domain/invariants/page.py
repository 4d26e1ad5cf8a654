import re
from datetime import date, datetime
from typing import Any, Dict

from dateutil.parser import parse

from ..exceptions import ValidationError

SLUG_PATTERN = re.compile(r"^/[a-z0-9\-/]*$")
LEGAL_PAGE_TYPE = "legal"
DEFAULT_LEGAL_VERSION = "1.0"


def normalize_slug(slug: str) -> str:
    """Trim and make sure the slug starts with a single leading slash."""
    if slug is None:
        raise ValidationError("Slug is required")

    slug = str(slug).strip()
    if not slug.startswith("/"):
        slug = "/" + slug
    return slug


def validate_slug(slug: str) -> str:
    """
    Normalize and validate a page slug.

    Rules:
    - leading slash is added when missing
    - lowercase letters, digits, hyphens and slashes only
    - no double slashes
    - trailing slash stripped (except for the root slug)
    """
    slug = normalize_slug(slug)

    if not SLUG_PATTERN.match(slug):
        raise ValidationError(
            "Slug can only contain lowercase letters, numbers, hyphens, and slashes"
        )

    if "//" in slug:
        raise ValidationError("Slug cannot contain double slashes")

    if len(slug) > 1 and slug.endswith("/"):
        slug = slug[:-1]

    return slug


def assert_page_fields(data: Dict[str, Any]) -> None:
    if not data.get("page_name") or not data.get("slug"):
        raise ValidationError("Both page_name and slug are required")


def default_seo_index(page_type: str) -> bool:
    # Legal pages stay out of search indexes unless asked otherwise
    return page_type != LEGAL_PAGE_TYPE


def coerce_review_date(value: Any):
    """Accept a date, a datetime or a parseable date string for ``last_reviewed_date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse(str(value)).date()
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid last_reviewed_date: {value!r}") from exc
