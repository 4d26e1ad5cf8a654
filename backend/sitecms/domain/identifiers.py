import re
from typing import Any

from .exceptions import ValidationError

SYNTHETIC_PAGE_ID_PREFIX = "theme-"
_NUMERIC_ID = re.compile(r"^\s*\d+\s*$")


def is_synthetic_page_id(value: Any) -> bool:
    """Filesystem-sourced pages carry ids like ``theme-<slug>-<pageSlug>``."""
    return isinstance(value, str) and value.startswith(SYNTHETIC_PAGE_ID_PREFIX)


def normalize_page_id(value: Any) -> int:
    """
    Map an external page identifier onto the integer primary key.

    Page ids reach the API as ints (JSON bodies) or numeric strings (URLs,
    query params). Everything else is rejected here, once, so the storage
    layer only ever sees one representation.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid page id: {value!r}")

    if isinstance(value, int):
        page_id = value
    elif isinstance(value, str) and _NUMERIC_ID.match(value):
        page_id = int(value.strip())
    else:
        raise ValidationError(f"Invalid page id: {value!r}")

    if page_id <= 0:
        raise ValidationError(f"Invalid page id: {value!r}")

    return page_id
