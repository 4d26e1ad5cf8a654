from typing import Set

from ..exceptions import ValidationError

PAGE_STATUSES = ("draft", "published")

# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: dict[str, Set[str]] = {
    "draft": {"draft", "published"},
    "published": {"published", "draft"},
}


def assert_page_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for status changes.
    """
    if to_status not in PAGE_STATUSES:
        raise ValidationError(f"Unknown page status: {to_status}")

    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_status or "draft", set())

    if to_status not in allowed:
        raise ValidationError(
            f"Illegal page transition: {from_status} → {to_status}"
        )
