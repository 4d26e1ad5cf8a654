"""
Locate the human-readable text inside a layout document.

A layout is an arbitrary JSON tree (``{"components": [{"id", "type",
"props"}]}``) whose component props are not typed. Translatable strings are
found heuristically: structural/identifier fields are skipped by name, and
string values that look like URLs, paths or identifiers are left alone.

Paths use the ``components[2].props.heading`` notation.
"""
import re
from typing import Any, Dict, Optional

SKIP_FIELDS = frozenset(
    name.lower()
    for name in (
        "id", "src", "link", "url", "image", "images", "avatar", "logo",
        "phoneNumber", "email", "date", "rating", "version", "sort_order",
        "level", "required", "value", "type", "key",
    )
)

_IDENTIFIER = re.compile(r"^[a-zA-Z0-9_-]+$")


def _is_capitalized_word(text: str) -> bool:
    return text[:1].isupper() and len(text) > 1 and text[1:].islower()


def is_translatable(value: Any) -> bool:
    if not isinstance(value, str):
        return False

    text = value.strip()
    if not text:
        return False

    if text.startswith("http") or text.startswith("/"):
        return False

    # A bare token is an identifier ("hero", "btn_primary", "col-6"), except
    # a single capitalized word, which is prose ("Welcome")
    if _IDENTIFIER.match(text) and not _is_capitalized_word(text):
        return False

    return True


def _join(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _walk(node: Any, path: str, found: Dict[str, str]) -> None:
    if isinstance(node, dict):
        for key, child in node.items():
            if str(key).lower() in SKIP_FIELDS:
                continue
            _walk(child, _join(path, str(key)), found)
    elif isinstance(node, list):
        for index, child in enumerate(node):
            _walk(child, f"{path}[{index}]", found)
    elif is_translatable(node):
        found[path] = node


def extract_translatable_text(tree: Any) -> Dict[str, str]:
    """Return ``{path: original text}`` for every translatable leaf."""
    found: Dict[str, str] = {}
    _walk(tree, "", found)
    return found


def _rebuild(node: Any, path: str, translations: Dict[str, str], skipped: bool) -> Any:
    if isinstance(node, dict):
        return {
            key: _rebuild(
                child,
                _join(path, str(key)),
                translations,
                skipped or str(key).lower() in SKIP_FIELDS,
            )
            for key, child in node.items()
        }
    if isinstance(node, list):
        return [
            _rebuild(child, f"{path}[{index}]", translations, skipped)
            for index, child in enumerate(node)
        ]
    if not skipped and isinstance(node, str) and path in translations:
        return translations[path]
    return node


def reinject_translations(tree: Any, translations: Optional[Dict[str, str]]) -> Any:
    """
    Rebuild ``tree`` with translated strings at the recorded paths.

    The result has the same keys and list lengths as ``tree``; leaves with
    no translation keep their original value.
    """
    return _rebuild(tree, "", translations or {}, False)
