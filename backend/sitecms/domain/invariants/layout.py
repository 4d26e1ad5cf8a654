import json
import re
from typing import Any, Dict

from ..exceptions import ValidationError

DEFAULT_LANGUAGE = "default"


def empty_layout() -> Dict[str, Any]:
    return {"components": []}


def normalize_layout_json(layout: Any) -> Dict[str, Any]:
    """
    Coerce an incoming layout payload into ``{"components": [...]}``.

    Accepted shapes:
    - a dict with a ``components`` list (other top-level keys are kept)
    - a bare list of components
    - a JSON string encoding either of the above
    """
    if isinstance(layout, str):
        try:
            layout = json.loads(layout)
        except ValueError as exc:
            raise ValidationError("layout_json is not valid JSON") from exc

    if isinstance(layout, list):
        layout = {"components": layout}

    if not isinstance(layout, dict):
        raise ValidationError("layout_json must be an object with a components list")

    components = layout.get("components", [])
    if components is None:
        components = []
    if not isinstance(components, list):
        raise ValidationError("layout_json.components must be a list")

    for component in components:
        if not isinstance(component, dict):
            raise ValidationError("Every layout component must be an object")

    normalized = dict(layout)
    normalized["components"] = components
    return normalized


LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})?$")


def normalize_language_code(code: Any) -> str:
    """Validate a language code such as ``en``, ``fr`` or ``zh-CN``."""
    if not isinstance(code, str) or not LANGUAGE_CODE_PATTERN.match(code.strip()):
        raise ValidationError(f"Invalid language code: {code!r}")
    return code.strip()


def normalize_layout_language(language: Any) -> str:
    """Layout languages are a language code or the literal ``default``."""
    if language is None or (isinstance(language, str) and not language.strip()):
        return DEFAULT_LANGUAGE
    if isinstance(language, str) and language.strip() == DEFAULT_LANGUAGE:
        return DEFAULT_LANGUAGE
    return normalize_language_code(language)
