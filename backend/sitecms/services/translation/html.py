import re
from typing import Callable, List, Tuple

_TAG = re.compile(r"(<[^>]+>)")
_HTML = re.compile(r"<[a-zA-Z/!][^>]*>")
_RAW_TEXT_OPEN = re.compile(r"^<\s*(script|style)\b", re.IGNORECASE)
_RAW_TEXT_CLOSE = re.compile(r"^<\s*/\s*(script|style)\s*>", re.IGNORECASE)

TAG = "tag"
TEXT = "text"


def contains_html(text: str) -> bool:
    return bool(_HTML.search(text or ""))


def split_html_segments(text: str) -> List[Tuple[str, str]]:
    """
    Split markup into ``("tag", ...)`` and ``("text", ...)`` segments.

    Joining the segment values gives back the input unchanged.
    """
    segments = []
    for part in _TAG.split(text):
        if not part:
            continue
        kind = TAG if _TAG.fullmatch(part) else TEXT
        segments.append((kind, part))
    return segments


def translate_html(text: str, translate: Callable[[str], str]) -> str:
    """
    Translate only the human-readable text nodes of an HTML fragment.

    Tags are emitted verbatim, whitespace around each text node is kept,
    and the content of ``<script>``/``<style>`` elements is never sent out.
    """
    output = []
    raw_depth = 0

    for kind, value in split_html_segments(text):
        if kind == TAG:
            if _RAW_TEXT_OPEN.match(value) and not value.rstrip().endswith("/>"):
                raw_depth += 1
            elif _RAW_TEXT_CLOSE.match(value) and raw_depth:
                raw_depth -= 1
            output.append(value)
            continue

        core = value.strip()
        if raw_depth or not core:
            output.append(value)
            continue

        leading = value[: len(value) - len(value.lstrip())]
        trailing = value[len(value.rstrip()):]
        output.append(f"{leading}{translate(core)}{trailing}")

    return "".join(output)
