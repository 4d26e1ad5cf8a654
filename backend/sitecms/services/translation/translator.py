"""
Layout translation: text extraction, per-text translation and reinjection.

A failure anywhere below the layout level (one chunk, one text) degrades to
the original text rather than failing the whole layout.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Tuple

from sitecms.domain.exceptions import TranslationApiError
from .chunking import split_text_into_chunks
from .client import TranslationClient
from .config import TranslationConfig
from .extraction import extract_translatable_text, reinject_translations
from .html import contains_html, translate_html

logger = logging.getLogger(__name__)


class LayoutTranslator:
    def __init__(
        self,
        client: TranslationClient,
        config: Optional[TranslationConfig] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.config = config or client.config
        self._sleep = sleep

    def close(self) -> None:
        self.client.close()

    # -------------------------------------------------
    # Single text
    # -------------------------------------------------
    def translate_text(self, text: str, target: str, source: Optional[str] = None) -> str:
        if contains_html(text):
            return translate_html(text, lambda segment: self._translate_plain(segment, target, source))
        return self._translate_plain(text, target, source)

    def _translate_plain(self, text: str, target: str, source: Optional[str]) -> str:
        chunks = split_text_into_chunks(text, self.config.max_chunk_bytes)
        translated = []

        for index, chunk in enumerate(chunks):
            try:
                translated.append(self.client.translate(chunk, target, source))
            except TranslationApiError as exc:
                logger.warning(
                    "Keeping original text for chunk %s/%s (%s): %s",
                    index + 1,
                    len(chunks),
                    target,
                    exc,
                )
                translated.append(chunk)

        return translated[0] if len(translated) == 1 else " ".join(translated)

    # -------------------------------------------------
    # Whole layout
    # -------------------------------------------------
    def translate_layout(
        self,
        layout_json: Any,
        target: str,
        source: Optional[str] = None,
    ) -> Tuple[Any, Dict[str, int]]:
        """
        Translate every translatable leaf of ``layout_json`` into ``target``.

        Texts are sent in batches of ``batch_size`` running side by side; each
        one settles on its own, so a failure never cancels its siblings.

        Returns the rebuilt layout and ``{"texts", "translated", "failed"}``.
        """
        texts = extract_translatable_text(layout_json)
        items: List[Tuple[str, str]] = list(texts.items())
        translations: Dict[str, str] = {}
        failed = 0

        if not items:
            return reinject_translations(layout_json, {}), {"texts": 0, "translated": 0, "failed": 0}

        batch_size = self.config.batch_size
        with ThreadPoolExecutor(max_workers=batch_size, thread_name_prefix="sitecms-translate") as pool:
            for start in range(0, len(items), batch_size):
                batch = items[start:start + batch_size]
                futures = [
                    (path, original, pool.submit(self.translate_text, original, target, source))
                    for path, original in batch
                ]

                for path, original, future in futures:
                    try:
                        translations[path] = future.result()
                    except Exception:
                        logger.exception("Translation of %s into %s failed", path, target)
                        translations[path] = original
                        failed += 1

                if start + batch_size < len(items) and self.config.batch_delay > 0:
                    self._sleep(self.config.batch_delay)

        stats = {"texts": len(items), "translated": len(items) - failed, "failed": failed}
        return reinject_translations(layout_json, translations), stats


def build_translator(
    config: TranslationConfig,
    *,
    transport=None,
) -> LayoutTranslator:
    return LayoutTranslator(TranslationClient(config, transport=transport), config)
