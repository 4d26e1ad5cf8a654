"""
Background propagation of a default-language layout into every other
configured language of a tenant.

Runs as a Celery task (see ``sitecms.tasks.translation_tasks``), detached
from the request that saved the layout.
Nothing in here raises: every per-language failure is logged and that
language is skipped.
"""
import logging
from typing import Any, Dict, List, Optional

from flask import current_app

from sitecms.domain.invariants.layout import DEFAULT_LANGUAGE
from sitecms.services.translation.config import TranslationConfig
from sitecms.services.translation.translator import LayoutTranslator, build_translator as _build
from sitecms.application.cms.upsert_page_layout import upsert_page_layout
from sitecms.application.settings.languages import get_default_language, get_target_languages

logger = logging.getLogger(__name__)


def build_translator() -> LayoutTranslator:
    config = TranslationConfig.from_mapping(current_app.config)
    return _build(config, transport=current_app.config.get("TRANSLATION_HTTP_TRANSPORT"))


def translate_layout_to_all_languages(
    *,
    page_id: int,
    layout_json: Any,
    tenant_id: str,
    source_language: Optional[str] = None,
    languages: Optional[List[str]] = None,
    translator: Optional[LayoutTranslator] = None,
) -> Dict[str, Optional[int]]:
    """
    Translate ``layout_json`` into each target language and store the result.

    Languages are processed one after the other. Translated layouts are
    written with ``translate=False`` so they never schedule translations of
    their own.

    Returns:
        dict: ``{language: stored version}``, ``None`` for a failed language
    """
    default = get_default_language(tenant_id=tenant_id)
    if languages is None:
        languages = get_target_languages(tenant_id=tenant_id)
    targets = [code for code in languages if code not in (default, DEFAULT_LANGUAGE)]

    if not targets:
        logger.info("No target languages for tenant %s, nothing to translate", tenant_id)
        return {}

    source = None if source_language in (None, DEFAULT_LANGUAGE) else source_language
    owns_translator = translator is None
    translator = translator or build_translator()

    results: Dict[str, Optional[int]] = {}
    try:
        for target in targets:
            try:
                translated, stats = translator.translate_layout(layout_json, target, source)
                stored = upsert_page_layout(
                    page_id=page_id,
                    layout_json=translated,
                    tenant_id=tenant_id,
                    language=target,
                    translate=False,
                )
            except Exception:
                logger.exception(
                    "Translating page %s into %s failed",
                    page_id,
                    target,
                    extra={"tenant_id": tenant_id},
                )
                results[target] = None
                continue

            results[target] = stored["version"]
            logger.info(
                "Translated page %s into %s (%s/%s texts) at version %s",
                page_id,
                target,
                stats["translated"],
                stats["texts"],
                stored["version"],
            )
    finally:
        if owns_translator:
            translator.close()

    return results

