"""
Per-tenant language configuration.

Stored as two site settings:

- ``site_language``: the default language code
- ``site_content_languages``: comma-separated list of every configured
  language, default included

Layouts written in the default language are the translation source for all
other configured languages.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.domain.exceptions import ConflictError, NotFoundError, ValidationError
from sitecms.domain.invariants.layout import DEFAULT_LANGUAGE, normalize_language_code
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from sitecms.application.cms.delete_layouts import delete_layouts_for_language
from .site_settings import get_setting, set_setting

logger = logging.getLogger(__name__)

SITE_LANGUAGE_KEY = "site_language"
CONTENT_LANGUAGES_KEY = "site_content_languages"
FALLBACK_LANGUAGE = "en"


def parse_language_list(value: Optional[str]) -> List[str]:
    """``"en, fr,,de"`` -> ``["en", "fr", "de"]`` (order kept, duplicates dropped)."""
    languages: List[str] = []
    for part in (value or "").split(","):
        code = part.strip()
        if code and code not in languages:
            languages.append(code)
    return languages


def format_language_list(languages: Iterable[str]) -> str:
    return ",".join(languages)


def get_default_language(*, tenant_id: Optional[str]) -> str:
    return (get_setting(key=SITE_LANGUAGE_KEY, tenant_id=tenant_id) or "").strip() or FALLBACK_LANGUAGE


def get_content_languages(*, tenant_id: Optional[str]) -> List[str]:
    return parse_language_list(get_setting(key=CONTENT_LANGUAGES_KEY, tenant_id=tenant_id))


def get_target_languages(*, tenant_id: Optional[str]) -> List[str]:
    """Configured languages minus the default one (and the literal ``default``)."""
    default = get_default_language(tenant_id=tenant_id)
    return [
        code
        for code in get_content_languages(tenant_id=tenant_id)
        if code != default and code != DEFAULT_LANGUAGE
    ]


def get_language_configuration(*, tenant_id: Optional[str]) -> Dict[str, Any]:
    default = get_default_language(tenant_id=tenant_id)
    languages = get_content_languages(tenant_id=tenant_id)
    return {
        "default_language": default,
        "languages": languages,
        "target_languages": [c for c in languages if c != default and c != DEFAULT_LANGUAGE],
    }


def is_default_language(*, tenant_id: Optional[str], language: str) -> bool:
    return language == DEFAULT_LANGUAGE or language == get_default_language(tenant_id=tenant_id)


def _source_layouts(tenant_id: str, default_language: str) -> List[PageLayout]:
    """Default-language layout of every tenant page (``default`` row preferred)."""
    rows = (
        PageLayout.query.join(Page, Page.id == PageLayout.page_id)
        .filter(
            Page.tenant_id == tenant_id,
            PageLayout.language.in_([DEFAULT_LANGUAGE, default_language]),
        )
        .order_by(PageLayout.page_id)
        .all()
    )

    by_page: Dict[int, PageLayout] = {}
    for row in rows:
        current = by_page.get(row.page_id)
        if current is None or row.language == DEFAULT_LANGUAGE:
            by_page[row.page_id] = row
    return list(by_page.values())


def add_language(
    *,
    tenant_id: str,
    code: str,
    actor_id: Optional[str] = None,
    translate: bool = True,
) -> Dict[str, Any]:
    """
    Add a content language and schedule translation of every tenant page
    into it.
    """
    from sitecms.tasks.translation_tasks import enqueue_layout_translation

    code = normalize_language_code(code)
    default = get_default_language(tenant_id=tenant_id)
    languages = get_content_languages(tenant_id=tenant_id)

    if code == default:
        raise ConflictError(f"{code} is already the default language")
    if code in languages:
        raise ConflictError(f"Language {code} is already configured")

    if default not in languages:
        languages.insert(0, default)
    languages.append(code)

    with transactional():
        set_setting(
            key=CONTENT_LANGUAGES_KEY,
            value=format_language_list(languages),
            tenant_id=tenant_id,
            category="language",
        )
        log_action(
            action="language.add",
            entity_type="language",
            entity_id=code,
            tenant_id=tenant_id,
            actor_id=actor_id,
            payload={"languages": languages},
        )

    jobs = []
    if translate:
        for layout in _source_layouts(tenant_id, default):
            try:
                job = enqueue_layout_translation(
                    page_id=layout.page_id,
                    layout_json=layout.layout_json,
                    tenant_id=tenant_id,
                    source_language=layout.language,
                    languages=[code],
                )
                jobs.append(job.id)
            except Exception:
                logger.exception("Could not queue %s translation for page %s", code, layout.page_id)

    config = get_language_configuration(tenant_id=tenant_id)
    config["translation_jobs"] = jobs
    return config


def remove_language(
    *,
    tenant_id: str,
    code: str,
    actor_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Remove a content language together with its translated layouts."""
    code = normalize_language_code(code)
    default = get_default_language(tenant_id=tenant_id)
    languages = get_content_languages(tenant_id=tenant_id)

    if code == default:
        raise ValidationError("The default language cannot be removed")
    if code not in languages:
        raise NotFoundError(f"Language {code} is not configured")

    languages.remove(code)

    with transactional():
        set_setting(
            key=CONTENT_LANGUAGES_KEY,
            value=format_language_list(languages),
            tenant_id=tenant_id,
            category="language",
        )
        removed = delete_layouts_for_language(tenant_id=tenant_id, language=code)
        log_action(
            action="language.remove",
            entity_type="language",
            entity_id=code,
            tenant_id=tenant_id,
            actor_id=actor_id,
            payload={"languages": languages, "layouts_removed": removed},
        )

    config = get_language_configuration(tenant_id=tenant_id)
    config["layouts_removed"] = removed
    return config


def set_default_language(
    *,
    tenant_id: str,
    code: str,
    actor_id: Optional[str] = None,
) -> Dict[str, Any]:
    code = normalize_language_code(code)
    languages = get_content_languages(tenant_id=tenant_id)
    if code not in languages:
        languages.insert(0, code)

    with transactional():
        set_setting(key=SITE_LANGUAGE_KEY, value=code, tenant_id=tenant_id, category="language")
        set_setting(
            key=CONTENT_LANGUAGES_KEY,
            value=format_language_list(languages),
            tenant_id=tenant_id,
            category="language",
        )
        log_action(
            action="language.set_default",
            entity_type="language",
            entity_id=code,
            tenant_id=tenant_id,
            actor_id=actor_id,
            payload={"languages": languages},
        )

    return get_language_configuration(tenant_id=tenant_id)
