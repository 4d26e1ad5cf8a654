"""Celery tasks for layout translation."""
import logging
from typing import Any, List, Optional

from celery import shared_task
from celery.result import AsyncResult

from sitecms.application.translation.translate_layout import translate_layout_to_all_languages

logger = logging.getLogger(__name__)

TRANSLATION_JOB_NAME = "sitecms.translation.translate_layout"


@shared_task(name=TRANSLATION_JOB_NAME)
def translate_layout_task(
    *,
    page_id: int,
    layout_json: Any,
    tenant_id: str,
    source_language: Optional[str] = None,
    languages: Optional[List[str]] = None,
) -> dict:
    results = translate_layout_to_all_languages(
        page_id=page_id,
        layout_json=layout_json,
        tenant_id=tenant_id,
        source_language=source_language,
        languages=languages,
    )
    return {"tenant_id": tenant_id, "page_id": page_id, "languages": results}


def enqueue_layout_translation(
    *,
    page_id: int,
    layout_json: Any,
    tenant_id: str,
    source_language: Optional[str] = None,
    languages: Optional[List[str]] = None,
) -> AsyncResult:
    """Schedule :func:`translate_layout_task`; the result id is the job id."""
    return translate_layout_task.apply_async(kwargs={
        "page_id": page_id,
        "layout_json": layout_json,
        "tenant_id": tenant_id,
        "source_language": source_language,
        "languages": languages,
    })
