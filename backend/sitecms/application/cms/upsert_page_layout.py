"""
Versioned write of a page layout.

One ``(page_id, language)`` pair maps to exactly one row. The write is a
single ``INSERT ... ON CONFLICT DO UPDATE`` statement, so racing writers to a
new pair never produce two rows: the loser turns into an update and the row
ends at version 2.
"""
import logging
from typing import Any, Dict, Optional

from sitecms.extensions import db
from sitecms.models.base import utcnow
from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.domain.exceptions import NotFoundError, ValidationError
from sitecms.domain.identifiers import is_synthetic_page_id, normalize_page_id
from sitecms.domain.invariants.layout import (
    DEFAULT_LANGUAGE,
    normalize_layout_json,
    normalize_layout_language,
)
from sitecms.domain.tenancy import assert_writable
from sitecms.utils.db import with_db_retry
from sitecms.utils.transaction import transactional
from sitecms.utils.upsert import dialect_insert

logger = logging.getLogger(__name__)


def _boundary_page_id(page_id: Any) -> int:
    if is_synthetic_page_id(page_id):
        raise ValidationError(
            "Theme pages live on disk and must be synced before their layout can be saved"
        )
    return normalize_page_id(page_id)


@with_db_retry
def _write_layout(page_id: int, language: str, layout: Dict[str, Any]):
    now = utcnow()
    stmt = dialect_insert(PageLayout).values(
        page_id=page_id,
        language=language,
        layout_json=layout,
        version=1,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PageLayout.page_id, PageLayout.language],
        set_={
            "layout_json": stmt.excluded.layout_json,
            "version": PageLayout.version + 1,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(PageLayout.version, PageLayout.updated_at)

    with transactional():
        return db.session.execute(stmt).one()


def upsert_page_layout(
    *,
    page_id: Any,
    layout_json: Any,
    tenant_id: Optional[str] = None,
    language: Optional[str] = DEFAULT_LANGUAGE,
    translate: bool = True,
) -> Dict[str, Any]:
    """
    Create or update the layout of a page in one language.

    Args:
        page_id: Page id as int or numeric string
        layout_json: Layout document, a bare component list, or its JSON text
        tenant_id: Writing tenant, required; master pages are rejected
        language: Language code or ``"default"``
        translate: Schedule translation into the tenant's other languages
            when this write targets its default language

    Returns:
        dict: ``{page_id, language, version, updated_at}``

    Raises:
        ValidationError: Bad id, synthetic theme id, bad layout or language
        NotFoundError: Page missing or owned by another tenant
        ForbiddenMasterWriteError: Page is a master page, or no tenant given
    """
    pid = _boundary_page_id(page_id)
    layout = normalize_layout_json(layout_json)
    language = normalize_layout_language(language)

    page = db.session.get(Page, pid)
    if page is None:
        raise NotFoundError(f"Page {pid} not found")
    assert_writable(page, tenant_id)

    row = _write_layout(pid, language, layout)

    logger.info(
        "Saved layout for page %s (%s) at version %s",
        pid,
        language,
        row.version,
        extra={"tenant_id": tenant_id},
    )

    if translate:
        _schedule_translation(pid, layout, tenant_id, language)

    return {
        "page_id": pid,
        "language": language,
        "version": row.version,
        "updated_at": row.updated_at.isoformat() if row.updated_at else None,
    }


def save_master_layout(
    *,
    page_id: Any,
    layout_json: Any,
    language: Optional[str] = DEFAULT_LANGUAGE,
) -> Dict[str, Any]:
    """
    Seed or replace the layout of a master page.

    Operator-only path (`flask cms set-master-layout`); tenant requests never
    reach it.
    Same versioning as :func:`upsert_page_layout`, no translation.
    """
    pid = _boundary_page_id(page_id)
    layout = normalize_layout_json(layout_json)
    language = normalize_layout_language(language)

    page = db.session.get(Page, pid)
    if page is None:
        raise NotFoundError(f"Page {pid} not found")
    if page.tenant_id is not None:
        raise ValidationError(f"Page {pid} belongs to tenant {page.tenant_id}, not to the master set")

    row = _write_layout(pid, language, layout)
    logger.info("Saved master layout for page %s (%s) at version %s", pid, language, row.version)

    return {
        "page_id": pid,
        "language": language,
        "version": row.version,
        "updated_at": row.updated_at.isoformat() if row.updated_at else None,
    }


def _schedule_translation(page_id: int, layout: Dict[str, Any], tenant_id: str, language: str) -> None:
    from sitecms.application.settings.languages import is_default_language
    from sitecms.tasks.translation_tasks import enqueue_layout_translation

    try:
        if not is_default_language(tenant_id=tenant_id, language=language):
            return
        job = enqueue_layout_translation(
            page_id=page_id,
            layout_json=layout,
            tenant_id=tenant_id,
            source_language=language,
        )
        logger.info("Queued translation job %s for page %s", job.id, page_id)
    except Exception:
        logger.exception("Could not queue translation for page %s", page_id)
