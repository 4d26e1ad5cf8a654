from typing import Optional
from sqlalchemy import select
from sitecms.models.page import Page
from sitecms.models.page_layout import PageLayout
from sitecms.domain.exceptions import ForbiddenMasterWriteError, ValidationError
from sitecms.domain.invariants.layout import DEFAULT_LANGUAGE, normalize_language_code


def delete_layouts_for_language(*, tenant_id: Optional[str], language: str) -> int:
    """
    Remove the translated layouts of every tenant page in ``language``.

    The caller owns the transaction. Master pages are untouched.
    """
    if tenant_id is None:
        raise ForbiddenMasterWriteError()

    if language == DEFAULT_LANGUAGE:
        raise ValidationError("Default layouts cannot be removed by language")
    language = normalize_language_code(language)

    tenant_pages = select(Page.id).where(Page.tenant_id == tenant_id)

    return PageLayout.query.filter(
        PageLayout.language == language,
        PageLayout.page_id.in_(tenant_pages),
    ).delete(synchronize_session=False)
