from typing import Any, Optional
from sitecms.extensions import db
from sitecms.models.page_layout import PageLayout
from sitecms.domain.tenancy import assert_writable
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .get_pages import find_page


def delete_page(
    *,
    tenant_id: Optional[str],
    page_id: Any,
    actor_id: Optional[str] = None,
) -> None:
    """
    Hard-delete a tenant page together with every layout (all languages).

    Notes:
    - Master pages are never deleted on behalf of a tenant
    - Layouts → Page (bottom-up); the FK also cascades at the database level
    """

    page = find_page(page_id=page_id, tenant_id=tenant_id)
    assert_writable(page, tenant_id)

    deleted_id = page.id
    slug = page.slug

    with transactional():
        removed = PageLayout.query.filter_by(
            page_id=page.id,
        ).delete(synchronize_session=False)

        db.session.delete(page)

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=deleted_id,
            tenant_id=tenant_id,
            actor_id=actor_id,
            payload={
                "slug": slug,
                "layouts_removed": removed,
            },
        )
