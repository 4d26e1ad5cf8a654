"""Celery tasks for promoting filesystem theme pages."""
from celery import shared_task
from celery.result import AsyncResult

from sitecms.application.themes.sync_theme_pages import ensure_demo_tenant_has_theme_pages

THEME_SYNC_JOB_NAME = "sitecms.themes.sync_demo_pages"


@shared_task(name=THEME_SYNC_JOB_NAME)
def sync_demo_theme_pages_task(*, theme_slug: str, tenant_id: str) -> dict:
    result = ensure_demo_tenant_has_theme_pages(theme_slug=theme_slug, tenant_id=tenant_id)
    return {"tenant_id": tenant_id, "theme_slug": theme_slug, **result}


def schedule_demo_theme_sync(*, theme_slug: str, tenant_id: str) -> AsyncResult:
    return sync_demo_theme_pages_task.apply_async(
        kwargs={"theme_slug": theme_slug, "tenant_id": tenant_id}
    )
