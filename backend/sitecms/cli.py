import json

import click
from flask import current_app
from flask.cli import AppGroup

from sitecms.extensions import db
from sitecms.utils.schema import ensure_composite_unique_constraint
from sitecms.application.cms.upsert_page_layout import save_master_layout
from sitecms.application.themes.sync_theme_pages import sync_theme_pages
from sitecms.services.themes.filesystem import get_themes_from_filesystem

cms_cli = AppGroup("cms", help="Site CMS maintenance commands.")


@cms_cli.command("repair-layouts")
def repair_layouts():
    """Ensure page_layouts is unique on (page_id, language)."""
    result = ensure_composite_unique_constraint(db.engine)
    if result["created"]:
        click.echo(
            f"Unique constraint added ({result['removed_duplicates']} duplicate row(s) removed)"
        )
    else:
        click.echo("Unique constraint already present")


@cms_cli.command("list-themes")
def list_themes():
    """List the themes found in THEMES_DIR."""
    themes = get_themes_from_filesystem()
    if not themes:
        click.echo(f"No themes in {current_app.config['THEMES_DIR']}")
    for theme in themes:
        click.echo(f"{theme['slug']}\t{theme['name']}")


@cms_cli.command("sync-theme")
@click.argument("theme_slug")
@click.option("--tenant", "tenant_id", default=None, help="Tenant id (master pages when omitted).")
def sync_theme(theme_slug, tenant_id):
    """Insert the pages of THEME_SLUG that are missing from the database."""
    result = sync_theme_pages(theme_slug=theme_slug, tenant_id=tenant_id)
    click.echo(
        f"success={result['success']} synced={result['synced']} skipped={result['skipped']}"
    )


@cms_cli.command("set-master-layout")
@click.argument("page_id", type=int)
@click.argument("layout_file", type=click.File("r", encoding="utf-8"))
@click.option("--language", default="default", show_default=True)
def set_master_layout(page_id, layout_file, language):
    """Store LAYOUT_FILE (JSON) as the layout of master page PAGE_ID."""
    result = save_master_layout(
        page_id=page_id,
        layout_json=json.load(layout_file),
        language=language,
    )
    click.echo(f"page={result['page_id']} language={result['language']} version={result['version']}")
