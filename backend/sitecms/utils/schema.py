"""
Repair routine for the ``(page_id, language)`` uniqueness of page layouts.

The layout upsert relies on ``ON CONFLICT (page_id, language)``, which needs
a unique constraint (or unique index) on those columns. Databases built by
the migrations already have it; databases created by hand or restored from
old dumps may not, and may even contain duplicate rows. This module is run
from the migration and from ``flask cms repair-layouts``, never from the
request path.
"""
import logging
from typing import Dict

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, ProgrammingError

from sitecms.domain.exceptions import SchemaDriftError
from sitecms.models.page_layout import LAYOUT_UNIQUE_CONSTRAINT

logger = logging.getLogger(__name__)

LAYOUTS_TABLE = "page_layouts"
KEY_COLUMNS = {"page_id", "language"}

DEDUPLICATE_LAYOUTS_SQL = text(
    """
    DELETE FROM page_layouts
    WHERE id IN (
        SELECT id FROM (
            SELECT id,
                   ROW_NUMBER() OVER (
                       PARTITION BY page_id, language
                       ORDER BY updated_at DESC, id DESC
                   ) AS rn
            FROM page_layouts
        ) ranked
        WHERE ranked.rn > 1
    )
    """
)


def layout_constraint_exists(connection: Connection) -> bool:
    inspector = inspect(connection)

    if not inspector.has_table(LAYOUTS_TABLE):
        raise SchemaDriftError(f"Table {LAYOUTS_TABLE} does not exist")

    columns = {column["name"] for column in inspector.get_columns(LAYOUTS_TABLE)}
    missing = KEY_COLUMNS - columns
    if missing:
        raise SchemaDriftError(
            f"Table {LAYOUTS_TABLE} is missing column(s): {', '.join(sorted(missing))}"
        )

    for constraint in inspector.get_unique_constraints(LAYOUTS_TABLE):
        if set(constraint["column_names"]) == KEY_COLUMNS:
            return True

    for index in inspector.get_indexes(LAYOUTS_TABLE):
        if index.get("unique") and set(index["column_names"]) == KEY_COLUMNS:
            return True

    return False


def _add_constraint(connection: Connection) -> None:
    if connection.dialect.name == "postgresql":
        connection.execute(text(
            f"ALTER TABLE {LAYOUTS_TABLE} "
            f"ADD CONSTRAINT {LAYOUT_UNIQUE_CONSTRAINT} UNIQUE (page_id, language)"
        ))
    else:
        # SQLite cannot add constraints to an existing table
        connection.execute(text(
            f"CREATE UNIQUE INDEX {LAYOUT_UNIQUE_CONSTRAINT} "
            f"ON {LAYOUTS_TABLE} (page_id, language)"
        ))


def deduplicate_layouts(connection: Connection) -> int:
    """Keep the most recently updated row per (page_id, language)."""
    result = connection.execute(DEDUPLICATE_LAYOUTS_SQL)
    return result.rowcount or 0


def ensure_composite_unique_constraint(engine: Engine) -> Dict[str, int | bool]:
    """
    Make sure ``page_layouts`` is unique on ``(page_id, language)``.

    Steps:
    1. no-op when the constraint (or an equivalent unique index) exists
    2. try to add it
    3. if existing duplicates block it, delete all but the newest row of
       each pair and add it again
    """
    with engine.connect() as connection:
        if layout_constraint_exists(connection):
            return {"created": False, "removed_duplicates": 0}

    try:
        with engine.begin() as connection:
            _add_constraint(connection)
        logger.info("Added unique constraint %s", LAYOUT_UNIQUE_CONSTRAINT)
        return {"created": True, "removed_duplicates": 0}
    except IntegrityError:
        logger.warning(
            "Duplicate page layouts block %s, cleaning up before retrying",
            LAYOUT_UNIQUE_CONSTRAINT,
        )
    except ProgrammingError:
        # Another process may have added it in the meantime
        with engine.connect() as connection:
            if layout_constraint_exists(connection):
                return {"created": False, "removed_duplicates": 0}
        raise

    with engine.begin() as connection:
        removed = deduplicate_layouts(connection)
        _add_constraint(connection)

    logger.info(
        "Removed %s duplicate page layout(s) and added %s",
        removed,
        LAYOUT_UNIQUE_CONSTRAINT,
    )
    return {"created": True, "removed_duplicates": removed}


def repair_layout_uniqueness(connection: Connection) -> Dict[str, int | bool]:
    """
    Single-connection variant for migrations, which already run inside a
    transaction: duplicates are removed up front instead of on failure.
    """
    if layout_constraint_exists(connection):
        return {"created": False, "removed_duplicates": 0}

    removed = deduplicate_layouts(connection)
    _add_constraint(connection)
    logger.info(
        "Removed %s duplicate page layout(s) and added %s",
        removed,
        LAYOUT_UNIQUE_CONSTRAINT,
    )
    return {"created": True, "removed_duplicates": removed}
