import pytest
from sqlalchemy import create_engine, text

from sitecms.extensions import db
from sitecms.domain.exceptions import SchemaDriftError
from sitecms.utils.schema import (
    ensure_composite_unique_constraint,
    layout_constraint_exists,
    repair_layout_uniqueness,
)

CREATE_UNCONSTRAINED_LAYOUTS = """
    CREATE TABLE page_layouts (
        id INTEGER PRIMARY KEY,
        page_id INTEGER NOT NULL,
        language VARCHAR(50) NOT NULL DEFAULT 'default',
        layout_json TEXT NOT NULL,
        version INTEGER NOT NULL DEFAULT 1,
        updated_at VARCHAR(40)
    )
"""


@pytest.fixture
def legacy_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with engine.begin() as connection:
        connection.execute(text(CREATE_UNCONSTRAINED_LAYOUTS))
    yield engine
    engine.dispose()


def _insert(engine, rows):
    with engine.begin() as connection:
        connection.execute(
            text(
                "INSERT INTO page_layouts (id, page_id, language, layout_json, version, updated_at) "
                "VALUES (:id, :page_id, :language, :layout_json, :version, :updated_at)"
            ),
            rows,
        )


def test_constraint_already_present_is_a_no_op(app):
    assert ensure_composite_unique_constraint(db.engine) == {
        "created": False,
        "removed_duplicates": 0,
    }


def test_constraint_is_added_when_missing(legacy_engine):
    _insert(legacy_engine, [
        {"id": 1, "page_id": 1, "language": "default", "layout_json": "{}", "version": 1, "updated_at": "2025-01-01"},
        {"id": 2, "page_id": 1, "language": "fr", "layout_json": "{}", "version": 1, "updated_at": "2025-01-01"},
    ])

    result = ensure_composite_unique_constraint(legacy_engine)

    assert result == {"created": True, "removed_duplicates": 0}
    with legacy_engine.connect() as connection:
        assert layout_constraint_exists(connection)

    assert ensure_composite_unique_constraint(legacy_engine)["created"] is False


def test_duplicates_are_removed_keeping_the_newest_row(legacy_engine):
    _insert(legacy_engine, [
        {"id": 1, "page_id": 1, "language": "default", "layout_json": '{"v": 1}', "version": 1, "updated_at": "2025-01-01"},
        {"id": 2, "page_id": 1, "language": "default", "layout_json": '{"v": 2}', "version": 2, "updated_at": "2025-03-01"},
        {"id": 3, "page_id": 1, "language": "default", "layout_json": '{"v": 3}', "version": 1, "updated_at": "2025-02-01"},
        {"id": 4, "page_id": 2, "language": "default", "layout_json": "{}", "version": 1, "updated_at": "2025-01-01"},
    ])

    result = ensure_composite_unique_constraint(legacy_engine)

    assert result == {"created": True, "removed_duplicates": 2}
    with legacy_engine.connect() as connection:
        ids = [row.id for row in connection.execute(text("SELECT id FROM page_layouts ORDER BY id"))]
    assert ids == [2, 4]


def test_single_connection_repair(legacy_engine):
    _insert(legacy_engine, [
        {"id": 1, "page_id": 1, "language": "default", "layout_json": "{}", "version": 1, "updated_at": "2025-01-01"},
        {"id": 2, "page_id": 1, "language": "default", "layout_json": "{}", "version": 1, "updated_at": "2025-01-02"},
    ])

    with legacy_engine.begin() as connection:
        result = repair_layout_uniqueness(connection)

    assert result == {"created": True, "removed_duplicates": 1}


def test_missing_table_is_schema_drift(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")

    with pytest.raises(SchemaDriftError):
        ensure_composite_unique_constraint(engine)

    engine.dispose()
