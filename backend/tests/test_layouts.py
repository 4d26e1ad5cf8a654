import threading

import pytest

from sitecms import create_app
from sitecms.config import TestingConfig
from sitecms.extensions import db
from sitecms.models.tenant import Tenant
from sitecms.models.page_layout import PageLayout
from sitecms.domain.exceptions import (
    ForbiddenMasterWriteError,
    NotFoundError,
    ValidationError,
)
from sitecms.application.cms.create_page import create_page
from sitecms.application.cms.delete_layouts import delete_layouts_for_language
from sitecms.application.cms.get_layout import get_layout_by_slug, get_page_layout
from sitecms.application.cms.upsert_page_layout import save_master_layout, upsert_page_layout


HERO = {"components": [{"id": "hero-1", "type": "Hero", "props": {"heading": "Welcome"}}]}


def _rows(page_id, language="default"):
    return PageLayout.query.filter_by(page_id=page_id, language=language).all()


def test_first_write_creates_version_one(app, tenant_page):
    result = upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")

    assert result["page_id"] == tenant_page.id
    assert result["language"] == "default"
    assert result["version"] == 1
    assert result["updated_at"]


def test_same_payload_twice_bumps_version_once_per_write(app, tenant_page):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")
    changed = {"components": [{"id": "hero-1", "type": "Hero", "props": {"heading": "Hello"}}]}
    result = upsert_page_layout(page_id=tenant_page.id, layout_json=changed, tenant_id="t1")

    rows = _rows(tenant_page.id)
    assert result["version"] == 3
    assert len(rows) == 1
    assert rows[0].version == 3
    assert rows[0].layout_json == changed


def test_version_is_monotonic_regardless_of_id_form(app, tenant_page):
    ids = [tenant_page.id, str(tenant_page.id), f" {tenant_page.id} "]

    versions = [
        upsert_page_layout(page_id=ids[i % len(ids)], layout_json=HERO, tenant_id="t1")["version"]
        for i in range(6)
    ]

    assert versions == [1, 2, 3, 4, 5, 6]
    assert len(_rows(tenant_page.id)) == 1


def test_languages_are_versioned_independently(app, tenant_page):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")
    fr = upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1", language="fr")

    assert fr["version"] == 1


def test_bare_component_list_is_wrapped(app, tenant_page):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO["components"], tenant_id="t1")

    assert _rows(tenant_page.id)[0].layout_json == HERO


def test_master_page_layout_is_write_protected(app, master_page):
    with pytest.raises(ForbiddenMasterWriteError):
        upsert_page_layout(page_id=master_page.id, layout_json=HERO, tenant_id="t1")

    assert _rows(master_page.id) == []


def test_other_tenant_page_is_not_found(app, tenant_page):
    with pytest.raises(NotFoundError):
        upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t2")


def test_layout_writes_without_a_tenant_are_refused(app, master_page, tenant_page):
    with pytest.raises(ForbiddenMasterWriteError):
        upsert_page_layout(page_id=master_page.id, layout_json=HERO)
    with pytest.raises(ForbiddenMasterWriteError):
        upsert_page_layout(page_id=tenant_page.id, layout_json=HERO)

    assert _rows(master_page.id) == []
    assert _rows(tenant_page.id) == []


def test_master_layouts_are_saved_through_the_operator_path(app, master_page, tenant_page):
    assert save_master_layout(page_id=master_page.id, layout_json=HERO)["version"] == 1
    assert save_master_layout(page_id=master_page.id, layout_json=[])["version"] == 2
    assert _rows(master_page.id)[0].layout_json == {"components": []}

    with pytest.raises(ValidationError):
        save_master_layout(page_id=tenant_page.id, layout_json=HERO)
    assert _rows(tenant_page.id) == []


@pytest.mark.parametrize("page_id", ["theme-landingpage-homepage", "home", None])
def test_invalid_page_ids_are_rejected(app, page_id):
    with pytest.raises(ValidationError):
        upsert_page_layout(page_id=page_id, layout_json=HERO, tenant_id="t1")


def test_missing_page(app):
    with pytest.raises(NotFoundError):
        upsert_page_layout(page_id=4242, layout_json=HERO, tenant_id="t1")


def test_bad_layout_is_rejected_without_writing(app, tenant_page):
    with pytest.raises(ValidationError):
        upsert_page_layout(page_id=tenant_page.id, layout_json={"components": "oops"}, tenant_id="t1")

    assert _rows(tenant_page.id) == []


# ------------------------
# Reads
# ------------------------

def test_page_without_layout_gets_an_empty_one(app, tenant_page):
    layout = get_page_layout(page_id=tenant_page.id, tenant_id="t1")

    assert layout["layout_json"] == {"components": []}
    assert layout["version"] == 1
    assert layout["fallback"] is True


def test_missing_translation_falls_back_to_default(app, tenant_page):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")

    layout = get_page_layout(page_id=tenant_page.id, tenant_id="t1", language="es")

    assert layout["language"] == "default"
    assert layout["requested_language"] == "es"
    assert layout["layout_json"] == HERO
    assert layout["fallback"] is True


def test_site_language_layout_serves_default_reads(app, tenant_page, multilingual_t1):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1", language="en", translate=False)

    layout = get_layout_by_slug(slug="/", tenant_id="t1")

    assert layout["language"] == "en"
    assert layout["layout_json"] == HERO
    assert layout["fallback"] is False

    missing = get_page_layout(page_id=tenant_page.id, tenant_id="t1", language="es")
    assert missing["language"] == "en"
    assert missing["layout_json"] == HERO
    assert missing["fallback"] is True


def test_default_layout_serves_site_language_reads(app, tenant_page, multilingual_t1):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1", translate=False)

    layout = get_page_layout(page_id=tenant_page.id, tenant_id="t1", language="en")

    assert layout["language"] == "default"
    assert layout["requested_language"] == "en"
    assert layout["layout_json"] == HERO
    assert layout["fallback"] is False


def test_master_layout_is_readable_by_tenants(app, master_page):
    save_master_layout(page_id=master_page.id, layout_json=HERO)

    layout = get_layout_by_slug(slug="about", tenant_id="t1")

    assert layout["is_master"] is True
    assert layout["layout_json"] == HERO


def test_layout_by_slug_prefers_tenant_page(app, master_page):
    own = create_page(tenant_id="t1", data={"page_name": "About us", "slug": "/about"})
    save_master_layout(page_id=master_page.id, layout_json=HERO)
    upsert_page_layout(page_id=own.id, layout_json=[], tenant_id="t1")

    layout = get_layout_by_slug(slug="/about", tenant_id="t1")

    assert layout["page_id"] == own.id
    assert layout["layout_json"] == {"components": []}

    with pytest.raises(NotFoundError):
        get_layout_by_slug(slug="/missing", tenant_id="t1")


def test_delete_layouts_for_language(app, tenant_page, master_page):
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1", language="fr")
    upsert_page_layout(page_id=tenant_page.id, layout_json=HERO, tenant_id="t1")
    save_master_layout(page_id=master_page.id, layout_json=HERO, language="fr")

    removed = delete_layouts_for_language(tenant_id="t1", language="fr")
    db.session.commit()

    assert removed == 1
    assert _rows(tenant_page.id, "fr") == []
    assert len(_rows(tenant_page.id)) == 1
    assert len(_rows(master_page.id, "fr")) == 1

    with pytest.raises(ValidationError):
        delete_layouts_for_language(tenant_id="t1", language="default")


def test_set_master_layout_command(app, master_page, tmp_path):
    layout_file = tmp_path / "about.json"
    layout_file.write_text('{"components": [{"id": "hero-1", "type": "Hero", "props": {"heading": "Welcome"}}]}')

    result = app.test_cli_runner().invoke(args=["cms", "set-master-layout", str(master_page.id), str(layout_file)])

    assert result.exit_code == 0, result.output
    assert f"page={master_page.id} language=default version=1" in result.output
    assert _rows(master_page.id)[0].layout_json == HERO


# ------------------------
# Concurrent writers
# ------------------------

@pytest.fixture
def file_backed_app(tmp_path, monkeypatch, themes_dir):
    """App on a file database, so separate threads really share the table."""
    monkeypatch.setattr(TestingConfig, "SQLALCHEMY_DATABASE_URI", f"sqlite:///{tmp_path / 'layouts.db'}")
    app = create_app("testing")
    app.config["THEMES_DIR"] = str(themes_dir)

    with app.app_context():
        db.create_all()
        db.session.add(Tenant(id="t1", name="Tenant t1", slug="t1"))
        db.session.commit()
        page_id = create_page(tenant_id="t1", data={"page_name": "Home", "slug": "/"}).id
        db.session.remove()

    yield app, page_id

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def test_racing_inserts_for_a_new_pair_end_at_version_two(file_backed_app):
    app, page_id = file_backed_app
    barrier = threading.Barrier(2)
    versions, errors = [], []

    def writer():
        with app.app_context():
            try:
                barrier.wait(timeout=10)
                result = upsert_page_layout(
                    page_id=page_id,
                    layout_json=HERO,
                    tenant_id="t1",
                    language="de",
                    translate=False,
                )
                versions.append(result["version"])
            except Exception as exc:
                errors.append(exc)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=writer) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    assert sorted(versions) == [1, 2]

    with app.app_context():
        rows = _rows(page_id, "de")
        assert len(rows) == 1
        assert rows[0].version == 2
