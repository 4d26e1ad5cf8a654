"""Pytest configuration and shared fixtures."""
import json

import httpx
import pytest
from flask_jwt_extended import create_access_token

from sitecms import create_app
from sitecms.extensions import db
from sitecms.models.tenant import Tenant
from sitecms.application.cms.create_page import create_page
from sitecms.application.settings.site_settings import set_setting


LANDING_PAGES = [
    {"page_name": "Home", "slug": "/", "page_type": "page"},
    {"page_name": "Contact", "slug": "/contact"},
    {"page_name": "Privacy", "slug": "privacy", "page_type": "legal", "last_reviewed_date": "2025-11-03"},
    {"page_name": "Broken entry"},
]


class FakeTranslateApi:
    """Stands in for the translation API behind an ``httpx.MockTransport``."""

    def __init__(self):
        self.requests = []
        self.fail_with = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)

        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"message": "nope"}})

        return httpx.Response(200, json={
            "data": {"translations": [{"translatedText": f"[{body['target']}] {body['q']}"}]}
        })


@pytest.fixture
def themes_dir(tmp_path):
    root = tmp_path / "themes"

    landing = root / "landingpage"
    landing.mkdir(parents=True)
    (landing / "theme.json").write_text(json.dumps({"name": "Landing Page", "version": "1.0.0"}))
    (landing / "pages.json").write_text(json.dumps(LANDING_PAGES))

    # No theme.json: name derived from the folder
    (root / "dark-mode_v2").mkdir()

    return root


@pytest.fixture
def translate_api():
    return FakeTranslateApi()


@pytest.fixture
def app(themes_dir, translate_api):
    app = create_app("testing")
    app.config["THEMES_DIR"] = str(themes_dir)
    app.config["TRANSLATION_HTTP_TRANSPORT"] = httpx.MockTransport(translate_api)

    with app.app_context():
        db.create_all()
        for tenant_id in ("t1", "t2", "demo"):
            db.session.add(Tenant(id=tenant_id, name=f"Tenant {tenant_id}", slug=tenant_id))
        db.session.commit()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def token_headers(app):
    """Build request headers carrying a bearer token and the tenant header."""

    def build(tenant_id="t1", role="admin", identity="user-1", **claims):
        token = create_access_token(
            identity=identity,
            additional_claims={"tenant_id": tenant_id, "role": role, **claims},
        )
        return {
            "Authorization": f"Bearer {token}",
            "X-Tenant-Id": tenant_id,
        }

    return build


@pytest.fixture
def master_page(app):
    return create_page(tenant_id=None, data={"page_name": "About", "slug": "/about"})


@pytest.fixture
def tenant_page(app):
    return create_page(tenant_id="t1", data={"page_name": "Home", "slug": "/"})


@pytest.fixture
def multilingual_t1(app):
    """Tenant t1 writes in English and publishes in English and French."""
    set_setting(key="site_language", value="en", tenant_id="t1")
    set_setting(key="site_content_languages", value="en,fr", tenant_id="t1")
    db.session.commit()
