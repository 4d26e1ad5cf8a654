import pytest

from sitecms.extensions import db
from sitecms.models.tenant import Tenant


HERO = {"components": [{"id": "hero-1", "type": "Hero", "props": {"heading": "Welcome"}}]}


# ------------------------
# Plumbing
# ------------------------

def test_health_needs_no_tenant(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_openapi_document_is_served(client):
    response = client.get("/openapi/cms.yaml")

    assert response.status_code == 200
    assert b"/pages/{page_id}/layout" in response.data


def test_tenant_is_required(client):
    response = client.get("/api/v1/pages/all")

    assert response.status_code == 400


def test_unknown_or_inactive_tenant_is_rejected(client):
    db.session.get(Tenant, "t2").is_active = False
    db.session.commit()

    assert client.get("/api/v1/pages/all", headers={"X-Tenant-Id": "nope"}).status_code == 404
    assert client.get("/api/v1/pages/all", headers={"X-Tenant-Id": "t2"}).status_code == 404


def test_tenant_from_query_or_token(client, token_headers):
    assert client.get("/api/v1/pages/all?tenantId=t1").status_code == 200

    headers = token_headers("t1")
    del headers["X-Tenant-Id"]
    assert client.get("/api/v1/pages/all", headers=headers).status_code == 200


def test_writes_need_a_token(client):
    response = client.post(
        "/api/v1/pages",
        json={"page_name": "Pricing", "slug": "/pricing"},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.status_code == 401


def test_token_for_another_tenant_is_rejected(client, token_headers):
    headers = token_headers("t1")
    headers["X-Tenant-Id"] = "t2"

    response = client.post("/api/v1/pages", json={"page_name": "Pricing", "slug": "/pricing"}, headers=headers)

    assert response.status_code == 403


def test_super_admin_can_write_to_any_tenant(client, token_headers):
    headers = token_headers("t1", role="super_admin")
    headers["X-Tenant-Id"] = "t2"

    response = client.post("/api/v1/pages", json={"page_name": "Pricing", "slug": "/pricing"}, headers=headers)

    assert response.status_code == 201
    assert response.get_json()["tenant_id"] == "t2"


def test_disabled_cms_feature(client, token_headers):
    db.session.get(Tenant, "t1").enable_cms = False
    db.session.commit()

    response = client.post(
        "/api/v1/pages",
        json={"page_name": "Pricing", "slug": "/pricing"},
        headers=token_headers("t1"),
    )

    assert response.status_code == 403


# ------------------------
# Pages
# ------------------------

def test_page_lifecycle(client, token_headers):
    headers = token_headers("t1")

    created = client.post("/api/v1/pages", json={"page_name": "Pricing", "slug": "pricing"}, headers=headers)
    assert created.status_code == 201
    page = created.get_json()
    assert page["slug"] == "/pricing"
    assert page["is_master"] is False

    duplicate = client.post("/api/v1/pages", json={"page_name": "Again", "slug": "/pricing"}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "ConflictError"

    updated = client.put(f"/api/v1/pages/{page['id']}", json={"status": "published"}, headers=headers)
    assert updated.status_code == 200
    assert updated.get_json()["status"] == "published"

    fetched = client.get(f"/api/v1/pages/{page['id']}", headers={"X-Tenant-Id": "t1"})
    assert fetched.get_json()["layout"]["layout_json"] == {"components": []}

    deleted = client.delete(f"/api/v1/pages/{page['id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/v1/pages/{page['id']}", headers={"X-Tenant-Id": "t1"}).status_code == 404


def test_validation_errors_are_400(client, token_headers):
    response = client.post("/api/v1/pages", json={"slug": "/x"}, headers=token_headers("t1"))

    assert response.status_code == 400
    assert response.get_json()["error"] == "ValidationError"


def test_master_page_is_read_only(client, token_headers, master_page):
    headers = token_headers("t1")

    response = client.put(f"/api/v1/pages/{master_page.id}", json={"page_name": "Mine"}, headers=headers)
    assert response.status_code == 403
    assert response.get_json()["message"] == "cannot update/delete master data"

    assert client.delete(f"/api/v1/pages/{master_page.id}", headers=headers).status_code == 403
    assert client.put(
        f"/api/v1/pages/{master_page.id}/layout", json={"layout_json": HERO}, headers=headers
    ).status_code == 403


def test_list_pages_marks_master_rows(client, master_page, tenant_page):
    response = client.get("/api/v1/pages/all", headers={"X-Tenant-Id": "t1"})

    body = response.get_json()
    assert body["count"] == 2
    assert {p["slug"]: p["is_master"] for p in body["pages"]} == {"/": False, "/about": True}


def test_slug_update_and_history(client, token_headers, tenant_page):
    headers = token_headers("t1")

    response = client.post(
        "/api/v1/pages/update-slug",
        json={"pageId": tenant_page.id, "pageType": "page", "newSlug": "start"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.get_json()["new_slug"] == "/start"

    history = client.get(f"/api/v1/pages/slug-history?pageId={tenant_page.id}", headers=headers)
    assert [entry["payload"]["new_slug"] for entry in history.get_json()["history"]] == ["/start"]

    missing = client.post("/api/v1/pages/update-slug", json={"pageId": tenant_page.id}, headers=headers)
    assert missing.status_code == 400


# ------------------------
# Layouts
# ------------------------

def test_layout_put_and_get(client, token_headers, tenant_page):
    headers = token_headers("t1")
    url = f"/api/v1/pages/{tenant_page.id}/layout"

    first = client.put(url, json={"layout_json": HERO}, headers=headers)
    second = client.put(url, json=HERO, headers=headers)

    assert first.status_code == 200
    assert [first.get_json()["version"], second.get_json()["version"]] == [1, 2]

    layout = client.get(url, headers={"X-Tenant-Id": "t1"}).get_json()
    assert layout["layout_json"] == HERO
    assert layout["version"] == 2


def test_layout_by_slug(client, token_headers, tenant_page):
    headers = token_headers("t1")

    saved = client.put("/api/v1/layout?slug=/&language=de", json={"layout_json": HERO}, headers=headers)
    assert saved.status_code == 200
    assert saved.get_json()["language"] == "de"

    layout = client.get("/api/v1/layout?slug=/&language=de", headers={"X-Tenant-Id": "t1"}).get_json()
    assert layout["layout_json"] == HERO
    assert layout["fallback"] is False

    assert client.get("/api/v1/layout", headers={"X-Tenant-Id": "t1"}).status_code == 400
    assert client.get("/api/v1/layout?slug=/nope", headers={"X-Tenant-Id": "t1"}).status_code == 404


@pytest.mark.parametrize("page_id", ["theme-landingpage-homepage", "abc"])
def test_layout_write_with_bad_page_id(client, token_headers, page_id):
    response = client.put(f"/api/v1/pages/{page_id}/layout", json={"layout_json": HERO}, headers=token_headers("t1"))

    assert response.status_code == 400


def test_layout_write_without_layout(client, token_headers, tenant_page):
    response = client.put(f"/api/v1/pages/{tenant_page.id}/layout", json={"title": "x"}, headers=token_headers("t1"))

    assert response.status_code == 400


# ------------------------
# Languages & jobs
# ------------------------

def test_language_management(client, token_headers, tenant_page, multilingual_t1, translate_api):
    headers = token_headers("t1")
    client.put(f"/api/v1/pages/{tenant_page.id}/layout?language=en", json=HERO, headers=headers)

    config = client.get("/api/v1/languages", headers={"X-Tenant-Id": "t1"}).get_json()
    assert config["target_languages"] == ["fr"]

    added = client.post("/api/v1/languages", json={"code": "de"}, headers=headers)
    assert added.status_code == 201
    assert added.get_json()["languages"] == ["en", "fr", "de"]

    job_id = added.get_json()["translation_jobs"][0]
    job = client.get(f"/api/v1/jobs/{job_id}", headers=headers)
    assert job.status_code == 200
    assert job.get_json()["status"] == "SUCCESS"
    assert job.get_json()["result"]["languages"] == {"de": 1}

    # Jobs of t1 are invisible to t2
    assert client.get(f"/api/v1/jobs/{job_id}", headers=token_headers("t2")).status_code == 404

    removed = client.delete("/api/v1/languages/fr", headers=headers)
    assert removed.get_json()["layouts_removed"] == 1

    default = client.put("/api/v1/languages/default", json={"code": "de"}, headers=headers)
    assert default.get_json()["default_language"] == "de"

    assert client.delete("/api/v1/languages/de", headers=headers).status_code == 400


def test_language_changes_need_admin_role(client, token_headers):
    response = client.post("/api/v1/languages", json={"code": "de"}, headers=token_headers("t1", role="editor"))

    assert response.status_code == 403
