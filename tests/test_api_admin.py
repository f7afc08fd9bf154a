"""Admin endpoints, in-process via TestClient."""
from datetime import timedelta

import pytest

PHOTO = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="

ADMIN_ONLY = [
    ("GET", "/api/admin/visitors"),
    ("GET", "/api/admin/visitors/some-id"),
    ("POST", "/api/admin/visitors/some-id/signout"),
    ("GET", "/api/admin/stats"),
    ("GET", "/api/admin/export"),
    ("POST", "/api/admin/logout"),
]


def test_login_with_default_admin(client):
    r = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user"]["username"] == "admin"
    assert body["token"]
    assert "visitdesk_session" in r.cookies


@pytest.mark.parametrize(
    "username,password",
    [("admin", "wrongpassword"), ("nobody", "admin123")],
)
def test_login_rejects_bad_credentials(client, username, password):
    r = client.post("/api/admin/login", json={"username": username, "password": password})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_login_requires_both_fields(client):
    assert client.post("/api/admin/login", json={"username": "admin", "password": ""}).status_code == 400


def test_session_check(client):
    assert client.get("/api/admin/session").json() == {"authenticated": False, "user": None}
    client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})

    body = client.get("/api/admin/session").json()

    assert body["authenticated"] is True
    assert body["user"]["username"] == "admin"


@pytest.mark.parametrize("method,path", ADMIN_ONLY)
def test_admin_routes_require_session(client, method, path):
    r = client.request(method, path)
    assert r.status_code == 401
    assert r.json()["detail"] == "Admin authentication required"


def test_unauthorized_sign_out_changes_nothing(client, sign_in, app_storage):
    visitor = sign_in("Jane Doe")
    entries_before = len(app_storage.list_audit_logs())

    r = client.post(f"/api/admin/visitors/{visitor['id']}/signout")

    assert r.status_code == 401
    assert app_storage.get_visitor(visitor["id"]).is_signed_out is False
    assert len(app_storage.list_audit_logs()) == entries_before


def test_bearer_token_is_accepted(client):
    token = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"}).json()["token"]
    client.cookies.clear()

    assert client.get("/api/admin/stats").status_code == 401
    assert client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"}).status_code == 200


def test_logout_ends_session(admin_client):
    token = admin_client.post("/api/admin/login", json={"username": "admin", "password": "admin123"}).json()["token"]

    r = admin_client.post("/api/admin/logout", headers={"Authorization": f"Bearer {token}"})

    assert r.json() == {"success": True}
    assert admin_client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_logout_clears_cookie_session(admin_client):
    assert admin_client.post("/api/admin/logout").status_code == 200
    assert admin_client.get("/api/admin/session").json()["authenticated"] is False
    assert admin_client.get("/api/admin/visitors").status_code == 401


def test_list_visitors_is_redacted(admin_client, sign_in):
    sign_in("Photo Test", photoData=PHOTO)

    r = admin_client.get("/api/admin/visitors")

    assert r.status_code == 200
    assert [(v["name"], v["photoData"]) for v in r.json()] == [("Photo Test", None)]


def test_get_single_visitor_includes_photo(admin_client, sign_in):
    visitor = sign_in("Photo Test", photoData=PHOTO)

    r = admin_client.get(f"/api/admin/visitors/{visitor['id']}")

    assert r.status_code == 200
    assert r.json()["photoData"] == PHOTO
    assert admin_client.get("/api/admin/visitors/missing").status_code == 404


def test_admin_sign_out_by_id(admin_client, sign_in, app_storage):
    visitor = sign_in("Jane Doe")

    r = admin_client.post(f"/api/admin/visitors/{visitor['id']}/signout")

    assert r.status_code == 200
    assert r.json()["isSignedOut"] is True
    admin_id = app_storage.get_admin_user_by_username("admin").id
    assert app_storage.list_audit_logs()[0].user_id == admin_id
    assert admin_client.post("/api/admin/visitors/missing/signout").status_code == 404


def test_stats(admin_client, sign_in, app_storage, clock):
    first = sign_in("Visitor 1")
    sign_in("Visitor 2")
    app_storage.sign_out_visitor(first["id"], clock.now + timedelta(hours=2))

    r = admin_client.get("/api/admin/stats")

    assert r.json() == {"currentVisitors": 1, "todaySignins": 2, "avgDuration": "2.0h"}


def test_stats_empty(admin_client):
    assert admin_client.get("/api/admin/stats").json() == {
        "currentVisitors": 0,
        "todaySignins": 0,
        "avgDuration": "0.0h",
    }


def test_export(admin_client, sign_in):
    visitor = sign_in("Export Me", photoData=PHOTO)
    admin_client.post("/api/visitors/signout", json={"name": "Export Me"})

    r = admin_client.get("/api/admin/export")

    assert r.status_code == 200
    assert "attachment; filename=visitor-data-2026-10-17.json" == r.headers["content-disposition"]
    body = r.json()
    assert body["exportedBy"] == "admin"
    assert body["exportedAt"].startswith("2026-10-17")
    assert [(v["id"], v["photoData"]) for v in body["visitors"]] == [(visitor["id"], None)]
    logs = body["auditLogs"]
    assert logs[0]["action"] == "VISITOR_SIGN_OUT"
    assert logs[0]["entityType"] == "visitor"
    assert logs[0]["entityId"] == visitor["id"]
    assert {"VISITOR_SIGN_IN", "ADMIN_CREATED", "ADMIN_LOGIN"} <= {e["action"] for e in logs}
    timestamps = [e["timestamp"] for e in logs]
    assert timestamps == sorted(timestamps, reverse=True)
