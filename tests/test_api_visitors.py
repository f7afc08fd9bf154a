"""Kiosk endpoints, in-process via TestClient."""

PHOTO = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}


def test_sign_in_creates_visitor(client, sign_in):
    body = sign_in("Test Visitor", "Test Host", "meeting", company="Test Company")

    assert body["id"]
    assert body["name"] == "Test Visitor"
    assert body["company"] == "Test Company"
    assert body["hostName"] == "Test Host"
    assert body["visitReason"] == "meeting"
    assert body["isSignedOut"] is False
    assert body["signOutTime"] is None
    assert body["signInTime"].startswith("2026-10-17T10:00")
    # No mail provider configured in tests
    assert body["emailSent"] is False


def test_sign_in_accepts_snake_case_and_photo(client):
    r = client.post(
        "/api/visitors/signin",
        json={"name": "Jane Doe", "host_name": "Host", "visit_reason": "other", "photo_data": PHOTO},
    )
    assert r.status_code == 200
    assert r.json()["photoData"] == PHOTO


def test_sign_in_trims_text(client, sign_in):
    body = sign_in("  Jane Doe ", " Host ", " delivery ")
    assert (body["name"], body["hostName"], body["visitReason"]) == ("Jane Doe", "Host", "delivery")


def test_sign_in_lowercases_known_reasons_and_keeps_free_text(client, sign_in):
    assert sign_in("Jane Doe", "Host", " Interview")["visitReason"] == "interview"
    assert sign_in("John Doe", "Host", "Package pickup")["visitReason"] == "Package pickup"


def test_sign_in_rejects_blank_reason(client):
    r = client.post("/api/visitors/signin", json={"name": "Jane Doe", "hostName": "Host", "visitReason": "  "})
    assert r.status_code == 400


def test_openapi_lists_reason_categories(client):
    schema = client.get("/openapi.json").json()["components"]["schemas"]["VisitorSignIn"]
    assert schema["properties"]["visitReason"]["examples"] == ["meeting", "interview", "delivery", "maintenance", "other"]


def test_sign_in_requires_fields(client, app_storage):
    r = client.post("/api/visitors/signin", json={"company": "Test Company", "visitReason": "meeting"})
    assert r.status_code == 400
    missing = {tuple(e["loc"])[-1] for e in r.json()["detail"]}
    assert {"name", "hostName"} <= missing
    assert app_storage.list_all_visitors() == []


def test_sign_in_rejects_blank_name(client):
    r = client.post("/api/visitors/signin", json={"name": "   ", "hostName": "Host", "visitReason": "meeting"})
    assert r.status_code == 400


def test_sign_out_by_name(client, sign_in):
    created = sign_in("John Smith")

    r = client.post("/api/visitors/signout", json={"name": "john smith"})

    assert r.status_code == 200
    body = r.json()
    assert body["id"] == created["id"]
    assert body["isSignedOut"] is True
    assert body["signOutTime"] is not None


def test_sign_out_unknown_name_is_404(client, sign_in):
    sign_in("John Smith")
    r = client.post("/api/visitors/signout", json={"name": "Nobody Here"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Visitor not found or already signed out"


def test_sign_out_twice_by_name_is_404(client, sign_in):
    sign_in("John Smith")
    assert client.post("/api/visitors/signout", json={"name": "John Smith"}).status_code == 200
    assert client.post("/api/visitors/signout", json={"name": "John Smith"}).status_code == 404


def test_sign_out_requires_name(client):
    assert client.post("/api/visitors/signout", json={"name": ""}).status_code == 400
    assert client.post("/api/visitors/signout", json={}).status_code == 400


def test_current_visitors(client, sign_in):
    sign_in("Staying")
    sign_in("Leaving")
    client.post("/api/visitors/signout", json={"name": "Leaving"})

    r = client.get("/api/visitors/current")

    assert r.status_code == 200
    assert [v["name"] for v in r.json()] == ["Staying"]


def test_badge_pdf(client, sign_in):
    visitor = sign_in("Jane Doe", company="Acme", photoData=PHOTO)

    r = client.get(f"/api/visitors/{visitor['id']}/badge")

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert "visitor-badge-jane-doe.pdf" in r.headers["content-disposition"]
    assert r.content.startswith(b"%PDF")


def test_badge_for_unknown_visitor(client):
    assert client.get("/api/visitors/missing/badge").status_code == 404
