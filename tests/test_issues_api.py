from app.models.user import UserRole

REPORT = {
    "title": "Overflowing bin",
    "description": "The public bin at the bus stop has not been emptied in days.",
    "severity": "high",
    "location": "Bus stop, Park Road",
    "verified": "true",
}


def _submit(client, headers, **overrides):
    data = dict(REPORT)
    data.update(overrides)
    return client.post("/issues", data=data, headers=headers)


def test_submit_report_awards_xp(client, make_user, auth_headers):
    citizen = make_user("Asha")
    headers = auth_headers(citizen)

    resp = _submit(client, headers)

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["xp_points"] == 50
    assert body["xp_awarded"] == 50
    assert body["xp_pending"] is False
    issue = body["issue"]
    assert issue["status"] == "pending"
    assert issue["severity"] == "high"
    assert issue["reporter_id"] == citizen.id
    assert issue["priority_rating"] == 3.6
    assert issue["solver_id"] is None and issue["solved_at"] is None

    me = client.get("/auth/me", headers=headers).json()
    assert me["xp_points"] == 50


def test_missing_fields_are_listed_and_nothing_changes(client, make_user, auth_headers):
    citizen = make_user()
    headers = auth_headers(citizen)

    resp = client.post(
        "/issues",
        data={"title": "No details", "severity": "low"},
        headers=headers,
    )

    assert resp.status_code == 400
    assert resp.json()["missing"] == ["description", "location", "verified"]
    assert client.get("/issues/mine", headers=headers).json() == []
    assert client.get("/auth/me", headers=headers).json()["xp_points"] == 0


def test_unknown_severity_is_a_validation_error(client, make_user, auth_headers):
    resp = _submit(client, auth_headers(make_user()), severity="catastrophic")
    assert resp.status_code == 400
    assert "Severity" in resp.json()["detail"]


def test_coordinates_become_location(client, make_user, auth_headers):
    data = dict(REPORT)
    data.pop("location")
    data.update({"lat": "12.5", "lon": "77.25"})

    resp = client.post("/issues", data=data, headers=auth_headers(make_user()))

    assert resp.status_code == 201, resp.text
    assert resp.json()["issue"]["location"] == "12.5, 77.25"


def test_image_is_stored_as_reference(client, make_user, auth_headers):
    resp = client.post(
        "/issues",
        data=REPORT,
        files={"image": ("bin.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=auth_headers(make_user()),
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["issue"]["image_url"].startswith("data:image/png;base64,")


def test_unsupported_image_type_rejected(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    resp = client.post(
        "/issues",
        data=REPORT,
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert resp.status_code == 400
    assert client.get("/issues/mine", headers=headers).json() == []


def test_bad_severity_is_rejected_before_the_image_is_uploaded(client, make_user, auth_headers, monkeypatch):
    uploads = []

    def recording_upload(data, content_type, path):
        uploads.append(path)
        return "https://cdn.example.com/" + path

    monkeypatch.setattr("app.routers.issues.upload_image", recording_upload)
    headers = auth_headers(make_user())

    resp = client.post(
        "/issues",
        data={**REPORT, "severity": "catastrophic"},
        files={"image": ("bin.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=headers,
    )

    assert resp.status_code == 400
    assert uploads == []
    assert client.get("/issues/mine", headers=headers).json() == []


def test_submit_requires_login(client):
    assert client.post("/issues", data=REPORT).status_code == 401


def test_history_lists_only_own_reports_in_order(client, make_user, auth_headers):
    asha, ravi = make_user("Asha"), make_user("Ravi")
    _submit(client, auth_headers(asha), title="first")
    _submit(client, auth_headers(ravi), title="other")
    _submit(client, auth_headers(asha), title="second")

    mine = client.get("/issues/mine", headers=auth_headers(asha)).json()
    assert [i["title"] for i in mine] == ["first", "second"]


def test_get_issue_and_not_found(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    issue_id = _submit(client, headers).json()["issue"]["id"]

    assert client.get(f"/issues/{issue_id}", headers=headers).json()["id"] == issue_id
    assert client.get("/issues/9999", headers=headers).status_code == 404


def test_ngo_triage_list_sorted_by_priority(client, make_user, auth_headers):
    citizen = make_user()
    ngo = make_user("Clean City", role=UserRole.ngo)
    _submit(client, auth_headers(citizen), title="minor", severity="low", description="small")
    _submit(client, auth_headers(citizen), title="major", severity="high")

    resp = client.get("/issues", headers=auth_headers(ngo))
    assert resp.status_code == 200
    assert [i["title"] for i in resp.json()] == ["major", "minor"]

    assert client.get("/issues", headers=auth_headers(citizen)).status_code == 403


def test_ngo_rejects_report_and_reporter_loses_xp(client, make_user, auth_headers):
    citizen = make_user()
    ngo = make_user("Clean City", role=UserRole.ngo)
    issue_id = _submit(client, auth_headers(citizen)).json()["issue"]["id"]

    resp = client.patch(f"/issues/{issue_id}/status", json={"status": "rejected"}, headers=auth_headers(ngo))

    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "rejected"
    assert resp.json()["solved_at"] is not None
    assert client.get("/auth/me", headers=auth_headers(citizen)).json()["xp_points"] == 40

    again = client.patch(f"/issues/{issue_id}/status", json={"status": "solved"}, headers=auth_headers(ngo))
    assert again.status_code == 409


def test_ngo_solves_report(client, make_user, auth_headers):
    citizen = make_user()
    ngo = make_user("Clean City", role=UserRole.ngo)
    issue_id = _submit(client, auth_headers(citizen)).json()["issue"]["id"]

    resp = client.patch(
        f"/issues/{issue_id}/status",
        json={"status": "solved", "solution_image_url": "https://cdn.example.com/after.jpg", "xp_award": 20},
        headers=auth_headers(ngo),
    )

    body = resp.json()
    assert body["status"] == "solved"
    assert body["solver_id"] == ngo.id
    assert body["solution_image_url"] == "https://cdn.example.com/after.jpg"
    assert client.get("/auth/me", headers=auth_headers(citizen)).json()["xp_points"] == 70


def test_citizens_cannot_resolve(client, make_user, auth_headers):
    citizen = make_user()
    headers = auth_headers(citizen)
    issue_id = _submit(client, headers).json()["issue"]["id"]

    resp = client.patch(f"/issues/{issue_id}/status", json={"status": "solved"}, headers=headers)
    assert resp.status_code == 403


def test_resolve_unknown_issue_is_404(client, make_user, auth_headers):
    ngo = make_user(role=UserRole.ngo)
    resp = client.patch("/issues/777/status", json={"status": "solved"}, headers=auth_headers(ngo))
    assert resp.status_code == 404
