from sqlalchemy.exc import OperationalError

from app.models.notification import Notification
from app.services import version_service
from tests.conftest import auth_headers


def _payload(department_id, **overrides):
    data = {
        "department_id": department_id,
        "title": "Triage Guide",
        "slug": "triage",
        "body": "START triage.",
        "type": "guide",
        "tags": ["triage", "mci", "triage"],
    }
    data.update(overrides)
    return data


def test_editor_creates_draft(client, seed_users, seed_departments):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.post("/api/content", json=_payload(seed_departments["ems"].department_id), headers=headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["version"] == 1
    assert data["status"] == "draft"
    assert data["tags"] == ["triage", "mci"]
    assert data["published_at"] is None


def test_editor_cannot_create_published(client, seed_users, seed_departments):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.post(
        "/api/content",
        json=_payload(seed_departments["ems"].department_id, status="published"),
        headers=headers,
    )
    assert resp.status_code == 403


def test_cannot_create_in_other_department(client, seed_users, seed_departments):
    headers = auth_headers(client, "admin@usrp.test")
    resp = client.post("/api/content", json=_payload(seed_departments["fire"].department_id), headers=headers)
    assert resp.status_code == 403


def test_viewer_cannot_create(client, seed_users, seed_departments):
    headers = auth_headers(client, "viewer@usrp.test")
    resp = client.post("/api/content", json=_payload(seed_departments["ems"].department_id), headers=headers)
    assert resp.status_code == 403


def test_duplicate_slug_rejected(client, seed_users, seed_departments, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.post(
        "/api/content",
        json=_payload(seed_departments["ems"].department_id, slug="cardiac-arrest"),
        headers=headers,
    )
    assert resp.status_code == 409


def test_same_slug_allowed_in_other_department(client, seed_users, seed_departments, ems_sop):
    headers = auth_headers(client, "fire@usrp.test")
    resp = client.post(
        "/api/content",
        json=_payload(seed_departments["fire"].department_id, slug="cardiac-arrest"),
        headers=headers,
    )
    assert resp.status_code == 201


def test_create_notifies_department_except_author(client, db, seed_users, seed_departments):
    headers = auth_headers(client, "editor@usrp.test")
    client.post("/api/content", json=_payload(seed_departments["ems"].department_id), headers=headers)
    rows = db.query(Notification).filter(Notification.type == "content_created").all()
    recipients = {row.user_id for row in rows}
    ems_others = {seed_users[k].user_id for k in ("super", "admin", "viewer")}
    assert recipients == ems_others
    assert rows[0].message == '"Triage Guide" by EmsEditor'
    assert rows[0].action_url == "/ems/guide/triage"


def test_update_creates_version(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.put(
        f"/api/content/{ems_sop.content_id}",
        json={"body": "Push hard and fast.", "changes_summary": "Clarified compressions"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["version"] == 2

    history = client.get(f"/api/content/{ems_sop.content_id}/versions", headers=headers).json()
    assert [v["version"] for v in history["versions"]] == [2, 1]
    assert history["versions"][0]["changes_summary"] == "Clarified compressions"
    assert history["versions"][0]["is_current_version"] is True
    assert history["versions"][0]["author"]["username"] == "EmsEditor"
    assert history["stats"]["total_versions"] == 2
    assert history["stats"]["first_version"]["version"] == 1


def test_editor_cannot_change_status_via_update(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.put(f"/api/content/{ems_sop.content_id}", json={"status": "published"}, headers=headers)
    assert resp.status_code == 403


def test_update_slug_collision(client, seed_users, seed_departments, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    other = client.post("/api/content", json=_payload(seed_departments["ems"].department_id), headers=headers).json()
    resp = client.put(f"/api/content/{other['content_id']}", json={"slug": "cardiac-arrest"}, headers=headers)
    assert resp.status_code == 409


def test_admin_publish_and_unpublish(client, db, seed_users, ems_sop):
    headers = auth_headers(client, "admin@usrp.test")
    resp = client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "published"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "published"
    assert resp.json()["published_at"] is not None
    published = db.query(Notification).filter(Notification.type == "content_published").all()
    assert published and all(row.priority == "high" for row in published)

    resp = client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "draft"}, headers=headers)
    assert resp.json()["status"] == "draft"
    assert resp.json()["published_at"] is None
    assert resp.json()["version"] == 3


def test_editor_cannot_publish(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "published"}, headers=headers)
    assert resp.status_code == 403


def test_draft_hidden_from_other_department(client, seed_users, ems_sop):
    resp = client.get(f"/api/content/{ems_sop.content_id}", headers=auth_headers(client, "fire@usrp.test"))
    assert resp.status_code == 403


def test_get_missing_content(client, seed_users):
    resp = client.get("/api/content/9999", headers=auth_headers(client, "super@usrp.test"))
    assert resp.status_code == 404


def test_compare_endpoint(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    client.put(f"/api/content/{ems_sop.content_id}", json={"title": "CPR Protocol"}, headers=headers)
    resp = client.get(f"/api/content/{ems_sop.content_id}/versions/compare?from=1&to=2", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_changes"] == 1
    assert data["diffs"][0]["field"] == "title"
    assert data["from_version_data"]["title"] == "Cardiac Arrest Protocol"
    assert data["to_version_data"]["title"] == "CPR Protocol"


def test_compare_unknown_version(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.get(f"/api/content/{ems_sop.content_id}/versions/compare?from=1&to=9", headers=headers)
    assert resp.status_code == 404


def test_restore_endpoint(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    client.put(f"/api/content/{ems_sop.content_id}", json={"title": "CPR Protocol"}, headers=headers)
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 1}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["restored_from"] == 1
    assert data["message"] == "Successfully restored to version 1"
    assert data["content"]["title"] == "Cardiac Arrest Protocol"
    assert data["content"]["version"] == 3


def test_restore_requires_version_number(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 0}, headers=headers)
    assert resp.status_code == 400


def test_restore_missing_version(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 5}, headers=headers)
    assert resp.status_code == 404


def test_viewer_cannot_restore(client, seed_users, ems_sop):
    headers = auth_headers(client, "viewer@usrp.test")
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 1}, headers=headers)
    assert resp.status_code == 403


def test_history_limited_to_department(client, seed_users, ems_sop):
    resp = client.get(f"/api/content/{ems_sop.content_id}/versions", headers=auth_headers(client, "fire@usrp.test"))
    assert resp.status_code == 403


def test_history_outage_is_503(client, seed_users, ems_sop, monkeypatch):
    headers = auth_headers(client, "editor@usrp.test")

    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(version_service, "_versions_query", broken)
    resp = client.get(f"/api/content/{ems_sop.content_id}/versions", headers=headers)
    assert resp.status_code == 503


def test_consistency_check_endpoint(client, seed_users, ems_sop):
    resp = client.get(
        f"/api/content/{ems_sop.content_id}/versions/check",
        headers=auth_headers(client, "admin@usrp.test"),
    )
    assert resp.status_code == 200
    assert resp.json() == {"content_id": ems_sop.content_id, "consistent": True, "issues": []}

    resp = client.get(
        f"/api/content/{ems_sop.content_id}/versions/check",
        headers=auth_headers(client, "editor@usrp.test"),
    )
    assert resp.status_code == 403


def test_delete_content(client, seed_users, ems_sop):
    headers = auth_headers(client, "editor@usrp.test")
    assert client.delete(f"/api/content/{ems_sop.content_id}", headers=headers).status_code == 204
    assert client.get(f"/api/content/{ems_sop.content_id}", headers=headers).status_code == 404


def test_list_content_scoped_to_department(client, seed_users, seed_departments, ems_sop):
    fire_headers = auth_headers(client, "fire@usrp.test")
    client.post("/api/content", json=_payload(seed_departments["fire"].department_id), headers=fire_headers)

    fire_items = client.get("/api/content", headers=fire_headers).json()
    assert {item["department_id"] for item in fire_items} == {seed_departments["fire"].department_id}
    everything = client.get("/api/content", headers=auth_headers(client, "super@usrp.test")).json()
    assert len(everything) == 2


def test_public_department_listing_hides_drafts(client, seed_users, ems_sop):
    assert client.get("/api/departments/ems/content").json() == []
    own = client.get("/api/departments/ems/content", headers=auth_headers(client, "viewer@usrp.test")).json()
    assert [item["slug"] for item in own] == ["cardiac-arrest"]
    assert client.get("/api/departments/ems/content/cardiac-arrest").status_code == 404


def test_search_published_titles(client, seed_users, ems_sop):
    admin = auth_headers(client, "admin@usrp.test")
    client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "published"}, headers=admin)
    resp = client.get("/api/content/search?department=ems&q=cardiac", headers=admin)
    assert [item["content_id"] for item in resp.json()] == [ems_sop.content_id]
    assert client.get("/api/content/search?department=ems&q=burn", headers=admin).json() == []


def test_editor_cannot_publish_by_restoring(client, seed_users, ems_sop):
    admin = auth_headers(client, "admin@usrp.test")
    client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "published"}, headers=admin)
    client.patch(f"/api/content/{ems_sop.content_id}/status", json={"status": "draft"}, headers=admin)

    editor = auth_headers(client, "editor@usrp.test")
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 2}, headers=editor)
    assert resp.status_code == 403
    item = client.get(f"/api/content/{ems_sop.content_id}", headers=editor).json()
    assert item["status"] == "draft"
    assert item["version"] == 3

    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 2}, headers=admin)
    assert resp.status_code == 200
    assert resp.json()["content"]["status"] == "published"


def test_editor_restores_same_status_version(client, seed_users, ems_sop):
    editor = auth_headers(client, "editor@usrp.test")
    client.put(f"/api/content/{ems_sop.content_id}", json={"title": "Draft edit"}, headers=editor)
    resp = client.post(f"/api/content/{ems_sop.content_id}/versions", json={"version_number": 1}, headers=editor)
    assert resp.status_code == 200
    assert resp.json()["content"]["status"] == "draft"


def test_null_body_leaves_body_unchanged(client, seed_users, ems_sop):
    editor = auth_headers(client, "editor@usrp.test")
    resp = client.put(f"/api/content/{ems_sop.content_id}", json={"title": "T2", "body": None}, headers=editor)
    assert resp.status_code == 200
    assert resp.json()["title"] == "T2"
    assert resp.json()["body"] == "Start compressions."
