"""Team members: CRUD and detachment from themes on delete."""

import os

from app.modules.team.service import NAME_MAX_LENGTH


def test_create_and_get_team_member(client, admin_headers):
    res = client.post(
        "/api/team",
        data={"name": " Alice ", "role": "Lead", "work_detail": "Owns the roadmap"},
        files={"image": ("alice.webp", b"webp", "image/webp")},
        headers=admin_headers,
    )
    assert res.status_code == 201
    member = res.json()["data"]
    assert member["name"] == "Alice"
    assert member["image_path"].startswith("/uploads/team-")

    fetched = client.get(f"/api/team/{member['id']}").json()["data"]
    assert fetched == member


def test_create_team_member_requires_admin(client, fake_db):
    res = client.post("/api/team", data={"name": "Alice", "role": "Lead", "work_detail": "x"})
    assert res.status_code == 401
    assert fake_db.rows("team_members") == []


def test_create_team_member_enforces_name_length(client, admin_headers):
    res = client.post(
        "/api/team",
        data={"name": "x" * (NAME_MAX_LENGTH + 1), "role": "Lead", "work_detail": "x"},
        headers=admin_headers,
    )
    assert res.status_code == 400
    assert "cannot exceed" in res.json()["message"]


def test_create_team_member_rejects_blank_role(client, admin_headers):
    res = client.post(
        "/api/team", data={"name": "Alice", "role": "  ", "work_detail": "x"}, headers=admin_headers,
    )
    assert res.status_code == 400


def test_list_team_members_newest_first(client, api):
    api.member(name="Alice")
    api.member(name="Bob")
    body = client.get("/api/team").json()
    assert body["count"] == 2
    assert [m["name"] for m in body["data"]] == ["Bob", "Alice"]


def test_update_team_member_is_partial(client, admin_headers, api):
    alice = api.member(name="Alice", role="Lead")
    res = client.put(f"/api/team/{alice['id']}", data={"role": "Architect"}, headers=admin_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["role"] == "Architect"
    assert data["name"] == "Alice"
    assert data["work_detail"] == alice["work_detail"]


def test_update_rejects_blank_name(client, admin_headers, api):
    alice = api.member()
    res = client.put(f"/api/team/{alice['id']}", data={"name": " "}, headers=admin_headers)
    assert res.status_code == 400


def test_get_missing_team_member_is_404(client):
    res = client.get("/api/team/missing")
    assert res.status_code == 404
    assert res.json()["message"] == "Team member not found"


def test_delete_head_member_detaches_from_themes(client, admin_headers, api, fake_db):
    core = api.theme(name="Core")
    ui = api.theme(name="UI")
    alice = api.member(name="Alice")
    bob = api.member(name="Bob")
    api.add_members(core["id"], alice["id"], bob["id"])
    api.add_members(ui["id"], alice["id"])
    api.assign_head(core["id"], alice["id"])

    res = client.delete(f"/api/team/{alice['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Team member deleted successfully"

    core_now = client.get(f"/api/themes/{core['id']}").json()["data"]
    assert core_now["theme_head"] is None
    assert core_now["theme_head_id"] is None
    assert [m["name"] for m in core_now["members"]] == ["Bob"]
    assert client.get(f"/api/themes/{ui['id']}").json()["data"]["members"] == []
    assert all(m["team_member_id"] != alice["id"] for m in fake_db.rows("theme_members"))


def test_delete_clears_head_before_memberships(client, admin_headers, api, fake_db):
    alice = api.member()
    fake_db.calls.clear()
    client.delete(f"/api/team/{alice['id']}", headers=admin_headers)
    writes = [(op, table) for op, table in fake_db.calls if op != "select"]
    assert writes == [("update", "themes"), ("delete", "theme_members"), ("delete", "team_members")]


def test_delete_missing_team_member_is_404(client, admin_headers):
    assert client.delete("/api/team/missing", headers=admin_headers).status_code == 404


def test_rejected_team_writes_leave_no_uploaded_file(client, admin_headers, api, image_storage):
    alice = api.member()
    photo = {"image": ("alice.png", b"png", "image/png")}

    res = client.put(f"/api/team/{alice['id']}", data={"name": " "}, files=photo, headers=admin_headers)
    assert res.status_code == 400
    assert client.get(f"/api/team/{alice['id']}").json()["data"]["image_path"] is None
    assert os.listdir(image_storage.uploads_dir) == []
