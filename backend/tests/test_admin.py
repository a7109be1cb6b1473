from sqlalchemy import select

from clubportal.db import SessionLocal
from clubportal import models

from helpers import auth_headers, get_club_id_by_slug, get_student_id


def test_admin_endpoints_forbid_other_roles(client, student_token, faculty_token):
    for token in (student_token, faculty_token):
        assert client.get("/admin/users", headers=auth_headers(token)).status_code == 403
        assert client.get("/admin/events", headers=auth_headers(token)).status_code == 403
        assert client.delete("/admin/users/whatever", headers=auth_headers(token)).status_code == 403


def test_admin_lists_users_across_roles(client, admin_token, student_token, faculty_token, head_token):
    resp = client.get("/admin/users", headers=auth_headers(admin_token))
    assert resp.status_code == 200
    users = {u["username"]: u for u in resp.json()}
    assert users["23BD1A05C7"]["role"] == "student"
    assert users["ramesh12@gmail.com"]["role"] == "faculty"
    assert users["ramesh12@gmail.com"]["email"] == "ramesh12@gmail.com"
    assert users["Coding-Head"]["role"] == "clubhead"
    assert users["admin"]["role"] == "admin"
    assert all(u["_id"] for u in users.values())


def test_admin_clubs_overview_counts_members(client, admin_token, student_token, head_token):
    club_id = get_club_id_by_slug("coding-club")
    client.post("/student/join-club", json={"clubId": club_id}, headers=auth_headers(student_token))

    clubs = {c["slug"]: c for c in client.get("/admin/clubs", headers=auth_headers(admin_token)).json()}
    assert clubs["coding-club"]["headUsername"] == "Coding-Head"
    assert clubs["coding-club"]["pendingCount"] == 1
    assert clubs["coding-club"]["memberCount"] == 0
    assert clubs["sports-club"]["headUsername"] is None


def test_fund_requests_and_approved_fund_update(client, admin_token, head_token):
    headers = auth_headers(head_token)
    client.post(
        "/clubhead/events",
        json={"title": "Robotics Expo", "date": "2026-12-05T10:00:00", "fundRequest": 12000},
        headers=headers,
    )
    client.post("/clubhead/events", json={"title": "Open Mic", "date": "2026-12-06T10:00:00"}, headers=headers)

    admin_headers = auth_headers(admin_token)
    all_events = client.get("/admin/events", headers=admin_headers).json()
    assert {e["title"] for e in all_events} == {"Robotics Expo", "Open Mic"}

    requests = client.get("/admin/fund-requests", headers=admin_headers).json()
    assert [r["title"] for r in requests] == ["Robotics Expo"]
    expo_id = requests[0]["_id"]

    resp = client.post(f"/admin/events/{expo_id}/update-funds", json={"approvedFund": 9000}, headers=admin_headers)
    assert resp.status_code == 200
    updated = client.get("/admin/fund-requests", headers=admin_headers).json()
    assert updated[0]["approvedFund"] == 9000
    # still pending: the amount is accepted regardless of status
    assert updated[0]["status"] == "pending"

    open_mic = next(e for e in all_events if e["title"] == "Open Mic")
    client.post(f"/admin/events/{open_mic['_id']}/update-funds", json={"approvedFund": 0}, headers=admin_headers)
    assert len(client.get("/admin/fund-requests", headers=admin_headers).json()) == 2


def test_update_funds_validation(client, admin_token):
    headers = auth_headers(admin_token)
    assert client.post("/admin/events/missing/update-funds", json={"approvedFund": 10}, headers=headers).status_code == 404
    assert client.post("/admin/events/missing/update-funds", json={"approvedFund": -10}, headers=headers).status_code == 400
    assert client.post("/admin/events/missing/approve", headers=headers).status_code == 404


def test_delete_student_removes_memberships(client, admin_token, student_token, head_token):
    club_id = get_club_id_by_slug("coding-club")
    student_id = get_student_id("23BD1A05C7")
    client.post("/student/join-club", json={"clubId": club_id}, headers=auth_headers(student_token))

    resp = client.delete(f"/admin/users/{student_id}", headers=auth_headers(admin_token))
    assert resp.status_code == 200
    assert resp.json()["message"] == "User permanently deleted"

    with SessionLocal() as session:
        assert session.get(models.Student, student_id) is None
        assert session.execute(select(models.ClubMembership)).first() is None
    head_view = client.get("/clubhead/dashboard", headers=auth_headers(head_token)).json()
    assert head_view["pendingRequests"] == []

    again = client.delete(f"/admin/users/{student_id}", headers=auth_headers(admin_token))
    assert again.status_code == 404


def test_delete_faculty_and_protect_admins(client, admin_token, faculty_token):
    users = client.get("/admin/users", headers=auth_headers(admin_token)).json()
    faculty = next(u for u in users if u["role"] == "faculty")
    admin = next(u for u in users if u["role"] == "admin")

    assert client.delete(f"/admin/users/{faculty['_id']}", headers=auth_headers(admin_token)).status_code == 200
    assert client.delete(f"/admin/users/{admin['_id']}", headers=auth_headers(admin_token)).status_code == 404

    relogin = client.post(
        "/login", json={"role": "faculty", "username": "ramesh12@gmail.com", "password": "Facult1!pass"}
    )
    assert relogin.status_code == 401
