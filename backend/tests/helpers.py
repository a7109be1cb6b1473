from sqlalchemy import select

from clubportal.db import SessionLocal
from clubportal import models


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login(client, role: str, username: str, password: str) -> str:
    resp = client.post("/login", json={"role": role, "username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def get_club_id_by_slug(slug: str) -> str:
    with SessionLocal() as session:
        club = session.execute(select(models.Club).where(models.Club.slug == slug)).scalar_one_or_none()
        assert club is not None
        return club.id


def get_student_id(username: str) -> str:
    with SessionLocal() as session:
        student = session.execute(
            select(models.Student).where(models.Student.username == username)
        ).scalar_one_or_none()
        assert student is not None
        return student.id
