import os

os.environ["DATABASE_URL"] = "sqlite:///./test_clubs.db"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from clubportal.db import Base, SessionLocal, engine
from clubportal.main import app, seed_data

from helpers import login


@pytest.fixture(autouse=True)
def setup_test_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_data(session)
        session.commit()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def student_token(client):
    resp = client.post(
        "/register",
        json={"role": "student", "studentUsername": "23BD1A05C7", "studentPassword": "23BD1A05C7"},
    )
    assert resp.status_code == 200, resp.text
    return login(client, "student", "23BD1A05C7", "23BD1A05C7")


@pytest.fixture()
def head_token(client):
    resp = client.post(
        "/register",
        json={"role": "clubhead", "clubUsername": "Coding-Head", "clubPassword": "Codeclub1!"},
    )
    assert resp.status_code == 200, resp.text
    return login(client, "clubhead", "Coding-Head", "Codeclub1!")


@pytest.fixture()
def faculty_token(client):
    resp = client.post(
        "/register",
        json={
            "role": "faculty",
            "facultyEmail": "ramesh12@gmail.com",
            "facultyPassword": "Facult1!pass",
            "name": "Ramesh",
        },
    )
    assert resp.status_code == 200, resp.text
    return login(client, "faculty", "ramesh12@gmail.com", "Facult1!pass")


@pytest.fixture()
def admin_token(client):
    return login(client, "admin", "admin", "Admin123$")
