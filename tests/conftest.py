import os

# Point the app at a private in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENFORCE_CARETAKER_ASSIGNMENTS"] = "false"

import pytest
from fastapi.testclient import TestClient

from medtrack.database import Base, SessionLocal, engine
from medtrack.main import app

PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def _fresh_database():
    # Every test starts from empty tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def register(client, username, role, password=PASSWORD):
    """Signs up and logs in an account, returning id, token and auth headers."""
    res = client.post("/signup", json={"username": username, "password": password, "role": role})
    assert res.status_code == 200, res.text
    res = client.post("/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    body = res.json()
    return {
        "id": body["userId"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


def add_medication(client, account, date, time="08:00", name="Metformin"):
    res = client.post(
        "/medications",
        json={"name": name, "dosage": "500mg", "frequency": "daily", "date": date, "time": time},
        headers=account["headers"],
    )
    assert res.status_code == 200, res.text
    return res.json()["id"]


@pytest.fixture
def patient(client):
    return register(client, "alice", "patient")


@pytest.fixture
def other_patient(client):
    return register(client, "bob", "patient")


@pytest.fixture
def caretaker(client):
    return register(client, "carol", "caretaker")
