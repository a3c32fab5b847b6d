"""
Shared fixtures: in-memory SQLite for the relational schema and mongomock
for the document store, rebuilt for every test.
"""
import os

# must be set before careerhub reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import mongomock
import pytest
from fastapi.testclient import TestClient

from careerhub.db.mongodb import set_mongo_client
from careerhub.db.postgres import init_schema, drop_schema, SessionLocal
from careerhub.main import app

PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def database():
    drop_schema()
    init_schema()
    set_mongo_client(mongomock.MongoClient())
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def anon_client():
    with TestClient(app) as c:
        yield c


def register(client: TestClient, email: str = "jordan@example.com", display_name: str = "Jordan Lee") -> dict:
    response = client.post("/api/auth/register", json={
        "email": email, "password": PASSWORD, "display_name": display_name,
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def client():
    """A client with a registered, signed-in user (session cookie set)."""
    with TestClient(app) as c:
        c.session = register(c)
        yield c


@pytest.fixture
def other_client():
    """A second user with a separate workspace."""
    with TestClient(app) as c:
        c.session = register(c, email="sam@example.com", display_name="Sam Park")
        yield c


def create(client: TestClient, path: str, payload: dict) -> dict:
    response = client.post(f"/api/{path}", json=payload)
    assert response.status_code == 201, response.text
    return response.json()
