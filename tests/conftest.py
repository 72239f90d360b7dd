import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from api.security import create_access_token
from app import app
from user_store import create_user


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    """Route every collection to a fresh in-memory MongoDB."""
    monkeypatch.setenv("MONGODB_DB", "dev_connector_test")
    monkeypatch.setenv("EMPTY_LIST_NOT_FOUND", "true")
    monkeypatch.setenv("CONFLICT_RETRIES", "3")
    client = mongomock.MongoClient()
    database.set_client(client)
    yield client["dev_connector_test"]
    database.set_client(None)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    def _make(name: str = "Alice", avatar: str | None = "//www.gravatar.com/avatar/alice") -> dict:
        user = create_user({"name": name, "email": f"{name.lower()}@example.com", "avatar": avatar})
        user_id = str(user["_id"])
        token = create_access_token({"id": user_id, "name": name, "avatar": avatar})
        return {
            "id": user_id,
            "name": name,
            "avatar": avatar,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make
