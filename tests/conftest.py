import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.db import mongodb
from app.db.mongodb import COLLECTIONS


@pytest.fixture
def mongo_db(monkeypatch):
    """
    Point the app at an in-memory mongomock database with real indexes.
    """
    client = mongomock.MongoClient()
    db = client["mentorship_test"]
    monkeypatch.setattr(mongodb, "_client", client)
    monkeypatch.setattr(mongodb, "_db", db)
    mongodb.init_mongo_indexes()
    return db


@pytest.fixture
def make_user(mongo_db):
    """Insert a member directory entry and return its ObjectId."""
    def _make(name, email):
        result = mongo_db[COLLECTIONS["users"]].insert_one(
            {"basic": {"name": name, "email_id": email}}
        )
        return result.inserted_id
    return _make


@pytest.fixture
def mentor(make_user):
    return make_user("Meera Mentor", "m@x.com")


@pytest.fixture
def mentee(make_user):
    return make_user("Uday Mentee", "u1@x.com")


@pytest.fixture
def meeting_id():
    return ObjectId()


@pytest.fixture
def client(mongo_db):
    from app.main import app

    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
