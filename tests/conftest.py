"""
pytest configuration.

Puts the project root on sys.path and swaps the Mongo database for a
fresh mongomock one per test.
"""
import sys
from pathlib import Path

root_dir = str(Path(__file__).parent.parent)
if root_dir not in sys.path:
    sys.path.insert(0, root_dir)

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app


@pytest.fixture
def db():
    return mongomock.MongoClient()["ktv-test"]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def room(client):
    body = {"name": "Room A", "type": "VIP", "pricePerHour": 50, "capacity": 8}
    return client.post("/rooms", json=body).json()["data"]


@pytest.fixture
def customer(client):
    body = {"name": "Linh Tran", "email": "linh@example.com", "phone": "0901234567", "address": "12 Le Loi"}
    return client.post("/customers", json=body).json()["data"]
