import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "finance_test")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import copy
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient


class InMemoryCollection:
    """Stands in for an AsyncIOMotorCollection: find_one / update_one / delete_one on `_id`."""

    def __init__(self, name, documents=()):
        self.name = name
        self.documents = {doc["_id"]: copy.deepcopy(doc) for doc in documents}
        self.writes = 0

    def _match(self, filter):
        key = filter["_id"]
        candidates = key["$in"] if isinstance(key, dict) else [key]
        for candidate in candidates:
            if candidate in self.documents:
                return candidate
        return None

    async def find_one(self, filter):
        doc = self.documents.get(self._match(filter))
        return copy.deepcopy(doc) if doc is not None else None

    async def update_one(self, filter, update):
        self.writes += 1
        doc = self.documents.get(self._match(filter))
        if doc is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        doc.update(update["$set"])
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def delete_one(self, filter):
        self.writes += 1
        removed = self.documents.pop(self._match(filter), None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)


class InMemoryDatabase:
    def __init__(self):
        self.collections = {}

    def get_collection(self, name):
        if name not in self.collections:
            self.collections[name] = InMemoryCollection(name)
        return self.collections[name]


@pytest.fixture
def database():
    db = InMemoryDatabase()
    db.collections["expenses"] = InMemoryCollection(
        "expenses",
        [
            {"_id": "e1", "title": "Coffee", "description": "", "amount": 4.5},
            {"_id": "42", "title": "Groceries", "description": "Weekly shop", "amount": 63.2},
        ],
    )
    db.collections["invoices"] = InMemoryCollection(
        "invoices",
        [
            {"_id": "inv-1", "title": "ACME consulting", "description": None, "amount": 1200.0},
        ],
    )
    return db


@pytest.fixture
def client(database):
    from main import create_app

    with TestClient(create_app(database=database)) as test_client:
        yield test_client
