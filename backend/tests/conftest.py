"""
Fauna API: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db / mock_collection: MagicMock database for service unit tests
    ├── fake_db: In-memory document store for endpoint tests
    └── test_client: HTTPX AsyncClient over ASGITransport, fake_db injected
                     through app.dependency_overrides[get_database]

The in-memory store implements the subset of the pymongo asyncio API the
services call (find, find_one, insert_one, update_one, delete_one,
aggregate, cursor.to_list) and the aggregation stages the animal service
emits ($lookup, $unwind, $match, $project, $sort, $skip, $limit).
"""

import copy
import os
import re
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "fauna_test"
os.environ["MONGODB_CREATE_INDEXES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

_MISSING = object()


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Document Store
# ══════════════════════════════════════════════════════════════════════════

def _get_path(doc: Dict[str, Any], path: str) -> Any:
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(doc: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    for path, condition in (query or {}).items():
        value = _get_path(doc, path)
        if isinstance(condition, dict) and "$regex" in condition:
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            if not isinstance(value, str) or not re.search(condition["$regex"], value, flags):
                return False
        elif value is _MISSING or value != condition:
            return False
    return True


def _sort(docs: List[Dict[str, Any]], spec) -> List[Dict[str, Any]]:
    items = list(spec.items()) if isinstance(spec, dict) else list(spec or [])
    # Stable sort from the least significant key; missing values sort first
    for field, direction in reversed(items):
        def key(doc, field=field):
            value = _get_path(doc, field)
            return (0, "") if value is _MISSING or value is None else (1, value)
        docs = sorted(docs, key=key, reverse=direction < 0)
    return docs


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    def __init__(self, db: "FakeDatabase", name: str):
        self.db = db
        self.name = name
        self.docs: List[Dict[str, Any]] = []

    async def insert_one(self, doc: Dict[str, Any]):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: Dict[str, Any]):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None, sort=None, skip: int = 0, limit: int = 0) -> FakeCursor:
        docs = [copy.deepcopy(d) for d in self.docs if _matches(d, query)]
        docs = _sort(docs, sort)[skip:]
        if limit:
            docs = docs[:limit]
        return FakeCursor(docs)

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                for field, value in update["$set"].items():
                    doc[field] = copy.deepcopy(value)
                return SimpleNamespace(matched_count=1, modified_count=int(doc != before))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: Dict[str, Any]):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> FakeCursor:
        docs = [copy.deepcopy(d) for d in self.docs]
        for stage in pipeline:
            (operator, spec), = stage.items()
            docs = getattr(self, "_stage_" + operator[1:])(docs, spec)
        return FakeCursor(docs)

    # ── Aggregation stages ────────────────────────────────────────────────

    def _stage_lookup(self, docs, spec):
        foreign = self.db[spec["from"]].docs
        for doc in docs:
            local = _get_path(doc, spec["localField"])
            doc[spec["as"]] = [
                copy.deepcopy(f)
                for f in foreign
                if local is not _MISSING and f.get(spec["foreignField"]) == local
            ]
        return docs

    def _stage_unwind(self, docs, spec):
        field = spec["path"].lstrip("$")
        out = []
        for doc in docs:
            values = doc.get(field)
            if values:
                for value in values:
                    out.append({**doc, field: value})
            elif spec.get("preserveNullAndEmptyArrays"):
                out.append({k: v for k, v in doc.items() if k != field})
        return out

    def _stage_match(self, docs, spec):
        return [d for d in docs if _matches(d, spec)]

    def _stage_project(self, docs, spec):
        out = []
        for doc in docs:
            projected = {}
            for field, rule in spec.items():
                if isinstance(rule, str) and rule.startswith("$"):
                    value = _get_path(doc, rule[1:])
                else:
                    value = doc.get(field, _MISSING) if rule else _MISSING
                if value is not _MISSING:
                    projected[field] = value
            out.append(projected)
        return out

    def _stage_sort(self, docs, spec):
        return _sort(docs, spec)

    def _stage_skip(self, docs, spec):
        return docs[spec:]

    def _stage_limit(self, docs, spec):
        return docs[:spec]


class FakeDatabase:
    name = "fauna_test"

    def __init__(self):
        self._collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(self, name)
        return self._collections[name]


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    A MagicMock collection with awaitable driver methods.

    Usage:
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
    """
    collection = MagicMock()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    collection.aggregate = AsyncMock(return_value=cursor)
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=1, modified_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.cursor = cursor
    return collection


@pytest.fixture
def mock_db(mock_collection):
    """MagicMock database whose every collection is `mock_collection`."""
    db = MagicMock()
    db.__getitem__.return_value = mock_collection
    return db


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest_asyncio.fixture
async def test_client(fake_db):
    """
    Async HTTP client talking to the FastAPI app with the in-memory store.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/categories")
            assert response.status_code == 200
    """
    from fauna_api.database import get_database
    from fauna_api.main import app

    app.dependency_overrides[get_database] = lambda: fake_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
