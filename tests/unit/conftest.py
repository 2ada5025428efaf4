"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (AsyncMongoClient is replaced by an in-memory fake)
- Environment variable isolation (prevents credential leakage)

The fake implements only the slice of the pymongo asyncio API the handler
uses, backed by a shared FakeMongoServer so several clients see the same data.
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest
from bson import ObjectId


class FakeInsertManyResult:
    def __init__(self, inserted_ids):
        self.inserted_ids = inserted_ids


class FakeUpdateResult:
    def __init__(self, matched_count, modified_count, upserted_id=None):
        self.matched_count = matched_count
        self.modified_count = modified_count
        self.upserted_id = upserted_id


def _matches(document: Dict[str, Any], filter: Optional[Dict[str, Any]]) -> bool:
    return all(document.get(key) == value for key, value in (filter or {}).items())


def _project(document: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    doc = copy.deepcopy(document)
    if projection and projection.get("_id") is False:
        doc.pop("_id", None)
    return doc


class FakeMongoServer:
    """Shared in-memory state: {database: {collection: [documents]}}."""

    def __init__(self):
        self.databases: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        self.clients: List["FakeAsyncMongoClient"] = []
        self.failures: Dict[str, Exception] = {}

    def fail(self, operation: str, exc: Exception) -> None:
        """Make the next calls of an operation raise exc."""
        self.failures[operation] = exc

    def check(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    def collection(self, database: str, name: str) -> Optional[List[Dict[str, Any]]]:
        return self.databases.get(database, {}).get(name)


class FakeCursor:
    def __init__(self, collection: "FakeCollection", filter, projection):
        self._collection = collection
        self._filter = filter
        self._projection = projection

    async def to_list(self, length=None):
        self._collection.server.check("find")
        docs = [
            _project(doc, self._projection)
            for doc in self._collection.documents
            if _matches(doc, self._filter)
        ]
        return docs if length is None else docs[:length]


class FakeCollection:
    def __init__(self, database: "FakeDatabase", name: str):
        self.database = database
        self.name = name

    @property
    def server(self) -> FakeMongoServer:
        return self.database.server

    @property
    def documents(self) -> List[Dict[str, Any]]:
        return self.database.data.get(self.name, [])

    def _create(self) -> List[Dict[str, Any]]:
        return self.database.data.setdefault(self.name, [])

    def find(self, filter=None, projection=None):
        return FakeCursor(self, filter, projection)

    async def find_one(self, filter=None):
        self.server.check("find_one")
        for doc in self.documents:
            if _matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def insert_many(self, documents, ordered=True):
        self.server.check("insert_many")
        stored = self._create()
        inserted_ids = []
        for doc in documents:
            # The real driver mutates the caller's documents
            doc.setdefault("_id", ObjectId())
            stored.append(copy.deepcopy(doc))
            inserted_ids.append(doc["_id"])
        return FakeInsertManyResult(inserted_ids)

    async def replace_one(self, filter, replacement, upsert=False):
        self.server.check("replace_one")
        stored = self.documents
        for index, doc in enumerate(stored):
            if _matches(doc, filter):
                new_doc = copy.deepcopy(replacement)
                new_doc["_id"] = doc["_id"]
                stored[index] = new_doc
                return FakeUpdateResult(1, 1)
        if not upsert:
            return FakeUpdateResult(0, 0)
        new_doc = copy.deepcopy(replacement)
        new_doc.setdefault("_id", ObjectId())
        self._create().append(new_doc)
        return FakeUpdateResult(0, 0, upserted_id=new_doc["_id"])

    async def rename(self, new_name, dropTarget=False, **kwargs):
        self.server.check("rename")
        data = self.database.data
        if new_name in data and not dropTarget:
            raise RuntimeError(f"target namespace exists: {new_name}")
        data[new_name] = data.pop(self.name, [])


class FakeDatabase:
    def __init__(self, client: "FakeAsyncMongoClient", name: str):
        self.client = client
        self.name = name

    @property
    def server(self) -> FakeMongoServer:
        return self.client.server

    @property
    def data(self) -> Dict[str, List[Dict[str, Any]]]:
        return self.server.databases.setdefault(self.name, {})

    def __getitem__(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    async def list_collection_names(self, filter=None, **kwargs):
        self.server.check("list_collection_names")
        names = list(self.data)
        if filter and "name" in filter:
            names = [name for name in names if name == filter["name"]]
        return names

    async def drop_collection(self, name, **kwargs):
        self.server.check("drop_collection")
        self.data.pop(name, None)


class FakeAdmin:
    def __init__(self, client: "FakeAsyncMongoClient"):
        self.client = client

    async def command(self, name, *args, **kwargs):
        # Yield like a real round trip so concurrent callers interleave
        await asyncio.sleep(0)
        self.client.server.check(name)
        return {"ok": 1}


class FakeAsyncMongoClient:
    def __init__(self, server: FakeMongoServer, *args, **kwargs):
        self.server = server
        self.args = args
        self.kwargs = kwargs
        self.closed = False
        self.admin = FakeAdmin(self)
        server.clients.append(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        return FakeDatabase(self, name)

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def fake_mongo():
    """
    Replace pymongo's AsyncMongoClient in the handler with the in-memory fake.

    Yields the FakeMongoServer so tests can inspect stored documents and
    inject failures with server.fail(operation, exc).
    """
    server = FakeMongoServer()
    with patch(
        "docstore.handler.AsyncMongoClient",
        side_effect=lambda *args, **kwargs: FakeAsyncMongoClient(server, *args, **kwargs),
    ):
        yield server


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.
    """
    for name in (
        "MONGODB_URI",
        "MONGODB_DATABASE",
        "MONGODB_TIMEOUT_MS",
        "DOCSTORE_REPLACE_STRATEGY",
        "DOCSTORE_LOG_LEVEL",
        "DOCSTORE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store():
    """Unconnected handler against the fake server."""
    from docstore import DocumentStoreHandler
    return DocumentStoreHandler("mongodb://test", "testdb")


@pytest.fixture
def shadow_store():
    """Unconnected handler using the shadow-swap replace strategy."""
    from docstore import DocumentStoreHandler, ReplaceStrategy
    return DocumentStoreHandler(
        "mongodb://test", "testdb", replace_strategy=ReplaceStrategy.SHADOW_SWAP
    )
