"""In-memory test doubles for the async MongoDB driver.

Only the operations the repositories issue are implemented. Write methods
return real ``pymongo.results`` objects so result mapping is exercised as in
production.
"""

import copy
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import ServerSelectionTimeoutError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from api.src.repositories.service_repo import TEXT_INDEX_FIELDS

Document = Dict[str, Any]


def _words(text: str) -> set:
    return set(re.findall(r"\w+", text.lower()))


def matches(document: Document, query: Optional[Document]) -> bool:
    """Evaluate the small subset of query operators the API uses."""
    for key, expected in (query or {}).items():
        if key == "$text":
            haystack = " ".join(str(document.get(field, "")) for field in TEXT_INDEX_FIELDS)
            if not _words(expected["$search"]) & _words(haystack):
                return False
        elif document.get(key) != expected:
            return False
    return True


class FakeCursor:
    """Subset of AsyncCursor: ``sort`` and ``to_list``."""

    def __init__(self, documents: List[Document]):
        self._documents = documents

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._documents.sort(key=lambda d: d[key], reverse=direction == DESCENDING)
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Document]:
        documents = [copy.deepcopy(d) for d in self._documents]
        return documents[:length] if length else documents


class FakeCollection:
    """Subset of AsyncCollection backed by a list."""

    def __init__(self, name: str, documents: Optional[List[Document]] = None):
        self.name = name
        self.documents: List[Document] = [copy.deepcopy(d) for d in documents or []]
        self.indexes: List[str] = []

    def _first(self, query: Document) -> Optional[Document]:
        return next((d for d in self.documents if matches(d, query)), None)

    def find(self, query: Optional[Document] = None) -> FakeCursor:
        return FakeCursor([d for d in self.documents if matches(d, query)])

    async def find_one(self, query: Document) -> Optional[Document]:
        document = self._first(query)
        return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, document: Document) -> InsertOneResult:
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    async def update_one(self, query: Document, update: Document) -> UpdateResult:
        document = self._first(query)
        if document is None:
            return UpdateResult({"n": 0, "nModified": 0}, True)

        changes = update["$set"]
        modified = any(document.get(k) != v for k, v in changes.items())
        document.update(changes)
        return UpdateResult({"n": 1, "nModified": 1 if modified else 0}, True)

    async def delete_one(self, query: Document) -> DeleteResult:
        document = self._first(query)
        if document is None:
            return DeleteResult({"n": 0}, True)
        self.documents.remove(document)
        return DeleteResult({"n": 1}, True)

    async def create_index(self, keys: List[tuple]) -> str:
        name = "_".join(f"{field}_{kind}" for field, kind in keys)
        if name not in self.indexes:
            self.indexes.append(name)
        return name


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))


class FakeAdmin:
    def __init__(self, client: "FakeMongoClient"):
        self._client = client

    async def command(self, name: str) -> Document:
        self._client.commands.append(name)
        if self._client.fail_ping:
            raise ServerSelectionTimeoutError("No servers found yet")
        return {"ok": 1.0}


class FakeMongoClient:
    """Subset of AsyncMongoClient used by MongoConnection."""

    def __init__(self, fail_ping: bool = False):
        self.fail_ping = fail_ping
        self.closed = False
        self.commands: List[str] = []
        self.databases: Dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase(name))

    async def close(self) -> None:
        self.closed = True
