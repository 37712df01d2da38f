"""Credential store adapters: Mongo mapping and duplicate handling, in-memory store."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from repo_forge.domain.entities import Credential
from repo_forge.domain.exceptions import EmailAlreadyRegisteredError
from repo_forge.infrastructure import credential_store
from repo_forge.infrastructure.credential_store import (
    InMemoryCredentialStore,
    MongoCredentialStore,
)
from repo_forge.services.auth import AccountService, TokenService


class FakeCollection:
    """Async collection honouring a unique index on ``email``."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[tuple[list[tuple[str, int]], dict[str, Any]]] = []
        self.hide_from_find = False

    async def create_index(self, keys: list[tuple[str, int]], **kwargs: Any) -> str:
        self.indexes.append((keys, kwargs))
        return "email_1"

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        if self.hide_from_find:
            return None
        return next((d for d in self.docs if d["email"] == query["email"]), None)

    async def insert_one(self, doc: dict[str, Any]) -> Any:
        if any(d["email"] == doc["email"] for d in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error collection: logins", 11000)
        doc["_id"] = ObjectId()
        self.docs.append(doc)
        return type("InsertOneResult", (), {"inserted_id": doc["_id"]})()


class FakeMongoClient:
    def __init__(self, url: str) -> None:
        self.url = url
        self.collection = FakeCollection()
        self.databases: list[str] = []
        self.closed = False

    def __getitem__(self, database: str) -> dict[str, FakeCollection]:
        self.databases.append(database)
        return {"logins": self.collection}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mongo_store(monkeypatch: pytest.MonkeyPatch) -> MongoCredentialStore:
    monkeypatch.setattr(credential_store, "AsyncMongoClient", FakeMongoClient)
    return MongoCredentialStore("mongodb://db.invalid:27017", "repo_forge_test")


def _collection(store: MongoCredentialStore) -> FakeCollection:
    return store._collection  # type: ignore[return-value]


def test_mongo_store_uses_logins_collection(mongo_store: MongoCredentialStore) -> None:
    client: FakeMongoClient = mongo_store._client  # type: ignore[assignment]
    assert client.url == "mongodb://db.invalid:27017"
    assert client.databases == ["repo_forge_test"]


def test_ensure_indexes_requests_unique_email(mongo_store: MongoCredentialStore) -> None:
    asyncio.run(mongo_store.ensure_indexes())
    assert _collection(mongo_store).indexes == [([("email", ASCENDING)], {"unique": True})]


def test_create_then_find_maps_document(mongo_store: MongoCredentialStore) -> None:
    created = asyncio.run(mongo_store.create("a@b.com", "$2b$10$hash"))

    doc = _collection(mongo_store).docs[0]
    assert doc["email"] == "a@b.com"
    assert doc["password"] == "$2b$10$hash"
    assert doc["createdAt"] == doc["updatedAt"]
    assert created.id == str(doc["_id"])

    found = asyncio.run(mongo_store.find_by_email("a@b.com"))
    assert found == Credential(id=str(doc["_id"]), email="a@b.com", password_hash="$2b$10$hash")


def test_find_unknown_email(mongo_store: MongoCredentialStore) -> None:
    assert asyncio.run(mongo_store.find_by_email("nobody@b.com")) is None


def test_duplicate_key_becomes_conflict(mongo_store: MongoCredentialStore) -> None:
    asyncio.run(mongo_store.create("a@b.com", "h1"))
    with pytest.raises(EmailAlreadyRegisteredError, match="Email already in use"):
        asyncio.run(mongo_store.create("a@b.com", "h2"))
    assert len(_collection(mongo_store).docs) == 1


def test_signup_race_is_settled_by_unique_index(mongo_store: MongoCredentialStore) -> None:
    accounts = AccountService(mongo_store, TokenService("s3cret"))
    asyncio.run(accounts.signup("a@b.com", "secret1"))

    # a concurrent signup that passed the lookup before the first insert landed
    _collection(mongo_store).hide_from_find = True
    with pytest.raises(EmailAlreadyRegisteredError):
        asyncio.run(accounts.signup("A@b.com", "secret2"))
    assert len(_collection(mongo_store).docs) == 1


def test_close_closes_client(mongo_store: MongoCredentialStore) -> None:
    asyncio.run(mongo_store.close())
    assert mongo_store._client.closed  # type: ignore[attr-defined]


def test_in_memory_store_rejects_duplicates() -> None:
    store = InMemoryCredentialStore()
    asyncio.run(store.create("a@b.com", "h1"))
    with pytest.raises(EmailAlreadyRegisteredError):
        asyncio.run(store.create("a@b.com", "h2"))
    assert len(store) == 1
