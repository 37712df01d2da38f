"""Credential store adapters — implement the CredentialStore port."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import DuplicateKeyError

from repo_forge.domain.entities import Credential
from repo_forge.domain.exceptions import EmailAlreadyRegisteredError

logger = logging.getLogger(__name__)

_COLLECTION = "logins"


class MongoCredentialStore:
    """Accounts kept in a MongoDB collection with a unique index on ``email``.

    The index is what guarantees one account per email under concurrent
    signups; ``create`` translates the duplicate-key error.
    """

    def __init__(self, url: str, database: str) -> None:
        self._client: AsyncMongoClient = AsyncMongoClient(url)
        self._collection = self._client[database][_COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("email", ASCENDING)], unique=True)
        logger.info("Credential store ready (collection %s)", _COLLECTION)

    async def find_by_email(self, email: str) -> Credential | None:
        doc = await self._collection.find_one({"email": email})
        if doc is None:
            return None
        return Credential(id=str(doc["_id"]), email=doc["email"], password_hash=doc["password"])

    async def create(self, email: str, password_hash: str) -> Credential:
        now = datetime.now(timezone.utc)
        doc = {"email": email, "password": password_hash, "createdAt": now, "updatedAt": now}
        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise EmailAlreadyRegisteredError("Email already in use.") from exc
        return Credential(id=str(result.inserted_id), email=email, password_hash=password_hash)

    async def close(self) -> None:
        await self._client.close()


class InMemoryCredentialStore:
    """Process-local store used when no MongoDB URL is configured."""

    def __init__(self) -> None:
        self._by_email: dict[str, Credential] = {}

    async def ensure_indexes(self) -> None:
        logger.warning("No MONGO_URL configured; accounts live in memory only")

    async def find_by_email(self, email: str) -> Credential | None:
        return self._by_email.get(email)

    async def create(self, email: str, password_hash: str) -> Credential:
        if email in self._by_email:
            raise EmailAlreadyRegisteredError("Email already in use.")
        credential = Credential(id=uuid.uuid4().hex, email=email, password_hash=password_hash)
        self._by_email[email] = credential
        return credential

    async def close(self) -> None:
        return None

    def __len__(self) -> int:
        return len(self._by_email)
