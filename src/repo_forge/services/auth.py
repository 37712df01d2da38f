"""Accounts and bearer tokens.

Passwords are hashed with ``bcrypt``; sessions are stateless HS256 JWTs
signed with the configured secret.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from repo_forge.domain.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from repo_forge.domain.ports.credential_store import CredentialStore
from repo_forge.domain.value_objects import check_password, normalize_email

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def hash_password(password: str, rounds: int = _BCRYPT_ROUNDS) -> str:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, password_hash.encode("ascii"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def extract_bearer(header: str | None) -> str:
    """Accept ``Bearer <token>`` or a bare token."""
    if not header or not header.strip():
        raise InvalidTokenError("Access denied. No token provided.")
    scheme, _, value = header.strip().partition(" ")
    header = value.strip() if scheme == "Bearer" else header.strip()
    if not header:
        raise InvalidTokenError("Access denied. No token provided.")
    return header


class TokenService:
    """Issue and verify time-limited JWTs carrying the user id and email."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=7)) -> None:
        self._secret = secret
        self._ttl = ttl

    def issue(self, user_id: str, email: str, *, now: datetime | None = None) -> str:
        issued = now or datetime.now(timezone.utc)
        claims = {
            "id": user_id,
            "email": email,
            "iat": issued,
            "exp": issued + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Invalid or expired token.") from exc
        except jwt.PyJWTError as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenError("Invalid or expired token.") from exc

        if not claims.get("id") or not claims.get("email"):
            raise InvalidTokenError("Invalid or expired token.")
        return claims


class AccountService:
    """Signup / login against a :class:`CredentialStore`."""

    def __init__(self, store: CredentialStore, tokens: TokenService) -> None:
        self._store = store
        self._tokens = tokens

    async def signup(self, email: str, password: str) -> str:
        """Create an account and return a fresh token."""
        normalized = normalize_email(email)
        check_password(password)

        # Fast path only; the store's uniqueness guarantee is authoritative.
        if await self._store.find_by_email(normalized) is not None:
            raise EmailAlreadyRegisteredError("Email already in use.")

        password_hash = await asyncio.to_thread(hash_password, password)
        credential = await self._store.create(normalized, password_hash)
        logger.info("Created account %s", credential.id)
        return self._tokens.issue(credential.id, credential.email)

    async def login(self, email: str, password: str) -> str:
        """Return a token for a valid email / password pair.

        Unknown email and wrong password produce the same error.
        """
        normalized = email.strip().lower()
        credential = await self._store.find_by_email(normalized)
        if credential is None:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        matches = await asyncio.to_thread(verify_password, password, credential.password_hash)
        if not matches:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        return self._tokens.issue(credential.id, credential.email)
