"""Port: credential store — a single collection of accounts keyed by email."""

from __future__ import annotations

from typing import Protocol

from repo_forge.domain.entities import Credential


class CredentialStore(Protocol):
    """Abstract contract for persisting account credentials."""

    async def find_by_email(self, email: str) -> Credential | None:
        """Return the account for a normalized email, if any."""
        ...

    async def create(self, email: str, password_hash: str) -> Credential:
        """Insert a new account.

        Raises ``EmailAlreadyRegisteredError`` when the email is taken.
        """
        ...
