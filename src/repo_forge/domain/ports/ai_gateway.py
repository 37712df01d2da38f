"""Port: AI gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class AIGateway(Protocol):
    """Abstract contract for a hosted text-completion model."""

    async def complete(self, prompt: str) -> str:
        """Send a prompt and return the raw completion text."""
        ...
