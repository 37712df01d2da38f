"""Per-caller request limits for the model-backed endpoints."""

from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

# Fixed window of one minute, ten requests per caller
RATE_LIMIT = "10/minute"


def caller_key(request: Request) -> str:
    """Authenticated user id when the auth dependency has run, else client IP."""
    user = getattr(request.state, "user", None)
    if isinstance(user, dict) and user.get("id"):
        return f"user:{user['id']}"
    return get_remote_address(request)


limiter = Limiter(key_func=caller_key, strategy="fixed-window")
