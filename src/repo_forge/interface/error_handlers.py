"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception family maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.  Handlers are
registered per base class, so subclasses inherit their family's status.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from repo_forge.domain.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    RateLimitedError,
    RepoForgeError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[RepoForgeError], int]] = [
    (ValidationError, 400),
    (AuthError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (RateLimitedError, 429),
    (UpstreamError, 502),
    (InternalError, 500),
    (RepoForgeError, 500),
]


def _error_json(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    content: dict[str, str] = {"status": "error", "message": message}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                detail = getattr(exc, "detail", None)
                if status_code >= 500:
                    logger.error("%s: %s (%s)", type(exc).__name__, exc, detail)
                else:
                    logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_json(status_code, str(exc), detail)

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    # ── Local rate limiter ──────────────────────────────────────────────

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning("Rate limit hit on %s: %s", request.url.path, exc.detail)
        return _error_json(429, "Too many requests. Please try again later.")

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(400, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
