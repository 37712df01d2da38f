"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.domain.ports.credential_store import CredentialStore
from repo_forge.infrastructure.config import Settings, get_settings
from repo_forge.infrastructure.credential_store import (
    InMemoryCredentialStore,
    MongoCredentialStore,
)
from repo_forge.infrastructure.openai_adapter import OpenAIAdapter
from repo_forge.interface.error_handlers import register_error_handlers
from repo_forge.interface.rate_limit import limiter
from repo_forge.interface.routes import analysis_router, auth_router, explorer_router
from repo_forge.services.auth import TokenService

logger = logging.getLogger(__name__)


def _build_credential_store(settings: Settings) -> CredentialStore:
    if settings.mongo_url:
        return MongoCredentialStore(
            settings.mongo_url.get_secret_value(), settings.mongo_database
        )
    return InMemoryCredentialStore()


def _build_ai_gateway(settings: Settings) -> OpenAIAdapter:
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    if not api_key:
        logger.error("Missing OPENAI_API_KEY — AI endpoints will fail until it is set")
    return OpenAIAdapter(
        api_key=api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.ai_timeout_seconds,
    )


def create_app(
    settings: Settings | None = None,
    *,
    ai_gateway: AIGateway | None = None,
    credential_store: CredentialStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build and wire the FastAPI application.

    Anything not passed in is constructed from *settings*.  Resources built
    here are closed on shutdown; injected ones belong to the caller.
    """
    settings = settings or get_settings()
    owned: list[object] = []

    if http_client is None:
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.github_timeout_seconds))
        owned.append(http_client)
    if ai_gateway is None:
        ai_gateway = _build_ai_gateway(settings)
        owned.append(ai_gateway)
    if credential_store is None:
        credential_store = _build_credential_store(settings)
        owned.append(credential_store)

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Prepare the credential store; release owned resources on shutdown."""
        ensure_indexes = getattr(app.state.credential_store, "ensure_indexes", None)
        if ensure_indexes is not None:
            await ensure_indexes()
        yield
        for resource in owned:
            if isinstance(resource, httpx.AsyncClient):
                await resource.aclose()
            else:
                await resource.close()  # type: ignore[attr-defined]

    app = FastAPI(
        title="Repo Forge",
        version="1.0.0",
        description=(
            "Takes a GitHub repository URL and returns AI-generated artifacts: "
            "a README draft, an architectural analysis, or an explorable file "
            "tree with assisted search."
        ),
        lifespan=_lifespan,
    )

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.ai_gateway = ai_gateway
    app.state.credential_store = credential_store
    app.state.tokens = TokenService(
        settings.jwt_secret.get_secret_value(),
        ttl=timedelta(days=settings.jwt_ttl_days),
    )
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(analysis_router)
    app.include_router(explorer_router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
