"""FastAPI dependency injection wiring.

Shared resources live on ``app.state`` (see :func:`repo_forge.interface.app.create_app`);
use cases are assembled per request from them.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Header, Request

from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.domain.ports.repo_fetcher import RepoFetcher
from repo_forge.infrastructure.config import Settings
from repo_forge.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_forge.services.architecture_analyzer import AnalyzeArchitectureUseCase
from repo_forge.services.auth import AccountService, TokenService, extract_bearer
from repo_forge.services.code_summarizer import SummarizeCodeUseCase
from repo_forge.services.readme_generator import GenerateReadmeUseCase
from repo_forge.services.repo_explorer import RepoExplorer


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_ai_gateway(request: Request) -> AIGateway:
    gateway: AIGateway = request.app.state.ai_gateway
    return gateway


def get_token_service(request: Request) -> TokenService:
    tokens: TokenService = request.app.state.tokens
    return tokens


def get_repo_fetcher(
    request: Request, settings: Settings = Depends(get_settings)
) -> RepoFetcher:
    token = settings.github_token.get_secret_value() if settings.github_token else None
    return GitHubRestAdapter(client=request.app.state.http_client, token=token)


def get_account_service(
    request: Request, tokens: TokenService = Depends(get_token_service)
) -> AccountService:
    return AccountService(store=request.app.state.credential_store, tokens=tokens)


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> dict[str, Any]:
    """Verify the bearer token and expose its claims on ``request.state.user``."""
    claims = tokens.verify(extract_bearer(authorization))
    request.state.user = claims
    return claims


# ── Use cases ───────────────────────────────────────────────────────────────


def get_code_summarizer(
    settings: Settings = Depends(get_settings),
    ai_gateway: AIGateway = Depends(get_ai_gateway),
) -> SummarizeCodeUseCase:
    return SummarizeCodeUseCase(ai_gateway, max_code_tokens=settings.max_code_tokens)


def get_readme_generator(
    settings: Settings = Depends(get_settings),
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
    ai_gateway: AIGateway = Depends(get_ai_gateway),
) -> GenerateReadmeUseCase:
    return GenerateReadmeUseCase(fetcher, ai_gateway, file_chars=settings.readme_file_chars)


def get_architecture_analyzer(
    settings: Settings = Depends(get_settings),
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
    ai_gateway: AIGateway = Depends(get_ai_gateway),
) -> AnalyzeArchitectureUseCase:
    return AnalyzeArchitectureUseCase(
        fetcher, ai_gateway, file_chars=settings.architecture_file_chars
    )


def get_repo_explorer(
    settings: Settings = Depends(get_settings),
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
    ai_gateway: AIGateway = Depends(get_ai_gateway),
) -> RepoExplorer:
    return RepoExplorer(
        fetcher,
        ai_gateway,
        file_chars=settings.explorer_file_chars,
        readme_chars=settings.search_readme_chars,
    )
