"""API routes — thin controllers that delegate to the use cases."""

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from repo_forge.interface.dependencies import (
    get_account_service,
    get_architecture_analyzer,
    get_code_summarizer,
    get_current_user,
    get_readme_generator,
    get_repo_explorer,
    get_settings,
)
from repo_forge.interface.rate_limit import RATE_LIMIT, limiter
from repo_forge.interface.schemas import (
    AnalysisResponse,
    CodeSummaryRequest,
    CodeSummaryResponse,
    ContentRequest,
    ContentResponse,
    CredentialsRequest,
    DiagramResponse,
    ProfileResponse,
    RepoRequest,
    SearchRequest,
    SearchResponse,
    TokenResponse,
    TreeItem,
    TreeResponse,
)
from repo_forge.infrastructure.config import Settings
from repo_forge.services.architecture_analyzer import AnalyzeArchitectureUseCase
from repo_forge.services.auth import AccountService
from repo_forge.services.code_summarizer import SummarizeCodeUseCase
from repo_forge.services.readme_generator import GenerateReadmeUseCase
from repo_forge.services.repo_explorer import RepoExplorer

_REPO_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"description": "Missing or invalid repoUrl"},
    401: {"description": "Missing / invalid token, or GitHub rejected the server token"},
    404: {"description": "Repository not found or private"},
    429: {"description": "Local or GitHub rate limit exceeded"},
    502: {"description": "GitHub or AI provider failure"},
}

# ── Credentials ─────────────────────────────────────────────────────────────

auth_router = APIRouter(tags=["auth"])


@auth_router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid email or password"}, 409: {"description": "Email already in use"}},
)
async def signup(
    body: CredentialsRequest,
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    """Create an account and return a session token."""
    token = await accounts.signup(body.email, body.password)
    return TokenResponse(message="Signup successful.", token=token)


@auth_router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    body: CredentialsRequest,
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    token = await accounts.login(body.email, body.password)
    return TokenResponse(message="Login successful.", token=token)


@auth_router.get("/profile", response_model=ProfileResponse)
async def profile(user: dict[str, Any] = Depends(get_current_user)) -> ProfileResponse:
    """Identity check for the bearer token."""
    return ProfileResponse(user=user)


# ── AI artifacts (rate limited) ─────────────────────────────────────────────

analysis_router = APIRouter(dependencies=[Depends(get_current_user)], tags=["analysis"])


@analysis_router.post("/api/ai/code/summarize", response_model=CodeSummaryResponse)
@limiter.limit(RATE_LIMIT)
async def summarize_code(
    request: Request,
    body: CodeSummaryRequest,
    use_case: SummarizeCodeUseCase = Depends(get_code_summarizer),
) -> CodeSummaryResponse:
    """Review a pasted code snippet."""
    analysis = await use_case.execute(body.code)
    summary = analysis.get("summary")
    return CodeSummaryResponse(
        summary=summary if isinstance(summary, str) else str(summary or ""),
        analysis=analysis,
    )


@analysis_router.post("/api/readme/generate", response_model=AnalysisResponse, responses=_REPO_ERRORS)
@limiter.limit(RATE_LIMIT)
async def generate_readme(
    request: Request,
    body: RepoRequest,
    use_case: GenerateReadmeUseCase = Depends(get_readme_generator),
) -> AnalysisResponse:
    """Draft a README for a GitHub repository."""
    return AnalysisResponse(data=await use_case.execute(body.repo_url))


@analysis_router.post(
    "/api/architecture/analyze", response_model=AnalysisResponse, responses=_REPO_ERRORS
)
@limiter.limit(RATE_LIMIT)
async def analyze_architecture(
    request: Request,
    body: RepoRequest,
    use_case: AnalyzeArchitectureUseCase = Depends(get_architecture_analyzer),
) -> AnalysisResponse:
    """Describe the layers, components and data flow of a repository."""
    return AnalysisResponse(data=await use_case.execute(body.repo_url))


# ── File explorer ───────────────────────────────────────────────────────────

explorer_router = APIRouter(
    prefix="/api/explorer",
    dependencies=[Depends(get_current_user)],
    tags=["explorer"],
    responses=_REPO_ERRORS,
)


@explorer_router.post("/tree", response_model=TreeResponse)
async def explorer_tree(
    body: RepoRequest,
    explorer: RepoExplorer = Depends(get_repo_explorer),
) -> TreeResponse:
    files = await explorer.tree(body.repo_url)
    return TreeResponse(tree=[TreeItem(path=e.path, type=e.kind.git_type) for e in files])


@explorer_router.post("/content", response_model=ContentResponse)
async def explorer_content(
    body: ContentRequest,
    explorer: RepoExplorer = Depends(get_repo_explorer),
) -> ContentResponse:
    return ContentResponse(content=await explorer.content(body.repo_url, body.path))


@explorer_router.post("/search", response_model=SearchResponse)
async def explorer_search(
    body: SearchRequest,
    explorer: RepoExplorer = Depends(get_repo_explorer),
) -> SearchResponse:
    """Answer a question about where things live in the repository."""
    data = await explorer.search(body.repo_url, body.query)
    answer = data.get("answer")
    files = data.get("relevant_files")
    return SearchResponse(
        result=answer if isinstance(answer, str) else str(answer or ""),
        relevant_files=[str(f) for f in files] if isinstance(files, list) else [],
    )


@explorer_router.post("/diagram", response_model=DiagramResponse)
async def explorer_diagram(
    body: RepoRequest,
    explorer: RepoExplorer = Depends(get_repo_explorer),
    settings: Settings = Depends(get_settings),
) -> DiagramResponse:
    """Mermaid flowchart of the repository's folder structure."""
    diagram = await explorer.diagram(body.repo_url, max_nodes=settings.diagram_max_nodes)
    return DiagramResponse(
        mermaid=diagram.mermaid,
        node_count=diagram.node_count,
        truncated=diagram.truncated,
    )
