"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class RepoForgeError(Exception):
    """Base exception for the entire application."""

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


# ── Input validation (400) ──────────────────────────────────────────────────


class ValidationError(RepoForgeError):
    """The request body has the wrong shape or format."""


class InvalidGitHubUrlError(ValidationError):
    """The supplied URL does not point to a valid GitHub repository."""


class NotAFileError(ValidationError):
    """The requested repository path is a directory or other non-file entry."""


# ── Authentication (401) ────────────────────────────────────────────────────


class AuthError(RepoForgeError):
    """Missing, invalid or expired credentials."""


class InvalidCredentialsError(AuthError):
    """Email / password pair did not match an account."""


class InvalidTokenError(AuthError):
    """Bearer token is missing, malformed, tampered with or expired."""


class GitHubUnauthorizedError(AuthError):
    """GitHub rejected the configured token (401)."""


# ── Lookup / uniqueness (404, 409) ──────────────────────────────────────────


class NotFoundError(RepoForgeError):
    """The requested resource does not exist."""


class RepositoryNotFoundError(NotFoundError):
    """The repository does not exist or is private (404)."""


class RepoFileNotFoundError(NotFoundError):
    """The repository exists but has no file at the requested path."""


class ConflictError(RepoForgeError):
    """The resource already exists."""


class EmailAlreadyRegisteredError(ConflictError):
    """An account with this email is already registered."""


# ── Rate limiting (429) ─────────────────────────────────────────────────────


class RateLimitedError(RepoForgeError):
    """Too many requests, locally or upstream."""


class GitHubRateLimitError(RateLimitedError):
    """GitHub API rate limit exceeded (403 / 429)."""


# ── Upstream failures (502) ─────────────────────────────────────────────────


class UpstreamError(RepoForgeError):
    """A third-party dependency failed; provider detail is kept in ``detail``."""


class UpstreamAIError(UpstreamError):
    """The LLM provider was unreachable or returned an error."""


class GitHubApiError(UpstreamError):
    """Any GitHub failure not covered by a more specific error."""


# ── Internal (500) ──────────────────────────────────────────────────────────


class InternalError(RepoForgeError):
    """Something unanticipated went wrong on our side."""


class AIConfigurationError(InternalError):
    """The AI backend is not configured (no API key)."""
