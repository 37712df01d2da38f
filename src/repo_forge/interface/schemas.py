"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _not_blank(value: str, field_name: str) -> str:
    stripped = value.strip()
    if not stripped:
        msg = f"{field_name} must not be empty."
        raise ValueError(msg)
    return stripped


# ── Auth ────────────────────────────────────────────────────────────────────


class CredentialsRequest(BaseModel):
    """Request body for ``POST /signup`` and ``POST /login``."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email_present(cls, v: str) -> str:
        return _not_blank(v, "email")

    @field_validator("password")
    @classmethod
    def _password_present(cls, v: str) -> str:
        if not v:
            msg = "password must not be empty."
            raise ValueError(msg)
        return v


class TokenResponse(BaseModel):
    message: str
    token: str


class ProfileResponse(BaseModel):
    message: str = "Protected route OK"
    user: dict[str, Any]


# ── Code summary ────────────────────────────────────────────────────────────


class CodeSummaryRequest(BaseModel):
    """Request body for ``POST /api/ai/code/summarize``."""

    code: str

    @field_validator("code")
    @classmethod
    def _code_present(cls, v: str) -> str:
        if not v.strip():
            msg = "Code is required."
            raise ValueError(msg)
        return v


class CodeSummaryResponse(BaseModel):
    summary: str
    analysis: dict[str, Any]


# ── Repository analysis ─────────────────────────────────────────────────────


class RepoRequest(BaseModel):
    """Request body carrying a GitHub repository URL."""

    model_config = ConfigDict(populate_by_name=True)

    repo_url: str = Field(alias="repoUrl")

    @field_validator("repo_url")
    @classmethod
    def _must_be_github(cls, v: str) -> str:
        stripped = _not_blank(v, "repoUrl")
        if "github.com" not in stripped.lower():
            msg = (
                f"Invalid URL: '{stripped}'. "
                "Only GitHub repository URLs are supported."
            )
            raise ValueError(msg)
        return stripped


class ContentRequest(RepoRequest):
    path: str

    @field_validator("path")
    @classmethod
    def _path_present(cls, v: str) -> str:
        return _not_blank(v, "path")


class SearchRequest(RepoRequest):
    query: str

    @field_validator("query")
    @classmethod
    def _query_present(cls, v: str) -> str:
        return _not_blank(v, "query")


class AnalysisResponse(BaseModel):
    """Envelope for README and architecture results."""

    ok: bool = True
    data: dict[str, Any]


class TreeItem(BaseModel):
    path: str
    type: str


class TreeResponse(BaseModel):
    tree: list[TreeItem]


class ContentResponse(BaseModel):
    content: str


class SearchResponse(BaseModel):
    result: str
    relevant_files: list[str] = Field(default_factory=list, serialization_alias="relevantFiles")


class DiagramResponse(BaseModel):
    mermaid: str
    node_count: int = Field(serialization_alias="nodeCount")
    truncated: bool


# ── Errors ──────────────────────────────────────────────────────────────────


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
    detail: str | None = None
