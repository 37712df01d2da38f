"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from repo_forge.domain.entities import EntryKind, RepoMetadata, TreeEntry
from repo_forge.domain.exceptions import (
    GitHubApiError,
    GitHubRateLimitError,
    GitHubUnauthorizedError,
    NotAFileError,
    RepoFileNotFoundError,
    RepositoryNotFoundError,
)
from repo_forge.domain.value_objects import RepoRef

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


def normalize_path(path: str) -> str:
    """Strip surrounding slashes and URL-quote each segment of a repo path."""
    segments = [seg for seg in path.strip().strip("/").split("/") if seg]
    return "/".join(quote(seg, safe="") for seg in segments)


def decode_content(content: str, encoding: str) -> str:
    """Decode a contents-API payload according to its declared encoding."""
    enc = (encoding or "").lower()
    if enc == "base64":
        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError) as exc:
            raise GitHubApiError("GitHub returned malformed base64 content.") from exc
        return raw.decode("utf-8", errors="replace")
    if enc in ("utf-8", "utf8"):
        return content
    raise GitHubApiError(f"Unsupported content encoding: '{encoding}'.")


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API.

    Every method performs its round trips sequentially and never retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        base_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-forge/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, ref: RepoRef) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        data = await self._api_get(f"/repos/{ref.owner}/{ref.name}")
        license_info = data.get("license") or {}
        owner_info = data.get("owner") or {}
        return RepoMetadata(
            owner=owner_info.get("login") or ref.owner,
            name=data.get("name") or ref.name,
            full_name=data.get("full_name") or ref.full_name,
            default_branch=data.get("default_branch") or "main",
            description=data.get("description"),
            license=license_info.get("name"),
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
        )

    async def fetch_languages(self, ref: RepoRef) -> dict[str, int]:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        data = await self._api_get(f"/repos/{ref.owner}/{ref.name}/languages")
        return {str(lang): int(count) for lang, count in data.items()}

    async def fetch_tree(self, ref: RepoRef, branch: str) -> list[TreeEntry]:
        """Resolve *branch* to its tree SHA, then list that tree recursively.

        The branch endpoint yields a commit, not a tree, so this is two
        round trips on top of the metadata call that produced *branch*.
        """
        branch_info = await self._api_get(
            f"/repos/{ref.owner}/{ref.name}/branches/{quote(branch, safe='')}"
        )
        try:
            tree_sha = branch_info["commit"]["commit"]["tree"]["sha"]
        except (KeyError, TypeError) as exc:
            raise GitHubApiError(
                f"GitHub branch response for {ref.full_name}@{branch} has no tree SHA."
            ) from exc

        data = await self._api_get(
            f"/repos/{ref.owner}/{ref.name}/git/trees/{tree_sha}",
            params={"recursive": "1"},
        )
        if data.get("truncated"):
            logger.info("Tree listing for %s was truncated by GitHub", ref.full_name)

        return [
            TreeEntry(
                path=item["path"],
                kind=EntryKind.from_git_type(item.get("type", "blob")),
                size=item.get("size", 0) or 0,
            )
            for item in data.get("tree", [])
            if item.get("path")
        ]

    async def fetch_file_content(
        self, ref: RepoRef, path: str, max_chars: int | None = None
    ) -> str:
        """GET /repos/{owner}/{repo}/contents/{path} → decoded text.

        A missing path raises ``RepoFileNotFoundError``; a directory (GitHub
        answers with a listing) or other non-file entry raises ``NotAFileError``.
        """
        clean = normalize_path(path)
        try:
            data = await self._api_get(f"/repos/{ref.owner}/{ref.name}/contents/{clean}")
        except RepositoryNotFoundError as exc:
            raise RepoFileNotFoundError(f"File not found: '{path}'.") from exc
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise NotAFileError(f"'{path}' is not a file.")
        return self._decode_payload(data, path, max_chars)

    async def fetch_readme(self, ref: RepoRef, max_chars: int | None = None) -> str:
        """GET /repos/{owner}/{repo}/readme → decoded text ("" when absent)."""
        try:
            data = await self._api_get(f"/repos/{ref.owner}/{ref.name}/readme")
        except RepositoryNotFoundError:
            logger.debug("No README for %s", ref.full_name)
            return ""
        return self._decode_payload(data, "README", max_chars)

    @staticmethod
    def _decode_payload(data: dict[str, Any], path: str, max_chars: int | None) -> str:
        content = data.get("content")
        if content is None:
            raise GitHubApiError(f"GitHub returned no content for '{path}'.")
        text = decode_content(content, data.get("encoding", ""))
        if max_chars is not None:
            text = text[:max_chars]
        return text

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.HTTPError as exc:
            raise GitHubApiError(
                "Could not reach the GitHub API.", detail=str(exc)
            ) from exc

        if resp.status_code == 200:
            return resp.json()

        if resp.status_code == 404:
            raise RepositoryNotFoundError("Repository not found or private.")

        if resp.status_code == 401:
            raise GitHubUnauthorizedError("Invalid GitHub Token.")

        if resp.status_code in (403, 429):
            raise GitHubRateLimitError(_rate_limit_message(resp))

        raise GitHubApiError(
            f"GitHub API returned HTTP {resp.status_code}.",
            detail=_error_detail(resp),
        )


def _rate_limit_message(resp: httpx.Response) -> str:
    message = "GitHub API rate limit exceeded."
    reset_raw = resp.headers.get("x-ratelimit-reset", "")
    if reset_raw:
        try:
            reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                "%Y-%m-%d %H:%M:%S UTC"
            )
        except (ValueError, OSError):
            reset_str = reset_raw
        message += f" Resets at {reset_str}."
    return message + " Set GITHUB_TOKEN on the server to increase the limit."


def _error_detail(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None
