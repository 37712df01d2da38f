"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_forge.domain.entities import RepoMetadata, TreeEntry
from repo_forge.domain.value_objects import RepoRef


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, ref: RepoRef) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_languages(self, ref: RepoRef) -> dict[str, int]:
        """Return language → byte-count mapping from the GitHub Languages API."""
        ...

    async def fetch_tree(self, ref: RepoRef, branch: str) -> list[TreeEntry]:
        """Return the recursive file tree for the given branch."""
        ...

    async def fetch_file_content(
        self, ref: RepoRef, path: str, max_chars: int | None = None
    ) -> str:
        """Return the decoded text content of a single file."""
        ...

    async def fetch_readme(self, ref: RepoRef, max_chars: int | None = None) -> str:
        """Return the decoded README, or an empty string when there is none."""
        ...
