"""File-explorer use cases: tree listing, file content, AI search, diagram."""

from __future__ import annotations

import logging

from repo_forge.domain.entities import AnalysisResult, TreeEntry
from repo_forge.domain.exceptions import ValidationError
from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.domain.ports.repo_fetcher import RepoFetcher
from repo_forge.domain.value_objects import RepoRef
from repo_forge.services.prompt_builder import build_search_prompt
from repo_forge.services.response_normalizer import FallbackShape, normalize_response
from repo_forge.services.tree_diagram import Diagram, build_path_tree, render_mermaid

logger = logging.getLogger(__name__)

SEARCH_FALLBACK = FallbackShape(defaults={"relevant_files": []}, raw_field="answer")


class RepoExplorer:
    """Read-only browsing of one repository, plus a model-assisted search."""

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        ai_gateway: AIGateway,
        *,
        file_chars: int = 200_000,
        readme_chars: int = 2_000,
    ) -> None:
        self._fetcher = repo_fetcher
        self._ai = ai_gateway
        self._file_chars = file_chars
        self._readme_chars = readme_chars

    async def _files(self, ref: RepoRef) -> list[TreeEntry]:
        metadata = await self._fetcher.fetch_metadata(ref)
        entries = await self._fetcher.fetch_tree(ref, metadata.default_branch)
        return [e for e in entries if e.is_file]

    async def tree(self, repo_url: str) -> list[TreeEntry]:
        """Files only, in GitHub's tree order."""
        ref = RepoRef.parse(repo_url)
        files = await self._files(ref)
        logger.info("Listed %d files in %s", len(files), ref.full_name)
        return files

    async def content(self, repo_url: str, path: str) -> str:
        ref = RepoRef.parse(repo_url)
        if not path.strip().strip("/"):
            raise ValidationError("path is required.")
        return await self._fetcher.fetch_file_content(ref, path, max_chars=self._file_chars)

    async def search(self, repo_url: str, query: str) -> AnalysisResult:
        ref = RepoRef.parse(repo_url)
        if not query.strip():
            raise ValidationError("query is required.")

        metadata = await self._fetcher.fetch_metadata(ref)
        entries = await self._fetcher.fetch_tree(ref, metadata.default_branch)
        readme = await self._fetcher.fetch_readme(ref, max_chars=self._readme_chars)

        prompt = build_search_prompt(metadata, entries, readme, query)
        raw = await self._ai.complete(prompt)
        return normalize_response(raw, SEARCH_FALLBACK)

    async def diagram(self, repo_url: str, max_nodes: int | None = None) -> Diagram:
        ref = RepoRef.parse(repo_url)
        files = await self._files(ref)
        return render_mermaid(build_path_tree(files), max_nodes=max_nodes)
