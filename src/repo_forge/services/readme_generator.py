"""Generate-README use case."""

from __future__ import annotations

import logging

from repo_forge.domain.entities import AnalysisResult
from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.domain.ports.repo_fetcher import RepoFetcher
from repo_forge.domain.value_objects import RepoRef
from repo_forge.services.prompt_builder import build_readme_prompt
from repo_forge.services.response_normalizer import FallbackShape, normalize_response
from repo_forge.services.snapshot import README_POLICY, fetch_snapshot, select_snapshot_paths
from repo_forge.services.token_budget import count_tokens

logger = logging.getLogger(__name__)

README_FALLBACK = FallbackShape(
    defaults={
        "summary": "Could not parse AI response.",
        "mermaid": "",
        "tech_stack": [],
        "detected_scripts": {},
        "notes": "",
    },
    raw_field="readme_markdown",
)


class GenerateReadmeUseCase:
    """Repo URL → metadata, languages and a small snapshot → README draft.

    The returned object always carries the real ``languages`` byte counts
    and ``repo_details`` from GitHub, whatever the model produced.
    """

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        ai_gateway: AIGateway,
        file_chars: int = 2_500,
    ) -> None:
        self._fetcher = repo_fetcher
        self._ai = ai_gateway
        self._file_chars = file_chars

    async def execute(self, repo_url: str) -> AnalysisResult:
        ref = RepoRef.parse(repo_url)
        logger.info("Generating README for %s", ref.full_name)

        metadata = await self._fetcher.fetch_metadata(ref)
        languages = await self._fetcher.fetch_languages(ref)
        entries = await self._fetcher.fetch_tree(ref, metadata.default_branch)

        paths = select_snapshot_paths(entries, README_POLICY)
        files = await fetch_snapshot(self._fetcher, ref, paths, self._file_chars)

        prompt = build_readme_prompt(metadata, languages, files)
        logger.info("README prompt: %d tokens", count_tokens(prompt))
        raw = await self._ai.complete(prompt)

        return normalize_response(
            raw,
            README_FALLBACK,
            extra={
                "languages": languages,
                "repo_details": {
                    "owner": metadata.owner,
                    "license": metadata.license,
                    "stars": metadata.stars,
                    "forks": metadata.forks,
                },
            },
        )
