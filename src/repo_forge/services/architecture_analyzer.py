"""Analyze-architecture use case."""

from __future__ import annotations

import logging

from repo_forge.domain.entities import AnalysisResult
from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.domain.ports.repo_fetcher import RepoFetcher
from repo_forge.domain.value_objects import RepoRef
from repo_forge.services.prompt_builder import build_architecture_prompt
from repo_forge.services.response_normalizer import FallbackShape, normalize_response
from repo_forge.services.snapshot import (
    ARCHITECTURE_POLICY,
    fetch_snapshot,
    select_snapshot_paths,
)
from repo_forge.services.token_budget import count_tokens

logger = logging.getLogger(__name__)

# Number of tree paths echoed back to the client as ``tree_raw``
TREE_RAW_LIMIT = 500

ARCHITECTURE_FALLBACK = FallbackShape(
    defaults={
        "summary": "AI analysis completed but returned invalid JSON.",
        "layers": [],
        "key_components": [],
        "potential_issues": ["JSON Parsing Failed"],
        "tree_mermaid": "",
    },
    raw_field="data_flow",
)


class AnalyzeArchitectureUseCase:
    """Repo URL → full tree plus snapshot → layered architecture analysis."""

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        ai_gateway: AIGateway,
        file_chars: int = 4_000,
    ) -> None:
        self._fetcher = repo_fetcher
        self._ai = ai_gateway
        self._file_chars = file_chars

    async def execute(self, repo_url: str) -> AnalysisResult:
        ref = RepoRef.parse(repo_url)
        logger.info("Analysing architecture of %s", ref.full_name)

        metadata = await self._fetcher.fetch_metadata(ref)
        entries = await self._fetcher.fetch_tree(ref, metadata.default_branch)

        paths = select_snapshot_paths(entries, ARCHITECTURE_POLICY)
        files = await fetch_snapshot(self._fetcher, ref, paths, self._file_chars)

        prompt = build_architecture_prompt(metadata, entries, files)
        logger.info("Architecture prompt: %d tokens", count_tokens(prompt))
        raw = await self._ai.complete(prompt)

        return normalize_response(
            raw,
            ARCHITECTURE_FALLBACK,
            extra={
                "repo_details": {
                    "owner": metadata.owner,
                    "name": metadata.name,
                    "stars": metadata.stars,
                    "forks": metadata.forks,
                    "description": metadata.description,
                },
                "tree_raw": "\n".join(e.path for e in entries[:TREE_RAW_LIMIT]),
            },
        )
