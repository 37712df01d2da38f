"""Summarize-code use case — review a pasted snippet."""

from __future__ import annotations

import logging

from repo_forge.domain.entities import AnalysisResult
from repo_forge.domain.exceptions import ValidationError
from repo_forge.domain.ports.ai_gateway import AIGateway
from repo_forge.services.prompt_builder import build_code_summary_prompt
from repo_forge.services.response_normalizer import FallbackShape, normalize_response
from repo_forge.services.token_budget import count_tokens, truncate_to_budget

logger = logging.getLogger(__name__)

CODE_SUMMARY_FALLBACK = FallbackShape(
    defaults={
        "explanation": "",
        "issues": [],
        "improvements": [],
        "quality_score": None,
    },
    raw_field="summary",
)


class SummarizeCodeUseCase:
    """Code → prompt → model → normalized review."""

    def __init__(self, ai_gateway: AIGateway, max_code_tokens: int = 12_000) -> None:
        self._ai = ai_gateway
        self._max_code_tokens = max_code_tokens

    async def execute(self, code: str) -> AnalysisResult:
        if not code or not code.strip():
            raise ValidationError("Code is required.")

        fitted = truncate_to_budget(code, self._max_code_tokens)
        if fitted != code:
            logger.info("Submitted code truncated to %d tokens", self._max_code_tokens)

        prompt = build_code_summary_prompt(fitted)
        logger.info("Code summary prompt: %d tokens", count_tokens(prompt))
        raw = await self._ai.complete(prompt)
        return normalize_response(raw, CODE_SUMMARY_FALLBACK)
