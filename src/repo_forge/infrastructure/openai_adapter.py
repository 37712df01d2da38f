"""OpenAI adapter — implements the AIGateway port."""

from __future__ import annotations

import logging

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from repo_forge.domain.exceptions import AIConfigurationError, UpstreamAIError

logger = logging.getLogger(__name__)

PING_PROMPT = "Hello, are you working? Reply with one short sentence."


class OpenAIAdapter:
    """Concrete ``AIGateway`` backed by the OpenAI chat-completions API.

    Any OpenAI-compatible provider works by setting *base_url*.  Calls are
    single-shot: the SDK's own retry loop is disabled.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        *,
        base_url: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._client: AsyncOpenAI | None = None
        if api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str) -> str:
        """Send *prompt* as a single user message and return the completion text."""
        if self._client is None:
            raise AIConfigurationError(
                "AI backend not configured. Set OPENAI_API_KEY on the server."
            )

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
            )
        except APIConnectionError as exc:
            logger.error("AI provider unreachable: %s", exc)
            raise UpstreamAIError(
                "AI provider host not reachable.", detail=str(exc)
            ) from exc
        except APIStatusError as exc:
            logger.error("AI provider returned HTTP %s: %s", exc.status_code, exc.message)
            raise UpstreamAIError(
                "Remote AI request failed.",
                detail=exc.message or f"Status {exc.status_code}",
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamAIError("AI provider returned an empty response.")
        return content

    async def ping(self) -> str:
        """Round-trip a fixed liveness prompt."""
        return await self.complete(PING_PROMPT)

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        if self._client is not None:
            await self._client.close()
