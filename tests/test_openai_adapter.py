"""OpenAIAdapter error mapping, exercised with a stubbed SDK client."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from repo_forge.domain.exceptions import AIConfigurationError, UpstreamAIError
from repo_forge.infrastructure.openai_adapter import PING_PROMPT, OpenAIAdapter

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class _StubCompletions:
    def __init__(self, outcome: Any) -> None:
        self.outcome = outcome
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _adapter_with(outcome: Any) -> tuple[OpenAIAdapter, _StubCompletions]:
    adapter = OpenAIAdapter(api_key="sk-test", model="test-model")
    completions = _StubCompletions(outcome)
    adapter._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))  # type: ignore[assignment]
    return adapter, completions


def _reply(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def test_missing_key_is_a_configuration_error() -> None:
    adapter = OpenAIAdapter(api_key=None)
    assert not adapter.configured
    with pytest.raises(AIConfigurationError):
        asyncio.run(adapter.complete("hi"))


def test_complete_sends_single_user_message() -> None:
    adapter, completions = _adapter_with(_reply("hello"))
    assert asyncio.run(adapter.complete("prompt text")) == "hello"
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["messages"] == [{"role": "user", "content": "prompt text"}]


def test_ping_uses_fixed_prompt() -> None:
    adapter, completions = _adapter_with(_reply("pong"))
    assert asyncio.run(adapter.ping()) == "pong"
    assert completions.calls[0]["messages"][0]["content"] == PING_PROMPT


def test_connection_error_maps_to_upstream() -> None:
    adapter, _ = _adapter_with(openai.APIConnectionError(request=_REQUEST))
    with pytest.raises(UpstreamAIError, match="not reachable"):
        asyncio.run(adapter.complete("hi"))


def test_status_error_maps_to_upstream_with_detail() -> None:
    error = openai.APIStatusError(
        "quota exceeded",
        response=httpx.Response(429, request=_REQUEST),
        body=None,
    )
    adapter, _ = _adapter_with(error)
    with pytest.raises(UpstreamAIError) as info:
        asyncio.run(adapter.complete("hi"))
    assert str(info.value) == "Remote AI request failed."
    assert info.value.detail == "quota exceeded"


@pytest.mark.parametrize("reply", [_reply(None), _reply(""), SimpleNamespace(choices=[])])
def test_empty_reply_is_an_upstream_error(reply: Any) -> None:
    adapter, _ = _adapter_with(reply)
    with pytest.raises(UpstreamAIError, match="empty"):
        asyncio.run(adapter.complete("hi"))
