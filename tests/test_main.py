from __future__ import annotations

import asyncio

import pytest

from repo_forge import main as cli
from repo_forge.domain.exceptions import UpstreamAIError
from repo_forge.infrastructure.config import Settings


def test_parser_defaults_to_no_command() -> None:
    args = cli._build_parser().parse_args([])
    assert args.command is None


def test_parser_serve_overrides() -> None:
    args = cli._build_parser().parse_args(["serve", "--host", "127.0.0.1", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 8080


def test_parser_rejects_unknown_command() -> None:
    with pytest.raises(SystemExit):
        cli._build_parser().parse_args(["deploy"])


def test_check_ai_without_key_fails(settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    assert asyncio.run(cli._check_ai(settings)) == 1
    assert "Model test failed" in capsys.readouterr().err


def test_check_ai_reports_reply(
    settings: Settings, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    async def fake_ping(self: object) -> str:
        return "I am working."

    monkeypatch.setattr(cli.OpenAIAdapter, "ping", fake_ping)
    assert asyncio.run(cli._check_ai(settings)) == 0
    assert "Success! Response: I am working." in capsys.readouterr().out


def test_check_ai_prints_provider_detail(
    settings: Settings, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    async def failing_ping(self: object) -> str:
        raise UpstreamAIError("Remote AI request failed.", detail="model not found")

    monkeypatch.setattr(cli.OpenAIAdapter, "ping", failing_ping)
    assert asyncio.run(cli._check_ai(settings)) == 1
    assert "Provider said: model not found" in capsys.readouterr().err
