"""Command-line entry point: run the server or probe the AI provider."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn

from repo_forge.domain.exceptions import RepoForgeError
from repo_forge.infrastructure.config import Settings, get_settings
from repo_forge.infrastructure.openai_adapter import OpenAIAdapter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-forge",
        description="AI-generated READMEs, architecture notes and file search for GitHub repositories.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API (default).")
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to HOST).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (defaults to PORT).")

    subparsers.add_parser(
        "check-ai",
        help="Send a test prompt to the configured AI provider and print the reply.",
    )
    return parser


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


async def _check_ai(settings: Settings) -> int:
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    adapter = OpenAIAdapter(
        api_key=api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.ai_timeout_seconds,
    )
    print(f"Testing model: {settings.openai_model}...")
    try:
        reply = await adapter.ping()
    except RepoForgeError as exc:
        print(f"Model test failed: {exc}", file=sys.stderr)
        if exc.detail:
            print(f"Provider said: {exc.detail}", file=sys.stderr)
        return 1
    finally:
        await adapter.close()
    print(f"Success! Response: {reply}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    _configure_logging(settings)

    if args.command == "check-ai":
        return asyncio.run(_check_ai(settings))

    uvicorn.run(
        "repo_forge.interface.app:create_app",
        factory=True,
        host=getattr(args, "host", None) or settings.host,
        port=getattr(args, "port", None) or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
