from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from repo_forge.infrastructure.config import Settings
from repo_forge.infrastructure.credential_store import InMemoryCredentialStore
from repo_forge.interface.app import create_app
from repo_forge.interface.rate_limit import limiter
from repo_forge.services import token_budget


class CharEncoding:
    """Offline stand-in for a tiktoken encoding: one token per character."""

    def encode(self, text: str) -> list[int]:
        return [ord(ch) for ch in text]

    def decode(self, tokens: list[int]) -> str:
        return "".join(chr(t) for t in tokens)


@pytest.fixture(autouse=True)
def _offline_tokenizer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(token_budget, "_encoder", CharEncoding())


class FakeAIGateway:
    """Records prompts and replies with canned text (or raises)."""

    def __init__(self, reply: str = "{}") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class FakeGitHub:
    """Serves a single repository through ``httpx.MockTransport``."""

    owner: str = "octo"
    name: str = "demo"
    default_branch: str = "main"
    tree_sha: str = "tree123"
    tree: list[dict[str, Any]] = field(default_factory=list)
    files: dict[str, str] = field(default_factory=dict)
    languages: dict[str, int] = field(default_factory=lambda: {"Python": 1200, "JavaScript": 300})
    readme: str | None = None
    status_overrides: dict[str, int] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add_file(self, path: str, content: str = "") -> None:
        parts = path.split("/")
        for i in range(1, len(parts)):
            folder = "/".join(parts[:i])
            if not any(item["path"] == folder for item in self.tree):
                self.tree.append({"path": folder, "type": "tree"})
        self.tree.append({"path": path, "type": "blob", "size": len(content)})
        self.files[path] = content

    @property
    def prefix(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.status_overrides:
            return httpx.Response(self.status_overrides[path], json={"message": "nope"})

        if path == self.prefix:
            return httpx.Response(
                200,
                json={
                    "name": self.name,
                    "full_name": f"{self.owner}/{self.name}",
                    "description": "A demo repository",
                    "default_branch": self.default_branch,
                    "owner": {"login": self.owner},
                    "license": {"name": "MIT License"},
                    "stargazers_count": 42,
                    "forks_count": 7,
                },
            )
        if path == f"{self.prefix}/languages":
            return httpx.Response(200, json=self.languages)
        if path == f"{self.prefix}/branches/{self.default_branch}":
            return httpx.Response(
                200, json={"commit": {"commit": {"tree": {"sha": self.tree_sha}}}}
            )
        if path == f"{self.prefix}/git/trees/{self.tree_sha}":
            return httpx.Response(200, json={"sha": self.tree_sha, "tree": self.tree})
        if path == f"{self.prefix}/readme":
            if self.readme is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=_encoded(self.readme))
        if path.startswith(f"{self.prefix}/contents/"):
            file_path = path[len(f"{self.prefix}/contents/") :]
            if file_path in self.files:
                return httpx.Response(200, json=_encoded(self.files[file_path]))
            if any(i["path"] == file_path and i["type"] == "tree" for i in self.tree):
                # directories come back as a listing of their children
                listing = [
                    {"path": i["path"], "type": "file" if i["type"] == "blob" else "dir"}
                    for i in self.tree
                    if i["path"].rpartition("/")[0] == file_path
                ]
                return httpx.Response(200, json=listing)
        return httpx.Response(404, json={"message": "Not Found"})


def _encoded(text: str) -> dict[str, Any]:
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    # GitHub wraps base64 content at 60 columns
    wrapped = "\n".join(payload[i : i + 60] for i in range(0, len(payload), 60))
    return {"type": "file", "encoding": "base64", "content": wrapped}


@pytest.fixture
def fake_github() -> FakeGitHub:
    gh = FakeGitHub()
    gh.add_file("README.md", "# Demo\nA demo project.")
    gh.add_file("package.json", '{"name": "demo"}')
    gh.add_file("src/index.js", "console.log('hi');")
    gh.add_file("src/routes/users.js", "module.exports = {};")
    gh.add_file("docs/logo.png", "")
    return gh


@pytest.fixture
def fake_ai() -> FakeAIGateway:
    return FakeAIGateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        jwt_secret="test-secret",
        openai_api_key=None,
        github_token=None,
        mongo_url=None,
    )


@pytest.fixture
def client(settings: Settings, fake_github: FakeGitHub, fake_ai: FakeAIGateway) -> TestClient:
    limiter.reset()
    app = create_app(
        settings,
        ai_gateway=fake_ai,
        credential_store=InMemoryCredentialStore(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_github.handler)),
    )
    return TestClient(app)


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/signup", json={"email": "a@b.com", "password": "secret1"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
