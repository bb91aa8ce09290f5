from __future__ import annotations

import asyncio
import base64
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx
import pytest


GOOD_TOKEN = "good-token"
COMMIT = "91ee15b2d43da92f751165c88d1a78ebc3b99114"
RENDERER_SOURCE = "\n".join(f"line {number}" for number in range(1, 41)) + "\n"


def encode_contents(text: str | bytes) -> str:
    """Base64 the way the contents API does, wrapped every 60 characters."""
    raw = text.encode("utf-8") if isinstance(text, str) else text
    encoded = base64.b64encode(raw).decode("ascii")
    return "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)) + "\n"


@dataclass
class FakeGitHub:
    """Minimal stand-in for the repository contents endpoint."""

    token: str = GOOD_TOKEN
    files: dict[tuple[str, str, str, str], object] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    on_request: Callable[[httpx.Request], Awaitable[None]] | None = None

    def add(self, owner: str, repo: str, path: str, commit: str, text: str | bytes) -> None:
        self.files[(owner, repo, path, commit)] = {
            "type": "file",
            "encoding": "base64",
            "content": encode_contents(text),
        }

    def add_payload(self, owner: str, repo: str, path: str, commit: str, payload: object) -> None:
        self.files[(owner, repo, path, commit)] = payload

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request is not None:
            await self.on_request(request)
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"message": "Bad credentials"})
        parts = request.url.path.split("/", 5)
        if len(parts) != 6 or parts[1] != "repos" or parts[4] != "contents":
            return httpx.Response(404, json={"message": "Not Found"})
        _, _, owner, repo, _, path = parts
        ref = request.url.params.get("ref", "")
        payload = self.files.get((owner, repo, path, ref))
        if payload is None:
            return httpx.Response(404, json={"message": "No commit found for the ref"})
        return httpx.Response(200, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.add("markedjs", "marked", "src/Renderer.ts", COMMIT, RENDERER_SOURCE)
    return fake


def run(coro):
    return asyncio.run(coro)
