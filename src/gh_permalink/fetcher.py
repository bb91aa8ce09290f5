"""Retrieve the lines a permalink points at from the GitHub contents API."""

from __future__ import annotations

import asyncio
import base64
import binascii
from collections.abc import AsyncIterator, MutableMapping
from contextlib import asynccontextmanager
import logging

import httpx

from .config import PermalinkConfig
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .exceptions import SnippetDecodeError, SnippetFetchError
from .matcher import PermalinkReference


logger = logging.getLogger(__name__)


def decode_contents(payload: object) -> str:
    """Return the text of a contents API payload.

    Raises:
        SnippetDecodeError: If the payload carries no base64 text.
    """
    if not isinstance(payload, dict):
        raise SnippetDecodeError("Contents payload is not a JSON object.")
    content = payload.get("content")
    if not isinstance(content, str):
        raise SnippetDecodeError("Contents payload has no 'content' field (is it a file?).")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        raise SnippetDecodeError(f"Unsupported content encoding '{encoding}'.")
    try:
        raw = base64.b64decode(content)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise SnippetDecodeError("File content is not valid base64 encoded UTF-8.") from exc


def slice_lines(text: str, line_from: int, line_to: int) -> str | None:
    """Return lines ``line_from`` to ``line_to`` (1-based, inclusive) of ``text``.

    Ranges that select nothing yield ``None``; a range running past the end of
    the file is truncated to the lines that exist.
    """
    if line_from < 1 or line_to < line_from:
        return None
    lines = text.split("\n")
    selected = lines[line_from - 1 : line_to]
    if not selected:
        return None
    return "\n".join(selected)


class SnippetFetcher:
    """Fetch, decode and slice the file a permalink references."""

    def __init__(
        self,
        config: PermalinkConfig,
        *,
        client: httpx.AsyncClient | None = None,
        cache: MutableMapping[tuple[str, str, str, str], str] | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._cache: MutableMapping[tuple[str, str, str, str], str] = (
            {} if cache is None else cache
        )
        self._emitter = emitter or LoggingEmitter(logger_obj=logger)
        # Downloads still running, shared by every permalink into the same file.
        self._pending: dict[tuple[str, str, str, str], asyncio.Future[str]] = {}

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.api_url,
            headers=self.config.headers,
            timeout=self.config.timeout,
            follow_redirects=True,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield an HTTP client shared by the fetches of one enrichment pass.

        An injected client is reused and left open; otherwise a client is
        created for the pass and closed when it ends.
        """
        if self._client is not None:
            yield self._client
            return
        async with self._build_client() as client:
            yield client

    async def enrich(
        self,
        reference: PermalinkReference,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> str | None:
        """Return the referenced lines, or ``None`` when they are unavailable."""
        try:
            if client is None:
                async with self.session() as owned:
                    content = await self.fetch_file(reference, client=owned)
            else:
                content = await self.fetch_file(reference, client=client)
        except SnippetFetchError as exc:
            self._emitter.warning(f"Unable to fetch {reference.code_link}: {exc}", exc)
            return None
        except SnippetDecodeError as exc:
            self._emitter.warning(f"Unable to decode {reference.code_link}: {exc}", exc)
            return None

        code = slice_lines(content, reference.line_from, reference.line_to)
        if code is None:
            self._emitter.warning(
                f"Lines {reference.line_from}-{reference.line_to} are not available "
                f"in {reference.path} at {reference.short_commit}."
            )
        return code

    async def fetch_file(
        self,
        reference: PermalinkReference,
        *,
        client: httpx.AsyncClient,
    ) -> str:
        """Return the whole text of the referenced file at its commit.

        Raises:
            SnippetFetchError: On transport failures or non-success responses.
            SnippetDecodeError: When the response body cannot be decoded.
        """
        key = reference.cache_key
        cached = self._cache.get(key)
        if cached is not None:
            self._emitter.event("snippet_fetch_cached", {"url": reference.code_link})
            return cached

        pending = self._pending.get(key)
        if pending is not None:
            self._emitter.event("snippet_fetch_cached", {"url": reference.code_link})
            return await pending

        task = asyncio.ensure_future(self._download(reference, client))
        self._pending[key] = task
        try:
            return await task
        finally:
            if self._pending.get(key) is task:
                del self._pending[key]

    async def _download(self, reference: PermalinkReference, client: httpx.AsyncClient) -> str:
        url = f"{self.config.api_url}/{reference.contents_path}"
        self._emitter.event("snippet_fetch", {"url": url, "ref": reference.commit})
        try:
            response = await client.get(
                url,
                params={"ref": reference.commit},
                headers=self.config.headers,
            )
        except httpx.HTTPError as exc:
            raise SnippetFetchError(f"request failed: {exc}") from exc

        if response.is_error:
            raise SnippetFetchError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SnippetDecodeError("Response body is not JSON.") from exc

        content = decode_contents(payload)
        self._cache[reference.cache_key] = content
        return content


__all__ = ["SnippetFetcher", "decode_contents", "slice_lines"]
