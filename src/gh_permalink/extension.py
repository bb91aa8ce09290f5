"""Detect / enrich / render contract tying the snippet pipeline together.

A host Markdown engine needs three hooks to embed permalinks:

* an inline tokenizer hook calling :meth:`ExtensionAdapter.detect`,
* a whole-document asynchronous hook awaiting :meth:`PermalinkExtension.enrich_all`
  before anything is rendered,
* a per-token render hook calling :meth:`ExtensionAdapter.render`.

Document conversions using this adapter are asynchronous: rendered output is
only correct once every enrichment task of the document has settled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
import logging
from typing import Protocol, runtime_checkable

import httpx

from .config import PermalinkConfig
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .exceptions import ConfigurationError
from .fetcher import SnippetFetcher
from .highlight import PygmentsHtmlHighlighter
from .matcher import parse_permalink
from .renderer import SnippetRenderer
from .tokens import Detected, Enriched, EnrichmentFailed, PermalinkToken, is_settled


logger = logging.getLogger(__name__)


@runtime_checkable
class ExtensionAdapter(Protocol):
    """Three-phase contract expected from an inline snippet extension."""

    def detect(self, text: str) -> Detected | None: ...

    async def enrich(self, token: PermalinkToken) -> PermalinkToken: ...

    def render(self, token: PermalinkToken) -> str: ...


async def settle_tokens(
    tokens: Sequence[PermalinkToken],
    enrich: Callable[[PermalinkToken], Awaitable[PermalinkToken]],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> list[PermalinkToken]:
    """Start every pending enrichment at once and wait for all of them.

    Settled tokens are passed through untouched. An enrichment that raises
    downgrades its own token to :class:`EnrichmentFailed` and leaves its
    siblings alone. The returned list keeps the order of ``tokens``.
    """
    emitter = emitter or LoggingEmitter(logger_obj=logger)
    settled: list[PermalinkToken] = list(tokens)
    pending = [index for index, token in enumerate(tokens) if not is_settled(token)]
    if not pending:
        return settled

    results = await asyncio.gather(
        *(enrich(tokens[index]) for index in pending),
        return_exceptions=True,
    )

    enriched = 0
    for index, result in zip(pending, results, strict=True):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            token = tokens[index]
            emitter.error(f"Enrichment crashed for {token.raw}", result)
            settled[index] = EnrichmentFailed(raw=token.raw, reference=token.reference)
            continue
        if isinstance(result, Enriched):
            enriched += 1
        settled[index] = result

    emitter.event("enrichment_done", {"total": len(pending), "enriched": enriched})
    return settled


class PermalinkExtension:
    """Embed GitHub permalinks as highlighted snippets."""

    def __init__(
        self,
        config: PermalinkConfig,
        *,
        fetcher: SnippetFetcher | None = None,
        renderer: SnippetRenderer | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if not isinstance(config, PermalinkConfig):
            raise ConfigurationError("PermalinkExtension requires a PermalinkConfig.")
        self.config = config
        self._emitter = emitter or LoggingEmitter(logger_obj=logger)
        self.fetcher = fetcher or SnippetFetcher(config, emitter=self._emitter)
        self.renderer = renderer or SnippetRenderer(
            highlighter=PygmentsHtmlHighlighter(style=config.pygments_style),
            emitter=self._emitter,
        )

    @classmethod
    def from_token(cls, token: str, **settings: object) -> PermalinkExtension:
        return cls(PermalinkConfig.build(token=token, **settings))

    # -- detect --------------------------------------------------------------
    def detect(self, text: str) -> Detected | None:
        """Return a token consuming all of ``text`` when it is a permalink."""
        reference = parse_permalink(text)
        if reference is None:
            return None
        return Detected(raw=text, reference=reference)

    # -- enrich --------------------------------------------------------------
    async def enrich(
        self,
        token: PermalinkToken,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> PermalinkToken:
        """Settle one token; tokens that were not freshly detected pass through."""
        if not isinstance(token, Detected):
            return token
        code = await self.fetcher.enrich(token.reference, client=client)
        if code is None:
            return token.failed()
        return token.enriched(code)

    async def enrich_all(self, tokens: Sequence[PermalinkToken]) -> list[PermalinkToken]:
        """Enrich every token concurrently and wait until all of them settled.

        The result keeps the order of ``tokens``. A task that raises only
        downgrades its own token to the failed state.
        """
        if all(is_settled(token) for token in tokens):
            return list(tokens)
        async with self.fetcher.session() as client:
            return await settle_tokens(
                tokens, partial(self.enrich, client=client), emitter=self._emitter
            )

    # -- render --------------------------------------------------------------
    def render(self, token: PermalinkToken) -> str:
        return self.renderer.render(token)


__all__ = ["ExtensionAdapter", "PermalinkExtension", "settle_tokens"]
