"""Python-Markdown extension embedding GitHub permalinks as code snippets.

Python-Markdown converts synchronously, so the extension splits the work:
the inline processor swaps each permalink for a per-document placeholder,
:func:`render_markdown` awaits the enrichment of every collected token and
only then substitutes the rendered snippets. A plain ``Markdown.convert``
call still works and renders every permalink as a fallback link.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
import re
import secrets
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.postprocessors import Postprocessor

from .config import DEFAULT_API_URL, DEFAULT_PYGMENTS_STYLE, DEFAULT_TIMEOUT, PermalinkConfig
from .exceptions import ConfigurationError
from .extension import ExtensionAdapter, PermalinkExtension, settle_tokens
from .matcher import CANDIDATE_PATTERN
from .tokens import PermalinkToken


# Above "link" (160) and "autolink" (120), below "backtick" and "escape".
INLINE_PRIORITY = 175
POSTPROCESSOR_PRIORITY = 5


@dataclass(slots=True)
class _DocumentTokens:
    """Tokens detected during one conversion, addressed by placeholder."""

    nonce: str = field(default_factory=lambda: secrets.token_hex(8))
    tokens: list[PermalinkToken] = field(default_factory=list)
    deferred: bool = False

    def register(self, token: PermalinkToken) -> str:
        self.tokens.append(token)
        return f"gh-permalink-{self.nonce}-{len(self.tokens) - 1}"

    def substitute(self, html: str, rendered: Sequence[str]) -> str:
        if not self.tokens:
            return html
        pattern = re.compile(rf"gh-permalink-{self.nonce}-(\d+)")

        def _replace(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index >= len(rendered):
                return match.group(0)
            return rendered[index]

        return pattern.sub(_replace, html)


class _PermalinkInlineProcessor(InlineProcessor):
    """Consume permalink URLs and leave a placeholder in their place."""

    def __init__(self, pattern: str, md: Markdown, extension: GitHubPermalinkExtension) -> None:
        super().__init__(pattern, md)
        self._extension = extension

    def handleMatch(  # type: ignore[override]  # noqa: N802 - Markdown API requires camelCase
        self,
        match: re.Match[str],
        data: str,
    ) -> tuple[str | None, int | None, int | None]:
        token = self._extension.adapter.detect(match.group(0))
        if token is None:
            return None, None, None
        placeholder = self._extension.document.register(token)
        return placeholder, match.start(0), match.start(0) + len(token.raw)


class _PermalinkPostprocessor(Postprocessor):
    """Render placeholders left behind by a synchronous conversion."""

    def __init__(self, md: Markdown, extension: GitHubPermalinkExtension) -> None:
        super().__init__(md)
        self._extension = extension

    def run(self, text: str) -> str:  # type: ignore[override]
        document = self._extension.document
        if document.deferred:
            return text
        adapter = self._extension.adapter
        try:
            return document.substitute(
                text, [adapter.render(token) for token in document.tokens]
            )
        finally:
            self._extension.reset()


class GitHubPermalinkExtension(Extension):
    """Register the permalink inline processor on a Markdown instance."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "token": ["", "GitHub API token used to read file contents."],
            "api_url": [DEFAULT_API_URL, "Root of the GitHub REST API."],
            "timeout": [DEFAULT_TIMEOUT, "Seconds before a contents request is abandoned."],
            "pygments_style": [DEFAULT_PYGMENTS_STYLE, "Pygments style used for snippets."],
        }
        adapter = kwargs.pop("adapter", None)
        super().__init__(**kwargs)
        if adapter is None:
            token = self.getConfig("token")
            if not token:
                raise ConfigurationError("GitHubPermalinkExtension requires a 'token'.")
            adapter = PermalinkExtension(
                PermalinkConfig.build(
                    token=token,
                    api_url=self.getConfig("api_url"),
                    timeout=self.getConfig("timeout"),
                    pygments_style=self.getConfig("pygments_style"),
                )
            )
        self.adapter: ExtensionAdapter = adapter
        self.document = _DocumentTokens()

    def reset(self) -> None:
        """Forget the tokens of the previous conversion."""
        self.document = _DocumentTokens()

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.registerExtension(self)
        md.inlinePatterns.register(
            _PermalinkInlineProcessor(CANDIDATE_PATTERN.pattern, md, self),
            "gh_permalink",
            INLINE_PRIORITY,
        )
        md.postprocessors.register(
            _PermalinkPostprocessor(md, self), "gh_permalink", POSTPROCESSOR_PRIORITY
        )

    async def convert(self, md: Markdown, source: str) -> str:
        """Convert ``source`` once every permalink of the document has settled."""
        md.reset()
        document = self.document
        document.deferred = True
        html = md.convert(source)

        try:
            if isinstance(self.adapter, PermalinkExtension):
                settled = await self.adapter.enrich_all(document.tokens)
            else:
                settled = await settle_tokens(document.tokens, self.adapter.enrich)
            rendered = [self.adapter.render(token) for token in settled]
        finally:
            self.reset()
        html = document.substitute(html, rendered)
        return f"{html}\n" if html else html


def _find_extension(md: Markdown) -> GitHubPermalinkExtension:
    for extension in getattr(md, "registeredExtensions", []):
        if isinstance(extension, GitHubPermalinkExtension):
            return extension
    raise ConfigurationError("GitHubPermalinkExtension is not registered on this Markdown instance.")


async def render_markdown(source: str, md: Markdown) -> str:
    """Asynchronously convert ``source`` with the permalink extension of ``md``."""
    return await _find_extension(md).convert(md, source)


def convert(
    source: str,
    *,
    token: str,
    extensions: Iterable[str | Extension] = (),
    extension_configs: dict[str, dict[str, Any]] | None = None,
    **settings: Any,
) -> str:
    """Synchronously convert Markdown, enriching permalinks on a private event loop."""
    permalink = GitHubPermalinkExtension(token=token, **settings)
    md = Markdown(
        extensions=[permalink, *extensions],
        extension_configs=extension_configs or {},
    )
    return asyncio.run(permalink.convert(md, source))


def makeExtension(**kwargs: Any) -> GitHubPermalinkExtension:  # noqa: N802 - Markdown hook
    """Entry point exposed to Python-Markdown."""
    return GitHubPermalinkExtension(**kwargs)


__all__ = [
    "INLINE_PRIORITY",
    "GitHubPermalinkExtension",
    "convert",
    "makeExtension",
    "render_markdown",
]
