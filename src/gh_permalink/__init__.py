"""Embed GitHub permalinks in Markdown as highlighted code snippets."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from gh_permalink.config import PermalinkConfig
from gh_permalink.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from gh_permalink.exceptions import (
    ConfigurationError,
    PermalinkError,
    SnippetDecodeError,
    SnippetFetchError,
)
from gh_permalink.extension import ExtensionAdapter, PermalinkExtension, settle_tokens
from gh_permalink.fetcher import SnippetFetcher, slice_lines
from gh_permalink.highlight import PygmentsHtmlHighlighter
from gh_permalink.markdown import (
    GitHubPermalinkExtension,
    convert,
    makeExtension,
    render_markdown,
)
from gh_permalink.matcher import PermalinkReference, find_permalinks, parse_permalink
from gh_permalink.renderer import SnippetRenderer, render_fallback
from gh_permalink.tokens import Detected, Enriched, EnrichmentFailed, PermalinkToken


try:
    __version__ = _pkg_version("gh-permalink")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "ConfigurationError",
    "Detected",
    "DiagnosticEmitter",
    "Enriched",
    "EnrichmentFailed",
    "ExtensionAdapter",
    "GitHubPermalinkExtension",
    "LoggingEmitter",
    "NullEmitter",
    "PermalinkConfig",
    "PermalinkError",
    "PermalinkExtension",
    "PermalinkReference",
    "PermalinkToken",
    "PygmentsHtmlHighlighter",
    "SnippetDecodeError",
    "SnippetFetchError",
    "SnippetFetcher",
    "SnippetRenderer",
    "__version__",
    "convert",
    "find_permalinks",
    "makeExtension",
    "parse_permalink",
    "render_fallback",
    "render_markdown",
    "settle_tokens",
]
