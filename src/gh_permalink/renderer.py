"""Turn permalink tokens into GitHub-like snippet markup or a plain link."""

from __future__ import annotations

from collections.abc import Mapping
from html import escape
import logging
from typing import Protocol

from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .highlight import PygmentsHtmlHighlighter
from .matcher import PermalinkReference
from .styles import (
    CODE_BLOCK,
    CODE_OUTER_BLOCK,
    COMMIT_LINK,
    COMMIT_LINK_OUTER_BLOCK,
    FILE_LINK,
    HEADER_BLOCK,
    OUTERMOST_BLOCK,
    css_to_style,
)
from .tokens import Enriched, PermalinkToken


logger = logging.getLogger(__name__)


class Highlighter(Protocol):
    """Anything able to turn code into highlighted HTML."""

    def highlight(self, code: str, language: str, *, filename: str | None = None) -> str: ...


def _style(declarations: Mapping[str, str]) -> str:
    return escape(css_to_style(declarations), quote=True)


def render_fallback(raw: str) -> str:
    """Render the permalink as an anchor pointing at itself."""
    target = escape(raw, quote=True)
    return f'<a href="{target}">{target}</a>'


def normalise_code(code: str) -> str:
    """Ensure the snippet ends with exactly one newline."""
    if code.endswith("\n"):
        code = code[:-1]
    return code + "\n"


class SnippetRenderer:
    """Render settled tokens; holds no per-token state."""

    def __init__(
        self,
        *,
        highlighter: Highlighter | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.highlighter = highlighter or PygmentsHtmlHighlighter()
        self._emitter = emitter or LoggingEmitter(logger_obj=logger)

    def render(self, token: PermalinkToken) -> str:
        if not isinstance(token, Enriched):
            return render_fallback(token.raw)
        code = normalise_code(token.code)
        return self.render_block(token.reference, self.highlight(code, token.reference))

    def highlight(self, code: str, reference: PermalinkReference) -> str:
        """Highlight ``code``, falling back to escaped plain text on any failure."""
        try:
            return self.highlighter.highlight(
                code, reference.language_suffix, filename=reference.path
            )
        except Exception as exc:  # noqa: BLE001 - highlighting must never abort rendering
            self._emitter.warning(
                f"Error when syntax highlighting {reference.path}: {exc}", exc
            )
            return escape(code, quote=False)

    def render_block(self, reference: PermalinkReference, code_html: str) -> str:
        """Assemble the bordered snippet around already escaped ``code_html``."""
        code_link = escape(reference.code_link, quote=True)
        commit_link = escape(reference.commit_link, quote=True)
        parts = [
            f'<div style="{_style(OUTERMOST_BLOCK)}">',
            f'<div style="{_style(HEADER_BLOCK)}">',
            f'<a style="{_style(FILE_LINK)}" href="{code_link}">{escape(reference.path)}</a>',
            f'<p style="{_style(COMMIT_LINK_OUTER_BLOCK)}">',
            f"Lines {reference.line_from} to {reference.line_to} in ",
            f'<a data-pjax="true" style="{_style(COMMIT_LINK)}" href="{commit_link}">',
            f"{escape(reference.short_commit)}</a></p></div>",
            f'<pre style="{_style(CODE_OUTER_BLOCK)}">',
            f'<code style="{_style(CODE_BLOCK)}">',
            f"{code_html}</code></pre></div>\n",
        ]
        return "".join(parts)


__all__ = ["Highlighter", "SnippetRenderer", "normalise_code", "render_fallback"]
