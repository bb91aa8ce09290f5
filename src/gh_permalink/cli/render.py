"""Implementation of the ``gh-permalink render`` command."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
import sys
from typing import Any

from markdown import Markdown
import typer

from gh_permalink.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, PermalinkConfig
from gh_permalink.diagnostics import format_event_message
from gh_permalink.exceptions import ConfigurationError
from gh_permalink.extension import PermalinkExtension
from gh_permalink.markdown import GitHubPermalinkExtension, render_markdown
from gh_permalink.matcher import PermalinkReference, find_permalinks

from ._options import (
    ApiUrlOption,
    DebugOption,
    ListOption,
    OutputPathOption,
    SourceArgument,
    TimeoutOption,
    TokenOption,
    VerboseOption,
)
from .state import CLIState, emit_error, emit_warning, render_message, set_cli_state


class CliEmitter:
    """Report pipeline diagnostics of one ``render`` run on the rich stderr console.

    Fetch and decode failures become ``warning:`` lines, events are kept on the
    state for the closing summary and echoed only with ``-v``.
    """

    def __init__(self, state: CLIState) -> None:
        self._state = state

    @property
    def debug_enabled(self) -> bool:
        return self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._state.record_event(name, payload)
        summary = format_event_message(name, payload)
        if summary:
            render_message("info", summary)


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        emit_error(f"Unable to read '{source}'.", exception=exc)
        raise typer.Exit(code=1) from exc


def _present_permalinks(state: CLIState, references: list[PermalinkReference]) -> None:
    from rich import box
    from rich.table import Table

    table = Table(title="Permalinks", box=box.SQUARE, header_style="bold cyan")
    for column in ("Repository", "Path", "Lines", "Commit"):
        table.add_column(column)
    for reference in references:
        table.add_row(
            f"{reference.owner}/{reference.repo}",
            reference.path,
            f"{reference.line_from}-{reference.line_to}",
            reference.short_commit,
        )
    state.console.print(table)


def render(
    source: SourceArgument,
    output: OutputPathOption = None,
    token: TokenOption = None,
    api_url: ApiUrlOption = DEFAULT_API_URL,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    list_only: ListOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render a Markdown document, embedding GitHub permalinks as code snippets."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    state.events.clear()
    text = _read_source(source)

    if list_only:
        references = [reference for _, _, reference in find_permalinks(text)]
        if not references:
            state.console.print("No permalinks found.")
            return
        _present_permalinks(state, references)
        return

    if not token:
        emit_error("A GitHub token is required; use --token or set GITHUB_TOKEN.")
        raise typer.Exit(code=2)

    try:
        config = PermalinkConfig.build(token=token, api_url=api_url, timeout=timeout)
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=2) from exc

    adapter = PermalinkExtension(config, emitter=CliEmitter(state))
    md = Markdown(extensions=[GitHubPermalinkExtension(adapter=adapter)])
    html = asyncio.run(render_markdown(text, md))
    fetches = state.consume_events("snippet_fetch")
    render_message("info", f"{len(fetches)} contents request(s) sent")

    if output is None:
        sys.stdout.write(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    state.err_console.print(f"Wrote {output}", markup=False)


__all__ = ["CliEmitter", "render"]
