"""Per-invocation state of the gh-permalink CLI and its stderr reporting."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any, TextIO


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

_LEVEL_STYLES = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback preference and collected pipeline events."""

    verbosity: int = 0
    show_tracebacks: bool = False
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict, init=False)
    _consoles: dict[str, Console] = field(default_factory=dict, init=False, repr=False)

    def _bound_console(self, name: str, stream: TextIO, **options: Any) -> Console:
        # Test runners swap the standard streams between invocations.
        console = self._consoles.get(name)
        if console is None or console.file is not stream:
            from rich.console import Console

            console = Console(file=stream, **options)
            self._consoles[name] = console
        return console

    @property
    def console(self) -> Console:
        """Console writing to standard output."""
        return self._bound_console("out", sys.stdout)

    @property
    def err_console(self) -> Console:
        """Console writing diagnostics to standard error."""
        return self._bound_console("err", sys.stderr, highlight=False)

    def record_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        self.events.setdefault(name, []).append(dict(payload or {}))

    def consume_events(self, name: str) -> list[dict[str, Any]]:
        """Return and forget the events recorded under ``name``."""
        return self.events.pop(name, [])


_CURRENT: ContextVar[CLIState | None] = ContextVar("gh_permalink_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the state of the running command, creating it on first use."""
    state = _CURRENT.get()
    if state is None:
        state = CLIState()
        _CURRENT.set(state)
    return state


def set_cli_state(*, verbosity: int | None = None, debug: bool | None = None) -> CLIState:
    state = get_cli_state()
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _exception_details(exc: BaseException, *, with_causes: bool) -> list[str]:
    details = [f"{type(exc).__name__}: {exc}"]
    if not with_causes:
        return details
    seen = {id(exc)}
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        details.append(f"caused by {type(cause).__name__}: {cause}")
        cause = cause.__cause__ or cause.__context__
    return details


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` on stderr.

    ``info`` messages only appear with ``-v``. Warnings and errors always do;
    ``-v`` appends the exception, ``-vv`` its whole cause chain.
    """
    state = get_cli_state()
    if level == "info":
        if state.verbosity >= 1:
            state.err_console.print(message, style="dim", markup=False)
        return

    from rich.text import Text

    style = _LEVEL_STYLES.get(level, "yellow")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        for line in _exception_details(exception, with_causes=state.verbosity >= 2):
            text.append(f"\n  {line}", style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)
