"""Warnings, errors and events raised while enriching and rendering permalinks.

Pipeline components never print. They report through a
:class:`DiagnosticEmitter` so the Markdown extension can log while the CLI
prints to a rich console.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Sink for the diagnostics of the snippet pipeline."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard everything; handy for tests and embedding."""

    debug_enabled = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        pass

    def error(self, message: str, exc: BaseException | None = None) -> None:
        pass

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        pass


class LoggingEmitter:
    """Send diagnostics to a :mod:`logging` logger.

    Warnings carry their traceback only when ``debug_enabled`` is set; a failed
    permalink is expected and should not flood the log. Errors always do.
    """

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.warning(message, exc_info=exc if self.debug_enabled else None)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.error(message, exc_info=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            self._logger.debug("event %s: %s", name, dict(payload))
        else:
            self._logger.info(summary)


def _url(payload: Mapping[str, Any]) -> str:
    return payload.get("url") or "<unknown>"


_EVENT_SUMMARIES: dict[str, Callable[[Mapping[str, Any]], str]] = {
    "snippet_fetch": lambda payload: f"Fetching: {_url(payload)}",
    "snippet_fetch_cached": lambda payload: f"Reusing cached file content: {_url(payload)}",
    "enrichment_done": lambda payload: (
        f"Enriched {payload.get('enriched', 0)} of {payload.get('total', 0)} permalink(s)"
    ),
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """One-line summary of a known event, ``None`` for anything else."""
    summarise = _EVENT_SUMMARIES.get(name)
    return summarise(payload) if summarise else None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
