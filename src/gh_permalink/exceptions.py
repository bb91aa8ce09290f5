"""Exception hierarchy for the permalink snippet pipeline."""

from __future__ import annotations


class PermalinkError(RuntimeError):
    """Base exception for permalink snippet failures."""


class ConfigurationError(PermalinkError, ValueError):
    """Raised when the extension is set up with unusable configuration."""


class SnippetFetchError(PermalinkError):
    """Raised when the remote file content cannot be retrieved."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SnippetDecodeError(PermalinkError):
    """Raised when retrieved content cannot be decoded or sliced."""


class HighlightError(PermalinkError):
    """Raised when the highlighter cannot produce markup for a snippet."""


__all__ = [
    "ConfigurationError",
    "HighlightError",
    "PermalinkError",
    "SnippetDecodeError",
    "SnippetFetchError",
]
