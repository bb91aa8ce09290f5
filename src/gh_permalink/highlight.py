"""Pygments integration producing inline-styled HTML for snippets."""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.util import ClassNotFound

from .exceptions import HighlightError


class PygmentsHtmlHighlighter:
    """Convert source code to HTML spans using Pygments."""

    def __init__(self, *, style: str = "default", noclasses: bool = True) -> None:
        self.style = style
        self.noclasses = noclasses

    def lexer_for(self, language: str, filename: str | None = None) -> Lexer:
        """Resolve a lexer from a language alias, then from the file name.

        Raises:
            ClassNotFound: If neither hint names a known lexer.
        """
        try:
            return get_lexer_by_name(language, stripnl=False, ensurenl=False)
        except ClassNotFound:
            if not filename:
                raise
        return get_lexer_for_filename(filename, stripnl=False, ensurenl=False)

    def highlight(self, code: str, language: str, *, filename: str | None = None) -> str:
        """Return highlighted markup for ``code`` without a wrapping element.

        Raises:
            HighlightError: If no lexer matches ``language`` or ``filename``.
        """
        try:
            lexer = self.lexer_for(language, filename)
        except ClassNotFound as exc:
            raise HighlightError(f"no lexer found for '{language}'") from exc
        formatter = HtmlFormatter(nowrap=True, noclasses=self.noclasses, style=self.style)
        return highlight(code, lexer, formatter)


__all__ = ["PygmentsHtmlHighlighter"]
