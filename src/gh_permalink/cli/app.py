"""Typer application behind the ``gh-permalink`` console script."""

from __future__ import annotations

import typer

from .render import render
from .state import emit_error, get_cli_state


app = typer.Typer(
    help="Render Markdown with GitHub permalinks embedded as code snippets.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


@app.callback()
def _root() -> None:
    """Render Markdown with GitHub permalinks embedded as code snippets."""


app.command()(render)


def main() -> None:
    """Run the CLI, reducing unexpected failures to one error line unless ``--debug``."""
    try:
        app()
    except (typer.Exit, SystemExit):
        raise
    except Exception as exc:  # pragma: no cover - last resort for the console script
        state = get_cli_state()
        if not state.show_tracebacks:
            emit_error(f"Rendering failed: {exc}", exception=exc)
            raise typer.Exit(code=1) from exc
        state.err_console.print_exception(show_locals=state.verbosity >= 2)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
