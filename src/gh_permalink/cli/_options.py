"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from gh_permalink.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, TOKEN_ENV


INPUTS_PANEL = "Input Handling"
REMOTE_PANEL = "GitHub"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

SourceArgument = Annotated[
    str,
    typer.Argument(
        metavar="SOURCE",
        help="Markdown document to render, or '-' to read from standard input.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the HTML to this file instead of standard output.",
        dir_okay=False,
        writable=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TokenOption = Annotated[
    str | None,
    typer.Option(
        "--token",
        envvar=TOKEN_ENV,
        show_envvar=True,
        help="GitHub API token used to read file contents.",
        rich_help_panel=REMOTE_PANEL,
    ),
]

ApiUrlOption = Annotated[
    str,
    typer.Option(
        "--api-url",
        help="Root of the GitHub REST API (for GitHub Enterprise Server).",
        rich_help_panel=REMOTE_PANEL,
    ),
]

TimeoutOption = Annotated[
    float,
    typer.Option(
        "--timeout",
        min=0.1,
        help="Seconds before a contents request is abandoned.",
        rich_help_panel=REMOTE_PANEL,
    ),
]

ListOption = Annotated[
    bool,
    typer.Option(
        "--list",
        help="List the permalinks found in SOURCE and exit without fetching.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT",
    "ApiUrlOption",
    "DebugOption",
    "ListOption",
    "OutputPathOption",
    "SourceArgument",
    "TimeoutOption",
    "TokenOption",
    "VerboseOption",
]
