"""Inline CSS mimicking GitHub's embedded code snippet."""

from __future__ import annotations

from collections.abc import Mapping


OUTERMOST_BLOCK: Mapping[str, str] = {
    # Thin border with round corners.
    "border-color": "#d0d7de",
    "border-radius": "6px",
    "border-style": "solid",
    "border-width": "1px",
    # Keeps children from overflowing the rounded corners.
    "overflow": "hidden",
}

HEADER_BLOCK: Mapping[str, str] = {
    "background-color": "#f6f8fa",
    # Separates the header from the code.
    "border-bottom": "1px solid #d0d7de",
    "padding": "8px 16px",
    "font-size": "14px",
}

FILE_LINK: Mapping[str, str] = {
    "margin": "0px !important",
    "padding": "0px !important",
    "font-weight": "600",
    "font-family": (
        '-apple-system,BlinkMacSystemFont,"Segoe UI","Noto Sans",Helvetica,Arial,'
        'sans-serif,"Apple Color Emoji","Segoe UI Emoji"'
    ),
    "color": "#0969da",
    "text-decoration": "underline",
}

COMMIT_LINK_OUTER_BLOCK: Mapping[str, str] = {
    "margin": "0px !important",
    "padding": "0px !important",
    # Meta info text.
    "color": "#636c76",
}

COMMIT_LINK: Mapping[str, str] = {
    "font-size": "90%",
    "color": "#1f2328",
    "text-decoration": "underline",
}

CODE_OUTER_BLOCK: Mapping[str, str] = {
    "margin": "0px !important",
    "padding": "0px !important",
}

CODE_BLOCK: Mapping[str, str] = {
    "background-color": "#ffffff",
    "padding": "0px 16px",
    # Scrollable once the snippet is taller than the cap.
    "display": "block",
    "overflow": "auto",
    "max-height": "300px",
}


def css_to_style(declarations: Mapping[str, str]) -> str:
    """Serialise CSS declarations for a ``style`` attribute."""
    return " ".join(f"{key}: {value};" for key, value in declarations.items())


__all__ = [
    "CODE_BLOCK",
    "CODE_OUTER_BLOCK",
    "COMMIT_LINK",
    "COMMIT_LINK_OUTER_BLOCK",
    "FILE_LINK",
    "HEADER_BLOCK",
    "OUTERMOST_BLOCK",
    "css_to_style",
]
