from __future__ import annotations

import dataclasses

import pytest

from gh_permalink.matcher import find_permalinks, parse_permalink


URL = (
    "https://github.com/markedjs/marked/blob/"
    "91ee15b2d43da92f751165c88d1a78ebc3b99114/src/Renderer.ts#L17-L33"
)


def test_parse_decomposes_permalink() -> None:
    reference = parse_permalink(URL)

    assert reference is not None
    assert reference.owner == "markedjs"
    assert reference.repo == "marked"
    assert reference.commit == "91ee15b2d43da92f751165c88d1a78ebc3b99114"
    assert reference.path == "src/Renderer.ts"
    assert reference.language_suffix == "ts"
    assert reference.line_from == 17
    assert reference.line_to == 33
    assert reference.code_link == URL
    assert reference.commit_link == (
        "https://github.com/markedjs/marked/commit/91ee15b2d43da92f751165c88d1a78ebc3b99114"
    )
    assert reference.short_commit == "91ee15"


def test_path_splits_at_last_dot() -> None:
    reference = parse_permalink(
        "https://github.com/o/r/blob/main/pkg/v1.2/archive.tar.gz#L1-L2"
    )

    assert reference is not None
    assert reference.path == "pkg/v1.2/archive.tar.gz"
    assert reference.language_suffix == "gz"


def test_commit_is_opaque() -> None:
    reference = parse_permalink(
        "https://github.com/markedjs/marked/blob/bad-commit-123/src/Renderer.ts#L17-L33"
    )

    assert reference is not None
    assert reference.commit == "bad-commit-123"
    assert reference.short_commit == "bad-co"


def test_line_numbers_are_not_validated() -> None:
    reference = parse_permalink("https://github.com/o/r/blob/abc/a.py#L9-L3")

    assert reference is not None
    assert (reference.line_from, reference.line_to) == (9, 3)


@pytest.mark.parametrize(
    "text",
    [
        "example markdown",
        "",
        f"see {URL}",
        f"{URL}.",
        URL.replace("https://", "http://"),
        URL.replace("github.com", "gitlab.com"),
        URL.replace("/blob/", "/tree/"),
        URL.replace("#L17-L33", "#L17"),
        URL.replace("#L17-L33", ""),
        "https://github.com/o/r/blob/abc/Makefile#L1-L2",
        "https://github.com/o/r/blob/abc/a.py#Lx-L2",
        f"{URL}\n",
    ],
)
def test_non_permalinks_yield_nothing(text: str) -> None:
    assert parse_permalink(text) is None


def test_non_string_input_yields_nothing() -> None:
    assert parse_permalink(None) is None
    assert parse_permalink(42) is None


def test_parse_is_deterministic() -> None:
    assert parse_permalink(URL) == parse_permalink(URL)


def test_reference_is_immutable() -> None:
    reference = parse_permalink(URL)
    assert reference is not None

    with pytest.raises(dataclasses.FrozenInstanceError):
        reference.commit = "other"  # type: ignore[misc]


def test_contents_path_and_cache_key() -> None:
    reference = parse_permalink(URL)
    assert reference is not None

    assert reference.contents_path == "repos/markedjs/marked/contents/src/Renderer.ts"
    assert reference.cache_key == (
        "markedjs",
        "marked",
        "src/Renderer.ts",
        "91ee15b2d43da92f751165c88d1a78ebc3b99114",
    )


def test_find_permalinks_scans_text() -> None:
    other = "https://github.com/o/r/blob/abc/lib/mod.py#L1-L4"
    text = f"First {URL} then\n{other} and https://example.com/x#L1-L2 and ({URL})."

    found = list(find_permalinks(text))

    assert [reference.code_link for _, _, reference in found] == [URL, other]
    start, end, _ = found[0]
    assert text[start:end] == URL
