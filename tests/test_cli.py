from __future__ import annotations

from pathlib import Path

from conftest import COMMIT, GOOD_TOKEN, FakeGitHub
import pytest
from typer.testing import CliRunner

from gh_permalink.cli import app
from gh_permalink.config import TOKEN_ENV
from gh_permalink.fetcher import SnippetFetcher


GOOD = f"https://github.com/markedjs/marked/blob/{COMMIT}/src/Renderer.ts#L17-L19"
BAD_COMMIT = "https://github.com/markedjs/marked/blob/bad-commit-123/src/Renderer.ts#L17-L33"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "notes.md"
    path.write_text(f"# Notes\n\n{GOOD}\n\n{BAD_COMMIT}\n", encoding="utf-8")
    return path


@pytest.fixture
def offline(github: FakeGitHub, monkeypatch: pytest.MonkeyPatch) -> FakeGitHub:
    monkeypatch.setattr(SnippetFetcher, "_build_client", lambda self: github.client())
    return github


def test_list_shows_permalinks_without_fetching(
    runner: CliRunner, document: Path, offline: FakeGitHub
) -> None:
    result = runner.invoke(app, ["render", str(document), "--list"])

    assert result.exit_code == 0, result.output
    assert "markedjs/marked" in result.output
    assert "17-19" in result.output
    assert "91ee15" in result.output
    assert "bad-co" in result.output
    assert offline.requests == []


def test_list_reads_standard_input(runner: CliRunner) -> None:
    result = runner.invoke(app, ["render", "-", "--list"], input="nothing to see here\n")

    assert result.exit_code == 0, result.output
    assert "No permalinks found." in result.output


def test_render_writes_html_to_stdout(
    runner: CliRunner, document: Path, offline: FakeGitHub
) -> None:
    result = runner.invoke(app, ["render", str(document), "--token", GOOD_TOKEN])

    assert result.exit_code == 0, result.output
    assert "<h1>Notes</h1>" in result.output
    assert "Lines 17 to 19 in " in result.output
    assert f'<p><a href="{BAD_COMMIT}">{BAD_COMMIT}</a></p>' in result.output
    assert len(offline.requests) == 2


def test_render_reads_token_from_environment(
    runner: CliRunner,
    document: Path,
    offline: FakeGitHub,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(TOKEN_ENV, GOOD_TOKEN)

    result = runner.invoke(app, ["render", str(document)])

    assert result.exit_code == 0, result.output
    assert "Lines 17 to 19 in " in result.output


def test_render_writes_output_file(
    runner: CliRunner, document: Path, offline: FakeGitHub, tmp_path: Path
) -> None:
    target = tmp_path / "site" / "notes.html"

    result = runner.invoke(
        app, ["render", str(document), "--token", GOOD_TOKEN, "-o", str(target)]
    )

    assert result.exit_code == 0, result.output
    assert "Wrote" in result.output
    html = target.read_text(encoding="utf-8")
    assert html.startswith("<h1>Notes</h1>\n<p><div style=")
    assert html.endswith(f'<p><a href="{BAD_COMMIT}">{BAD_COMMIT}</a></p>\n')


def test_render_requires_a_token(
    runner: CliRunner, document: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv(TOKEN_ENV, raising=False)

    result = runner.invoke(app, ["render", str(document)])

    assert result.exit_code == 2
    assert "GitHub token is required" in result.output


def test_render_rejects_empty_api_url(runner: CliRunner, document: Path) -> None:
    result = runner.invoke(
        app, ["render", str(document), "--token", "t", "--api-url", ""]
    )

    assert result.exit_code == 2
    assert "cannot be empty" in result.output


def test_render_reports_unreadable_source(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["render", str(tmp_path / "missing.md"), "--list"])

    assert result.exit_code == 1
    assert "Unable to read" in result.output


def test_verbose_render_reports_requests(
    runner: CliRunner, document: Path, offline: FakeGitHub
) -> None:
    result = runner.invoke(app, ["render", str(document), "--token", GOOD_TOKEN, "-v"])

    assert result.exit_code == 0, result.output
    assert "Enriched 1 of 2 permalink(s)" in result.output
    assert "2 contents request(s) sent" in result.output
