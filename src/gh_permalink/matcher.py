"""Recognise GitHub permalinks pinned to a commit and a line range."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import re


# https://docs.github.com/en/get-started/writing-on-github/working-with-advanced-formatting/creating-a-permanent-link-to-a-code-snippet
PERMALINK_PATTERN = re.compile(
    r"""
    https://github\.com/
    (?P<owner>[^/]+)/
    (?P<repo>[^/]+)/
    blob/
    (?P<commit>[^/]+)/
    (?P<prefix>.*)\.(?P<suffix>.*)
    \#L(?P<line_from>\d+)-L(?P<line_to>\d+)
    """,
    re.VERBOSE,
)

# Whitespace-delimited URL spans that are worth a full grammar check.
CANDIDATE_PATTERN = re.compile(r"(?<![\w<(\[\"'=/])https://[^\s<>]+")


@dataclass(frozen=True, slots=True)
class PermalinkReference:
    """Structured view of a permalink URL."""

    owner: str
    repo: str
    commit: str
    path: str
    language_suffix: str
    line_from: int
    line_to: int
    code_link: str
    commit_link: str

    @property
    def short_commit(self) -> str:
        return self.commit[:6]

    @property
    def contents_path(self) -> str:
        """Path of the file below the REST API root."""
        return f"repos/{self.owner}/{self.repo}/contents/{self.path}"

    @property
    def cache_key(self) -> tuple[str, str, str, str]:
        return (self.owner, self.repo, self.path, self.commit)


def parse_permalink(text: object) -> PermalinkReference | None:
    """Return the permalink encoded by ``text`` or ``None`` when it is not one.

    The whole string must match; surrounding prose or trailing punctuation
    makes the candidate ordinary text.
    """
    if not isinstance(text, str):
        return None
    match = PERMALINK_PATTERN.fullmatch(text)
    if match is None:
        return None

    owner = match.group("owner")
    repo = match.group("repo")
    commit = match.group("commit")
    suffix = match.group("suffix")
    return PermalinkReference(
        owner=owner,
        repo=repo,
        commit=commit,
        path=f"{match.group('prefix')}.{suffix}",
        language_suffix=suffix,
        line_from=int(match.group("line_from")),
        line_to=int(match.group("line_to")),
        code_link=text,
        commit_link=f"https://github.com/{owner}/{repo}/commit/{commit}",
    )


def find_permalinks(text: str) -> Iterator[tuple[int, int, PermalinkReference]]:
    """Yield ``(start, end, reference)`` for every permalink span inside ``text``."""
    for candidate in CANDIDATE_PATTERN.finditer(text):
        reference = parse_permalink(candidate.group(0))
        if reference is not None:
            yield candidate.start(), candidate.end(), reference


__all__ = [
    "CANDIDATE_PATTERN",
    "PERMALINK_PATTERN",
    "PermalinkReference",
    "find_permalinks",
    "parse_permalink",
]
