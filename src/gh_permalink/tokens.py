"""Token states a permalink passes through during one document conversion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from .matcher import PermalinkReference


@dataclass(frozen=True, slots=True)
class Detected:
    """A permalink recognised in inline text, not yet enriched."""

    raw: str
    reference: PermalinkReference

    def enriched(self, code: str) -> Enriched:
        return Enriched(raw=self.raw, reference=self.reference, code=code)

    def failed(self) -> EnrichmentFailed:
        return EnrichmentFailed(raw=self.raw, reference=self.reference)


@dataclass(frozen=True, slots=True)
class Enriched:
    """A permalink whose referenced lines were retrieved."""

    raw: str
    reference: PermalinkReference
    code: str


@dataclass(frozen=True, slots=True)
class EnrichmentFailed:
    """A permalink whose lines could not be retrieved."""

    raw: str
    reference: PermalinkReference


PermalinkToken: TypeAlias = Detected | Enriched | EnrichmentFailed


def is_settled(token: PermalinkToken) -> bool:
    """Return whether enrichment already ran for ``token``."""
    return not isinstance(token, Detected)


__all__ = ["Detected", "Enriched", "EnrichmentFailed", "PermalinkToken", "is_settled"]
