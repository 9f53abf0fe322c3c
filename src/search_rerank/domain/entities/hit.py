"""
Domain Entities: RawHit, RankedResult, SessionState

A RawHit is one lexical search hit as submitted by the caller, already
normalized: every field is a plain string, never None. A RankedResult is
the scored, immutable output record produced when a session is finalized.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any


class SessionState(str, Enum):
    """Lifecycle state of a rerank session."""

    OPEN = "open"  # Accepting hits
    RANKED = "ranked"  # Terminal, results produced


def coerce_field(value: Any) -> str:
    """Normalize a raw hit field to a string ("" for missing values)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def shorten(text: str, max_length: int | None) -> str:
    """Truncate text to at most max_length characters."""
    if max_length is None or len(text) <= max_length:
        return text
    return text[:max_length]


@dataclass(frozen=True, slots=True)
class RawHit:
    """
    Normalized search hit.

    Fields are always strings. Use from_fields() at the ingestion
    boundary so nothing downstream has to check for None.
    """

    url: str = ""
    title: str = ""
    extract: str = ""

    @classmethod
    def from_fields(
        cls,
        url: Any = None,
        title: Any = None,
        extract: Any = None,
        *,
        max_title_length: int | None = None,
        max_extract_length: int | None = None,
    ) -> RawHit:
        """Build a hit from possibly missing or non-string values."""
        return cls(
            url=coerce_field(url),
            title=shorten(coerce_field(title), max_title_length),
            extract=shorten(coerce_field(extract), max_extract_length),
        )


@dataclass(frozen=True, slots=True)
class RankedResult:
    """Scored output record. Produced only by session finalization."""

    url: str
    title: str
    extract: str
    score: float

    @classmethod
    def from_hit(cls, hit: RawHit, score: float) -> RankedResult:
        return cls(url=hit.url, title=hit.title, extract=hit.extract, score=score)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return dataclasses.asdict(self)
