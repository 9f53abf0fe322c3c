"""
RankingEngine - Deterministic Relevance Scoring and Ordering

Scores each accumulated hit against the query words and orders the hits.

Scoring:
    Every hit is split into four fields: title, extract, url domain and url
    path. For each field the engine records which query words occur (whole
    words, case-insensitive) and derives a field score:

        field_score = exponent ** (match_length - total_length) / last_match_end

    where match_length sums the lengths of distinct words found,
    total_length sums the lengths of all query words and last_match_end is
    the end offset of the last new word found. Full, early matches score
    close to 1; partial or late matches decay quickly.

    The final score is

        score = coverage + refinement

    coverage:   number of distinct query words found in title or extract
    refinement: weighted field scores times exp(-decay * len(url)),
                scaled into [0, 1)

    Because refinement stays below 1, a hit covering more query words can
    never score below one covering fewer.

Ordering:
    Score descending. Equal scores keep ingestion order (stable sort).
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from search_rerank.application.search.query_analyzer import QueryAnalyzer
from search_rerank.domain.entities.hit import RankedResult, RawHit

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingConfig:
    """
    Configuration for hit scoring.

    Presets:
    - DEFAULT: title and domain matches weigh most, short urls preferred
    - CONTENT_FOCUSED: only title and extract count
    """

    title_weight: float = 4.0
    extract_weight: float = 1.0
    domain_weight: float = 4.0
    path_weight: float = 2.0

    # Base of the per-field match score
    match_exponent: float = 2.0

    # Refinement is multiplied by exp(-decay * len(url))
    url_length_decay: float = 0.04

    def __post_init__(self) -> None:
        weights = (self.title_weight, self.extract_weight, self.domain_weight, self.path_weight)
        if any(w < 0 for w in weights):
            raise ValueError("Ranking weights must be non-negative")
        if self.match_exponent < 1:
            raise ValueError("match_exponent must be >= 1")
        if self.url_length_decay < 0:
            raise ValueError("url_length_decay must be non-negative")

    @classmethod
    def default(cls) -> RankingConfig:
        """Get default configuration."""
        return cls()

    @classmethod
    def content_focused(cls) -> RankingConfig:
        """Get configuration that ignores the url entirely."""
        return cls(domain_weight=0.0, path_weight=0.0, url_length_decay=0.0)

    @property
    def weight_sum(self) -> float:
        return self.title_weight + self.extract_weight + self.domain_weight + self.path_weight


@dataclass(frozen=True)
class FieldMatch:
    """Match features of the query words within one hit field."""

    length: int = 0
    last_char: int = 0
    num_terms: int = 0
    total_possible_length: int = 0
    term_proportion: float = 0.0
    score: float = 0.0
    matched_terms: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "last_char": self.last_char,
            "num_terms": self.num_terms,
            "total_possible_length": self.total_possible_length,
            "term_proportion": self.term_proportion,
            "score": self.score,
            "matched_terms": sorted(self.matched_terms),
        }


@dataclass(frozen=True)
class HitFeatures:
    """Per-field match features of one hit."""

    title: FieldMatch = field(default_factory=FieldMatch)
    extract: FieldMatch = field(default_factory=FieldMatch)
    domain: FieldMatch = field(default_factory=FieldMatch)
    path: FieldMatch = field(default_factory=FieldMatch)

    @property
    def content_terms(self) -> frozenset[str]:
        """Distinct query words found in title or extract."""
        return self.title.matched_terms | self.extract.matched_terms

    @property
    def coverage(self) -> int:
        return len(self.content_terms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title.to_dict(),
            "extract": self.extract.to_dict(),
            "domain": self.domain.to_dict(),
            "path": self.path.to_dict(),
            "coverage": self.coverage,
        }


def split_url(url: str) -> tuple[str, str]:
    """
    Split a url into (domain, path).

    Urls without a scheme or host, and urls that fail to parse, give
    ("", "") so they only lose the url features.
    """
    if not url:
        return "", ""
    try:
        parts = urlsplit(url)
        host = parts.hostname or ""
    except ValueError:
        return "", ""
    if not parts.scheme or not host:
        return "", ""
    return host, parts.path


class RankingEngine:
    """
    Scores and orders hits for one query.

    Usage:
        engine = RankingEngine.for_query("rust programming")
        results = engine.rank(hits)
    """

    def __init__(self, words: Iterable[str], config: RankingConfig | None = None):
        """
        Initialize RankingEngine.

        Args:
            words: Normalized query words (duplicates are ignored)
            config: Scoring configuration (default if not provided)
        """
        self._config = config or RankingConfig.default()
        self._words = tuple(dict.fromkeys(w for w in words if w))
        self._total_length = sum(len(w) for w in self._words)
        self._pattern = self._compile(self._words)

    @classmethod
    def for_query(cls, query: str | None, config: RankingConfig | None = None) -> RankingEngine:
        """Build an engine from a raw query string."""
        return cls(QueryAnalyzer().analyze(query).words, config)

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    @property
    def config(self) -> RankingConfig:
        return self._config

    @staticmethod
    def _compile(words: Sequence[str]) -> re.Pattern[str] | None:
        if not words:
            return None
        # Longest first so the alternation is independent of query order
        ordered = sorted(words, key=lambda w: (-len(w), w))
        alternation = "|".join(re.escape(w) for w in ordered)
        return re.compile(rf"\b(?:{alternation})\b")

    def match_field(self, text: str) -> FieldMatch:
        """Compute match features of the query words within one field."""
        if self._pattern is None or not text:
            return FieldMatch(total_possible_length=self._total_length)

        seen: set[str] = set()
        length = 0
        last_char = 0
        for match in self._pattern.finditer(text.lower()):
            term = match.group(0)
            if term in seen:
                continue
            seen.add(term)
            last_char = match.end()
            length += match.end() - match.start()

        if not seen:
            return FieldMatch(total_possible_length=self._total_length)

        score = self._config.match_exponent ** (length - self._total_length) / last_char
        return FieldMatch(
            length=length,
            last_char=last_char,
            num_terms=len(seen),
            total_possible_length=self._total_length,
            term_proportion=len(seen) / len(self._words),
            score=score,
            matched_terms=frozenset(seen),
        )

    def features(self, hit: RawHit) -> HitFeatures:
        """Get per-field match features for a hit."""
        domain, path = split_url(hit.url)
        return HitFeatures(
            title=self.match_field(hit.title),
            extract=self.match_field(hit.extract),
            domain=self.match_field(domain),
            path=self.match_field(path),
        )

    def score(self, hit: RawHit) -> float:
        """Relevance score of a hit. Deterministic, never raises for empty fields."""
        if not self._words:
            return 0.0

        config = self._config
        features = self.features(hit)
        weighted = (
            config.title_weight * features.title.score
            + config.extract_weight * features.extract.score
            + config.domain_weight * features.domain.score
            + config.path_weight * features.path.score
        )
        length_penalty = math.exp(-config.url_length_decay * len(hit.url))
        refinement = weighted * length_penalty / (config.weight_sum + 1.0)
        return features.coverage + refinement

    def rank(self, hits: Iterable[RawHit]) -> tuple[RankedResult, ...]:
        """
        Score and order hits.

        Args:
            hits: Hits in ingestion order

        Returns:
            Immutable sequence sorted by score, ties in ingestion order
        """
        scored = [RankedResult.from_hit(hit, self.score(hit)) for hit in hits]
        # sorted() is stable with reverse=True, equal scores keep input order
        ranked = tuple(sorted(scored, key=lambda r: r.score, reverse=True))
        logger.debug(f"Ranked {len(ranked)} hits for words {list(self._words)}")
        return ranked


# Convenience function
def rank_hits(
    query: str | None,
    hits: Iterable[RawHit],
    config: RankingConfig | None = None,
) -> tuple[RankedResult, ...]:
    """
    Rank hits against a query (convenience function).

    Args:
        query: Original query
        hits: Hits in ingestion order
        config: Scoring configuration

    Returns:
        Ordered ranked results
    """
    return RankingEngine.for_query(query, config).rank(hits)
