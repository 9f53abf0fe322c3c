"""
QueryAnalyzer - Query Term Extraction for Fan-Out Search

This module turns the user's query into the ordered, deduplicated terms the
caller fans out to the remote search API, and into the word set the ranking
engine matches hits against.

Architecture Decision:
    QueryAnalyzer is stateless and deterministic. It does NOT call any
    external APIs. Same query in, same terms out.

Example:
    >>> analyzer = QueryAnalyzer()
    >>> analyzer.derive_terms("Rust programming, rust!")
    ['rust', 'programming']
    >>> QueryAnalyzer(include_phrases=True).derive_terms("rust programming")
    ['rust', 'programming', 'rust programming']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

# Leading/trailing characters that are not letters or digits
_EDGE_PUNCTUATION = re.compile(r"^[\W_]+|[\W_]+$")


@dataclass(frozen=True)
class AnalyzedQuery:
    """
    Result of query analysis.

    `words` are the distinct normalized single words in first-seen order.
    `phrases` are distinct adjacent-word pairs (empty unless enabled).
    `terms` is what the caller fans out: words followed by phrases.
    """

    original_query: str
    normalized_query: str
    words: tuple[str, ...] = field(default_factory=tuple)
    phrases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def terms(self) -> list[str]:
        return list(self.words + self.phrases)

    @property
    def is_empty(self) -> bool:
        return not self.words

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "original_query": self.original_query,
            "normalized_query": self.normalized_query,
            "words": list(self.words),
            "phrases": list(self.phrases),
            "terms": self.terms,
        }


class QueryAnalyzer:
    """
    Derives query terms from a raw query string.

    Steps:
    1. Split on whitespace
    2. Lowercase each token and trim punctuation at its edges
    3. Drop tokens that end up empty
    4. Deduplicate, keeping first occurrence order
    5. Optionally append distinct adjacent-word phrases

    Usage:
        analyzer = QueryAnalyzer()
        terms = analyzer.derive_terms("foo bar bar")  # ["foo", "bar"]
    """

    def __init__(self, include_phrases: bool = False):
        """
        Initialize QueryAnalyzer.

        Args:
            include_phrases: Also emit "word1 word2" pairs as fan-out terms
        """
        self.include_phrases = include_phrases

    def analyze(self, query: str | None) -> AnalyzedQuery:
        """
        Analyze a search query.

        Args:
            query: User's search query (None is treated as empty)

        Returns:
            AnalyzedQuery with words, phrases and terms
        """
        query = query or ""
        tokens = self._tokenize(query)
        words = _unique(tokens)

        phrases: tuple[str, ...] = ()
        if self.include_phrases:
            pairs = [f"{a} {b}" for a, b in zip(tokens, tokens[1:])]
            phrases = tuple(p for p in _unique(pairs) if p not in words)

        return AnalyzedQuery(
            original_query=query,
            normalized_query=" ".join(tokens),
            words=words,
            phrases=phrases,
        )

    def derive_terms(self, query: str | None) -> list[str]:
        """Return the ordered, deduplicated fan-out terms for a query."""
        return self.analyze(query).terms

    @staticmethod
    def normalize_token(token: str) -> str:
        """Lowercase a token and strip punctuation from both ends."""
        return _EDGE_PUNCTUATION.sub("", token.strip().lower())

    def _tokenize(self, query: str) -> list[str]:
        tokens = (self.normalize_token(raw) for raw in query.split())
        return [token for token in tokens if token]


def _unique(items: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


# Convenience function
def derive_terms(query: str | None, include_phrases: bool = False) -> list[str]:
    """
    Derive fan-out terms from a query (convenience function).

    Args:
        query: User's search query
        include_phrases: Also emit adjacent-word phrases

    Returns:
        Ordered, deduplicated list of terms
    """
    return QueryAnalyzer(include_phrases=include_phrases).derive_terms(query)
