"""
ResultStore - Normalized, Deduplicated Hit Accumulation

Collects raw hits submitted by the caller while fan-out responses arrive.

Rules:
1. Missing/None fields become "" (never an error)
2. Dedup by exact url, first write wins
3. Hits with an empty url collapse into one entry keyed by ""
4. Insertion order is kept and becomes the ranking tie-break
5. Once sealed, further ingestion raises InvalidStateError

Thread Safety:
    ingest() and seal() run under one lock, so the dedup check and the
    insert are atomic even when several fan-out tasks ingest at once.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from search_rerank.domain.entities.hit import RawHit, SessionState
from search_rerank.shared.exceptions import InvalidStateError

logger = logging.getLogger(__name__)


@dataclass
class IngestStats:
    """Statistics from the ingestion process."""

    total_input: int = 0
    unique_hits: int = 0
    duplicates_removed: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_input": self.total_input,
            "unique_hits": self.unique_hits,
            "duplicates_removed": self.duplicates_removed,
        }


class ResultStore:
    """
    Accumulates hits keyed by url in insertion order.

    Usage:
        store = ResultStore()
        store.ingest("https://a.example", "A", "first")
        store.ingest("https://a.example", "B", "dropped")
        hits = store.seal()  # (RawHit(url="https://a.example", title="A", ...),)
    """

    def __init__(
        self,
        max_title_length: int | None = None,
        max_extract_length: int | None = None,
    ):
        """
        Initialize ResultStore.

        Args:
            max_title_length: Truncate stored titles to this many characters
            max_extract_length: Truncate stored extracts to this many characters
        """
        self._max_title_length = max_title_length
        self._max_extract_length = max_extract_length
        self._hits: dict[str, RawHit] = {}
        self._stats = IngestStats()
        self._sealed = False
        self._lock = threading.Lock()

    def ingest(self, url: Any = None, title: Any = None, extract: Any = None) -> bool:
        """
        Store a hit unless its url was already seen.

        Args:
            url: Hit url (None/missing becomes "")
            title: Hit title (None/missing becomes "")
            extract: Hit extract (None/missing becomes "")

        Returns:
            True if the hit was stored, False if it was a duplicate

        Raises:
            InvalidStateError: If the store has been sealed
        """
        hit = RawHit.from_fields(
            url,
            title,
            extract,
            max_title_length=self._max_title_length,
            max_extract_length=self._max_extract_length,
        )
        with self._lock:
            if self._sealed:
                raise InvalidStateError("ingest", SessionState.RANKED.value)
            self._stats.total_input += 1
            if hit.url in self._hits:
                self._stats.duplicates_removed += 1
                logger.debug(f"Dropping duplicate hit for url {hit.url!r}")
                return False
            self._hits[hit.url] = hit
            self._stats.unique_hits += 1
            return True

    def ingest_many(self, hits: list[dict[str, Any]]) -> int:
        """
        Ingest a batch of `{url, title, extract}` mappings.

        Returns:
            Number of hits actually stored
        """
        stored = 0
        for item in hits:
            if self.ingest(item.get("url"), item.get("title"), item.get("extract")):
                stored += 1
        return stored

    def seal(self) -> tuple[RawHit, ...]:
        """
        Stop accepting hits and return a snapshot in insertion order.

        Raises:
            InvalidStateError: If the store was already sealed
        """
        with self._lock:
            if self._sealed:
                raise InvalidStateError("finalize", SessionState.RANKED.value)
            self._sealed = True
            return tuple(self._hits.values())

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def stats(self) -> IngestStats:
        with self._lock:
            return IngestStats(**self._stats.to_dict())

    def snapshot(self) -> tuple[RawHit, ...]:
        """Current hits in insertion order (does not seal)."""
        with self._lock:
            return tuple(self._hits.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._hits
