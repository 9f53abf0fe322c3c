"""
Rerank Session - one search action from query to ranked results.

A Session owns the query terms, the ingested hits and the lifecycle state.

State machine:
    OPEN   --ingest()-->   OPEN
    OPEN   --finalize()--> RANKED (terminal)
    RANKED --ingest()-->   InvalidStateError
    RANKED --finalize()--> InvalidStateError

Usage:
    session = create_session("rust programming")
    for term in session.get_query_terms():
        for hit in fetch(term):            # caller's own I/O
            session.ingest(hit.get("url"), hit.get("title"), hit.get("extract"))
    results = session.finalize()

Sessions are never shared between search actions. The caller must let all
in-flight ingest() calls finish before calling finalize().
"""

from __future__ import annotations

import logging
from typing import Any

from search_rerank.application.search.query_analyzer import AnalyzedQuery, QueryAnalyzer
from search_rerank.application.search.ranking_engine import RankingConfig, RankingEngine
from search_rerank.application.search.result_store import IngestStats, ResultStore
from search_rerank.domain.entities.hit import RankedResult, SessionState
from search_rerank.shared.exceptions import InvalidStateError
from search_rerank.shared.settings import RerankSettings

logger = logging.getLogger(__name__)


class Session:
    """Per-search rerank session."""

    def __init__(
        self,
        query: str | None,
        *,
        ranking_config: RankingConfig | None = None,
        include_phrases: bool = False,
        max_title_length: int | None = None,
        max_extract_length: int | None = None,
    ):
        """
        Initialize a session.

        Args:
            query: Original user query (None is treated as empty)
            ranking_config: Scoring configuration
            include_phrases: Add adjacent-word phrases to the fan-out terms
            max_title_length: Truncate stored titles
            max_extract_length: Truncate stored extracts
        """
        self._analysis: AnalyzedQuery = QueryAnalyzer(include_phrases=include_phrases).analyze(query)
        self._engine = RankingEngine(self._analysis.words, ranking_config)
        self._store = ResultStore(
            max_title_length=max_title_length,
            max_extract_length=max_extract_length,
        )
        self._results: tuple[RankedResult, ...] | None = None
        logger.debug(f"Created session for query {self.original_query!r} with terms {self._analysis.terms}")

    @property
    def original_query(self) -> str:
        return self._analysis.original_query

    @property
    def analysis(self) -> AnalyzedQuery:
        return self._analysis

    @property
    def state(self) -> SessionState:
        """RANKED from the moment the store is sealed."""
        if self._store.sealed:
            return SessionState.RANKED
        return SessionState.OPEN

    @property
    def terms(self) -> list[str]:
        return self._analysis.terms

    @property
    def stats(self) -> IngestStats:
        return self._store.stats

    @property
    def engine(self) -> RankingEngine:
        return self._engine

    def get_query_terms(self) -> list[str]:
        """Ordered, deduplicated terms to fan out as separate searches."""
        return self._analysis.terms

    def ingest(self, url: Any = None, title: Any = None, extract: Any = None) -> bool:
        """
        Add one raw hit to the session.

        Missing fields are stored as "". A url already ingested is ignored.
        Safe to call from concurrent fan-out tasks.

        Returns:
            True if the hit was stored, False if it was a duplicate

        Raises:
            InvalidStateError: If the session has been finalized
        """
        try:
            return self._store.ingest(url, title, extract)
        except InvalidStateError:
            logger.warning(f"Rejected ingest into ranked session for {self.original_query!r}")
            raise

    def finalize(self) -> tuple[RankedResult, ...]:
        """
        Rank all ingested hits and close the session.

        Returns:
            Immutable ordered results (empty if nothing was ingested)

        Raises:
            InvalidStateError: If the session was already finalized
        """
        try:
            hits = self._store.seal()
        except InvalidStateError:
            logger.warning(f"Rejected second finalize for {self.original_query!r}")
            raise
        self._results = self._engine.rank(hits)
        logger.info(
            f"Finalized session for {self.original_query!r}: "
            f"{len(self._results)} results from {self._store.stats.total_input} submitted hits"
        )
        return self._results

    @property
    def results(self) -> tuple[RankedResult, ...]:
        """
        Results produced by finalize(). Same object on every read.

        Raises:
            InvalidStateError: If the session has not been finalized yet
        """
        if self._results is None:
            raise InvalidStateError(
                "read results",
                self.state.value,
                message="Cannot read results: session has not been finalized",
            )
        return self._results

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Session(query={self.original_query!r}, state={self.state.value}, hits={len(self)})"


def create_session(
    query: str | None,
    settings: RerankSettings | None = None,
    ranking_config: RankingConfig | None = None,
) -> Session:
    """
    Create a session for one search action.

    Args:
        query: Original user query
        settings: Runtime settings (phrases, truncation); RerankSettings() if omitted
        ranking_config: Scoring configuration

    Returns:
        A new Session in the OPEN state
    """
    settings = settings or RerankSettings()
    return Session(
        query,
        ranking_config=ranking_config,
        include_phrases=settings.include_phrases,
        max_title_length=settings.max_title_length,
        max_extract_length=settings.max_extract_length,
    )
