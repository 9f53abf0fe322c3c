"""
Search Rerank - Re-rank lexical web search hits against the original query

Usage:
    from search_rerank import create_session

    session = create_session("rust programming")
    for term in session.get_query_terms():
        for hit in my_search(term):
            session.ingest(hit.get("url"), hit.get("title"), hit.get("extract"))

    for result in session.finalize():
        print(f"{result.score:.3f} {result.url}")

Or end to end against the configured remote API:
    results = await rerank_search("rust programming")
"""

from .application import (
    AnalyzedQuery,
    QueryAnalyzer,
    RankingConfig,
    RankingEngine,
    Session,
    create_session,
    rerank_search,
)
from .domain import RankedResult, RawHit, SessionState
from .shared import InvalidStateError, RerankError, RerankSettings

__version__ = "0.1.0"

__all__ = [
    # Session API
    "create_session",
    "Session",
    "SessionState",
    # Data
    "RawHit",
    "RankedResult",
    # Components
    "QueryAnalyzer",
    "AnalyzedQuery",
    "RankingEngine",
    "RankingConfig",
    # Orchestration
    "rerank_search",
    # Errors / settings
    "InvalidStateError",
    "RerankError",
    "RerankSettings",
]
