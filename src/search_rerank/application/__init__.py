"""
Application Layer - Use Cases and Orchestration

Contains:
- search: Rerank core (query analysis, result store, ranking engine)
- session: Session lifecycle
- fanout: Caller-side parallel search around a session
"""

from .fanout import FanOutReport, fan_out, rerank_search
from .search.query_analyzer import AnalyzedQuery, QueryAnalyzer
from .search.ranking_engine import RankingConfig, RankingEngine
from .search.result_store import IngestStats, ResultStore
from .session import Session, create_session

__all__ = [
    # Core
    "QueryAnalyzer",
    "AnalyzedQuery",
    "ResultStore",
    "IngestStats",
    "RankingEngine",
    "RankingConfig",
    "Session",
    "create_session",
    # Fan-out
    "fan_out",
    "rerank_search",
    "FanOutReport",
]
