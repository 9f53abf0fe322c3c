"""
Rerank Core

Query analysis, hit accumulation and ranking for one search action.

Key Components:
- QueryAnalyzer: Derives the fan-out terms from the query
- ResultStore: Normalizes and deduplicates incoming hits
- RankingEngine: Scores and orders the accumulated hits

Architecture:
    User Query
        │
        ▼
    ┌──────────────────┐
    │  QueryAnalyzer   │  ← Ordered, deduplicated terms
    └────────┬─────────┘
             │
    ┌────────┴────────┐
    ▼        ▼        ▼
  term 1   term 2   term N  ← Caller's parallel searches
    │        │        │
    └────────┴────────┘
             │
             ▼
    ┌──────────────────┐
    │   ResultStore    │  ← Normalize + dedup by url
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐
    │  RankingEngine   │  ← Score, stable sort
    └────────┬─────────┘
             │
             ▼
    RankedResult[]
"""

from __future__ import annotations

from .query_analyzer import AnalyzedQuery, QueryAnalyzer, derive_terms
from .ranking_engine import (
    FieldMatch,
    HitFeatures,
    RankingConfig,
    RankingEngine,
    rank_hits,
    split_url,
)
from .result_store import IngestStats, ResultStore

__all__ = [
    # Query Analysis
    "QueryAnalyzer",
    "AnalyzedQuery",
    "derive_terms",
    # Hit Accumulation
    "ResultStore",
    "IngestStats",
    # Ranking
    "RankingEngine",
    "RankingConfig",
    "FieldMatch",
    "HitFeatures",
    "rank_hits",
    "split_url",
]
