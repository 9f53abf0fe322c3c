"""
Domain Layer - Core Business Objects

Contains:
- entities: search hits, ranked results, session state
"""

from .entities import RankedResult, RawHit, SessionState

__all__ = [
    "RawHit",
    "RankedResult",
    "SessionState",
]
