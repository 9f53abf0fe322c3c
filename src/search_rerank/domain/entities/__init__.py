"""
Domain Entities

Core objects of a rerank session.
"""

from __future__ import annotations

from .hit import RankedResult, RawHit, SessionState, coerce_field, shorten

__all__ = [
    "RawHit",
    "RankedResult",
    "SessionState",
    "coerce_field",
    "shorten",
]
