"""Rerank Session Lifecycle."""

from __future__ import annotations

from .session import Session, create_session

__all__ = [
    "Session",
    "create_session",
]
