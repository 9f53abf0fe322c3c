"""Remote search API clients."""

from __future__ import annotations

from .base_client import BaseAPIClient
from .mwmbl import MwmblClient

__all__ = [
    "BaseAPIClient",
    "MwmblClient",
]
