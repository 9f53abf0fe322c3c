"""
Shared module for Search Rerank.

Provides:
- Unified exception hierarchy
- Async utilities for the remote fan-out
- Environment-driven settings
"""

from .async_utils import CircuitBreaker, gather_with_errors
from .exceptions import (
    APIError,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidStateError,
    NetworkError,
    ParseError,
    RerankError,
)
from .settings import RerankSettings

__all__ = [
    # Exceptions
    "RerankError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "InvalidStateError",
    "APIError",
    "NetworkError",
    "DataError",
    "ParseError",
    "ConfigurationError",
    # Async utilities
    "gather_with_errors",
    "CircuitBreaker",
    # Settings
    "RerankSettings",
]
