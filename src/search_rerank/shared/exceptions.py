"""
Exception Hierarchy for Search Rerank.

    RerankError
    ├── InvalidStateError        raised by the ranking core
    ├── APIError
    │   └── NetworkError         remote search unreachable or unusable
    ├── DataError
    │   └── ParseError           response envelope not understood
    └── ConfigurationError       bad RERANK_* environment value

Each class fixes its own category, severity and retry flag; instances only
carry a message and an optional ErrorContext. The ranking core (query
analysis, result store, ranking engine, session) raises InvalidStateError
and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class ErrorSeverity(Enum):
    ERROR = "error"  # This call failed, a later one may succeed
    CRITICAL = "critical"  # Caller bug or unusable setup


class ErrorCategory(Enum):
    STATE = "state"
    API = "api"
    DATA = "data"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where an error happened and what the caller can do about it."""

    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None


class RerankError(Exception):
    """Base exception for all Search Rerank errors."""

    category: ClassVar[ErrorCategory] = ErrorCategory.API
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.ERROR
    retryable: ClassVar[bool] = False

    def __init__(self, message: str, *, context: ErrorContext | None = None) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready description, as printed by the CLI."""
        data: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
        }
        optional = {
            "operation": self.context.operation,
            "suggestion": self.context.suggestion,
            "retry_after_seconds": self.context.retry_after,
        }
        data.update((key, value) for key, value in optional.items() if value)
        return data


# =============================================================================
# Session State
# =============================================================================


class InvalidStateError(RerankError):
    """
    A session operation was attempted in a state that forbids it.

    Ingesting into, or finalizing, an already ranked session; or reading
    results before finalize(). This is an orchestration bug, so it is
    never retryable.
    """

    category = ErrorCategory.STATE
    severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        operation: str,
        state: str,
        *,
        message: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message or f"Cannot {operation}: session is {state}",
            context=context
            or ErrorContext(
                operation=operation,
                input_value=state,
                suggestion="Create a new session for each search action",
            ),
        )
        self.operation = operation
        self.state = state


# =============================================================================
# Remote Search
# =============================================================================


class APIError(RerankError):
    """Base class for remote search API errors."""

    retryable = True


class NetworkError(APIError):
    """No usable response from the remote search API."""

    def __init__(self, message: str = "Network connection failed", *, context: ErrorContext | None = None) -> None:
        super().__init__(message, context=context)


class DataError(RerankError):
    """Base class for malformed remote data."""

    category = ErrorCategory.DATA


class ParseError(DataError):
    """A response envelope could not be understood."""

    def __init__(self, message: str, *, source: str | None = None, context: ErrorContext | None = None) -> None:
        prefix = f"Parse error ({source})" if source else "Parse error"
        super().__init__(f"{prefix}: {message}", context=context)


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(RerankError):
    """An environment setting could not be used."""

    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.CRITICAL
