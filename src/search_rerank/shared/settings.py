"""
Runtime settings read from environment variables.

Variables:
    RERANK_API_URL             Remote raw-search endpoint
    RERANK_TIMEOUT             Request timeout in seconds
    RERANK_MIN_INTERVAL        Minimum seconds between remote requests
    RERANK_INCLUDE_PHRASES     Add adjacent-word phrases to fan-out terms
    RERANK_MAX_TITLE_LENGTH    Stored title length (characters)
    RERANK_MAX_EXTRACT_LENGTH  Stored extract length (characters)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from search_rerank.shared.exceptions import ConfigurationError, ErrorContext

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.mwmbl.org/api/v1/search/raw"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_TITLE_LENGTH = 100
DEFAULT_MAX_EXTRACT_LENGTH = 200

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class RerankSettings:
    """Settings shared by the session factory, remote client and CLI."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    min_interval: float = 0.0
    include_phrases: bool = False
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH
    max_extract_length: int = DEFAULT_MAX_EXTRACT_LENGTH

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RerankSettings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Raises:
            ConfigurationError: If a numeric or boolean variable is malformed
        """
        env = os.environ if environ is None else environ
        settings = cls(
            api_url=env.get("RERANK_API_URL", "").strip() or DEFAULT_API_URL,
            timeout=_read_float(env, "RERANK_TIMEOUT", DEFAULT_TIMEOUT),
            min_interval=_read_float(env, "RERANK_MIN_INTERVAL", 0.0),
            include_phrases=_read_bool(env, "RERANK_INCLUDE_PHRASES", False),
            max_title_length=_read_int(env, "RERANK_MAX_TITLE_LENGTH", DEFAULT_MAX_TITLE_LENGTH),
            max_extract_length=_read_int(env, "RERANK_MAX_EXTRACT_LENGTH", DEFAULT_MAX_EXTRACT_LENGTH),
        )
        logger.debug(f"Loaded settings: {settings}")
        return settings


def _invalid(name: str, raw: str, expected: str) -> ConfigurationError:
    return ConfigurationError(
        f"Invalid value for {name}: {raw!r} (expected {expected})",
        context=ErrorContext(operation="load_settings", input_value=raw, suggestion=f"Set {name} to {expected}"),
    )


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise _invalid(name, raw, "a non-negative number") from None
    if value < 0:
        raise _invalid(name, raw, "a non-negative number")
    return value


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise _invalid(name, raw, "a positive integer") from None
    if value <= 0:
        raise _invalid(name, raw, "a positive integer")
    return value


def _read_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise _invalid(name, raw, "true or false")
