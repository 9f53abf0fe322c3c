"""
Mwmbl Raw Search Client

Queries the Mwmbl raw lexical search endpoint:
    GET {api_url}?s=<term>  ->  {"results": [{"url", "title", "extract"}, ...]}

Result items are handed back as plain dicts; field normalization is left
to the session at ingestion.
"""

from __future__ import annotations

import logging
from typing import Any

from search_rerank.infrastructure.sources.base_client import BaseAPIClient
from search_rerank.shared.exceptions import ErrorContext, NetworkError, ParseError
from search_rerank.shared.settings import DEFAULT_API_URL, RerankSettings

logger = logging.getLogger(__name__)


class MwmblClient(BaseAPIClient):
    """
    Async client for the Mwmbl raw search API.

    Usage:
        async with MwmblClient() as client:
            hits = await client.search("rust")
    """

    _service_name = "Mwmbl"

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        min_interval: float = 0.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            timeout=timeout,
            min_interval=min_interval,
            headers={"Accept": "application/json"},
            **kwargs,
        )
        self._api_url = api_url

    @classmethod
    def from_settings(cls, settings: RerankSettings, **kwargs: Any) -> MwmblClient:
        return cls(
            api_url=settings.api_url,
            timeout=settings.timeout,
            min_interval=settings.min_interval,
            **kwargs,
        )

    async def search(self, term: str) -> list[dict[str, Any]]:
        """
        Run one raw lexical search.

        Args:
            term: Search term

        Returns:
            The envelope's result objects (non-object items are skipped)

        Raises:
            NetworkError: If no usable response was received
            ParseError: If the envelope has no `results` list
        """
        data = await self._get_json(self._api_url, params={"s": term})
        if data is None:
            raise NetworkError(
                f"No response from {self._service_name} for {term!r}",
                context=ErrorContext(operation="search", input_value=term),
            )
        return self.parse_envelope(data, term)

    @classmethod
    def parse_envelope(cls, data: Any, term: str = "") -> list[dict[str, Any]]:
        """Extract result objects from a raw search response."""
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise ParseError(
                "response has no 'results' list",
                source=cls._service_name,
                context=ErrorContext(operation="search", input_value=term),
            )
        results = [item for item in data["results"] if isinstance(item, dict)]
        skipped = len(data["results"]) - len(results)
        if skipped:
            logger.warning(f"{cls._service_name}: skipped {skipped} malformed results for {term!r}")
        return results
