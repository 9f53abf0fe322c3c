"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from search_rerank import create_session
from search_rerank.shared.settings import RerankSettings

# ============================================================
# Session Fixtures
# ============================================================


@pytest.fixture
def settings():
    """Settings that never depend on the test environment."""
    return RerankSettings()


@pytest.fixture
def make_session(settings):
    """Factory for fresh sessions."""

    def _create(query: str = "rust programming"):
        return create_session(query, settings)

    return _create


# ============================================================
# Mock Remote Search Responses
# ============================================================


@pytest.fixture
def rust_hits():
    """Raw hits as the remote API returns them for "rust"."""
    return [
        {
            "url": "https://www.rust-lang.org/",
            "title": "Rust Programming Language",
            "extract": "A language empowering everyone to build reliable and efficient software.",
        },
        {
            "url": "https://en.wikipedia.org/wiki/Rust",
            "title": "Rust - Wikipedia",
            "extract": "Rust is an iron oxide, a usually reddish-brown oxide formed by iron and oxygen.",
        },
        {"url": None, "title": None, "extract": None},
    ]


@pytest.fixture
def programming_hits():
    """Raw hits as the remote API returns them for "programming"."""
    return [
        {
            "url": "https://www.rust-lang.org/",
            "title": "Duplicate title that must be dropped",
            "extract": "",
        },
        {
            "url": "https://en.wikipedia.org/wiki/Computer_programming",
            "title": "Computer programming - Wikipedia",
            "extract": "Computer programming is the process of writing code.",
        },
    ]


@pytest.fixture
def mock_client(rust_hits, programming_hits):
    """Search client returning canned hits per term."""
    responses = {"rust": rust_hits, "programming": programming_hits}

    async def _search(term: str):
        return responses.get(term, [])

    client = AsyncMock()
    client.search = AsyncMock(side_effect=_search)
    return client
