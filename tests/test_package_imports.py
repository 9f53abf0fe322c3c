"""
Package Import Tests - Verify all exports are working correctly.

This test module ensures:
1. All __all__ exports are importable
2. Sub-package exports resolve
3. No circular import issues
4. Version is correct
"""

import importlib

import pytest


class TestPackageImports:
    """Test all package imports work correctly."""

    def test_version(self):
        """Version should be a valid semver string."""
        import search_rerank

        parts = search_rerank.__version__.split(".")
        assert len(parts) >= 2
        assert all(p.isdigit() for p in parts[:2])

    @pytest.mark.parametrize(
        "module",
        [
            "search_rerank",
            "search_rerank.domain",
            "search_rerank.application",
            "search_rerank.application.search",
            "search_rerank.application.session",
            "search_rerank.infrastructure.sources",
            "search_rerank.shared",
        ],
    )
    def test_all_exports_importable(self, module):
        """All items in __all__ should be importable."""
        mod = importlib.import_module(module)
        for name in mod.__all__:
            assert getattr(mod, name, None) is not None, f"Export '{module}.{name}' is missing"

    def test_core_does_not_import_http_stack(self):
        """The rerank core modules never reference the remote client."""
        import search_rerank.application.search.ranking_engine as ranking_engine
        import search_rerank.application.search.result_store as result_store
        import search_rerank.application.session.session as session

        for mod in (ranking_engine, result_store, session):
            assert not hasattr(mod, "httpx")
            assert not hasattr(mod, "MwmblClient")
