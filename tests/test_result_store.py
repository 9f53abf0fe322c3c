"""
Tests for ResultStore - hit normalization, dedup and sealing.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from search_rerank.application.search.result_store import IngestStats, ResultStore
from search_rerank.domain.entities.hit import RawHit
from search_rerank.shared.exceptions import InvalidStateError

# =============================================================================
# Normalization
# =============================================================================


class TestNormalization:
    def test_none_fields_become_empty_strings(self):
        store = ResultStore()
        store.ingest(None, None, None)
        assert store.snapshot() == (RawHit(url="", title="", extract=""),)

    def test_missing_fields_default_to_empty(self):
        store = ResultStore()
        store.ingest("https://a.example")
        hit = store.snapshot()[0]
        assert hit.title == ""
        assert hit.extract == ""

    def test_non_string_values_coerced(self):
        store = ResultStore()
        store.ingest("https://a.example", 42, 3.5)
        hit = store.snapshot()[0]
        assert hit.title == "42"
        assert hit.extract == "3.5"

    def test_truncation(self):
        store = ResultStore(max_title_length=5, max_extract_length=3)
        store.ingest("https://a.example/" + "x" * 300, "abcdefgh", "ünïcode")
        hit = store.snapshot()[0]
        assert hit.title == "abcde"
        assert hit.extract == "ünï"
        assert len(hit.url) == len("https://a.example/") + 300

    def test_no_truncation_by_default(self):
        store = ResultStore()
        store.ingest("u", "t" * 500, "e" * 500)
        hit = store.snapshot()[0]
        assert len(hit.title) == 500
        assert len(hit.extract) == 500


# =============================================================================
# Deduplication
# =============================================================================


class TestDeduplication:
    def test_first_write_wins(self):
        store = ResultStore()
        assert store.ingest("u", "A", "x") is True
        assert store.ingest("u", "B", "y") is False
        assert store.snapshot() == (RawHit(url="u", title="A", extract="x"),)

    def test_empty_urls_collapse_to_one_entry(self):
        store = ResultStore()
        store.ingest(None, "first", "")
        store.ingest("", "second", "")
        store.ingest(None, None, None)
        assert len(store) == 1
        assert store.snapshot()[0].title == "first"

    def test_exact_match_only(self):
        store = ResultStore()
        store.ingest("https://a.example", "A", "")
        store.ingest("https://a.example/", "B", "")
        store.ingest("HTTPS://A.EXAMPLE", "C", "")
        assert len(store) == 3

    def test_insertion_order_preserved(self):
        store = ResultStore()
        for url in ["c", "a", "b", "a"]:
            store.ingest(url, url.upper(), "")
        assert [h.url for h in store.snapshot()] == ["c", "a", "b"]

    def test_contains(self):
        store = ResultStore()
        store.ingest("u")
        assert "u" in store
        assert "v" not in store

    def test_ingest_many(self):
        store = ResultStore()
        stored = store.ingest_many(
            [
                {"url": "a", "title": "A"},
                {"url": "a", "title": "dup"},
                {"title": "no url"},
            ]
        )
        assert stored == 2
        assert [h.url for h in store.snapshot()] == ["a", ""]


# =============================================================================
# Stats
# =============================================================================


class TestStats:
    def test_counts(self):
        store = ResultStore()
        store.ingest("a")
        store.ingest("a")
        store.ingest("b")
        stats = store.stats
        assert isinstance(stats, IngestStats)
        assert stats.to_dict() == {"total_input": 3, "unique_hits": 2, "duplicates_removed": 1}

    def test_stats_is_a_copy(self):
        store = ResultStore()
        stats = store.stats
        store.ingest("a")
        assert stats.total_input == 0


# =============================================================================
# Sealing
# =============================================================================


class TestSeal:
    def test_seal_returns_snapshot(self):
        store = ResultStore()
        store.ingest("a", "A")
        store.ingest("b", "B")
        hits = store.seal()
        assert [h.url for h in hits] == ["a", "b"]
        assert store.sealed

    def test_ingest_after_seal_rejected(self):
        store = ResultStore()
        store.seal()
        with pytest.raises(InvalidStateError):
            store.ingest("a")
        assert len(store) == 0

    def test_double_seal_rejected(self):
        store = ResultStore()
        store.seal()
        with pytest.raises(InvalidStateError):
            store.seal()

    def test_rejected_ingest_not_counted(self):
        store = ResultStore()
        store.seal()
        with pytest.raises(InvalidStateError):
            store.ingest("a")
        assert store.stats.total_input == 0


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrentIngest:
    def test_parallel_ingest_of_same_url_stores_one(self):
        store = ResultStore()
        barrier = threading.Barrier(16)

        def worker(i: int) -> bool:
            barrier.wait()
            return store.ingest("https://same.example", f"title {i}", "")

        with ThreadPoolExecutor(max_workers=16) as pool:
            outcomes = list(pool.map(worker, range(16)))

        assert outcomes.count(True) == 1
        assert len(store) == 1
        assert store.stats.duplicates_removed == 15

    def test_parallel_ingest_of_distinct_urls(self):
        store = ResultStore()

        def worker(batch: int) -> None:
            for i in range(200):
                store.ingest(f"https://example.com/{i % 50}", f"{batch}-{i}", "")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert len(store) == 50
        stats = store.stats
        assert stats.total_input == 1600
        assert stats.unique_hits + stats.duplicates_removed == stats.total_input
