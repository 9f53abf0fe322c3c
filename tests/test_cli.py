"""Tests for the command-line entry point."""

import json
from unittest.mock import AsyncMock, patch

from search_rerank.cli import build_parser, format_results, main
from search_rerank.domain.entities.hit import RankedResult
from search_rerank.shared.exceptions import ConfigurationError

RESULTS = (
    RankedResult(url="https://www.rust-lang.org/", title="Rust", extract="A language", score=2.5),
    RankedResult(url="", title="", extract="", score=0.0),
)


class TestParser:
    def test_query_words_joined(self):
        args = build_parser().parse_args(["rust", "programming", "--limit", "3", "--json"])
        assert args.query == ["rust", "programming"]
        assert args.limit == 3
        assert args.json is True
        assert args.verbose is False


class TestFormatResults:
    def test_text_output(self):
        text = format_results(RESULTS)
        lines = text.splitlines()
        assert lines[0] == "  1. [2.5000] Rust"
        assert lines[1] == "     https://www.rust-lang.org/"
        assert lines[2] == "     A language"
        assert lines[3] == "  2. [0.0000] (untitled)"

    def test_json_output(self):
        data = json.loads(format_results(RESULTS, as_json=True))
        assert data[0] == {
            "url": "https://www.rust-lang.org/",
            "title": "Rust",
            "extract": "A language",
            "score": 2.5,
        }

    def test_empty(self):
        assert format_results(()) == ""


class TestMain:
    def test_prints_results(self, capsys):
        with patch("search_rerank.cli.rerank_search", new=AsyncMock(return_value=RESULTS)) as search:
            code = main(["rust", "programming", "--limit", "1"])

        assert code == 0
        assert search.await_args.args[0] == "rust programming"
        out = capsys.readouterr().out
        assert "https://www.rust-lang.org/" in out
        assert "(untitled)" not in out

    def test_json_flag(self, capsys):
        with patch("search_rerank.cli.rerank_search", new=AsyncMock(return_value=RESULTS)):
            assert main(["rust", "--json"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_configuration_error_exit_code(self, capsys, monkeypatch):
        monkeypatch.setenv("RERANK_TIMEOUT", "never")
        assert main(["rust"]) == 1
        err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert err["category"] == "config"

    def test_rerank_error_from_search(self, capsys):
        failing = AsyncMock(side_effect=ConfigurationError("broken"))
        with patch("search_rerank.cli.rerank_search", new=failing):
            assert main(["rust"]) == 1
