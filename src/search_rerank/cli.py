"""
Command-line entry point: python -m search_rerank "rust programming"

Runs the full fan-out search against the configured remote API and prints
the reranked results.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING

from search_rerank.application.fanout import rerank_search
from search_rerank.shared.exceptions import RerankError
from search_rerank.shared.settings import RerankSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from search_rerank.domain.entities.hit import RankedResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rerank lexical web search results for a query")
    parser.add_argument("query", nargs="+", help="Search query")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--limit", type=int, default=None, help="Show at most N results")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_results(results: Sequence[RankedResult], as_json: bool = False) -> str:
    """Render ranked results as text lines or a JSON list."""
    if as_json:
        return json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)
    lines = []
    for position, result in enumerate(results, start=1):
        lines.append(f"{position:>3}. [{result.score:.4f}] {result.title or '(untitled)'}")
        lines.append(f"     {result.url}")
        if result.extract:
            lines.append(f"     {result.extract}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = RerankSettings.from_env()
        results = asyncio.run(rerank_search(" ".join(args.query), settings=settings))
    except RerankError as e:
        logger.exception(f"Search failed: {e}")
        print(json.dumps(e.to_dict()), file=sys.stderr)
        return 1

    if args.limit is not None:
        results = results[: max(args.limit, 0)]
    print(format_results(results, as_json=args.json))
    return 0
