"""
Fan-Out Search - caller-side orchestration around a rerank Session.

Issues one remote search per query term in parallel, streams every hit into
the session as each response arrives and finalizes once all requests have
completed. A failed term only means fewer hits; the ranked output is still
produced from whatever arrived.

The rerank core never imports this module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from search_rerank.application.session.session import Session, create_session
from search_rerank.shared.async_utils import gather_with_errors
from search_rerank.shared.settings import RerankSettings

if TYPE_CHECKING:
    from search_rerank.application.search.ranking_engine import RankingConfig
    from search_rerank.domain.entities.hit import RankedResult

logger = logging.getLogger(__name__)


class SearchClient(Protocol):
    """Anything that can run one lexical search per term."""

    async def search(self, term: str) -> list[dict[str, Any]]: ...


@dataclass
class FanOutReport:
    """Outcome of one fan-out round."""

    terms: list[str] = field(default_factory=list)
    hits_received: int = 0
    hits_stored: int = 0
    failed_terms: dict[str, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failed_terms

    def to_dict(self) -> dict[str, Any]:
        return {
            "terms": self.terms,
            "hits_received": self.hits_received,
            "hits_stored": self.hits_stored,
            "failed_terms": self.failed_terms,
        }


async def fan_out(session: Session, client: SearchClient) -> FanOutReport:
    """
    Search every session term concurrently and ingest the hits.

    Args:
        session: An OPEN session
        client: Remote search client

    Returns:
        FanOutReport with per-term failures
    """
    terms = session.get_query_terms()
    report = FanOutReport(terms=list(terms))

    async def search_and_ingest(term: str) -> int:
        hits = await client.search(term)
        report.hits_received += len(hits)
        stored = 0
        for hit in hits:
            if session.ingest(hit.get("url"), hit.get("title"), hit.get("extract")):
                stored += 1
        return stored

    outcomes = await gather_with_errors(
        *[search_and_ingest(term) for term in terms],
        return_exceptions=True,
    )

    for term, outcome in zip(terms, outcomes):
        if isinstance(outcome, Exception):
            logger.warning(f"Search for term {term!r} failed: {outcome}")
            report.failed_terms[term] = str(outcome)
        else:
            report.hits_stored += outcome

    logger.info(
        f"Fan-out for {session.original_query!r}: {len(terms)} terms, "
        f"{len(report.failed_terms)} failed, {report.hits_stored} hits stored"
    )
    return report


async def rerank_search(
    query: str | None,
    client: SearchClient | None = None,
    settings: RerankSettings | None = None,
    ranking_config: RankingConfig | None = None,
) -> tuple[RankedResult, ...]:
    """
    Run a complete rerank search: terms, fan-out, ingestion, ranking.

    Args:
        query: User's search query
        client: Remote search client (a MwmblClient is created and closed if omitted)
        settings: Runtime settings (read from the environment if omitted)
        ranking_config: Scoring configuration

    Returns:
        Ranked results; empty for an empty query
    """
    settings = settings or RerankSettings.from_env()
    session = create_session(query, settings, ranking_config)

    if not session.get_query_terms():
        logger.debug("Empty query, skipping fan-out")
        return session.finalize()

    if client is not None:
        await fan_out(session, client)
        return session.finalize()

    from search_rerank.infrastructure.sources.mwmbl import MwmblClient

    async with MwmblClient.from_settings(settings) as owned_client:
        await fan_out(session, owned_client)
    return session.finalize()
