"""Scan orchestrator - fetch, normalize, enrich, score, sort."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol

import structlog

from polyradar.models import CanonicalMarket, DepthQuote, ScanRequest, ScanResult, ScoredMarket
from polyradar.scanner.depth import DepthSourceProtocol, resolve_depth
from polyradar.scanner.normalize import normalize_market
from polyradar.scanner.scoring import score_market, sort_markets

log = structlog.get_logger(__name__)

DEFAULT_MARKET_URL_BASE = "https://polymarket.com/event/"


class MarketSourceProtocol(DepthSourceProtocol, Protocol):
    """List + depth source. PolymarketCli implements it."""

    async def list_markets_with_fallback(
        self, limit: int = 20, search: str = ""
    ) -> tuple[str, list[Any]]: ...


def market_url(slug: str, base: str = DEFAULT_MARKET_URL_BASE) -> str | None:
    return f"{base}{slug}" if slug else None


def active_markets(raw_markets: list[Any]) -> list[CanonicalMarket]:
    """Normalize every record and keep only active, open markets (input order kept)."""
    normalized = (normalize_market(raw) for raw in raw_markets)
    return [m for m in normalized if m.active and not m.closed]


def build_scored(market: CanonicalMarket, depth: DepthQuote, url_base: str) -> ScoredMarket:
    metrics = score_market(market, depth)
    return ScoredMarket(
        **market.model_dump(),
        score=metrics["score"],
        spread=metrics["spread"],
        midpoint=metrics["midpoint"],
        depth_source=depth.source,
        market_url=market_url(market.slug, url_base),
    )


async def scan(
    source: MarketSourceProtocol,
    request: ScanRequest,
    *,
    max_enrich: int = 8,
    market_url_base: str = DEFAULT_MARKET_URL_BASE,
) -> ScanResult:
    """Run one scan.

    Markets are enriched one at a time, in input order, for the first
    `max_enrich` active markets only; every market then gets market-derived
    depth for whatever is still missing. A list fetch failure other than an
    unavailable CLI (already mapped to mock data by the source) propagates.
    """
    list_source, raw_markets = await source.list_markets_with_fallback(
        limit=request.limit, search=request.search
    )
    markets = active_markets(raw_markets)

    scored: list[ScoredMarket] = []
    enriched = 0
    for i, market in enumerate(markets):
        use_live = request.enrich and i < max_enrich
        if use_live and market.token_id:
            enriched += 1
        depth = await resolve_depth(market, source, use_live=use_live)
        scored.append(build_scored(market, depth, market_url_base))

    ordered = sort_markets(scored, sort_by=request.sort_by, order=request.order)
    log.info(
        "scan_complete",
        source=list_source,
        fetched=len(raw_markets),
        active=len(markets),
        enriched=enriched,
    )
    return ScanResult(
        source=list_source,
        generated_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        markets=ordered[: request.limit],
    )
