"""Depth resolution: live -> mock -> market-derived, merged by tier strength."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol

import structlog

from polyradar.models import CanonicalMarket, DepthQuote
from polyradar.scanner.normalize import first_present, to_number

log = structlog.get_logger(__name__)

BEST_BID_KEYS = ("bestBid", "best_bid")
BEST_ASK_KEYS = ("bestAsk", "best_ask")
LAST_TRADE_KEYS = ("lastTradePrice", "last_trade_price")
OUTCOME_PRICES_KEYS = ("outcomePrices", "outcome_prices")


class DepthSourceProtocol(Protocol):
    """Live quote source (tiers 1 and 2). PolymarketCli implements it."""

    async def depth_with_fallback(self, token_id: str | None) -> DepthQuote: ...


def _first_outcome_price(value: Any) -> float | None:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if isinstance(value, list) and value:
        return to_number(value[0], None)
    return None


def market_derived_depth(raw: Mapping[str, Any]) -> DepthQuote:
    """Midpoint/spread estimated from fields already on the raw record (tier 3).

    Midpoint: bid/ask average, else last trade price, else first outcome price.
    Spread: ask - bid when both are usable, else an explicit non-negative `spread`.
    """
    bid = to_number(first_present(raw, BEST_BID_KEYS), None)
    ask = to_number(first_present(raw, BEST_ASK_KEYS), None)
    has_book = bid is not None and ask is not None and bid >= 0 and ask >= 0

    midpoint: float | None = None
    if has_book:
        midpoint = (bid + ask) / 2
    if midpoint is None:
        midpoint = to_number(first_present(raw, LAST_TRADE_KEYS), None)
    if midpoint is None:
        midpoint = _first_outcome_price(first_present(raw, OUTCOME_PRICES_KEYS))

    spread: float | None = None
    if has_book and ask >= bid:
        spread = round(ask - bid, 10)
    else:
        explicit = to_number(raw.get("spread"), None)
        if explicit is not None and explicit >= 0:
            spread = explicit

    if midpoint is None and spread is None:
        return DepthQuote.empty("none")
    return DepthQuote(midpoint=midpoint, spread=spread, source="market")


def merge_depth(stronger: DepthQuote, weaker: DepthQuote) -> DepthQuote:
    """Fill null fields of `stronger` from `weaker`; never overwrite a resolved field.

    Provenance is the stronger quote's if it contributed anything, else the
    weaker quote's if that did. With no data at all, "unavailable" survives
    from the stronger side; anything else collapses to "none".
    """
    midpoint = stronger.midpoint if stronger.midpoint is not None else weaker.midpoint
    spread = stronger.spread if stronger.spread is not None else weaker.spread
    if stronger.has_data:
        source = stronger.source
    elif weaker.has_data:
        source = weaker.source
    elif stronger.source == "unavailable" or weaker.source == "unavailable":
        source = "unavailable"
    else:
        source = "none"
    return DepthQuote(midpoint=midpoint, spread=spread, source=source)


async def resolve_depth(
    market: CanonicalMarket,
    live_source: DepthSourceProtocol | None,
    *,
    use_live: bool = True,
) -> DepthQuote:
    """Full three-tier depth for one market.

    Tiers 1-2 run only when `use_live` and the market has a token id; a market
    without one never touches the source. Tier 3 fills whatever is still null.
    """
    quote = DepthQuote.empty("none")
    if use_live and live_source is not None and market.token_id:
        try:
            quote = await live_source.depth_with_fallback(market.token_id)
        except Exception as e:
            log.warning("depth_error", market_id=market.id, error=repr(e))
            quote = DepthQuote.empty("unavailable")
        log.debug("depth_live", market_id=market.id, source=quote.source)
    if quote.is_complete:
        return quote
    return merge_depth(quote, market_derived_depth(market.raw))
