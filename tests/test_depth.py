"""Depth resolver: market-derived estimates, tier merge, resolution."""

import asyncio

import pytest

from polyradar.models import DepthQuote
from polyradar.scanner.depth import market_derived_depth, merge_depth, resolve_depth
from polyradar.scanner.normalize import normalize_market


def test_derived_from_best_bid_ask():
    q = market_derived_depth({"bestBid": "0.58", "bestAsk": 0.62})
    assert q.midpoint == pytest.approx(0.60)
    assert q.spread == pytest.approx(0.04)
    assert q.source == "market"


def test_derived_falls_back_to_last_trade_then_outcome_prices():
    q = market_derived_depth({"best_bid": 0.4, "lastTradePrice": 0.45})
    assert q.midpoint == 0.45 and q.spread is None
    q = market_derived_depth({"outcomePrices": '["0.3", "0.7"]'})
    assert q.midpoint == 0.3 and q.source == "market"
    q = market_derived_depth({"outcome_prices": [0.25, 0.75]})
    assert q.midpoint == 0.25


def test_derived_negative_bid_ignored():
    q = market_derived_depth({"bestBid": -1, "bestAsk": 0.5, "last_trade_price": 0.52})
    assert q.midpoint == 0.52
    assert q.spread is None


def test_derived_explicit_spread():
    q = market_derived_depth({"spread": "0.03"})
    assert q.midpoint is None and q.spread == 0.03 and q.source == "market"


def test_derived_nothing_is_none():
    assert market_derived_depth({"outcomePrices": "[bad"}) == DepthQuote.empty("none")
    assert market_derived_depth({}).source == "none"


def test_merge_live_wins_and_fills_from_market():
    live = DepthQuote(midpoint=0.5, spread=None, source="live")
    derived = DepthQuote(midpoint=0.6, spread=0.02, source="market")
    assert merge_depth(live, derived) == DepthQuote(midpoint=0.5, spread=0.02, source="live")


def test_merge_empty_stronger_takes_weaker_provenance():
    merged = merge_depth(DepthQuote.empty("unavailable"), DepthQuote(midpoint=0.4, source="market"))
    assert merged == DepthQuote(midpoint=0.4, spread=None, source="market")
    merged = merge_depth(DepthQuote(source="live"), DepthQuote(spread=0.01, source="market"))
    assert merged.source == "market"


def test_merge_no_data_anywhere():
    assert merge_depth(DepthQuote.empty("unavailable"), DepthQuote.empty()).source == "unavailable"
    assert merge_depth(DepthQuote(source="live"), DepthQuote.empty()).source == "none"


def test_resolve_without_token_never_calls_source(fake_source_cls):
    src = fake_source_cls([])
    market = normalize_market({"id": "x"})
    q = asyncio.run(resolve_depth(market, src))
    assert q == DepthQuote(midpoint=None, spread=None, source="none")
    assert src.depth_calls == []


def test_resolve_live_complete_skips_market_fallback(fake_source_cls):
    live = DepthQuote(midpoint=0.55, spread=0.01, source="live")
    src = fake_source_cls([], depth={"t1": live})
    market = normalize_market({"token_id": "t1", "bestBid": 0.1, "bestAsk": 0.2})
    assert asyncio.run(resolve_depth(market, src)) == live
    assert src.depth_calls == ["t1"]


def test_resolve_unavailable_live_uses_market_fields(fake_source_cls):
    src = fake_source_cls([])
    market = normalize_market({"token_id": "t1", "lastTradePrice": 0.7})
    q = asyncio.run(resolve_depth(market, src))
    assert q == DepthQuote(midpoint=0.7, spread=None, source="market")


def test_resolve_use_live_false_is_market_only(fake_source_cls):
    src = fake_source_cls([], depth={"t1": DepthQuote(midpoint=0.5, spread=0.01, source="live")})
    market = normalize_market({"token_id": "t1", "bestBid": 0.3, "bestAsk": 0.5})
    q = asyncio.run(resolve_depth(market, src, use_live=False))
    assert q.source == "market"
    assert q.midpoint == pytest.approx(0.4)
    assert src.depth_calls == []


def test_derived_ignores_int_too_large_for_float():
    q = market_derived_depth({"bestBid": 10**400, "bestAsk": 0.5, "lastTradePrice": 0.48})
    assert q == DepthQuote(midpoint=0.48, spread=None, source="market")


class ExplodingSource:
    async def depth_with_fallback(self, token_id):
        raise RuntimeError("boom")


def test_resolve_source_crash_degrades_to_market_fields():
    market = normalize_market({"token_id": "t1", "lastTradePrice": 0.3})
    assert asyncio.run(resolve_depth(market, ExplodingSource())) == DepthQuote(
        midpoint=0.3, spread=None, source="market"
    )
    bare = normalize_market({"token_id": "t1"})
    assert asyncio.run(resolve_depth(bare, ExplodingSource())).source == "unavailable"
