"""Scan orchestrator end-to-end over a fake source."""

import asyncio
import math

import pytest

from polyradar.errors import CliError, ErrorKind
from polyradar.ingestion.mock_data import MOCK_MARKETS
from polyradar.models import DepthQuote, ScanRequest
from polyradar.scanner.orchestrator import scan


def _run(source, **kw):
    max_enrich = kw.pop("max_enrich", 8)
    return asyncio.run(scan(source, ScanRequest(**kw), max_enrich=max_enrich))


def _expected(m):
    return math.log10(m["liquidity_num"] + 1) * 17 + math.log10(m["volume_num"] + 1) * 14 + 14


def test_mock_markets_ranked_by_score_without_enrichment(fake_source_cls):
    src = fake_source_cls(MOCK_MARKETS, source="mock")
    result = _run(src, enrich=False)
    assert result.source == "mock"
    expected = sorted(MOCK_MARKETS, key=_expected, reverse=True)
    assert [m.id for m in result.markets] == [m["id"] for m in expected]
    assert result.markets[0].id == "mock-election"
    for m in result.markets:
        assert m.depth_source == "none"
        assert m.spread is None and m.midpoint is None
    assert src.depth_calls == []


def test_generated_at_and_market_url(fake_source_cls):
    result = _run(fake_source_cls([{"id": "a", "slug": "s-a"}, {"id": "b"}]), enrich=False)
    assert result.generated_at.endswith("Z")
    urls = {m.id: m.market_url for m in result.markets}
    assert urls["a"] == "https://polymarket.com/event/s-a"
    # slug falls back to id
    assert urls["b"] == "https://polymarket.com/event/b"
    assert _run(fake_source_cls([{"question": "no id or slug"}]), enrich=False).markets[0].market_url is None


def test_inactive_and_closed_dropped(fake_source_cls):
    raw = [
        {"id": "open"},
        {"id": "closed", "closed": True},
        {"id": "inactive", "active": False},
        {"id": "both", "active": True, "closed": True},
    ]
    assert [m.id for m in _run(fake_source_cls(raw), enrich=False).markets] == ["open"]


def test_enrichment_cap_and_order(fake_source_cls):
    raw = [
        {"id": "m0", "token_id": "t0"},
        {"id": "m1"},  # no token: counts toward the cap, never queried
        {"id": "m2", "token_id": "t2"},
        {"id": "m3", "token_id": "t3", "bestBid": 0.2, "bestAsk": 0.3},
    ]
    depth = {
        "t0": DepthQuote(midpoint=0.5, spread=0.01, source="live"),
        "t2": DepthQuote(midpoint=0.4, spread=0.02, source="live"),
        "t3": DepthQuote(midpoint=0.9, spread=0.09, source="live"),
    }
    src = fake_source_cls(raw, depth=depth)
    result = _run(src, max_enrich=3)
    assert src.depth_calls == ["t0", "t2"]
    by_id = {m.id: m for m in result.markets}
    assert by_id["m0"].depth_source == "live"
    assert by_id["m1"].depth_source == "none"
    # beyond the cap: market-derived depth still applies
    assert by_id["m3"].depth_source == "market"
    assert by_id["m3"].midpoint == pytest.approx(0.25)
    assert by_id["m3"].spread == pytest.approx(0.1)


def test_partial_live_depth_merged_with_market_fields(fake_source_cls):
    raw = [{"id": "m", "token_id": "t", "bestBid": 0.59, "bestAsk": 0.61}]
    src = fake_source_cls(raw, depth={"t": DepthQuote(midpoint=0.5, spread=None, source="live")})
    m = _run(src).markets[0]
    assert (m.midpoint, m.depth_source) == (0.5, "live")
    assert m.spread == pytest.approx(0.02)


def test_depth_failure_degrades_without_aborting(fake_source_cls):
    raw = [{"id": "a", "token_id": "ta"}, {"id": "b", "token_id": "tb", "volume": 10}]
    result = _run(fake_source_cls(raw))
    assert len(result.markets) == 2
    assert {m.depth_source for m in result.markets} == {"unavailable"}


def test_sort_and_limit(fake_source_cls):
    raw = [{"id": str(i), "liquidity": liq} for i, liq in enumerate([5, 50, 500, 1])]
    result = _run(fake_source_cls(raw), enrich=False, sort_by="liquidity", order="asc", limit=2)
    assert [m.id for m in result.markets] == ["3", "0"]


def test_sort_by_spread_puts_missing_last(fake_source_cls):
    raw = [
        {"id": "nospread"},
        {"id": "wide", "spread": 0.1},
        {"id": "tight", "spread": 0.01},
    ]
    for order in ("asc", "desc"):
        ids = [m.id for m in _run(fake_source_cls(raw), enrich=False, sort_by="spread", order=order).markets]
        assert ids[-1] == "nospread"


def test_list_passes_limit_and_search(fake_source_cls):
    src = fake_source_cls([])
    _run(src, limit=7, search="fed")
    assert src.list_calls == [(7, "fed")]


def test_list_failure_propagates(fake_source_cls):
    src = fake_source_cls([], list_error=CliError("slow", ErrorKind.TIMEOUT))
    with pytest.raises(CliError) as exc:
        _run(src)
    assert exc.value.kind is ErrorKind.TIMEOUT


class CrashingDepthSource:
    def __init__(self, markets):
        self.markets = markets

    async def list_markets_with_fallback(self, limit=20, search=""):
        return "live", list(self.markets)

    async def depth_with_fallback(self, token_id):
        raise RuntimeError(f"no depth for {token_id}")


def test_depth_crash_does_not_abort_scan():
    raw = [{"id": "a", "token_id": "ta", "bestBid": 0.4, "bestAsk": 0.5}, {"id": "b", "token_id": "tb"}]
    result = _run(CrashingDepthSource(raw))
    by_id = {m.id: m for m in result.markets}
    assert by_id["a"].depth_source == "market"
    assert by_id["a"].midpoint == pytest.approx(0.45)
    assert by_id["b"].depth_source == "unavailable"


def test_huge_numeric_fields_do_not_abort_scan(fake_source_cls):
    raw = [{"id": "big", "volume": 10**400, "bestBid": 10**400, "bestAsk": 0.5}, {"id": "ok", "volume": 10}]
    result = _run(fake_source_cls(raw), enrich=False)
    assert {m.id for m in result.markets} == {"big", "ok"}
