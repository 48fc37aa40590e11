"""Canonical schema (Pydantic) - Market, Depth, Scan."""

from polyradar.models.depth import DepthQuote, DepthSource
from polyradar.models.market import CanonicalMarket, ScoredMarket
from polyradar.models.scan import SORT_KEYS, OrderRequest, ScanRequest, ScanResult

__all__ = [
    "CanonicalMarket",
    "ScoredMarket",
    "DepthQuote",
    "DepthSource",
    "ScanRequest",
    "ScanResult",
    "OrderRequest",
    "SORT_KEYS",
]
