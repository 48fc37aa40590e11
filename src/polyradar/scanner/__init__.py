"""Scan pipeline: normalize -> depth -> score -> sort."""

from polyradar.scanner.depth import market_derived_depth, merge_depth, resolve_depth
from polyradar.scanner.normalize import extract_token_id, normalize_market, to_number
from polyradar.scanner.orchestrator import scan
from polyradar.scanner.scoring import score_market, sort_markets

__all__ = [
    "extract_token_id",
    "normalize_market",
    "to_number",
    "market_derived_depth",
    "merge_depth",
    "resolve_depth",
    "score_market",
    "sort_markets",
    "scan",
]
