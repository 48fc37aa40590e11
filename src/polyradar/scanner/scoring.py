"""Ranking score and sorting for scanned markets."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TypeVar

from polyradar.models import SORT_KEYS, CanonicalMarket, DepthQuote
from polyradar.scanner.normalize import to_number

T = TypeVar("T")

# Fixed weights
LIQUIDITY_WEIGHT = 17.0
VOLUME_WEIGHT = 14.0
ACTIVE_BONUS = 14.0
INACTIVE_PENALTY = -35.0
SPREAD_PENALTY_CAP = 25.0
SPREAD_PENALTY_SCALE = 100 * 1.6
MID_STABILITY_MAX = 8.0
MID_STABILITY_SLOPE = 10.0


def round_half_up(value: float, places: int = 2) -> float:
    """Round the exact binary value, ties away from zero (0.125 -> 0.13)."""
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def spread_penalty(spread: float | None) -> float:
    """Spread in price units -> penalty, capped (saturates at spread 0.15625)."""
    if spread is None:
        return 0.0
    return min(SPREAD_PENALTY_CAP, spread * SPREAD_PENALTY_SCALE)


def mid_stability(midpoint: float | None) -> float:
    """Bonus peaks at mid 0.5; negative beyond distance 0.8."""
    if midpoint is None:
        return 0.0
    return MID_STABILITY_MAX - abs(midpoint - 0.5) * MID_STABILITY_SLOPE


def score_market(market: CanonicalMarket, depth: DepthQuote | None = None) -> dict[str, float | None]:
    """Return {score, spread, midpoint}. Pure; score rounded to 2 decimals."""
    depth = depth or DepthQuote.empty()
    spread = to_number(depth.spread, None)
    midpoint = to_number(depth.midpoint, None)

    liquidity_score = math.log10(market.liquidity + 1) * LIQUIDITY_WEIGHT
    volume_score = math.log10(market.volume + 1) * VOLUME_WEIGHT
    activity_score = ACTIVE_BONUS if market.active else INACTIVE_PENALTY

    score = (
        liquidity_score
        + volume_score
        + activity_score
        + mid_stability(midpoint)
        - spread_penalty(spread)
    )
    return {"score": round_half_up(score, 2), "spread": spread, "midpoint": midpoint}


def _sort_value(row: Any, key: str) -> float | None:
    value = row.get(key) if isinstance(row, Mapping) else getattr(row, key, None)
    return to_number(value, None)


def sort_markets(rows: Sequence[T], sort_by: str = "score", order: str = "desc") -> list[T]:
    """Sort rows (models or dicts) by a numeric key; rows missing it go last either way.

    Unknown sort keys fall back to score. Ties keep input order.
    """
    key = sort_by if sort_by in SORT_KEYS else "score"
    present: list[tuple[float, T]] = []
    missing: list[T] = []
    for row in rows:
        value = _sort_value(row, key)
        if value is None:
            missing.append(row)
        else:
            present.append((value, row))
    present.sort(key=lambda item: item[0], reverse=order != "asc")
    return [row for _, row in present] + missing
