"""CanonicalMarket, ScoredMarket - canonical entities."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from polyradar.models.depth import DepthSource


class CanonicalMarket(BaseModel):
    """Market normalized from an arbitrary raw CLI record."""

    id: str
    slug: str = ""
    question: str = ""
    active: bool = True
    closed: bool = False
    end_date: str | None = None
    condition_id: str | None = None
    token_id: str | None = None  # first unique CLOB token id
    volume: float = Field(0.0, ge=0)
    liquidity: float = Field(0.0, ge=0)
    raw: dict[str, Any] = Field(default_factory=dict)  # kept for market-derived depth


class ScoredMarket(CanonicalMarket):
    """CanonicalMarket plus derived ranking fields. Recomputed every scan."""

    score: float
    spread: float | None = None
    midpoint: float | None = None
    depth_source: DepthSource = "none"
    market_url: str | None = None
