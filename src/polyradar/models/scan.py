"""Scan request/result and order request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from polyradar.models.market import ScoredMarket

SORT_KEYS = ("score", "liquidity", "volume", "spread", "midpoint")


class ScanRequest(BaseModel):
    """Already-validated scan parameters (limit clamped by the caller)."""

    search: str = ""
    limit: int = Field(20, ge=1)
    enrich: bool = True
    sort_by: str = "score"
    order: str = "desc"


class ScanResult(BaseModel):
    source: Literal["live", "mock"]
    generated_at: str  # ISO-8601 UTC
    markets: list[ScoredMarket] = Field(default_factory=list)


class OrderRequest(BaseModel):
    token: str = Field(..., min_length=1)
    side: Literal["buy", "sell"]
    amount: float = Field(..., gt=0)
