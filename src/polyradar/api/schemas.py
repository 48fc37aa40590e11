"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# --- Health ---
class HealthResponse(BaseModel):
    ok: bool = True
    cli: str = Field(..., description="live or unavailable")
    mock_if_unavailable: bool | None = None


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. SOURCE_UNAVAILABLE, TIMEOUT")


# --- Config ---
class ConfigResponse(BaseModel):
    trading_enabled: bool
    default_limit: int
    max_limit: int
    max_enrich: int
    binary: str
    mock_if_unavailable: bool


# --- Trade ---
class TradeBody(BaseModel):
    """Raw trade input; validated by polyradar.trading.orders.validate_order."""

    token: Any = None
    side: Any = None
    amount: Any = None


class SimulateResponse(BaseModel):
    command: list[str]
    command_text: str
    risk_checks: list[str]


class ExecuteResponse(BaseModel):
    ok: bool = True
    result: Any = None
