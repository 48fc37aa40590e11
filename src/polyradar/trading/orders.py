"""Market orders: validate, simulate (print the CLI command), execute when enabled."""

from __future__ import annotations

import shlex
from typing import Any

import structlog

from polyradar.errors import OrderValidationError, TradingDisabledError
from polyradar.ingestion.cli_runner import PolymarketCli
from polyradar.models import OrderRequest
from polyradar.scanner.normalize import to_number

log = structlog.get_logger(__name__)

RISK_CHECKS = [
    "Confirm token ID matches desired market outcome.",
    "Check current spread and midpoint before submitting.",
    "Use small amount first to validate fill behavior.",
]


def validate_order(token: Any, side: Any, amount: Any) -> OrderRequest:
    """Check caller input before any CLI call. Raises OrderValidationError."""
    token = str(token or "").strip()
    side = str(side or "").strip().lower()
    value = to_number(amount, None)
    if not token:
        raise OrderValidationError("token is required")
    if side not in ("buy", "sell"):
        raise OrderValidationError("side must be buy or sell")
    if value is None or value <= 0:
        raise OrderValidationError("amount must be > 0")
    return OrderRequest(token=token, side=side, amount=value)


def simulate_order(client: PolymarketCli, order: OrderRequest) -> dict[str, Any]:
    command = client.build_market_order_command(order.token, order.side, order.amount)
    return {
        "command": command,
        "command_text": shlex.join(command),
        "risk_checks": list(RISK_CHECKS),
    }


async def execute_order(
    client: PolymarketCli, order: OrderRequest, *, trading_enabled: bool
) -> Any:
    if not trading_enabled:
        raise TradingDisabledError(
            "Trading is disabled. Set ENABLE_TRADING=true to enable execution."
        )
    log.info("order_execute", token=order.token, side=order.side, amount=order.amount)
    return await client.market_order(order.token, order.side, order.amount)
