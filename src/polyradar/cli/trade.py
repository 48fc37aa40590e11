"""Trade subcommand: simulate, execute."""

from __future__ import annotations

import asyncio
import json

import typer

from polyradar.cli.common import client_from_settings, fail
from polyradar.errors import PolyradarError
from polyradar.trading.orders import execute_order, simulate_order, validate_order

app = typer.Typer(help="Build or execute market orders through the Polymarket CLI")


@app.command("simulate")
def simulate(
    ctx: typer.Context,
    token: str = typer.Option(..., "--token", "-t", help="CLOB token ID"),
    side: str = typer.Option(..., "--side", help="buy or sell"),
    amount: float = typer.Option(..., "--amount", "-a", help="Order amount (> 0)"),
) -> None:
    """Print the CLI command a market order would run, plus risk checks."""
    client = client_from_settings(ctx.obj["settings"])
    try:
        order = validate_order(token, side, amount)
    except PolyradarError as e:
        fail(e)
    plan = simulate_order(client, order)
    typer.echo(plan["command_text"])
    for check in plan["risk_checks"]:
        typer.echo(f"  - {check}")


@app.command("execute")
def execute(
    ctx: typer.Context,
    token: str = typer.Option(..., "--token", "-t", help="CLOB token ID"),
    side: str = typer.Option(..., "--side", help="buy or sell"),
    amount: float = typer.Option(..., "--amount", "-a", help="Order amount (> 0)"),
) -> None:
    """Execute a market order (requires trading.enabled / ENABLE_TRADING=true)."""
    settings = ctx.obj["settings"]
    client = client_from_settings(settings)
    try:
        order = validate_order(token, side, amount)
        result = asyncio.run(
            execute_order(client, order, trading_enabled=settings.trading_enabled)
        )
    except PolyradarError as e:
        fail(e)
    typer.echo(json.dumps(result, indent=2, default=str))
