"""Scan, health and config commands."""

from __future__ import annotations

import asyncio
import json

import typer

from polyradar.cli.common import client_from_settings, fail
from polyradar.errors import PolyradarError
from polyradar.models import ScanRequest
from polyradar.scanner.orchestrator import scan


def _fmt(value: float | None, spec: str) -> str:
    return "-" if value is None else format(value, spec)


def scan_cmd(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Search query (default: browse active markets)"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Max markets (clamped to config max)"),
    enrich: bool = typer.Option(True, "--enrich/--no-enrich", help="Fetch live midpoint/spread"),
    sort_by: str = typer.Option("score", "--sort-by", help="score, liquidity, volume, spread, midpoint"),
    order: str = typer.Option("desc", "--order", help="asc or desc"),
    as_json: bool = typer.Option(False, "--json", help="Print the full scan result as JSON"),
) -> None:
    """Scan markets and print them ranked."""
    settings = ctx.obj["settings"]
    client = client_from_settings(settings)
    request = ScanRequest(
        search=search.strip(),
        limit=settings.clamp_limit(limit),
        enrich=enrich,
        sort_by=sort_by,
        order=order.lower(),
    )
    try:
        result = asyncio.run(
            scan(
                client,
                request,
                max_enrich=settings.max_enrich,
                market_url_base=settings.market_url_base,
            )
        )
    except PolyradarError as e:
        fail(e)
    if as_json:
        typer.echo(result.model_dump_json(indent=2, exclude={"markets": {"__all__": {"raw"}}}))
        return
    typer.echo(f"Source: {result.source}  generated: {result.generated_at}")
    for m in result.markets:
        typer.echo(
            f"  {m.score:7.2f}  liq {m.liquidity:>12,.0f}  vol {m.volume:>12,.0f}"
            f"  mid {_fmt(m.midpoint, '.3f'):>5}  spr {_fmt(m.spread, '.3f'):>5}"
            f"  [{m.depth_source}]  {m.question[:60]}"
        )
    typer.echo(f"Total: {len(result.markets)} markets")


def health_cmd(ctx: typer.Context) -> None:
    """Check whether the Polymarket CLI is reachable."""
    settings = ctx.obj["settings"]
    try:
        state = asyncio.run(client_from_settings(settings).health())
    except PolyradarError as e:
        fail(e)
    typer.echo(f"CLI: {state} (binary: {settings.binary}, mock fallback: {settings.mock_if_unavailable})")


def config_cmd(ctx: typer.Context) -> None:
    """Print effective configuration."""
    settings = ctx.obj["settings"]
    typer.echo(
        json.dumps(
            {
                "trading_enabled": settings.trading_enabled,
                "default_limit": settings.default_limit,
                "max_limit": settings.max_limit,
                "max_enrich": settings.max_enrich,
                "binary": settings.binary,
                "mock_if_unavailable": settings.mock_if_unavailable,
            },
            indent=2,
        )
    )
