"""Helpers shared by CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from polyradar.config import Settings
from polyradar.errors import PolyradarError
from polyradar.ingestion.cli_runner import PolymarketCli


def client_from_settings(settings: Settings) -> PolymarketCli:
    return PolymarketCli(
        binary=settings.binary,
        mock_if_unavailable=settings.mock_if_unavailable,
        timeout_sec=settings.command_timeout_sec,
    )


def fail(error: PolyradarError) -> NoReturn:
    typer.echo(f"Error [{error.code}]: {error}", err=True)
    raise typer.Exit(1)
