"""Polymarket CLI client - runs the `polymarket` binary and parses its JSON output."""

from __future__ import annotations

import asyncio
import contextlib
import json
from typing import Any

import structlog

from polyradar.errors import CliError, ErrorKind
from polyradar.ingestion.mock_data import mock_depth, mock_markets
from polyradar.models import DepthQuote
from polyradar.scanner.normalize import to_number

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 20.0


def unwrap_array(payload: Any) -> list[Any]:
    """List payload, or the list under data/markets/items; anything else -> []."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "markets", "items"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []


def _payload_number(payload: Any, keys: tuple[str, ...]) -> float | None:
    if isinstance(payload, dict):
        for key in keys:
            if payload.get(key) is not None:
                return to_number(payload[key], None)
        return None
    if isinstance(payload, (int, float, str)) and not isinstance(payload, bool):
        return to_number(payload, None)
    return None


def _format_amount(amount: float) -> str:
    amount = float(amount)
    return str(int(amount)) if amount.is_integer() else repr(amount)


class PolymarketCli:
    """Async wrapper around the external Polymarket CLI.

    Configuration (binary path, mock fallback flag, timeout) is fixed at
    construction and never mutated.
    """

    def __init__(
        self,
        binary: str = "polymarket",
        mock_if_unavailable: bool = True,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ):
        self.binary = binary
        self.mock_if_unavailable = mock_if_unavailable
        self.timeout_sec = timeout_sec

    async def run_json(self, args: list[str], *, timeout_sec: float | None = None) -> Any:
        """Run `<binary> -o json <args>` and return parsed stdout. Empty stdout -> {}."""
        timeout = self.timeout_sec if timeout_sec is None else timeout_sec
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                "-o",
                "json",
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise CliError(f"Binary not found: {self.binary}", ErrorKind.SOURCE_UNAVAILABLE) from e
        except OSError as e:
            raise CliError(f"CLI command failed: {e}", ErrorKind.FAILED) from e

        try:
            stdout_b, stderr_b = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise CliError("CLI command timed out.", ErrorKind.TIMEOUT) from e
        except OSError as e:
            raise CliError(f"CLI command failed: {e}", ErrorKind.FAILED) from e

        stdout = stdout_b.decode("utf-8", errors="replace").strip()
        stderr = stderr_b.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            log.warning("cli_failed", args=args, returncode=proc.returncode, stderr=stderr[:200])
            raise CliError(
                f"CLI command failed (exit {proc.returncode}).",
                ErrorKind.FAILED,
                stdout=stdout,
                stderr=stderr,
            )
        if not stdout:
            return {}
        try:
            return json.loads(stdout)
        except ValueError as e:
            raise CliError(
                "CLI did not return valid JSON.",
                ErrorKind.MALFORMED_RESPONSE,
                stdout=stdout,
                stderr=stderr,
            ) from e

    async def list_markets(self, limit: int = 20, search: str = "") -> list[Any]:
        if search:
            payload = await self.run_json(["markets", "search", search, "--limit", str(limit)])
        else:
            payload = await self.run_json(
                ["markets", "list", "--limit", str(limit), "--active", "true", "--closed", "false"]
            )
        return unwrap_array(payload)

    async def midpoint(self, token_id: str) -> float | None:
        payload = await self.run_json(["clob", "midpoint", token_id])
        return _payload_number(payload, ("midpoint", "mid", "price"))

    async def spread(self, token_id: str) -> float | None:
        payload = await self.run_json(["clob", "spread", token_id])
        return _payload_number(payload, ("spread", "width"))

    def build_market_order_command(self, token: str, side: str, amount: float) -> list[str]:
        """Argv for a market order, binary first. Not executed."""
        return [self.binary, *self._market_order_args(token, side, amount)]

    @staticmethod
    def _market_order_args(token: str, side: str, amount: float) -> list[str]:
        return [
            "clob", "market-order",
            "--token", token,
            "--side", side,
            "--amount", _format_amount(amount),
        ]

    async def market_order(self, token: str, side: str, amount: float) -> Any:
        return await self.run_json(self._market_order_args(token, side, amount))

    async def health(self) -> str:
        """'live' if the CLI answers, 'unavailable' if the binary is missing."""
        try:
            await self.run_json(["markets", "list", "--limit", "1"])
        except CliError as e:
            if e.is_unavailable:
                return "unavailable"
            raise
        return "live"

    async def list_markets_with_fallback(
        self, limit: int = 20, search: str = ""
    ) -> tuple[str, list[Any]]:
        """Return (source, raw markets). Only SOURCE_UNAVAILABLE falls back to mock data."""
        try:
            markets = await self.list_markets(limit=limit, search=search)
        except CliError as e:
            if not (self.mock_if_unavailable and e.is_unavailable):
                raise
            log.info("cli_unavailable", fallback="mock", binary=self.binary)
            return "mock", mock_markets(search, limit)
        return "live", markets

    async def depth_with_fallback(self, token_id: str | None) -> DepthQuote:
        """Live midpoint+spread (queried concurrently), mock on unavailable binary.

        Any other failure yields source 'unavailable' with null fields.
        """
        if not token_id:
            return DepthQuote.empty("none")
        results = await asyncio.gather(
            self.midpoint(token_id), self.spread(token_id), return_exceptions=True
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if not errors:
            midpoint, spread = results
            return DepthQuote(midpoint=midpoint, spread=spread, source="live")

        error = errors[0]
        if not isinstance(error, Exception):
            raise error
        if not isinstance(error, CliError):
            log.warning("depth_error", token_id=token_id, error=repr(error))
            return DepthQuote.empty("unavailable")
        if not (self.mock_if_unavailable and error.is_unavailable):
            log.warning("depth_unavailable", token_id=token_id, code=error.code)
            return DepthQuote.empty("unavailable")

        mock = mock_depth(token_id)
        if mock is None:
            return DepthQuote.empty("none")
        return DepthQuote(midpoint=mock["midpoint"], spread=mock["spread"], source="mock")
