"""FastAPI backend for the scanner dashboard."""

from __future__ import annotations

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from polyradar.api.schemas import (
    ConfigResponse,
    ErrorResponse,
    ExecuteResponse,
    HealthResponse,
    SimulateResponse,
    TradeBody,
)
from polyradar.config import Settings, get_settings
from polyradar.errors import ErrorKind, PolyradarError, TradingDisabledError
from polyradar.ingestion.cli_runner import PolymarketCli
from polyradar.models import ScanRequest, ScanResult
from polyradar.scanner.normalize import to_number
from polyradar.scanner.orchestrator import scan
from polyradar.trading.orders import execute_order, simulate_order, validate_order

log = structlog.get_logger(__name__)

# Set by run_api() before uvicorn imports the app.
_config_profile: str | None = None

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.TRADING_DISABLED: 403,
}


def settings_dep() -> Settings:
    return get_settings(_config_profile)


def client_dep(settings: Settings = Depends(settings_dep)) -> PolymarketCli:
    return PolymarketCli(
        binary=settings.binary,
        mock_if_unavailable=settings.mock_if_unavailable,
        timeout_sec=settings.command_timeout_sec,
    )


app = FastAPI(title="Polyradar API", version="0.1.0")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


def _error_json(code: str, message: str, status_code: int = 500) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _query_int(value: str | None) -> int | None:
    """Lenient int: junk or non-finite -> None (caller applies the default)."""
    num = to_number(value, None)
    return None if num is None else int(num)


@app.exception_handler(PolyradarError)
async def polyradar_error_handler(request: Request, exc: PolyradarError) -> JSONResponse:
    status = _STATUS_BY_KIND.get(exc.kind, 500)
    if status >= 500:
        log.error("request_failed", path=request.url.path, code=exc.code, error=str(exc))
    return _error_json(exc.code, str(exc), status_code=status)


@app.get("/api/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(settings_dep),
    client: PolymarketCli = Depends(client_dep),
) -> HealthResponse:
    cli_state = await client.health()
    if cli_state == "unavailable":
        return HealthResponse(cli=cli_state, mock_if_unavailable=settings.mock_if_unavailable)
    return HealthResponse(cli=cli_state)


@app.get("/api/config", response_model=ConfigResponse)
def config(settings: Settings = Depends(settings_dep)) -> ConfigResponse:
    return ConfigResponse(
        trading_enabled=settings.trading_enabled,
        default_limit=settings.default_limit,
        max_limit=settings.max_limit,
        max_enrich=settings.max_enrich,
        binary=settings.binary,
        mock_if_unavailable=settings.mock_if_unavailable,
    )


@app.get("/api/scan", response_model=ScanResult, responses={500: {"model": ErrorResponse}})
async def scan_markets(
    search: str = Query("", description="Free-text market search"),
    limit: str | None = Query(None, description="Max markets; clamped to configured maximum"),
    enrich: str = Query("true", description="Anything but \"false\" fetches live midpoint/spread"),
    sort_by: str = Query("score", description="score, liquidity, volume, spread or midpoint"),
    order: str = Query("desc", description="asc or desc"),
    settings: Settings = Depends(settings_dep),
    client: PolymarketCli = Depends(client_dep),
) -> ScanResult:
    """Scan, enrich and rank markets."""
    request = ScanRequest(
        search=search.strip(),
        limit=settings.clamp_limit(_query_int(limit)),
        enrich=enrich.strip().lower() != "false",
        sort_by=sort_by,
        order=order.lower(),
    )
    return await scan(
        client,
        request,
        max_enrich=settings.max_enrich,
        market_url_base=settings.market_url_base,
    )


@app.post("/api/trade/simulate", response_model=SimulateResponse)
def trade_simulate(
    body: TradeBody,
    client: PolymarketCli = Depends(client_dep),
) -> SimulateResponse:
    order = validate_order(body.token, body.side, body.amount)
    return SimulateResponse(**simulate_order(client, order))


@app.post("/api/trade/execute", response_model=ExecuteResponse)
async def trade_execute(
    body: TradeBody,
    settings: Settings = Depends(settings_dep),
    client: PolymarketCli = Depends(client_dep),
) -> ExecuteResponse:
    if not settings.trading_enabled:
        raise TradingDisabledError(
            "Trading is disabled. Set ENABLE_TRADING=true to enable execution."
        )
    order = validate_order(body.token, body.side, body.amount)
    result = await execute_order(client, order, trading_enabled=settings.trading_enabled)
    return ExecuteResponse(result=result)


def run_api(host: str = "127.0.0.1", port: int = 8790, profile: str | None = None) -> None:
    global _config_profile
    _config_profile = profile
    import uvicorn
    uvicorn.run("polyradar.api.main:app", host=host, port=port, reload=False)
