"""TOML config loading, profiles and environment overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

# env var -> (section, key, cast)
_ENV_OVERRIDES: dict[str, tuple[str, str, str]] = {
    "POLYMARKET_BIN": ("polymarket", "binary", "str"),
    "POLYRADAR_MOCK_IF_UNAVAILABLE": ("polymarket", "mock_if_unavailable", "bool"),
    "POLYRADAR_DEFAULT_LIMIT": ("scan", "default_limit", "int"),
    "POLYRADAR_MAX_ENRICH": ("scan", "max_enrich", "int"),
    "ENABLE_TRADING": ("trading", "enabled", "bool"),
    "PORT": ("api", "port", "int"),
}


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def _env_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def apply_env_overrides(raw: dict[str, Any], environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Overlay known environment variables on the TOML dict. Unparsable ints are ignored."""
    env = os.environ if environ is None else environ
    overlay: dict[str, Any] = {}
    for name, (section, key, cast) in _ENV_OVERRIDES.items():
        value = env.get(name)
        if value is None or value == "":
            continue
        if cast == "bool":
            parsed: Any = _env_bool(value)
        elif cast == "int":
            try:
                parsed = int(value)
            except ValueError:
                continue
        else:
            parsed = value
        overlay.setdefault(section, {})[key] = parsed
    return _deep_merge(raw, overlay)


def load_config(profile: str | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None) -> Settings:
    """Return Settings instance from merged config plus environment overrides."""
    load_dotenv()
    raw = apply_env_overrides(load_config(profile))
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        polymarket: dict[str, Any] | None = None,
        scan: dict[str, Any] | None = None,
        trading: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.polymarket = polymarket or {}
        self.scan = scan or {}
        self.trading = trading or {}
        self.api = api or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            polymarket=raw.get("polymarket"),
            scan=raw.get("scan"),
            trading=raw.get("trading"),
            api=raw.get("api"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def binary(self) -> str:
        return self.polymarket.get("binary", "polymarket")

    @property
    def mock_if_unavailable(self) -> bool:
        return bool(self.polymarket.get("mock_if_unavailable", True))

    @property
    def command_timeout_sec(self) -> float:
        return float(self.polymarket.get("command_timeout_sec", 20.0))

    @property
    def default_limit(self) -> int:
        return int(self.scan.get("default_limit", 20))

    @property
    def max_limit(self) -> int:
        return int(self.scan.get("max_limit", 100))

    @property
    def max_enrich(self) -> int:
        return int(self.scan.get("max_enrich", 8))

    @property
    def market_url_base(self) -> str:
        return self.scan.get("market_url_base", "https://polymarket.com/event/")

    @property
    def trading_enabled(self) -> bool:
        return bool(self.trading.get("enabled", False))

    @property
    def api_host(self) -> str:
        return self.api.get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.api.get("port", 8790))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)

    def clamp_limit(self, limit: int | None) -> int:
        """Missing or non-positive limit -> default_limit; never above max_limit."""
        if limit is None or limit <= 0:
            limit = self.default_limit
        return min(limit, self.max_limit)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
