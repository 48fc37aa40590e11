"""Error taxonomy for collaborator calls and caller-supplied parameters."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"  # binary/service missing; eligible for mock fallback
    TIMEOUT = "TIMEOUT"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    VALIDATION = "VALIDATION"
    TRADING_DISABLED = "TRADING_DISABLED"
    FAILED = "FAILED"


class PolyradarError(Exception):
    """Base error; `kind` decides fallback eligibility and HTTP status."""

    kind: ErrorKind = ErrorKind.FAILED

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def message(self) -> str:
        return str(self)


class CliError(PolyradarError):
    """Failure running the external Polymarket CLI."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.FAILED,
        *,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message, kind)
        self.stdout = stdout
        self.stderr = stderr

    @property
    def is_unavailable(self) -> bool:
        return self.kind is ErrorKind.SOURCE_UNAVAILABLE


class OrderValidationError(PolyradarError):
    kind = ErrorKind.VALIDATION


class TradingDisabledError(PolyradarError):
    kind = ErrorKind.TRADING_DISABLED
