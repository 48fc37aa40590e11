"""Shared fixtures: fake market/depth source and fake CLI binaries."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Any

import pytest

from polyradar.errors import CliError, ErrorKind
from polyradar.models import DepthQuote


class FakeSource:
    """In-memory list + depth source recording every depth lookup."""

    def __init__(
        self,
        markets: list[dict[str, Any]],
        depth: dict[str, DepthQuote] | None = None,
        source: str = "live",
        list_error: Exception | None = None,
    ) -> None:
        self.markets = markets
        self.depth = depth or {}
        self.source = source
        self.list_error = list_error
        self.depth_calls: list[str] = []
        self.list_calls: list[tuple[int, str]] = []

    async def list_markets_with_fallback(self, limit: int = 20, search: str = ""):
        self.list_calls.append((limit, search))
        if self.list_error is not None:
            raise self.list_error
        return self.source, list(self.markets)

    async def depth_with_fallback(self, token_id: str | None) -> DepthQuote:
        self.depth_calls.append(token_id)
        return self.depth.get(token_id, DepthQuote.empty("unavailable"))


@pytest.fixture
def fake_source_cls():
    return FakeSource


@pytest.fixture
def unavailable_error():
    return CliError("Binary not found: nope", ErrorKind.SOURCE_UNAVAILABLE)


@pytest.fixture
def make_binary(tmp_path: Path):
    """Write an executable shell script standing in for the polymarket CLI."""
    if sys.platform == "win32":
        pytest.skip("shell-script binaries need a POSIX shell")

    def _make(body: str, name: str = "polymarket") -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make
