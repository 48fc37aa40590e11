"""DepthQuote - midpoint/spread with provenance."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

DepthSource = Literal["live", "mock", "market", "unavailable", "none"]


class DepthQuote(BaseModel):
    midpoint: float | None = None
    spread: float | None = None
    source: DepthSource = "none"

    @classmethod
    def empty(cls, source: DepthSource = "none") -> DepthQuote:
        return cls(midpoint=None, spread=None, source=source)

    @property
    def has_data(self) -> bool:
        return self.midpoint is not None or self.spread is not None

    @property
    def is_complete(self) -> bool:
        return self.midpoint is not None and self.spread is not None
