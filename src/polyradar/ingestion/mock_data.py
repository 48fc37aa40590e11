"""Fixed mock markets and depth, served when the Polymarket CLI is unavailable."""

from __future__ import annotations

from typing import Any

MOCK_MARKETS: list[dict[str, Any]] = [
    {
        "id": "mock-btc-100k",
        "slug": "will-bitcoin-hit-100k-by-year-end",
        "question": "Will Bitcoin hit $100k by year-end?",
        "active": True,
        "closed": False,
        "volume_num": 1580000,
        "liquidity_num": 520000,
        "clob_token_ids": ["483310433366128830000000000000001"],
    },
    {
        "id": "mock-fed-cut",
        "slug": "will-the-fed-cut-rates-next-meeting",
        "question": "Will the Fed cut rates at the next meeting?",
        "active": True,
        "closed": False,
        "volume_num": 910000,
        "liquidity_num": 260000,
        "clob_token_ids": ["483310433366128830000000000000002"],
    },
    {
        "id": "mock-election",
        "slug": "candidate-a-wins-general-election",
        "question": "Will Candidate A win the general election?",
        "active": True,
        "closed": False,
        "volume_num": 2140000,
        "liquidity_num": 740000,
        "clob_token_ids": ["483310433366128830000000000000003"],
    },
]

MOCK_DEPTH: dict[str, dict[str, float]] = {
    "483310433366128830000000000000001": {"midpoint": 0.57, "spread": 0.018},
    "483310433366128830000000000000002": {"midpoint": 0.44, "spread": 0.026},
    "483310433366128830000000000000003": {"midpoint": 0.62, "spread": 0.015},
}


def mock_markets(search: str = "", limit: int | None = None) -> list[dict[str, Any]]:
    """Mock markets matching search (case-insensitive, question or slug), truncated to limit."""
    needle = (search or "").strip().lower()
    rows = [
        dict(m)
        for m in MOCK_MARKETS
        if not needle or needle in m["question"].lower() or needle in m["slug"].lower()
    ]
    return rows if limit is None else rows[:limit]


def mock_depth(token_id: str) -> dict[str, float] | None:
    return MOCK_DEPTH.get(token_id)
