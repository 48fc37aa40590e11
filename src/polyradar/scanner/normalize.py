"""Raw CLI market record -> canonical CanonicalMarket. Total over any input."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from polyradar.models import CanonicalMarket

# Candidate keys per logical field, first present wins.
VOLUME_KEYS = ("volume_num", "volumeNum", "volume", "event_volume", "eventVolume")
LIQUIDITY_KEYS = ("liquidity_num", "liquidityNum", "liquidity", "depth")
ID_KEYS = ("id", "market_id", "marketId")
QUESTION_KEYS = ("question", "title", "market_question")
END_DATE_KEYS = ("end_date", "endDate", "end_date_iso", "endDateIso")
CONDITION_ID_KEYS = ("condition_id", "conditionId")
TOKEN_LIST_KEYS = ("clob_token_ids", "clobTokenIds")
TOKEN_OBJECT_KEYS = ("token_id", "tokenId", "clob_token_id", "clobTokenId", "id")
TOKEN_SCALAR_KEYS = ("token_id", "tokenId")

UNTITLED = "Untitled market"


def to_number(value: Any, fallback: float | None = 0.0) -> float | None:
    """None and '' are absent; anything unparsable or non-finite -> fallback."""
    if value is None or value == "":
        return fallback
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return num if math.isfinite(num) else fallback


def first_present(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """Value of the first key whose value is not None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def first_text(raw: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    """First value that is non-blank once stringified and trimmed."""
    for key in keys:
        text = _text(raw.get(key))
        if text is not None:
            return text
    return None


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    try:
        text = str(value).strip()
    except ValueError:  # int beyond the str conversion digit limit
        return None
    return text or None


def _token_list_values(value: Any) -> list[Any]:
    """Token list as list, JSON-array string, or comma-separated string."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        return []
    trimmed = value.strip()
    if not trimmed:
        return []
    if trimmed.startswith("["):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return parsed
    return trimmed.split(",")


def extract_token_ids(raw: Mapping[str, Any]) -> list[str]:
    """All candidate token ids, stringified and trimmed, deduped in first-seen order."""
    candidates: list[Any] = []
    for key in TOKEN_LIST_KEYS:
        candidates.extend(_token_list_values(raw.get(key)))
    tokens = raw.get("tokens")
    if isinstance(tokens, list):
        for token in tokens:
            if isinstance(token, Mapping):
                candidates.extend(token.get(key) for key in TOKEN_OBJECT_KEYS)
    candidates.extend(raw.get(key) for key in TOKEN_SCALAR_KEYS)

    seen: dict[str, None] = {}
    for value in candidates:
        text = _text(value)
        if text is not None and text not in seen:
            seen[text] = None
    return list(seen)


def extract_token_id(raw: Mapping[str, Any]) -> str | None:
    ids = extract_token_ids(raw)
    return ids[0] if ids else None


def normalize_market(raw: Any) -> CanonicalMarket:
    """Convert any raw market record to CanonicalMarket. Never raises."""
    if not isinstance(raw, Mapping):
        raw = {}
    token_id = extract_token_id(raw)
    volume = to_number(first_present(raw, VOLUME_KEYS)) or 0.0
    liquidity = to_number(first_present(raw, LIQUIDITY_KEYS)) or 0.0

    market_id = first_text(raw, (*ID_KEYS, "slug")) or token_id or "unknown"
    slug = _text(raw.get("slug")) or _text(raw.get("id")) or ""
    question = first_text(raw, (*QUESTION_KEYS, "slug")) or UNTITLED
    closed = _to_bool(raw.get("closed", False))
    active_raw = raw.get("active")
    active = (not closed) if active_raw is None else _to_bool(active_raw)

    return CanonicalMarket(
        id=market_id,
        slug=slug,
        question=question,
        active=active,
        closed=closed,
        end_date=_text(first_present(raw, END_DATE_KEYS)),
        condition_id=_text(first_present(raw, CONDITION_ID_KEYS)),
        token_id=token_id,
        volume=max(volume, 0.0),
        liquidity=max(liquidity, 0.0),
        raw={str(k): v for k, v in raw.items()},
    )
