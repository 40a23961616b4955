"""Snapshot date parsing and recommendation timestamp handling."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def parse_snapshot_date(raw: Optional[str]) -> Optional[str]:
    """Turn ``DD/MM/YYYY`` into ``YYYY-MM-DD``; ``None`` unless it is a real calendar date.

    Day and month are both zero-padded, so ``5/3/2024`` gives ``2024-03-05``.
    """
    if not raw or not raw.strip():
        return None
    parts = [p.strip() for p in raw.strip().split("/")]
    if len(parts) < 3:
        return None
    day, month, year = parts[0], parts[1], parts[2]
    if not day or not month or not year:
        return None
    snapshot = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    if snapshot_as_date(snapshot) is None:
        return None
    return snapshot


def parse_timestamp(value: Any) -> Optional[date]:
    """Date part of an ISO-8601 string or epoch-milliseconds value."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def snapshot_as_date(snapshot: Optional[str]) -> Optional[date]:
    if not snapshot:
        return None
    try:
        return date.fromisoformat(snapshot)
    except ValueError:
        return None
