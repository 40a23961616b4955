"""Recommendation fetching with id fallback, plus the filter policies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from guidelines.catalog import GuidelineEntry
from guidelines.client import MagicAppClient
from guidelines.dates import parse_timestamp, snapshot_as_date
from guidelines.errors import ApiError, ConfigError


logger = logging.getLogger(__name__)

NOTSET = "NOTSET"
INFO = "INFO"


@dataclass
class Recommendation:
    section_id: Optional[str]
    text: Optional[str]
    strength: Optional[str] = None
    status: Optional[str] = None
    last_updated: Any = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Recommendation":
        section_id = record.get("sectionId")
        strength = record.get("strength")
        status = record.get("status")
        return cls(
            section_id=str(section_id) if section_id is not None else None,
            text=record.get("text"),
            strength=str(strength).upper() if strength else None,
            status=str(status).upper() if status else None,
            last_updated=record.get("lastUpdated"),
            raw=record,
        )


def fetch_recommendations(
    client: MagicAppClient,
    entry: GuidelineEntry,
    snapshot_date: Optional[str] = None,
) -> Optional[List[Recommendation]]:
    """Try each candidate id in order; ``None`` when every candidate fails."""
    for guideline_id in entry.candidate_ids():
        try:
            records = client.get_recommendations(guideline_id, snapshot_date)
        except ApiError as exc:
            logger.warning("Recommendation fetch failed for ID %s: %s", guideline_id, exc.message)
            continue
        if not isinstance(records, list):
            logger.warning("Unexpected recommendations payload for ID %s: %s", guideline_id, type(records).__name__)
            records = []
        logger.info("Loaded %d recommendations using ID %s", len(records), guideline_id)
        return [Recommendation.from_dict(r) for r in records if isinstance(r, dict)]
    return None


FilterFn = Callable[[List[Recommendation], Optional[str]], List[Recommendation]]


def no_filter(recs: List[Recommendation], snapshot_date: Optional[str] = None) -> List[Recommendation]:
    return list(recs)


def filter_by_date(recs: List[Recommendation], snapshot_date: Optional[str] = None) -> List[Recommendation]:
    """Keep items last updated on or before the snapshot date."""
    cutoff = snapshot_as_date(snapshot_date)
    if cutoff is None:
        return list(recs)
    kept = []
    for rec in recs:
        stamp = parse_timestamp(rec.last_updated)
        if stamp is not None and stamp <= cutoff:
            kept.append(rec)
    return kept


def filter_by_strength(recs: List[Recommendation], snapshot_date: Optional[str] = None) -> List[Recommendation]:
    """Drop INFO items, then NOTSET items unless nothing else is left.

    Guidelines that never set a strength would otherwise render empty.
    """
    without_info = [r for r in recs if r.strength != INFO]
    if without_info and all(r.strength in (None, NOTSET) for r in without_info):
        return without_info
    return [r for r in without_info if r.strength not in (None, NOTSET)]


FILTER_POLICIES: Dict[str, FilterFn] = {
    "none": no_filter,
    "date": filter_by_date,
    "strength": filter_by_strength,
}


def get_filter(name: str) -> FilterFn:
    try:
        return FILTER_POLICIES[name]
    except KeyError:
        raise ConfigError(f"unknown filter policy '{name}'", {"allowed": sorted(FILTER_POLICIES)}) from None
