"""Guideline catalog: fetch, filter, sort and index by display id."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from guidelines.client import MagicAppClient
from guidelines.config import ViewerConfig
from guidelines.errors import ApiError


logger = logging.getLogger(__name__)

CATALOG_FAILED_MESSAGE = "Failed to load guidelines. Check the logs for details."
NO_GUIDELINES_MESSAGE = "No guidelines found with date filters."


@dataclass
class GuidelineEntry:
    name: str
    guideline_id: Optional[str]
    published_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "GuidelineEntry":
        def _id(value: Any) -> Optional[str]:
            return str(value) if value not in (None, "") else None

        return cls(
            name=str(record.get("name") or ""),
            guideline_id=_id(record.get("guidelineId")),
            published_id=_id(record.get("publishedId")),
            raw=record,
        )

    @property
    def display_id(self) -> Optional[str]:
        return self.published_id or self.guideline_id

    def candidate_ids(self) -> List[str]:
        """publishedId first, then guidelineId unless it is the same id."""
        ids: List[str] = []
        if self.published_id:
            ids.append(self.published_id)
        if self.guideline_id and self.guideline_id not in ids:
            ids.append(self.guideline_id)
        return ids


@dataclass
class CatalogResult:
    entries: Dict[str, GuidelineEntry]
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.message != CATALOG_FAILED_MESSAGE


def build_catalog(records: Iterable[Dict[str, Any]], deletion_marker: Optional[str] = None) -> Dict[str, GuidelineEntry]:
    entries = [GuidelineEntry.from_dict(r) for r in records if isinstance(r, dict)]
    if deletion_marker:
        entries = [e for e in entries if deletion_marker not in e.name]
    entries.sort(key=lambda e: e.name.casefold())

    catalog: Dict[str, GuidelineEntry] = {}
    for entry in entries:
        key = entry.display_id
        if key is None:
            logger.warning("Skipping guideline without any id: %r", entry.name)
            continue
        if key in catalog:
            # Later duplicates win; keep the position of the first one.
            logger.debug("Duplicate guideline id %s (%r replaces %r)", key, entry.name, catalog[key].name)
        catalog[key] = entry
    return catalog


def load_catalog(client: MagicAppClient, config: ViewerConfig) -> CatalogResult:
    try:
        records = client.list_guidelines()
    except ApiError as exc:
        logger.error("Error loading guidelines: %s", exc.message, extra={"details": exc.details})
        return CatalogResult(entries={}, message=CATALOG_FAILED_MESSAGE)

    if not isinstance(records, list):
        logger.error("Unexpected guideline list payload: %s", type(records).__name__)
        return CatalogResult(entries={}, message=CATALOG_FAILED_MESSAGE)

    catalog = build_catalog(records, config.deletion_marker)
    logger.info("Loaded %d guidelines (%d upstream)", len(catalog), len(records))
    if not records:
        return CatalogResult(entries=catalog, message=NO_GUIDELINES_MESSAGE)
    return CatalogResult(entries=catalog)
