"""Session state and the load / fetch / export commands driven by the UI."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from guidelines.catalog import CatalogResult, GuidelineEntry, load_catalog
from guidelines.client import MagicAppClient
from guidelines.config import ViewerConfig
from guidelines.dates import parse_snapshot_date
from guidelines.errors import ActionInProgress, ExportError
from guidelines.export import export_pdf, pdf_filename
from guidelines.recommendations import Recommendation, fetch_recommendations, get_filter
from guidelines.render import render_message, render_results
from guidelines.sections import resolve_section_titles


logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading recommendations..."
SELECT_FIRST_MESSAGE = "Select a guideline first."
NO_RECOMMENDATIONS_MESSAGE = "No recommendations found for this guideline."
NO_RECOMMENDATIONS_FOR_DATE_MESSAGE = "No recommendations found for selected date."
EXPORT_FAILED_MESSAGE = "Failed to export PDF."


@dataclass
class FetchOutcome:
    ok: bool
    message: Optional[str] = None
    entry: Optional[GuidelineEntry] = None
    snapshot_date: Optional[str] = None
    recommendations: List[Recommendation] = field(default_factory=list)
    section_titles: Dict[str, str] = field(default_factory=dict)
    html: str = ""

    @property
    def exportable(self) -> bool:
        return self.ok and bool(self.recommendations)

    @classmethod
    def failure(cls, message: str, **kwargs) -> "FetchOutcome":
        return cls(ok=False, message=message, html=render_message(message), **kwargs)


@dataclass
class ViewerState:
    """Per-session state; the catalog is rebuilt on every load."""

    catalog: Dict[str, GuidelineEntry] = field(default_factory=dict)
    last_outcome: Optional[FetchOutcome] = None
    in_flight: Set[str] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def reset(self) -> None:
        with self._lock:
            self.catalog = {}
            self.last_outcome = None
            self.in_flight = set()

    def is_running(self, action: str) -> bool:
        return action in self.in_flight


@contextmanager
def guard(state: ViewerState, action: str) -> Iterator[None]:
    """Reject a second run of ``action`` while the first is still going."""
    with state._lock:
        if action in state.in_flight:
            raise ActionInProgress(f"'{action}' is already running", {"action": action})
        state.in_flight.add(action)
    try:
        yield
    finally:
        with state._lock:
            state.in_flight.discard(action)


class ViewerPipeline:
    def __init__(self, client: MagicAppClient, config: ViewerConfig):
        self.client = client
        self.config = config
        self.filter_fn = get_filter(config.filter_policy)

    def load(self, state: ViewerState) -> CatalogResult:
        with guard(state, "load"):
            result = load_catalog(self.client, self.config)
            state.catalog = result.entries
            return result

    def fetch(self, state: ViewerState, selected_id: Optional[str], raw_date: Optional[str] = None) -> FetchOutcome:
        with guard(state, "fetch"):
            outcome = self._fetch(state, selected_id, raw_date)
            state.last_outcome = outcome
            return outcome

    def _fetch(self, state: ViewerState, selected_id: Optional[str], raw_date: Optional[str]) -> FetchOutcome:
        entry = state.catalog.get(selected_id) if selected_id else None
        if entry is None:
            logger.warning("Fetch requested for unknown guideline id %r", selected_id)
            return FetchOutcome.failure(SELECT_FIRST_MESSAGE)

        snapshot_date = parse_snapshot_date(raw_date)
        if raw_date and raw_date.strip() and snapshot_date is None:
            logger.info("Ignoring malformed snapshot date %r", raw_date)

        recommendations = fetch_recommendations(self.client, entry, snapshot_date)
        if not recommendations:
            return FetchOutcome.failure(NO_RECOMMENDATIONS_MESSAGE, entry=entry, snapshot_date=snapshot_date)

        filtered = self.filter_fn(recommendations, snapshot_date)
        if not filtered:
            return FetchOutcome.failure(NO_RECOMMENDATIONS_FOR_DATE_MESSAGE, entry=entry, snapshot_date=snapshot_date)

        titles = resolve_section_titles(self.client, entry)
        html = render_results(filtered, titles, self.config.detail_style)
        logger.info(
            "Rendered %d of %d recommendations for %s (policy=%s)",
            len(filtered),
            len(recommendations),
            entry.display_id,
            self.config.filter_policy,
        )
        return FetchOutcome(
            ok=True,
            entry=entry,
            snapshot_date=snapshot_date,
            recommendations=filtered,
            section_titles=titles,
            html=html,
        )

    def export(self, state: ViewerState, outcome: Optional[FetchOutcome] = None) -> Tuple[str, bytes]:
        """Filename and PDF bytes for the given (or last) outcome."""
        outcome = outcome or state.last_outcome
        if outcome is None or not outcome.exportable or outcome.entry is None:
            raise ExportError("Nothing to export.")
        with guard(state, "export"):
            title = outcome.entry.name
            return pdf_filename(title), export_pdf(title, outcome.html)
