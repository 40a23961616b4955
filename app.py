from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from guidelines.catalog import CatalogResult
from guidelines.client import MagicAppClient
from guidelines.config import ViewerConfig, load_config
from guidelines.errors import ActionInProgress, ExportError
from guidelines.pipeline import (
    EXPORT_FAILED_MESSAGE,
    LOADING_MESSAGE,
    FetchOutcome,
    ViewerPipeline,
    ViewerState,
)


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

RESULTS_CSS = """
<style>
.recommendation h3 { margin-bottom: 0.25rem; }
.recommendation .meta { color: #666; }
</style>
"""


@st.cache_resource
def get_config() -> ViewerConfig:
    return load_config()


@st.cache_resource
def get_pipeline() -> ViewerPipeline:
    config = get_config()
    return ViewerPipeline(MagicAppClient(config), config)


@st.cache_data(show_spinner=False, ttl=3600)
def cached_catalog() -> CatalogResult:
    return get_pipeline().load(ViewerState())


def get_state() -> ViewerState:
    if "viewer_state" not in st.session_state:
        st.session_state["viewer_state"] = ViewerState()
    return st.session_state["viewer_state"]


def ensure_catalog(state: ViewerState) -> CatalogResult:
    result = cached_catalog()
    if not result.ok:
        # Do not keep a failed load around for the whole TTL.
        cached_catalog.clear()
    state.catalog = result.entries
    return result


def render_results_panel(outcome: Optional[FetchOutcome]) -> None:
    with st.container(border=True):
        if outcome is None:
            st.write("Pick a guideline and press Fetch.")
            return
        if not outcome.ok:
            st.info(outcome.message)
            return
        st.markdown(RESULTS_CSS + outcome.html, unsafe_allow_html=True)


def render_export(pipeline: ViewerPipeline, state: ViewerState, outcome: Optional[FetchOutcome]) -> None:
    if not pipeline.config.export_enabled or outcome is None or not outcome.exportable:
        st.session_state.pop("pdf_export", None)
        return

    if st.button("Export PDF", key="export-pdf-button"):
        try:
            st.session_state["pdf_export"] = pipeline.export(state, outcome)
        except ActionInProgress:
            st.warning("An export is already running.")
        except ExportError as exc:
            logger.error("Export failed: %s", exc.to_dict())
            st.session_state.pop("pdf_export", None)
            st.error(EXPORT_FAILED_MESSAGE)

    export = st.session_state.get("pdf_export")
    if export:
        filename, data = export
        st.download_button("Download PDF", data=data, file_name=filename, mime="application/pdf")


def main() -> None:
    st.set_page_config(page_title="MagicApp Guideline Viewer", layout="centered")
    st.title("MagicApp Guideline Viewer")
    st.caption("Recommendations are fetched live from api.magicapp.org.")

    pipeline = get_pipeline()
    state = get_state()

    if st.button("Reload catalog", key="reload-catalog"):
        cached_catalog.clear()
        state.reset()
        st.session_state.pop("pdf_export", None)

    catalog_result = ensure_catalog(state)
    if catalog_result.message:
        st.warning(catalog_result.message)

    options = list(state.catalog.keys())
    selected_id = st.selectbox(
        "Guideline",
        options,
        index=0 if options else None,
        format_func=lambda gid: state.catalog[gid].name,
        key="guideline-select",
    )
    raw_date = st.text_input("Snapshot date (DD/MM/YYYY, optional)", key="date-input")

    fetching = state.is_running("fetch")
    if st.button("Fetch recommendations", key="fetch-button", disabled=fetching or not options):
        st.session_state.pop("pdf_export", None)
        try:
            with st.spinner(LOADING_MESSAGE):
                pipeline.fetch(state, selected_id, raw_date)
        except ActionInProgress:
            st.warning("Recommendations are already loading.")

    outcome = state.last_outcome
    if outcome is not None and outcome.entry is not None:
        st.subheader(outcome.entry.name)
        if outcome.snapshot_date:
            st.caption(f"Snapshot date: {outcome.snapshot_date}")

    render_results_panel(outcome)
    render_export(pipeline, state, outcome)


if __name__ == "__main__":
    main()
