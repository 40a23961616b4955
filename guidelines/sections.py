"""Section id -> display title lookup, fetched with the same id fallback."""

from __future__ import annotations

import logging
from typing import Any, Dict

from guidelines.catalog import GuidelineEntry
from guidelines.client import MagicAppClient
from guidelines.errors import ApiError


logger = logging.getLogger(__name__)

UNTITLED_SECTION = "Untitled Section"


def section_title(section: Dict[str, Any]) -> str:
    heading = str(section.get("heading") or "").strip()
    if heading:
        return heading
    label = section.get("sectionLabel") or section.get("sectionType") or "Section"
    number = section.get("sectionNumber")
    number = "" if number is None else number
    return f"{label} {number}".strip()


def build_section_titles(sections: Any) -> Dict[str, str]:
    return {
        str(s.get("sectionId")): section_title(s)
        for s in (sections if isinstance(sections, list) else [])
        if isinstance(s, dict) and s.get("sectionId") is not None
    }


def resolve_section_titles(client: MagicAppClient, entry: GuidelineEntry) -> Dict[str, str]:
    """Titles keyed by section id; empty when no candidate id answers."""
    for guideline_id in entry.candidate_ids():
        try:
            sections = client.get_sections(guideline_id)
        except ApiError as exc:
            logger.warning("Section fetch failed for guideline %s: %s", guideline_id, exc.message)
            continue
        titles = build_section_titles(sections)
        logger.info("Loaded %d sections using ID %s", len(titles), guideline_id)
        return titles
    return {}
