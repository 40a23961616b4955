"""Human-readable labels for recommendation strength and status codes."""

from __future__ import annotations

from typing import Optional


STRENGTH_LABELS = {
    "STRONG": "Strong recommendation",
    "STRONG_AGAINST": "Strong recommendation against",
    "WEAK": "Weak recommendation",
    "WEAK_AGAINST": "Weak recommendation against",
    "CONSENSUS": "Consensus recommendation",
    "PRACTICE": "Practice statement",
    "RESEARCH_STATEMENT": "Research statement",
    "ONLY_IN_RESEARCH": "Only in research settings",
    "INFO": "Info",
    "NOTSET": "Not set",
}

STATUS_LABELS = {
    "NEW": "New",
    "UPDATED": "Updated",
    "UNDER_REVIEW": "Under review",
    "NEW_EVIDENCE": "New evidence",
    "REVIEWED_NO_NEW": "Reviewed, no new evidence",
    "NOTSET": "Not set",
}


def _label(table: dict, code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return table.get(code.upper(), code)


def strength_label(code: Optional[str]) -> Optional[str]:
    return _label(STRENGTH_LABELS, code)


def status_label(code: Optional[str]) -> Optional[str]:
    return _label(STATUS_LABELS, code)
