"""HTML fragments for the results panel."""

from __future__ import annotations

import html
import re
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

from guidelines.labels import status_label, strength_label
from guidelines.recommendations import NOTSET, Recommendation
from guidelines.sections import UNTITLED_SECTION


NO_TEXT_PLACEHOLDER = "(No text available)"

_UNSAFE_TAGS = ["script", "style", "noscript", "iframe", "object", "embed", "frame", "frameset"]
_URL_ATTRS = ("href", "src", "action", "formaction", "xlink:href")


def _strip_tags(markup: str, tags: List[str]) -> str:
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(tags):
        tag.decompose()
    return str(soup)


def _strip_active_attrs(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on"):
                del tag[attr]
            elif name in _URL_ATTRS:
                value = re.sub(r"[\s\x00-\x1f]+", "", str(tag[attr])).lower()
                if value.startswith(("javascript:", "vbscript:", "data:text/html")):
                    del tag[attr]


def clean_markup(markup: str) -> str:
    """Drop active content (scripts, frames, event handlers, script URLs) from upstream markup."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(_UNSAFE_TAGS):
        tag.decompose()
    _strip_active_attrs(soup)
    return str(soup)


def strip_images(markup: str) -> str:
    return _strip_tags(markup, ["img"])


def _detail_line(rec: Recommendation, detail_style: str) -> str:
    if detail_style == "labels":
        parts = []
        if rec.strength and rec.strength != NOTSET:
            parts.append(f"Strength: {html.escape(strength_label(rec.strength))}")
        if rec.status and rec.status != NOTSET:
            parts.append(f"Status: {html.escape(status_label(rec.status))}")
        if not parts:
            return ""
        return f'<small class="meta">{" | ".join(parts)}</small>'

    stamp = rec.last_updated if rec.last_updated not in (None, "") else "unknown"
    return f'<small class="meta">Last updated: {html.escape(str(stamp))}</small>'


def render_recommendation(
    rec: Recommendation,
    section_titles: Dict[str, str],
    detail_style: str = "timestamp",
) -> str:
    title = section_titles.get(rec.section_id or "", "") or UNTITLED_SECTION
    text = clean_markup(rec.text) if rec.text else html.escape(NO_TEXT_PLACEHOLDER)
    detail = _detail_line(rec, detail_style)
    return (
        '<div class="recommendation">'
        f"<h3>{html.escape(title)}</h3>"
        f"<div class=\"text\">{text}</div>"
        f"{detail}"
        "</div>"
        "<hr />"
    )


def render_results(
    recs: Iterable[Recommendation],
    section_titles: Optional[Dict[str, str]] = None,
    detail_style: str = "timestamp",
) -> str:
    """Fragments joined in response order."""
    titles = section_titles or {}
    return "".join(render_recommendation(rec, titles, detail_style) for rec in recs)


def render_message(message: str) -> str:
    return f"<p>{html.escape(message)}</p>"
