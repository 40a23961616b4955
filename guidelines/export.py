"""PDF export of the rendered results panel using reportlab."""

from __future__ import annotations

import io
import logging
import re
from typing import List
from xml.sax.saxutils import escape as xml_escape

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from guidelines.errors import ExportError
from guidelines.render import strip_images


logger = logging.getLogger(__name__)

MARGIN = 10 * mm
_BLOCK_TAGS = [
    "p", "div", "section", "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "tr", "td", "th", "blockquote", "pre", "dl", "dt", "dd",
]


def sanitize_filename(title: str) -> str:
    name = re.sub(r"[^a-z0-9]+", "_", (title or "").lower()).strip("_")
    return name or "guideline"


def pdf_filename(title: str) -> str:
    return f"{sanitize_filename(title)}.pdf"


def _clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _as_paragraph(text: str, style: ParagraphStyle):
    t = _clean_text(text or "")
    if not t:
        return None
    return Paragraph(xml_escape(t), style)


def _text_blocks(node) -> List[str]:
    """Paragraph texts of ``node`` in document order.

    Inline text between block elements forms its own paragraph.
    """
    blocks: List[str] = []
    run: List[str] = []

    def flush() -> None:
        text = _clean_text(" ".join(run))
        run.clear()
        if text:
            blocks.append(text)

    def walk(parent) -> None:
        for child in parent.children:
            if isinstance(child, Tag):
                if child.name in _BLOCK_TAGS:
                    flush()
                    walk(child)
                    flush()
                elif child.name == "br":
                    flush()
                elif child.find(_BLOCK_TAGS) is not None:
                    walk(child)
                else:
                    run.append(child.get_text(" ", strip=True))
            elif isinstance(child, NavigableString) and not isinstance(child, Comment):
                run.append(str(child))

    walk(node)
    flush()
    return blocks


def build_flowables(title: str, markup: str) -> list:
    styles = getSampleStyleSheet()
    meta_style = ParagraphStyle("Meta", parent=styles["BodyText"], fontSize=8, textColor=colors.HexColor("#555555"))

    story: list = []
    heading = _as_paragraph(title, styles["Title"])
    if heading is not None:
        story.append(heading)
        story.append(Spacer(1, 4 * mm))

    soup = BeautifulSoup(strip_images(markup), "html.parser")
    blocks = soup.select("div.recommendation")
    if not blocks:
        para = _as_paragraph(soup.get_text(" ", strip=True), styles["BodyText"])
        if para is not None:
            story.append(para)
        return story

    for block in blocks:
        h3 = block.find("h3", recursive=False)
        if h3 is not None:
            para = _as_paragraph(h3.get_text(" ", strip=True), styles["Heading3"])
            if para is not None:
                story.append(para)

        body = block.find("div", class_="text", recursive=False)
        if body is not None:
            for text in _text_blocks(body):
                para = _as_paragraph(text, styles["BodyText"])
                if para is not None:
                    story.append(para)

        meta = block.find("small", class_="meta", recursive=False)
        if meta is not None:
            para = _as_paragraph(meta.get_text(" ", strip=True), meta_style)
            if para is not None:
                story.append(para)

        story.append(HRFlowable(width="100%", thickness=0.5, color=colors.grey, spaceBefore=3 * mm, spaceAfter=3 * mm))
    return story


def export_pdf(title: str, markup: str) -> bytes:
    """Render ``markup`` to an A4 PDF; raises ExportError without partial output."""
    buffer = io.BytesIO()
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=title or "Guideline",
        )
        doc.build(build_flowables(title, markup))
    except Exception as exc:
        logger.exception("PDF export failed for %r", title)
        raise ExportError("Failed to export PDF.", {"title": title, "reason": str(exc)}) from exc
    return buffer.getvalue()
