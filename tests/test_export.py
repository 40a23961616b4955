import pytest

from guidelines import export as export_module
from guidelines.errors import ExportError
from guidelines.export import build_flowables, export_pdf, pdf_filename, sanitize_filename
from guidelines.recommendations import Recommendation
from guidelines.render import render_results


def _html(count=1, text="<p>Use inhaled steroids.</p>"):
    recs = [Recommendation.from_dict({"sectionId": 1, "text": text, "lastUpdated": "2024-01-01"}) for _ in range(count)]
    return render_results(recs, {"1": "Treatment"})


def test_sanitize_filename():
    assert sanitize_filename("Asthma: Adults & Children (2024)") == "asthma_adults_children_2024"
    assert sanitize_filename("***") == "guideline"
    assert pdf_filename("COPD") == "copd.pdf"


def test_export_produces_pdf_bytes():
    data = export_pdf("Asthma guideline", _html())
    assert data.startswith(b"%PDF")


def test_long_results_span_multiple_pages():
    data = export_pdf("Long", _html(count=80, text="<p>" + "word " * 120 + "</p>"))
    pages = data.count(b"/Type /Page") - data.count(b"/Type /Pages")
    assert pages > 1


def test_images_dropped_and_structure_kept():
    story = build_flowables("Title", _html(text='<p>See figure</p><img src="https://x/fig.png"/>'))
    kinds = [type(f).__name__ for f in story]
    assert kinds[0] == "Paragraph"
    assert "HRFlowable" in kinds
    assert "Image" not in kinds


def test_failure_raises_export_error(monkeypatch):
    def boom(title, markup):
        raise RuntimeError("layout failed")

    monkeypatch.setattr(export_module, "build_flowables", boom)
    with pytest.raises(ExportError) as info:
        export_pdf("T", _html())
    assert info.value.message == "Failed to export PDF."


def _story_texts(story):
    return [f.getPlainText() for f in story if type(f).__name__ == "Paragraph"]


def test_inline_text_between_blocks_is_kept():
    story = build_flowables(
        "T",
        _html(text="Give <b>fluids</b> early.<ul><li>Bolus 20 ml/kg</li></ul><h3>Rationale</h3>Reassess often."),
    )
    texts = _story_texts(story)
    assert texts[1:] == [
        "Treatment",
        "Give fluids early.",
        "Bolus 20 ml/kg",
        "Rationale",
        "Reassess often.",
        "Last updated: 2024-01-01",
    ]


def test_line_breaks_and_nested_divs_split_paragraphs():
    story = build_flowables("T", _html(text="<div>First line<br/>second line<div>nested</div></div>"))
    texts = _story_texts(story)
    assert "First line" in texts
    assert "second line" in texts
    assert "nested" in texts
