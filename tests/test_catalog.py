from guidelines.catalog import (
    CATALOG_FAILED_MESSAGE,
    NO_GUIDELINES_MESSAGE,
    GuidelineEntry,
    build_catalog,
    load_catalog,
)

from conftest import BASE


CATALOG_URL = (
    f"{BASE}/api/v2/content/guidelines?limit=1000&pubAfter=2000-01-01&pubBefore=2030-01-01"
    "&createAfter=2000-01-01&createBefore=2050-01-01"
)


def test_sorted_case_insensitively_by_name():
    records = [
        {"name": "beta", "guidelineId": 1},
        {"name": "Alpha", "guidelineId": 2},
        {"name": "gamma", "guidelineId": 3},
        {"name": "Delta", "guidelineId": 4},
    ]
    catalog = build_catalog(records)
    assert [e.name for e in catalog.values()] == ["Alpha", "beta", "Delta", "gamma"]


def test_published_id_is_display_key():
    catalog = build_catalog([{"name": "A", "guidelineId": 10, "publishedId": 99}])
    assert list(catalog) == ["99"]
    assert catalog["99"].candidate_ids() == ["99", "10"]


def test_candidate_ids_skip_duplicate():
    entry = GuidelineEntry.from_dict({"name": "A", "guidelineId": 5, "publishedId": 5})
    assert entry.candidate_ids() == ["5"]
    entry = GuidelineEntry.from_dict({"name": "B", "guidelineId": 6})
    assert entry.display_id == "6"
    assert entry.candidate_ids() == ["6"]


def test_deletion_marker_filtered():
    records = [
        {"name": "Keep me", "guidelineId": 1},
        {"name": "Old copy #DELETE THIS#", "guidelineId": 2},
    ]
    assert list(build_catalog(records, "#DELETE THIS#")) == ["1"]
    assert list(build_catalog(records, None)) == ["1", "2"]


def test_later_duplicate_overwrites_earlier():
    records = [
        {"name": "First", "guidelineId": 1},
        {"name": "Second", "guidelineId": 1},
    ]
    catalog = build_catalog(records)
    assert len(catalog) == 1
    assert catalog["1"].name == "Second"


def test_entries_without_ids_are_skipped():
    catalog = build_catalog([{"name": "No id"}, {"name": "Has id", "guidelineId": 4}])
    assert list(catalog) == ["4"]


def test_load_failure_is_contained(client, session, config):
    session.add(CATALOG_URL, {"error": "down"}, status=503)
    result = load_catalog(client, config)
    assert result.entries == {}
    assert result.message == CATALOG_FAILED_MESSAGE
    assert not result.ok


def test_load_empty_list_sets_message(client, session, config):
    session.add(CATALOG_URL, [])
    result = load_catalog(client, config)
    assert result.ok
    assert result.message == NO_GUIDELINES_MESSAGE


def test_load_success(client, session, config):
    session.add(CATALOG_URL, [{"name": "b", "guidelineId": 2}, {"name": "A", "guidelineId": 1}])
    result = load_catalog(client, config)
    assert result.ok and result.message is None
    assert [e.name for e in result.entries.values()] == ["A", "b"]
