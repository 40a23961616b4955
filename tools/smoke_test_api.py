#!/usr/bin/env python3
"""Live smoke test against the MagicApp API (needs network access)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from guidelines.client import MagicAppClient
from guidelines.config import load_config
from guidelines.pipeline import ViewerPipeline, ViewerState


def assert_true(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def run(guideline_id: Optional[str], raw_date: Optional[str], limit: int) -> None:
    config = load_config()
    pipeline = ViewerPipeline(MagicAppClient(config), config)
    state = ViewerState()

    catalog = pipeline.load(state)
    assert_true(catalog.ok, f"catalog load failed: {catalog.message}")
    print(f"\n=== Catalog: {len(state.catalog)} guidelines ===")
    for i, (gid, entry) in enumerate(list(state.catalog.items())[:limit], start=1):
        print(f"{i:02d}. {gid:<12} {entry.name}")

    names = [e.name.casefold() for e in state.catalog.values()]
    assert_true(names == sorted(names), "catalog should be sorted case-insensitively")

    target = guideline_id or next(iter(state.catalog), None)
    assert_true(target is not None, "catalog is empty")
    outcome = pipeline.fetch(state, target, raw_date)
    print(f"\n=== {state.catalog[target].name} ({target}) ===")
    print(f"ok={outcome.ok} message={outcome.message!r} snapshot={outcome.snapshot_date}")
    print(f"recommendations={len(outcome.recommendations)} sections={len(outcome.section_titles)}")

    if outcome.exportable:
        filename, data = pipeline.export(state, outcome)
        assert_true(data.startswith(b"%PDF"), "export should produce a PDF")
        print(f"export: {filename} ({len(data)} bytes)")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--guideline", help="display id to fetch (defaults to the first catalog entry)")
    parser.add_argument("--date", help="snapshot date, DD/MM/YYYY")
    parser.add_argument("--limit", type=int, default=10, help="catalog rows to print")
    args = parser.parse_args()

    run(args.guideline, args.date, args.limit)
    print("\nAll smoke tests passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
