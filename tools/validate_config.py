#!/usr/bin/env python3
"""Validate the viewer config and the strength/status label tables."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from guidelines.config import CONFIG_PATH, load_config
from guidelines.errors import ConfigError
from guidelines.labels import STATUS_LABELS, STRENGTH_LABELS
from guidelines.recommendations import FILTER_POLICIES

STRENGTH_CODES = [
    "CONSENSUS", "PRACTICE", "STRONG", "STRONG_AGAINST", "WEAK", "WEAK_AGAINST",
    "RESEARCH_STATEMENT", "ONLY_IN_RESEARCH", "INFO", "NOTSET",
]
STATUS_CODES = ["NEW", "UPDATED", "UNDER_REVIEW", "NEW_EVIDENCE", "REVIEWED_NO_NEW", "NOTSET"]


def validate(path: Path = CONFIG_PATH) -> List[str]:
    errors: List[str] = []

    if not path.exists():
        errors.append(f"missing config file: {path}")
    try:
        cfg = load_config(path, env={})
    except ConfigError as exc:
        errors.append(f"{path}: {exc.message}")
        return errors

    if cfg.filter_policy not in FILTER_POLICIES:
        errors.append(f"filter_policy '{cfg.filter_policy}' has no filter implementation")
    if not cfg.base_url.startswith("https://"):
        errors.append(f"base_url should be https: {cfg.base_url}")
    if cfg.catalog_limit <= 0:
        errors.append("catalog.limit must be positive")

    for code in STRENGTH_CODES:
        if code not in STRENGTH_LABELS:
            errors.append(f"missing strength label for {code}")
    for code in STATUS_CODES:
        if code not in STATUS_LABELS:
            errors.append(f"missing status label for {code}")

    return errors


def main() -> int:
    errors = validate()
    if errors:
        print("VALIDATION FAILED")
        for err in errors:
            print(f"- {err}")
        return 1

    print("Validation passed: viewer config and label tables are consistent.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
