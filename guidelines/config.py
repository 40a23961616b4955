"""Viewer configuration loaded from ``config/viewer.yaml``."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from guidelines.errors import ConfigError


ROOT = Path(__file__).resolve().parents[1]
CONFIG_PATH = ROOT / "config" / "viewer.yaml"

FILTER_POLICY_NAMES = ("none", "date", "strength")
DETAIL_STYLES = ("timestamp", "labels")

DEFAULT_DATE_RANGE = {
    "pubAfter": "2000-01-01",
    "pubBefore": "2030-01-01",
    "createAfter": "2000-01-01",
    "createBefore": "2050-01-01",
}


@dataclass
class ViewerConfig:
    base_url: str = "https://api.magicapp.org"
    cors_proxy: Optional[str] = None
    request_timeout: float = 10.0
    catalog_limit: int = 1000
    catalog_date_range: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DATE_RANGE))
    deletion_marker: Optional[str] = "#DELETE THIS#"
    filter_policy: str = "none"  # none | date | strength
    detail_style: str = "timestamp"  # timestamp | labels
    export_enabled: bool = True

    def validate(self) -> "ViewerConfig":
        if self.filter_policy not in FILTER_POLICY_NAMES:
            raise ConfigError(
                f"unknown filter_policy '{self.filter_policy}'",
                {"allowed": list(FILTER_POLICY_NAMES)},
            )
        if self.detail_style not in DETAIL_STYLES:
            raise ConfigError(
                f"unknown detail_style '{self.detail_style}'",
                {"allowed": list(DETAIL_STYLES)},
            )
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")
        return self


def _none_if_blank(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def config_from_dict(data: Dict[str, Any]) -> ViewerConfig:
    catalog = data.get("catalog", {}) or {}
    recs = data.get("recommendations", {}) or {}
    export = data.get("export", {}) or {}

    date_range = dict(DEFAULT_DATE_RANGE)
    date_range.update({k: str(v) for k, v in (catalog.get("date_range") or {}).items()})

    cfg = ViewerConfig(
        base_url=str(data.get("base_url") or ViewerConfig.base_url).rstrip("/"),
        cors_proxy=_none_if_blank(data.get("cors_proxy")),
        request_timeout=float(data.get("request_timeout", ViewerConfig.request_timeout)),
        catalog_limit=int(catalog.get("limit", ViewerConfig.catalog_limit)),
        catalog_date_range=date_range,
        deletion_marker=_none_if_blank(catalog.get("deletion_marker", ViewerConfig.deletion_marker)),
        filter_policy=str(recs.get("filter_policy", ViewerConfig.filter_policy)),
        detail_style=str(recs.get("detail_style", ViewerConfig.detail_style)),
        export_enabled=bool(export.get("enabled", True)),
    )
    return cfg


def _apply_env(cfg: ViewerConfig, env: Dict[str, str]) -> ViewerConfig:
    if env.get("MAGICAPP_BASE_URL"):
        cfg.base_url = env["MAGICAPP_BASE_URL"].rstrip("/")
    if "MAGICAPP_CORS_PROXY" in env:
        cfg.cors_proxy = _none_if_blank(env["MAGICAPP_CORS_PROXY"])
    if env.get("MAGICAPP_FILTER_POLICY"):
        cfg.filter_policy = env["MAGICAPP_FILTER_POLICY"].strip().lower()
    if env.get("MAGICAPP_DETAIL_STYLE"):
        cfg.detail_style = env["MAGICAPP_DETAIL_STYLE"].strip().lower()
    return cfg


def load_config(path: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> ViewerConfig:
    """Read the YAML config, apply environment overrides and validate.

    A missing file yields the built-in defaults.
    """
    path = path or CONFIG_PATH
    data: Dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"failed to parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

    cfg = config_from_dict(data)
    cfg = _apply_env(cfg, dict(os.environ) if env is None else env)
    return cfg.validate()
