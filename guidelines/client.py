"""Thin requests wrapper around the MagicApp REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import requests

from guidelines.config import ViewerConfig
from guidelines.errors import ApiError


logger = logging.getLogger(__name__)

CATALOG_PATH = "/api/v2/content/guidelines"
RECOMMENDATIONS_PATH = "/api/v2/guidelines/{id}/recommendations"
SECTIONS_PATH = "/api/v1/guidelines/{id}/sections"


class MagicAppClient:
    def __init__(self, config: ViewerConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Absolute URL for ``path``, routed through the CORS relay when one is set."""
        url = f"{self.config.base_url}{path}"
        if params:
            url += "?" + urlencode(params)
        if self.config.cors_proxy:
            return self.config.cors_proxy + quote(url, safe="")
        return url

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self.build_url(path, params)
        try:
            resp = self.session.get(url, timeout=self.config.request_timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise ApiError(f"HTTP {status} from {url}", url=url, status_code=status) from exc
        except requests.RequestException as exc:
            raise ApiError(f"request to {url} failed: {exc}", url=url) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(f"invalid JSON from {url}", url=url, status_code=resp.status_code) from exc

    def list_guidelines(self) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": self.config.catalog_limit}
        params.update(self.config.catalog_date_range)
        return self.get_json(CATALOG_PATH, params) or []

    def get_recommendations(self, guideline_id: str, date: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"date": date} if date else None
        return self.get_json(RECOMMENDATIONS_PATH.format(id=guideline_id), params) or []

    def get_sections(self, guideline_id: str) -> List[Dict[str, Any]]:
        return self.get_json(SECTIONS_PATH.format(id=guideline_id)) or []
