from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest
import requests

from guidelines.client import MagicAppClient
from guidelines.config import ViewerConfig


BASE = "https://api.magicapp.org"


def make_response(url: str, status: int, payload: Any = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp._content = json.dumps(payload).encode() if payload is not None else b""
    return resp


class FakeSession:
    """Stands in for requests.Session; unknown URLs answer 404."""

    def __init__(self, routes: Dict[str, Any] | None = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[str] = []

    def add(self, url: str, payload: Any = None, status: int = 200) -> None:
        self.routes[url] = (status, payload)

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    def get(self, url: str, timeout: float | None = None) -> requests.Response:
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return make_response(url, 404, {"error": "not found"})
        status, payload = route
        return make_response(url, status, payload)


@pytest.fixture
def config() -> ViewerConfig:
    return ViewerConfig()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(config, session) -> MagicAppClient:
    return MagicAppClient(config, session=session)


def recs_url(gid: str, date: str | None = None) -> str:
    url = f"{BASE}/api/v2/guidelines/{gid}/recommendations"
    return f"{url}?date={date}" if date else url


def sections_url(gid: str) -> str:
    return f"{BASE}/api/v1/guidelines/{gid}/sections"
