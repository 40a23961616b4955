import pytest
import requests

from guidelines.client import MagicAppClient
from guidelines.config import ViewerConfig
from guidelines.errors import ApiError

from conftest import BASE, FakeSession


def test_catalog_url_carries_limit_and_date_range(client, session):
    session.add(
        f"{BASE}/api/v2/content/guidelines?limit=1000&pubAfter=2000-01-01&pubBefore=2030-01-01"
        "&createAfter=2000-01-01&createBefore=2050-01-01",
        [{"name": "A", "guidelineId": 1}],
    )
    assert client.list_guidelines() == [{"name": "A", "guidelineId": 1}]


def test_date_param_only_when_given(client):
    assert client.build_url("/api/v2/guidelines/7/recommendations") == f"{BASE}/api/v2/guidelines/7/recommendations"
    assert client.build_url("/api/v2/guidelines/7/recommendations", {"date": "2024-03-05"}).endswith(
        "/recommendations?date=2024-03-05"
    )


def test_cors_proxy_prefixes_encoded_target():
    cfg = ViewerConfig(cors_proxy="https://corsproxy.io/?url=")
    client = MagicAppClient(cfg, session=FakeSession())
    url = client.build_url("/api/v1/guidelines/9/sections")
    assert url == "https://corsproxy.io/?url=https%3A%2F%2Fapi.magicapp.org%2Fapi%2Fv1%2Fguidelines%2F9%2Fsections"


def test_http_error_becomes_api_error(client, session):
    session.add(f"{BASE}/api/v1/guidelines/3/sections", {"error": "boom"}, status=500)
    with pytest.raises(ApiError) as info:
        client.get_sections("3")
    assert info.value.status_code == 500
    assert info.value.url.endswith("/sections")


def test_transport_error_becomes_api_error(client, session):
    session.fail(f"{BASE}/api/v1/guidelines/3/sections", requests.ConnectionError("down"))
    with pytest.raises(ApiError) as info:
        client.get_sections("3")
    assert info.value.status_code is None


def test_invalid_json_becomes_api_error(client, session):
    session.add(f"{BASE}/api/v1/guidelines/3/sections", None)
    with pytest.raises(ApiError):
        client.get_sections("3")
