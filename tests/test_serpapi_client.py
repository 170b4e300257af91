import json
from unittest.mock import patch

import httpx
import pytest

from app.obs.metrics import counter_value, reset_metrics
from app.serpapi.client import (
    ProviderDecodeError,
    ProviderError,
    ProviderTransportError,
    SerpApiClient,
)
from app.serpapi.query import build_search_query


QUERY = build_search_query("LHR", "MAD", "2025-10-15", 2)


class DummyResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json_data = {"best_flights": []} if json_data is None else json_data
        self._text = text

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._json_data


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


def test_build_search_query_adds_one_week_return():
    query = build_search_query("LHR", "MAD", "2025-12-28", 1)
    assert query.return_date == "2026-01-04"


def test_provider_params():
    params = QUERY.to_provider_params(api_key="secret", currency="USD", engine="google_flights")
    assert params == {
        "engine": "google_flights",
        "departure_id": "LHR",
        "arrival_id": "MAD",
        "outbound_date": "2025-10-15",
        "return_date": "2025-10-22",
        "adults": 2,
        "currency": "USD",
        "api_key": "secret",
    }


def test_sends_single_get_with_expected_params():
    client = SerpApiClient(api_key="TEST_KEY", base_url="https://serp.test/search")

    with patch("app.serpapi.client.httpx.Client.get") as mock_get:
        mock_get.return_value = DummyResponse(200, {"best_flights": ["ok"]})

        data = client.search_flights(QUERY)

    assert data == {"best_flights": ["ok"]}
    assert mock_get.call_count == 1
    url = mock_get.call_args.kwargs.get("url") or mock_get.call_args.args[0]
    assert url == "https://serp.test/search"
    params = mock_get.call_args.kwargs.get("params")
    assert params["engine"] == "google_flights"
    assert params["currency"] == "USD"
    assert params["api_key"] == "TEST_KEY"
    assert params["departure_id"] == "LHR"
    assert params["arrival_id"] == "MAD"
    assert params["return_date"] == "2025-10-22"
    assert params["adults"] == 2
    assert counter_value("provider_requests_total", {"outcome": "ok"}) == 1


def test_transport_failure_is_not_retried():
    client = SerpApiClient(api_key="TEST_KEY")

    with patch("app.serpapi.client.httpx.Client.get") as mock_get:
        mock_get.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(ProviderTransportError):
            client.search_flights(QUERY)

    assert mock_get.call_count == 1
    assert counter_value("provider_requests_total", {"outcome": "transport_error"}) == 1


def test_non_json_body_raises_decode_error():
    client = SerpApiClient(api_key="TEST_KEY")

    with patch("app.serpapi.client.httpx.Client.get") as mock_get:
        mock_get.return_value = DummyResponse(502, text="<html>Bad gateway</html>")

        with pytest.raises(ProviderDecodeError):
            client.search_flights(QUERY)


def test_json_array_body_raises_decode_error():
    client = SerpApiClient(api_key="TEST_KEY")

    with patch("app.serpapi.client.httpx.Client.get") as mock_get:
        mock_get.return_value = DummyResponse(200, ["not", "an", "object"])

        with pytest.raises(ProviderError):
            client.search_flights(QUERY)


def test_in_band_error_is_returned_and_logged(capsys):
    client = SerpApiClient(api_key="SUPERSECRETKEY")

    with patch("app.serpapi.client.httpx.Client.get") as mock_get:
        mock_get.return_value = DummyResponse(401, {"error": "Invalid API key."})

        data = client.search_flights(QUERY)

    assert data == {"error": "Invalid API key."}
    out = capsys.readouterr().out
    assert '"event":"provider_reported_error"' in out
    assert "SUPERSECRETKEY" not in out
    assert "***TKEY" in out


def test_works_with_injected_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["outbound_date"] == "2025-10-15"
        return httpx.Response(200, json={"other_flights": []})

    client = SerpApiClient(
        api_key="k",
        base_url="https://serp.test/search",
        http=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    try:
        assert client.search_flights(QUERY) == {"other_flights": []}
    finally:
        client.close()
