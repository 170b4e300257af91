from unittest.mock import Mock

import pytest

from app.fulfillment import InvalidRequestError, handle_fulfillment, parse_request
from app.serpapi.client import ProviderTransportError


def test_parse_request_defaults():
    assert parse_request({}).parameters == {}
    assert parse_request({"sessionInfo": {"parameters": None}}).parameters == {}
    assert parse_request({"sessionInfo": {"parameters": {"a": 1}}}).parameters == {"a": 1}


@pytest.mark.parametrize("payload", [None, "text", 3, [], {"sessionInfo": {"parameters": "x"}}])
def test_parse_request_rejects_non_requests(payload):
    with pytest.raises(InvalidRequestError):
        parse_request(payload)


def test_pipeline_with_fallback_date(fixed_today, serp_payload, capsys):
    client = Mock()
    client.search_flights.return_value = serp_payload

    reply = handle_fulfillment(
        {"sessionInfo": {"parameters": {
            "departure_city": {"original": "paris"},
            "destination_city": "Tokyo",
            "departure_date": {"year": 2025, "month": 2, "day": 30},
            "passenger_count": "3",
        }}},
        client,
        today=fixed_today,
    )

    query = client.search_flights.call_args.args[0]
    assert query.departure_date == "2025-03-08"
    assert query.return_date == "2025-03-15"
    assert query.adults == 3

    lines = reply["fulfillmentResponse"]["messages"][0]["text"]["text"]
    assert lines[0] == "Found flights from PAR to TOK on 2025-03-08:"
    assert len(reply["sessionInfo"]["parameters"]["flight_comparison_results"]) == 4

    out = capsys.readouterr().out
    assert '"event":"date_fallback"' in out
    assert '"event":"fulfillment_results"' in out


def test_provider_errors_propagate():
    client = Mock()
    client.search_flights.side_effect = ProviderTransportError("boom")

    with pytest.raises(ProviderTransportError):
        handle_fulfillment({}, client)
