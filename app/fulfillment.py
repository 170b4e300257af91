"""
Fulfillment flow for one webhook call.

normalize slots -> build query -> search provider -> rank results -> reply
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.config import settings
from app.formatters.dialogflow import build_webhook_response
from app.obs.logger import log_event
from app.parse.params import normalize_parameters
from app.serpapi.client import SerpApiClient
from app.serpapi.transform import normalize_results
from app.types import WebhookRequest


class InvalidRequestError(ValueError):
    """The webhook body is not a fulfillment request."""


def parse_request(payload: Any) -> WebhookRequest:
    if not isinstance(payload, dict):
        raise InvalidRequestError(f"expected a JSON object, got {type(payload).__name__}")
    try:
        return WebhookRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(str(e)) from e


def handle_fulfillment(payload: Any, client: SerpApiClient, today: Optional[date] = None) -> Dict[str, Any]:
    """Run the whole pipeline. Provider failures propagate as ProviderError."""
    request = parse_request(payload)
    query = normalize_parameters(request.parameters, today=today)
    log_event(
        "fulfillment_query",
        origin=query.origin,
        destination=query.destination,
        departure_date=query.departure_date,
        return_date=query.return_date,
        adults=query.adults,
    )

    data = client.search_flights(query)
    results = normalize_results(data, query, currency=settings.SEARCH_CURRENCY)
    log_event("fulfillment_results", options=len(results.options))

    return build_webhook_response(results, query)
