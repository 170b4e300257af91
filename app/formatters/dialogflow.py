from typing import Any, Dict

from app.types import FlightResults, SearchQuery


def build_webhook_response(results: FlightResults, query: SearchQuery) -> Dict[str, Any]:
    """
    Dialogflow CX webhook reply: the summary lines as one text message, and
    the options plus resolved codes as session parameters for later turns.
    """
    return {
        "fulfillmentResponse": {
            "messages": [
                {"text": {"text": list(results.lines)}},
            ],
        },
        "sessionInfo": {
            "parameters": {
                "flight_comparison_results": [o.model_dump() for o in results.options],
                "origin": query.origin,
                "destination": query.destination,
            },
        },
    }


def error_payload(message: str) -> Dict[str, str]:
    return {"error": message}
