import httpx
import time
from typing import Dict, Any, Optional

from app.config import settings
from app.obs.logger import log_event
from app.obs.metrics import inc_counter, record_timing
from app.types import SearchQuery


class ProviderError(Exception):
    """The flight search provider could not be used for this request."""


class ProviderTransportError(ProviderError):
    """The request never produced a response (DNS, connect, TLS, timeout...)."""


class ProviderDecodeError(ProviderError):
    """The response body was not a JSON object."""


class SerpApiClient:
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, http: Optional[httpx.Client] = None):
        self.api_key = settings.SERPAPI_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.SERPAPI_BASE_URL
        read_timeout = timeout or settings.SERPAPI_TIMEOUT_SECONDS
        # Persistent HTTP client with HTTP/2 and sensible timeouts
        self._http = http or httpx.Client(
            http2=True,
            timeout=httpx.Timeout(connect=3.0, read=read_timeout, write=12.0, pool=12.0),
        )

    def close(self) -> None:
        self._http.close()

    def search_flights(self, query: SearchQuery) -> Dict[str, Any]:
        """
        One round trip to the Google Flights engine. Not retried: any
        transport or decode failure is raised to the caller as a ProviderError.
        """
        params = query.to_provider_params(
            api_key=self.api_key,
            currency=settings.SEARCH_CURRENCY,
            engine=settings.SERPAPI_ENGINE,
        )
        log_event(
            "provider_request",
            origin=query.origin,
            destination=query.destination,
            outbound_date=query.departure_date,
            return_date=query.return_date,
            adults=query.adults,
            api_key=self.api_key,
        )

        start = time.monotonic()
        try:
            r = self._http.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            inc_counter("provider_requests_total", {"outcome": "transport_error"})
            log_event("provider_error", level="ERROR", kind="transport", error=f"{type(e).__name__}: {e}")
            raise ProviderTransportError("flight search request failed") from e
        finally:
            record_timing("provider_latency_ms", (time.monotonic() - start) * 1000.0)

        try:
            data = r.json()
        except ValueError as e:
            inc_counter("provider_requests_total", {"outcome": "decode_error"})
            log_event("provider_error", level="ERROR", kind="decode", status=r.status_code, error=str(e))
            raise ProviderDecodeError("flight search response is not JSON") from e

        if not isinstance(data, dict):
            inc_counter("provider_requests_total", {"outcome": "decode_error"})
            log_event("provider_error", level="ERROR", kind="decode", status=r.status_code,
                      error=f"expected a JSON object, got {type(data).__name__}")
            raise ProviderDecodeError("flight search response is not a JSON object")

        # SerpApi reports quota/validation problems in-band; the body then has no flight lists
        if "error" in data:
            log_event("provider_reported_error", level="WARNING", status=r.status_code, error=data.get("error"))
        inc_counter("provider_requests_total", {"outcome": "ok"})
        return data
