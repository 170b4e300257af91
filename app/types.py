from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Any, Dict, List, Optional, Union

# Provider values that are passed through untouched: number, string or absent.
Scalar = Optional[Union[StrictInt, StrictFloat, StrictStr]]


class SearchQuery(BaseModel):
    origin: str = Field("UNK", description="3-letter code or UNK")
    destination: str = Field("UNK", description="3-letter code or UNK")
    departure_date: str = Field(..., description="YYYY-MM-DD")
    return_date: str = Field(..., description="YYYY-MM-DD, departure + 7 days")
    adults: int = 1

    def to_provider_params(self, api_key: str, currency: str, engine: str) -> Dict[str, Any]:
        """Query string for a Google Flights round trip search."""
        return {
            "engine": engine,
            "departure_id": self.origin,
            "arrival_id": self.destination,
            "outbound_date": self.departure_date,
            "return_date": self.return_date,
            "adults": self.adults,
            "currency": currency,
            "api_key": api_key,
        }


class FlightOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int                # 1-based rank
    airline: str = ""
    airplane: str = ""
    price: Scalar = None
    departure_date: str
    origin: str
    destination: str
    duration: Scalar = None
    travel_class: str = ""
    is_nonstop: bool
    connection_info: Optional[str] = None  # e.g. "1 stop(s): Frankfurt Airport"


class FlightResults(BaseModel):
    lines: List[str]
    options: List[FlightOption] = Field(default_factory=list)


class SessionInfo(BaseModel):
    parameters: Optional[Dict[str, Any]] = None


class WebhookRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_info: Optional[SessionInfo] = Field(None, alias="sessionInfo")

    @property
    def parameters(self) -> Dict[str, Any]:
        if self.session_info is None or self.session_info.parameters is None:
            return {}
        return self.session_info.parameters

