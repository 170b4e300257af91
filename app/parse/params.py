"""Normalize the agent's loosely-typed slot parameters into query fields.

Dialogflow hands over slots in whatever shape the entity resolver produced:
``@sys.geo-city`` arrives as ``{"city": "Paris", "original": "paris"}`` or a
bare string, ``@sys.date`` as ``{"year": 2025, "month": 3, "day": 14}`` or an
ISO string, and numbers as JSON floats or strings. None of these ever raise;
bad input degrades to a default.
"""

from datetime import date
from numbers import Real
from typing import Any, Dict, Mapping, Optional
import re

from app.config import settings
from app.obs.logger import log_event
from app.serpapi.query import build_search_query
from app.types import SearchQuery
from app.utils.dates import default_departure_date, is_iso_date, today as current_day, ISO_DATE

UNKNOWN_CODE = "UNK"
DEFAULT_PASSENGERS = 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _is_number(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass
    return isinstance(value, Real) and not isinstance(value, bool)


def _code_from_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and len(value) >= 3:
        return value[:3].upper()
    return None


def extract_city_code(value: Any) -> str:
    """First three letters of the city, uppercased, or ``UNK``."""
    if isinstance(value, Mapping):
        code = _code_from_text(value.get("city")) or _code_from_text(value.get("original"))
        return code or UNKNOWN_CODE
    return _code_from_text(value) or UNKNOWN_CODE


def parse_departure_date(value: Any, today: Optional[date] = None) -> str:
    """
    Resolve the departure date slot to ``YYYY-MM-DD``.

    Structured dates overlay their numeric year/month/day onto today's date.
    Anything unusable falls back to one week from today.
    """
    base = today or current_day(settings.TZ)
    fallback = default_departure_date(base)

    if value is None:
        return fallback

    if isinstance(value, Mapping):
        parts = {"year": base.year, "month": base.month, "day": base.day}
        for field in parts:
            if _is_number(value.get(field)):
                parts[field] = value[field]
        try:
            return date(int(parts["year"]), int(parts["month"]), int(parts["day"])).strftime(ISO_DATE)
        except (ValueError, OverflowError) as e:
            log_event("date_fallback", level="WARNING", source="dict", error=str(e), fallback=fallback)
            return fallback

    if isinstance(value, str):
        if is_iso_date(value):
            return value
        log_event("date_fallback", level="WARNING", source="string", value=value, fallback=fallback)
        return fallback

    return fallback


def parse_passenger_count(value: Any) -> int:
    """Whole passenger count; numbers truncate, no range check."""
    if _is_number(value):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return DEFAULT_PASSENGERS
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        try:
            return int(value)
        except ValueError:
            # longer than the interpreter will convert
            return DEFAULT_PASSENGERS
    return DEFAULT_PASSENGERS


def normalize_parameters(params: Dict[str, Any], today: Optional[date] = None) -> SearchQuery:
    """Turn the session parameters into a ready-to-send round trip query."""
    return build_search_query(
        origin=extract_city_code(params.get("departure_city")),
        destination=extract_city_code(params.get("destination_city")),
        departure_date=parse_departure_date(params.get("departure_date"), today=today),
        adults=parse_passenger_count(params.get("passenger_count")),
    )
