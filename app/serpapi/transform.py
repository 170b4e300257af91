"""Project SerpApi Google Flights results onto ranked FlightOption records.

The provider payload is treated as untrusted: every nested lookup goes
through ``dig`` so a missing or oddly-typed field blanks that one field and
never aborts the remaining groups.
"""

from typing import Any, List, Mapping, Optional
import json
import math

from app.types import FlightOption, FlightResults, Scalar, SearchQuery

MAX_OPTIONS = 5
NONSTOP_LABEL = "Non-stop"
MISSING_VALUE = "N/A"


def dig(obj: Any, *path: str) -> Any:
    """Follow ``path`` through nested mappings, returning None on any miss."""
    for key in path:
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(key)
    return obj


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), default=str)


def as_scalar(value: Any) -> Scalar:
    """Keep numbers and strings as-is; anything structured is rendered as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        # NaN and Infinity cannot be written back out as JSON
        return as_text(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return as_text(value)


def _display(value: Scalar) -> str:
    return MISSING_VALUE if value is None else as_text(value)


def group_duration(group: Mapping) -> Scalar:
    total = group.get("total_duration")
    if total is not None:
        return as_scalar(total)
    return as_scalar(group.get("duration"))


def connection_info(legs: List[Any]) -> Optional[str]:
    """``"<n> stop(s): A, B"`` from every leg's arrival except the last; None if non-stop."""
    if len(legs) == 1:
        return None
    stops = []
    for leg in legs[:-1]:
        name = dig(leg, "arrival_airport", "name")
        if name is not None:
            stops.append(as_text(name))
    return f"{len(legs) - 1} stop(s): {', '.join(stops)}"


def to_flight_option(rank: int, group: Mapping, query: SearchQuery) -> Optional[FlightOption]:
    legs = as_list(group.get("flights"))
    if not legs:
        return None
    first = legs[0]
    return FlightOption(
        id=rank,
        airline=as_text(dig(first, "airline")),
        airplane=as_text(dig(first, "airplane")),
        price=as_scalar(group.get("price")),
        departure_date=query.departure_date,
        origin=query.origin,
        destination=query.destination,
        duration=group_duration(group),
        travel_class=as_text(dig(first, "travel_class")),
        is_nonstop=len(legs) == 1,
        connection_info=connection_info(legs),
    )


def summary_line(option: FlightOption, departure_time: str, currency: str) -> str:
    connection = NONSTOP_LABEL if option.is_nonstop else option.connection_info
    return (f"{option.id}. {option.airline} ({option.airplane}) Dep: {departure_time}, "
            f"Price: {currency} {_display(option.price)}, Duration: {_display(option.duration)}, "
            f"Class: {option.travel_class}, {connection}")


def normalize_results(data: Any, query: SearchQuery, currency: str = "USD") -> FlightResults:
    groups = as_list(dig(data, "best_flights")) + as_list(dig(data, "other_flights"))

    if not groups:
        return FlightResults(
            lines=[f"No flights found from {query.origin} to {query.destination} on {query.departure_date}."],
        )

    lines = [f"Found flights from {query.origin} to {query.destination} on {query.departure_date}:"]
    options: List[FlightOption] = []
    for group in groups:
        if len(options) >= MAX_OPTIONS:
            break
        if not isinstance(group, Mapping):
            continue
        option = to_flight_option(len(options) + 1, group, query)
        if option is None:
            continue
        departure_time = as_text(dig(as_list(group.get("flights"))[0], "departure_airport", "time"))
        options.append(option)
        lines.append(summary_line(option, departure_time, currency))

    return FlightResults(lines=lines, options=options)
