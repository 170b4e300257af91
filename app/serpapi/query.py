from app.types import SearchQuery
from app.utils.dates import add_days, ROUND_TRIP_DAYS


def build_search_query(origin: str, destination: str, departure_date: str, adults: int) -> SearchQuery:
    """
    Compose a round trip query. The return leg is always one week after the
    outbound date.
    """
    return SearchQuery(
        origin=origin,
        destination=destination,
        departure_date=departure_date,
        return_date=add_days(departure_date, ROUND_TRIP_DAYS),
        adults=adults,
    )
