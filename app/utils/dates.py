from datetime import date, datetime, timedelta
import pytz
import re

ISO_DATE = "%Y-%m-%d"
DEFAULT_LEAD_DAYS = 7
ROUND_TRIP_DAYS = 7

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_current_datetime(tz: str = "UTC") -> datetime:
    """Get current datetime with timezone"""
    return datetime.now(pytz.timezone(tz))


def today(tz: str = "UTC") -> date:
    return get_current_datetime(tz).date()


def default_departure_date(base: date) -> str:
    """The fallback departure date: one week from ``base``."""
    return (base + timedelta(days=DEFAULT_LEAD_DAYS)).strftime(ISO_DATE)


def is_iso_date(text: str) -> bool:
    """
    True only for a zero-padded YYYY-MM-DD string naming a real calendar day.
    """
    if not _ISO_DATE_RE.match(text):
        return False
    try:
        datetime.strptime(text, ISO_DATE)
    except ValueError:
        return False
    return True


def add_days(iso_date: str, days: int = ROUND_TRIP_DAYS) -> str:
    return (datetime.strptime(iso_date, ISO_DATE) + timedelta(days=days)).strftime(ISO_DATE)
