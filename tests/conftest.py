import os
import sys
from datetime import date

import pytest

# Ensure project root is on sys.path so `import app` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


def make_leg(airline="Lufthansa", airplane="Airbus A350", travel_class="Economy",
             dep_time="2025-03-14 10:05", arrival_name="Frankfurt Airport"):
    return {
        "departure_airport": {"name": "Paris CDG", "id": "CDG", "time": dep_time},
        "arrival_airport": {"name": arrival_name, "id": "XXX", "time": "2025-03-14 12:00"},
        "airline": airline,
        "airplane": airplane,
        "travel_class": travel_class,
    }


def make_group(legs, price=512, total_duration=745, **extra):
    group = {"flights": legs, "price": price, "total_duration": total_duration}
    group.update(extra)
    return group


@pytest.fixture
def fixed_today():
    return date(2025, 3, 1)


@pytest.fixture
def serp_payload():
    """Two best and two other itineraries, shaped like a google_flights response."""
    return {
        "search_metadata": {"status": "Success"},
        "best_flights": [
            make_group([make_leg()], price=480, total_duration=95),
            make_group(
                [make_leg(airline="Air France", arrival_name="Amsterdam Schiphol"),
                 make_leg(airline="Air France", arrival_name="Tokyo Haneda")],
                price=910,
                total_duration=860,
            ),
        ],
        "other_flights": [
            make_group([make_leg(airline="ANA")], price="1,020", total_duration=None, duration=780),
            make_group([make_leg(airline="JAL")], price=1100),
        ],
    }
