"""Shared builders for ride events in tests."""

import json
from datetime import UTC, datetime

from cabdash.events import RideEvent

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


def make_ride_payload(
    ride_id: str = "ride-1",
    status: str = "pickup",
    meter: float = 0.0,
    passengers: int = 2,
    timestamp: str = "2024-01-15T10:00:00Z",
    latitude: float = 40.7127753,
    longitude: float = -74.0059728,
) -> dict:
    """Create a valid ride payload as the transport would deliver it."""
    return {
        "ride_id": ride_id,
        "point_idx": 17,
        "latitude": latitude,
        "longitude": longitude,
        "timestamp": timestamp,
        "meter_reading": meter,
        "meter_increment": 0.02,
        "ride_status": status,
        "passenger_count": passengers,
    }


def make_ride_event(**kwargs) -> RideEvent:
    return RideEvent.model_validate(make_ride_payload(**kwargs))


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode()


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start.timestamp()

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now
