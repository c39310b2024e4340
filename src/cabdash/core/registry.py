"""Registry of currently active rides."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

from ..events.schemas import RideEvent


@dataclass(frozen=True)
class Ride:
    """Most recently observed state of an active ride."""

    ride_id: str
    ride_status: str
    timestamp: datetime
    latitude: float
    longitude: float
    meter_reading: float
    passenger_count: int
    sequence_number: int

    @classmethod
    def from_event(cls, event: RideEvent, sequence_number: int) -> "Ride":
        return cls(
            ride_id=event.ride_id,
            ride_status=event.ride_status,
            timestamp=event.timestamp,
            latitude=event.latitude,
            longitude=event.longitude,
            meter_reading=event.meter_reading,
            passenger_count=event.passenger_count,
            sequence_number=sequence_number,
        )


class RideRegistry:
    """Mapping of ride id to the latest record for every active ride.

    A ride is present exactly while its latest observed event was not a
    dropoff. Removing an unknown ride is a no-op.
    """

    def __init__(self) -> None:
        self._rides: dict[str, Ride] = {}

    def upsert(self, ride: Ride) -> None:
        self._rides[ride.ride_id] = ride

    def remove(self, ride_id: str) -> Ride | None:
        """Remove a ride, returning the record that was dropped (if any)."""
        return self._rides.pop(ride_id, None)

    def get(self, ride_id: str) -> Ride | None:
        return self._rides.get(ride_id)

    def active_count(self) -> int:
        return len(self._rides)

    def clear(self) -> None:
        self._rides.clear()

    def rides(self) -> Iterator[Ride]:
        return iter(self._rides.values())

    def __contains__(self, ride_id: object) -> bool:
        return ride_id in self._rides

    def __len__(self) -> int:
        return len(self._rides)
