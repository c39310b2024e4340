"""Incrementally maintained aggregate statistics over active rides."""

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..events.schemas import RideEvent
from .registry import Ride


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time aggregate statistics."""

    total_fare: float
    total_passengers: int
    active_rides: int
    avg_density: float
    fare_per_passenger: float
    events_processed: int
    events_per_sec: float
    lag_seconds: float
    seconds_since_reset: float


class StatsAggregator:
    """Running totals updated by deltas, one event at a time.

    Totals always equal a full recomputation over the registry contents:
    new rides add their values, updates add the difference to the previous
    record, and dropoffs subtract the previous record (never the dropoff
    event's own reading). Derived ratios report 0.0 when there is no data.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        self.total_fare = 0.0
        self.total_passengers = 0
        self.active_rides = 0
        self.events_processed = 0
        self.lag_seconds = 0.0
        self.reset_at = self._clock()

    def apply(self, event: RideEvent, is_new_ride: bool, previous: Ride | None) -> StatsSnapshot:
        """Fold one event into the totals and return the refreshed snapshot."""
        self.events_processed += 1

        if event.is_terminal:
            if previous is not None:
                self.total_fare -= previous.meter_reading
                self.total_passengers -= previous.passenger_count
                self.active_rides -= 1
        elif is_new_ride:
            self.total_fare += event.meter_reading
            self.total_passengers += event.passenger_count
            self.active_rides += 1
        elif previous is not None:
            self.total_fare += event.meter_reading - previous.meter_reading
            # Zero unless upstream changes the head count mid-ride
            self.total_passengers += event.passenger_count - previous.passenger_count

        now = self._clock()
        self.lag_seconds = now - event.timestamp.timestamp()
        return self.snapshot(now)

    @property
    def avg_density(self) -> float:
        if self.active_rides <= 0:
            return 0.0
        return self.total_passengers / self.active_rides

    @property
    def fare_per_passenger(self) -> float:
        if self.total_passengers <= 0:
            return 0.0
        return self.total_fare / self.total_passengers

    def events_per_sec(self, now: float | None = None) -> float:
        elapsed = (self._clock() if now is None else now) - self.reset_at
        if elapsed <= 0:
            return 0.0
        return self.events_processed / elapsed

    def snapshot(self, now: float | None = None) -> StatsSnapshot:
        now = self._clock() if now is None else now
        return StatsSnapshot(
            total_fare=self.total_fare,
            total_passengers=self.total_passengers,
            active_rides=self.active_rides,
            avg_density=self.avg_density,
            fare_per_passenger=self.fare_per_passenger,
            events_processed=self.events_processed,
            events_per_sec=self.events_per_sec(now),
            lag_seconds=self.lag_seconds,
            seconds_since_reset=now - self.reset_at,
        )
