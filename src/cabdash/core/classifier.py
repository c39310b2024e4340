"""Classification of ride events against the active registry."""

import logging
from dataclasses import dataclass
from enum import Enum

from ..events.schemas import PICKUP, RideEvent
from .registry import Ride, RideRegistry

logger = logging.getLogger(__name__)


class Classification(str, Enum):
    """How an incoming event relates to the tracked rides."""

    NEW_RIDE = "new_ride"
    PICKUP_NOTIFY = "pickup_notify"
    UPDATE = "update"
    DROPOFF_NOTIFY = "dropoff_notify"
    # Dropoff for a ride that is not being tracked
    IGNORED = "ignored"


NOTIFYING = frozenset([Classification.PICKUP_NOTIFY, Classification.DROPOFF_NOTIFY])


def should_notify_pickup(status: str, already_tracked: bool) -> bool:
    """Pickup notification policy.

    Only a pickup for a ride that is already tracked flashes a
    notification. The first sighting of a ride registers it silently, even
    when that first event is itself a pickup.
    """
    return already_tracked and status == PICKUP


@dataclass(frozen=True)
class ClassifiedEvent:
    """Outcome of classifying one event."""

    event: RideEvent
    classification: Classification
    # Registry record before this event was applied
    previous: Ride | None
    # Registry record after this event was applied; None once removed
    current: Ride | None

    @property
    def is_new_ride(self) -> bool:
        return self.classification is Classification.NEW_RIDE

    @property
    def notifies(self) -> bool:
        return self.classification in NOTIFYING


class EventClassifier:
    """Applies ride events to a registry and tags each one.

    The classifier owns the local sequence counter used to order rides for
    display; every new or re-touched ride gets the next number.
    """

    def __init__(self, registry: RideRegistry, first_sequence: int = 0):
        self.registry = registry
        self._first_sequence = first_sequence
        self._next_sequence = first_sequence

    def reset_sequence(self) -> None:
        self._next_sequence = self._first_sequence

    def _sequence(self, event: RideEvent) -> Ride:
        ride = Ride.from_event(event, self._next_sequence)
        self._next_sequence += 1
        self.registry.upsert(ride)
        return ride

    def classify(self, event: RideEvent) -> ClassifiedEvent:
        previous = self.registry.get(event.ride_id)

        if previous is None:
            if event.is_terminal:
                logger.debug(f"Ignoring {event.ride_status} for untracked ride {event.ride_id}")
                return ClassifiedEvent(event, Classification.IGNORED, None, None)
            ride = self._sequence(event)
            return ClassifiedEvent(event, Classification.NEW_RIDE, None, ride)

        if event.is_terminal:
            self.registry.remove(event.ride_id)
            return ClassifiedEvent(event, Classification.DROPOFF_NOTIFY, previous, None)

        ride = self._sequence(event)
        if should_notify_pickup(event.ride_status, already_tracked=True):
            return ClassifiedEvent(event, Classification.PICKUP_NOTIFY, previous, ride)
        return ClassifiedEvent(event, Classification.UPDATE, previous, ride)
