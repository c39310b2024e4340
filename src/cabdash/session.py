"""Per-client dashboard session and its connection state machine."""

import logging
import time
from collections.abc import Callable
from enum import Enum

from .core import CardSampler, EventClassifier, RideRegistry, StatsAggregator
from .events import RideEvent
from .presentation import (
    OutboundMessage,
    card_message,
    clear_message,
    notification_message,
    stats_message,
)

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class DashboardSession:
    """Owns all ride state for a single dashboard client.

    Every client gets its own registry, aggregates and sequence counter;
    nothing here is shared between sessions. Each method runs to completion
    without awaiting, so one event's effects are never interleaved with
    another event or a refresh tick.
    """

    def __init__(
        self,
        max_cards: int = 9,
        clock: Callable[[], float] = time.time,
        session_id: str | None = None,
    ):
        self.session_id = session_id or f"session-{id(self):x}"
        self.registry = RideRegistry()
        self.stats = StatsAggregator(clock=clock)
        self.classifier = EventClassifier(self.registry)
        self.sampler = CardSampler(self.registry, max_cards=max_cards)
        self.state = ConnectionState.DISCONNECTED

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def _reset(self) -> None:
        self.stats.reset()
        self.registry.clear()
        self.classifier.reset_sequence()

    def connect(self) -> list[OutboundMessage]:
        """Enter the connected state from a clean slate."""
        self._reset()
        self.state = ConnectionState.CONNECTED
        logger.info(f"{self.session_id} connected")
        return [clear_message()]

    def disconnect(self, user_initiated: bool = False) -> list[OutboundMessage]:
        """Leave the connected state.

        A transport close resets everything and clears the client display.
        A user-initiated disconnect drops the tracked rides but sends no
        clear, so the client keeps showing the last stats it received.
        """
        if not self.connected:
            return []

        self.state = ConnectionState.DISCONNECTED
        self._reset()
        logger.info(f"{self.session_id} disconnected (user_initiated={user_initiated})")

        if user_initiated:
            return []
        return [clear_message()]

    def process(self, event: RideEvent) -> list[OutboundMessage]:
        """Apply one decoded event; returns the messages it produced."""
        if not self.connected:
            return []

        classified = self.classifier.classify(event)
        snapshot = self.stats.apply(event, classified.is_new_ride, classified.previous)

        messages: list[OutboundMessage] = []
        if classified.notifies:
            messages.append(notification_message(event))
        messages.append(stats_message(snapshot))
        return messages

    def tick(self) -> list[OutboundMessage]:
        """Card refreshes for the current window; nothing while disconnected."""
        if not self.connected:
            return []
        return [card_message(slot, ride) for slot, ride in self.sampler.sample()]
