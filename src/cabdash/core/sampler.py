"""Selection of the bounded card window from the active rides."""

import heapq

from .registry import Ride, RideRegistry


class CardSampler:
    """Picks the rides to render on each refresh.

    The window is the `max_cards` most recently touched rides by sequence
    number, laid out oldest first so slot 0 holds the oldest ride in the
    window. Only as many slots as there are rides are filled; the rest are
    left to whatever they showed before.
    """

    def __init__(self, registry: RideRegistry, max_cards: int = 9):
        if max_cards < 1:
            raise ValueError(f"max_cards must be positive, got {max_cards}")
        self.registry = registry
        self.max_cards = max_cards

    def sample(self) -> list[tuple[int, Ride]]:
        """Return (slot, ride) pairs for the current window."""
        window = heapq.nlargest(
            self.max_cards, self.registry.rides(), key=lambda ride: ride.sequence_number
        )
        window.reverse()
        return list(enumerate(window))
