"""Ride event schemas and decoding."""

from .decoder import decode_ride_event
from .schemas import DROPOFF, ENROUTE, PICKUP, RideEvent, is_terminal

__all__ = [
    "DROPOFF",
    "ENROUTE",
    "PICKUP",
    "RideEvent",
    "decode_ride_event",
    "is_terminal",
]
