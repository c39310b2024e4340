"""Outbound websocket message formatting.

Every message sent to a dashboard client is a ``{"type": ..., "data": ...}``
envelope. The client renders notifications, ride cards and stat labels
directly from these payloads.
"""

from typing import Any

from .core.registry import Ride
from .core.stats import StatsSnapshot
from .events.schemas import DROPOFF, PICKUP, RideEvent

OutboundMessage = dict[str, Any]

MAPS_URL = "https://www.google.com/maps/place/{latlng}"

STATUS_ICONS = {
    PICKUP: "directions_run",
    DROPOFF: "done",
}
DEFAULT_STATUS_ICON = "traffic"


def format_coordinate(value: float, places: int = 4) -> str:
    """Truncate (not round) a coordinate to a fixed number of decimals."""
    text = str(value)
    idx = text.find(".")
    if idx < 0:
        return text
    return text[: idx + places + 1]


def status_icon(status: str) -> str:
    return STATUS_ICONS.get(status, DEFAULT_STATUS_ICON)


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def passenger_icons(count: int) -> list[str]:
    """One ``person`` per passenger; an empty cab shows ``refresh``."""
    if count > 0:
        return ["person"] * count
    return ["refresh"]


def ride_details(ride: Ride) -> str:
    """Plain ``key: value`` lines describing a ride, used as a tooltip."""
    fields = {
        "ride_id": ride.ride_id,
        "ride_status": ride.ride_status,
        "timestamp": ride.timestamp.isoformat(),
        "latitude": ride.latitude,
        "longitude": ride.longitude,
        "meter_reading": ride.meter_reading,
        "passenger_count": ride.passenger_count,
        "sequence_number": ride.sequence_number,
    }
    return "\n".join(f"{key}: {value}" for key, value in fields.items())


def notification_message(event: RideEvent) -> OutboundMessage:
    """Pickup/dropoff flash for a tracked ride."""
    latlng = f"{format_coordinate(event.latitude)},{format_coordinate(event.longitude)}"
    return {
        "type": "notification",
        "data": {
            "ride_id": event.ride_id,
            "ride_status": event.ride_status,
            "icon": "directions_run" if event.ride_status == PICKUP else "done",
            "latlng": latlng,
            "map_url": MAPS_URL.format(latlng=latlng),
        },
    }


def card_message(slot: int, ride: Ride) -> OutboundMessage:
    """Create-or-refresh instruction for one card slot."""
    return {
        "type": "card",
        "data": {
            "slot": slot,
            "ride_id": ride.ride_id,
            "ride_status": ride.ride_status,
            "icon": status_icon(ride.ride_status),
            "timestamp": ride.timestamp.isoformat(),
            "latitude": ride.latitude,
            "longitude": ride.longitude,
            "meter_reading": ride.meter_reading,
            "meter_label": format_money(ride.meter_reading),
            "passenger_count": ride.passenger_count,
            "passenger_icons": passenger_icons(ride.passenger_count),
            "passengers_label": f"{ride.passenger_count} passengers in ride {ride.ride_id}",
            "details": ride_details(ride),
            "sequence_number": ride.sequence_number,
            "sequence_label": f"#{ride.sequence_number}",
        },
    }


def stats_message(snapshot: StatsSnapshot) -> OutboundMessage:
    """Aggregate statistics with ready-to-render labels."""
    passengers_label = (
        f"{snapshot.total_passengers} ({snapshot.avg_density:.2f} / "
        f"{format_money(snapshot.fare_per_passenger)})"
    )
    return {
        "type": "stats",
        "data": {
            "events_per_sec": snapshot.events_per_sec,
            "lag_seconds": snapshot.lag_seconds,
            "active_rides": snapshot.active_rides,
            "total_fare": snapshot.total_fare,
            "total_passengers": snapshot.total_passengers,
            "avg_density": snapshot.avg_density,
            "fare_per_passenger": snapshot.fare_per_passenger,
            "events_processed": snapshot.events_processed,
            "labels": {
                "rate": f"{snapshot.events_per_sec:.2f} mps",
                "lag": f"{snapshot.lag_seconds:.4f}s",
                "active_rides": str(snapshot.active_rides),
                "total_fare": format_money(snapshot.total_fare),
                "total_passengers": passengers_label,
            },
        },
    }


def clear_message() -> OutboundMessage:
    """Tells the client to drop all cards and zero its stat labels."""
    return {"type": "clear", "data": {}}
