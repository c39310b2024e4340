"""Pydantic event schemas for validation."""

from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PICKUP = "pickup"
ENROUTE = "enroute"
DROPOFF = "dropoff"

TERMINAL_STATUSES = frozenset([DROPOFF])


def is_terminal(status: str) -> bool:
    """Return True if the status ends a ride."""
    return status in TERMINAL_STATUSES


class RideEvent(BaseModel):
    """A single pickup, meter update or dropoff for one taxi ride.

    Status is left open: upstream feeds add in-progress values freely, and
    anything that is neither a pickup nor a dropoff is treated as an update.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    ride_id: str = Field(validation_alias=AliasChoices("ride_id", "rideId", "identifier"))
    ride_status: str = Field(validation_alias=AliasChoices("ride_status", "rideStatus", "status"))
    timestamp: datetime
    latitude: float
    longitude: float
    meter_reading: float = Field(
        ge=0.0, validation_alias=AliasChoices("meter_reading", "meterReading")
    )
    passenger_count: int = Field(
        ge=0, validation_alias=AliasChoices("passenger_count", "passengerCount")
    )

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.ride_status)
