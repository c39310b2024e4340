"""Tests for outbound message formatting."""

import pytest

from cabdash.core import Ride, StatsSnapshot
from cabdash.presentation import (
    card_message,
    clear_message,
    format_coordinate,
    notification_message,
    stats_message,
    status_icon,
)
from tests.helpers import make_ride_event

pytestmark = pytest.mark.unit


class TestFormatCoordinate:
    def test_truncates_to_four_decimals(self):
        assert format_coordinate(40.7127753) == "40.7127"
        assert format_coordinate(-74.0059728) == "-74.0059"

    def test_short_values_unchanged(self):
        assert format_coordinate(40.5) == "40.5"


class TestStatusIcon:
    @pytest.mark.parametrize(
        "status,icon",
        [("pickup", "directions_run"), ("dropoff", "done"), ("enroute", "traffic")],
    )
    def test_icons(self, status, icon):
        assert status_icon(status) == icon


class TestMessages:
    def test_notification_carries_map_link(self):
        message = notification_message(make_ride_event(ride_id="ride-7", status="dropoff"))

        assert message["type"] == "notification"
        data = message["data"]
        assert data["ride_id"] == "ride-7"
        assert data["icon"] == "done"
        assert data["latlng"] == "40.7127,-74.0059"
        assert data["map_url"] == "https://www.google.com/maps/place/40.7127,-74.0059"

    def test_pickup_notification_icon(self):
        message = notification_message(make_ride_event(status="pickup"))

        assert message["data"]["icon"] == "directions_run"

    def test_card_message(self):
        ride = Ride.from_event(make_ride_event(ride_id="ride-3", meter=5.5), sequence_number=42)

        message = card_message(4, ride)

        assert message["type"] == "card"
        data = message["data"]
        assert data["slot"] == 4
        assert data["ride_id"] == "ride-3"
        assert data["meter_label"] == "$5.50"
        assert data["sequence_label"] == "#42"
        assert data["timestamp"] == "2024-01-15T10:00:00+00:00"

    def test_card_shows_one_icon_per_passenger(self):
        ride = Ride.from_event(make_ride_event(ride_id="ride-3", passengers=3), 0)

        data = card_message(0, ride)["data"]

        assert data["passenger_icons"] == ["person", "person", "person"]
        assert data["passengers_label"] == "3 passengers in ride ride-3"

    def test_empty_cab_shows_refresh_icon(self):
        ride = Ride.from_event(make_ride_event(passengers=0), 0)

        assert card_message(0, ride)["data"]["passenger_icons"] == ["refresh"]

    def test_card_details_list_ride_fields(self):
        ride = Ride.from_event(make_ride_event(ride_id="ride-3", status="enroute"), 7)

        details = card_message(0, ride)["data"]["details"].splitlines()

        assert "ride_id: ride-3" in details
        assert "ride_status: enroute" in details
        assert "sequence_number: 7" in details

    def test_stats_message_labels(self):
        snapshot = StatsSnapshot(
            total_fare=12.5,
            total_passengers=5,
            active_rides=2,
            avg_density=2.5,
            fare_per_passenger=2.5,
            events_processed=10,
            events_per_sec=3.333,
            lag_seconds=0.123456,
            seconds_since_reset=3.0,
        )

        message = stats_message(snapshot)

        assert message["type"] == "stats"
        labels = message["data"]["labels"]
        assert labels["rate"] == "3.33 mps"
        assert labels["lag"] == "0.1235s"
        assert labels["active_rides"] == "2"
        assert labels["total_fare"] == "$12.50"
        assert labels["total_passengers"] == "5 (2.50 / $2.50)"

    def test_clear_message(self):
        assert clear_message() == {"type": "clear", "data": {}}
