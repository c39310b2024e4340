"""Stateful ride tracking: registry, classification, aggregates and sampling."""

from .classifier import (
    Classification,
    ClassifiedEvent,
    EventClassifier,
    should_notify_pickup,
)
from .registry import Ride, RideRegistry
from .sampler import CardSampler
from .stats import StatsAggregator, StatsSnapshot

__all__ = [
    "CardSampler",
    "Classification",
    "ClassifiedEvent",
    "EventClassifier",
    "Ride",
    "RideRegistry",
    "StatsAggregator",
    "StatsSnapshot",
    "should_notify_pickup",
]
