"""Decoding of raw transport payloads into ride events."""

import json
import logging

from pydantic import ValidationError

from ..metrics import get_metrics_collector
from .schemas import RideEvent

logger = logging.getLogger(__name__)


def decode_ride_event(payload: bytes | str) -> RideEvent | None:
    """Parse and validate a raw payload.

    Returns None for anything that is not a valid ride event, so callers
    downstream only ever see fully-formed events.
    """
    try:
        raw = json.loads(payload)
        if not isinstance(raw, dict):
            raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
        return RideEvent.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Ride validation error: {e}")
        get_metrics_collector().record_validation_error()
        return None
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to parse ride event: {e}")
        get_metrics_collector().record_validation_error()
        return None
