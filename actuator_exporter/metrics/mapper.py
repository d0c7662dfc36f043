"""Map Actuator JSON payloads onto catalog gauges"""
import json
import logging
import math
from typing import Any, Dict, Mapping

from prometheus_client import Gauge

from ..errors import MalformedPayloadError
from .catalog import get_descriptor
from .models import MetricDescriptor, ValueType


logger = logging.getLogger(__name__)

MAX_UNSIGNED = 2 ** 64


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_payload(raw: bytes) -> Dict[str, Any]:
    """Decode the upstream body into its top-level object.

    ``null`` decodes to an empty mapping. Anything else that is not a JSON
    object raises MalformedPayloadError. Invalid UTF-8 is replaced with
    U+FFFD rather than rejected.
    """
    try:
        payload = json.loads(raw.decode("utf-8", errors="replace"), parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedPayloadError(f"JSON unmarshaling failed: {e}") from e

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"JSON unmarshaling failed: expected object, got {type(payload).__name__}"
        )
    return payload


def coerce_value(descriptor: MetricDescriptor, value: Any) -> float:
    """Convert a JSON value to the gauge value for ``descriptor``.

    Raises ValueError when the value does not fit the descriptor's type.
    """
    if isinstance(value, bool):
        raise ValueError(f"{descriptor.upstream_key}: boolean is not numeric")

    if descriptor.value_type is ValueType.FLOAT:
        if not isinstance(value, (int, float)):
            raise ValueError(f"{descriptor.upstream_key}: expected number, got {type(value).__name__}")
        result = float(value)
        if not math.isfinite(result):
            raise ValueError(f"{descriptor.upstream_key}: number out of range")
        return result

    if not isinstance(value, int):
        raise ValueError(f"{descriptor.upstream_key}: expected unsigned integer, got {type(value).__name__}")
    if not 0 <= value < MAX_UNSIGNED:
        raise ValueError(f"{descriptor.upstream_key}: {value} out of unsigned range")
    return float(value)


class ResponseMapper:
    """Writes recognized payload fields into their labelled gauges"""

    def __init__(self, gauges: Mapping[str, Gauge]):
        self.gauges = gauges

    def apply(self, raw: bytes) -> int:
        """Parse ``raw`` and set every catalog gauge present in it.

        Returns the number of gauges written. Fields that fail coercion are
        written as 0.
        """
        payload = parse_payload(raw)
        written = 0

        for key, value in payload.items():
            descriptor = get_descriptor(key)
            if descriptor is None or key not in self.gauges:
                continue

            try:
                number = coerce_value(descriptor, value)
            except (ValueError, OverflowError) as e:
                logger.debug(f"Coercion failed for {key}: {e}")
                number = 0.0

            self.gauges[key].labels(*descriptor.label_values()).set(number)
            written += 1

        return written
