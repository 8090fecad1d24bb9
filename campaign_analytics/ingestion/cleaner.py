"""Payload cleaning helpers for heterogeneous wire records."""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def parse_payload(value: Any, field_name: str = "payload") -> dict[str, Any] | None:
    """Decode a nested payload that may arrive JSON-encoded.

    Returns None (and logs) instead of raising when the value is absent,
    not valid JSON, or not a JSON object.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (str, bytes, bytearray)):
        try:
            decoded = json.loads(value)
        except (ValueError, TypeError) as e:
            logger.warning("Unparseable %s ignored: %s", field_name, e)
            return None
        if isinstance(decoded, dict):
            return decoded
        logger.warning(
            "%s decoded to %s, expected an object", field_name, type(decoded).__name__
        )
        return None

    logger.warning("Unsupported %s type %s ignored", field_name, type(value).__name__)
    return None


def coerce_number(value: Any) -> int | float:
    """Convert a wire value to a number; anything non-numeric counts as 0.

    Ints pass through so category counts keep exact integer sums.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
        return number if math.isfinite(number) else 0.0
    return 0


def extract_spend(cost_data: Any) -> tuple[dict[str, Any], float]:
    """Parse a cost payload and pull out its spend.

    Returns the parsed payload (empty when corrupt) and spend as a float.
    """
    parsed = parse_payload(cost_data, "costData") or {}
    return parsed, float(coerce_number(parsed.get("spend")))
