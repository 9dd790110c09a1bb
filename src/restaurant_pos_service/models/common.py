"""Helpers shared by the POS entity models."""

import time
import uuid
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

# Entities are stored and served with camelCase attribute names.
CAMEL_CASE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """Serialize a datetime as a UTC ISO-8601 string for storage."""
    return value.astimezone(UTC).isoformat()


def round_half_up(value: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def generate_entity_id(prefix: str) -> str:
    """Generate a time-based identifier with a short random suffix.

    Args:
        prefix: Entity prefix, e.g. "BILL"

    Returns:
        Identifier in the form ``<prefix>-<epoch millis>-<4 uppercase alnum>``
    """
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{uuid.uuid4().hex[:4].upper()}"
