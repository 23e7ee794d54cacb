"""
Shared pydantic building blocks for API payloads.

The backend sends camelCase keys, dates in several ISO-8601 flavours and money
either as JSON numbers or as numeric strings. The annotated types below absorb
those differences so the entity schemas can stay declarative.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

logger = logging.getLogger("nidus.schemas")

# Tried in order once datetime.fromisoformat has given up.
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an API date, returning None when no known format matches."""
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return _as_utc(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def lenient_datetime(value: Any) -> datetime:
    """Parse an API date, falling back to the current time instead of failing."""
    parsed = parse_datetime(value)
    if parsed is None:
        logger.warning("Unparseable date %r, using current time", value)
        return utcnow()
    return parsed


def optional_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return lenient_datetime(value)


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number or numeric string to Decimal, raising ValueError otherwise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Invalid numeric string {value!r}")
        if not result.is_finite():
            raise ValueError(f"Invalid numeric string {value!r}")
        return result
    raise ValueError(f"Expected a number, got {value!r}")


def lenient_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError:
        logger.warning("Ignoring malformed amount %r", value)
        return None


def zero_on_error_decimal(value: Any) -> Decimal:
    result = lenient_decimal(value)
    return result if result is not None else Decimal("0")


def _decimal_to_json(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


ApiDateTime = Annotated[datetime, BeforeValidator(lenient_datetime)]
OptionalApiDateTime = Annotated[Optional[datetime], BeforeValidator(optional_datetime)]

# Required money amount: number or numeric string; anything else fails decoding.
ApiDecimal = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(_decimal_to_json, return_type=float, when_used="json"),
]
# Optional money amount: malformed values decode as None.
LenientDecimal = Annotated[
    Optional[Decimal],
    BeforeValidator(lenient_decimal),
    PlainSerializer(_decimal_to_json, return_type=Optional[float], when_used="json"),
]
# Money amount that decodes malformed values as zero.
HistoryAmount = Annotated[
    Decimal,
    BeforeValidator(zero_on_error_decimal),
    PlainSerializer(_decimal_to_json, return_type=float, when_used="json"),
]


class APIModel(BaseModel):
    """Base for every payload exchanged with the API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self, exclude_none: bool = True) -> dict:
        """JSON-ready dict with camelCase keys"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)
