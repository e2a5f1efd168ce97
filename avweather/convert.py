"""
Value conversion helpers shared by all decoders.

Every helper takes the wire name of the field along with the raw value so a
failure can be reported as ``FieldConversionFailed(field, raw_value)``.
Parsing is strict: no locale handling, no silent truncation, no defaults for
unknown enum values.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from dateutil.parser import isoparse

from avweather.exceptions import FieldConversionFailed

E = TypeVar('E', bound=Enum)

_INT_RE = re.compile(r'^[+-]?\d+$', re.ASCII)
_FLOAT_RE = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$', re.ASCII)

# Sort key stand-in for a missing timestamp.
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def to_int(field: str, text: str) -> int:
    """
    Convert element text to an integer.

    Args:
        field: Wire name of the field
        text: Accumulated element text

    Returns:
        Parsed integer

    Raises:
        FieldConversionFailed: If the text is not a plain integer literal
    """
    value = text.strip()
    if not _INT_RE.match(value):
        raise FieldConversionFailed(field, text)
    return int(value)


def to_float(field: str, text: str) -> float:
    """
    Convert element text to a float.

    Only decimal literals are accepted; ``nan``, ``inf`` and underscore
    separators that ``float()`` would otherwise allow are rejected.
    """
    value = text.strip()
    if not _FLOAT_RE.match(value):
        raise FieldConversionFailed(field, text)
    return float(value)


def to_enum(field: str, text: str, enum_type: Type[E]) -> E:
    """Convert element text to a member of ``enum_type`` by value."""
    try:
        return enum_type(text.strip())
    except ValueError:
        raise FieldConversionFailed(field, text, f"not a known {enum_type.__name__}") from None


def to_datetime(field: str, text: str) -> datetime:
    """
    Convert an ISO-8601 timestamp to a timezone-aware datetime.

    Timestamps without an offset are taken as UTC.
    """
    value = text.strip()
    if not value:
        raise FieldConversionFailed(field, text)
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError):
        raise FieldConversionFailed(field, text, "not an ISO-8601 timestamp") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# --- JSON scalar helpers ---

def json_str(field: str, value: Any) -> Optional[str]:
    """Return a JSON string value, ``None`` for null."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldConversionFailed(field, value, "expected a string")
    return value


def json_int(field: str, value: Any) -> Optional[int]:
    """
    Return a JSON number as an integer, ``None`` for null.

    Booleans are rejected and floats are accepted only when integral.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise FieldConversionFailed(field, value, "expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise FieldConversionFailed(field, value, "expected an integer")


def json_float(field: str, value: Any) -> float:
    """Return a JSON number as a float; null is not a number here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldConversionFailed(field, value, "expected a number")
    return float(value)


def json_enum(field: str, value: Any, enum_type: Type[E]) -> Optional[E]:
    """Return a JSON string converted to ``enum_type``, ``None`` for null."""
    text = json_str(field, value)
    if text is None:
        return None
    return to_enum(field, text, enum_type)


def json_datetime(field: str, value: Any) -> Optional[datetime]:
    """Return a JSON ISO-8601 string as a datetime, ``None`` for null."""
    text = json_str(field, value)
    if text is None:
        return None
    return to_datetime(field, text)
