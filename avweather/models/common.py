"""Value types shared by the METAR and TAF models."""

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class FlightCategory(Enum):
    """
    Flight category reported by the service for an observation.

    Members are declared worst to best, so LIFR < IFR < MVFR < VFR and
    collections can select everything at or below a threshold.
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"

    def _rank(self) -> int:
        return list(FlightCategory).index(self)

    def __lt__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self._rank() < other._rank()

    def __le__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self._rank() <= other._rank()


class SkyCover(Enum):
    """Sky cover reported for a cloud layer."""

    SKC = "SKC"
    CLR = "CLR"
    CAVOK = "CAVOK"
    FEW = "FEW"
    SCT = "SCT"
    BKN = "BKN"
    OVC = "OVC"
    OVX = "OVX"  # vertical visibility reported


def serialize(value: Any) -> Any:
    """
    Convert a record (or any nested value) into JSON-friendly primitives.

    Enums become their value, datetimes ISO strings, tuples lists and
    dataclasses dicts keyed by field name.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value
