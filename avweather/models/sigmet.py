"""SIGMET data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from avweather.models.common import serialize

Pair = Tuple[float, float]


class ReportFamily(Enum):
    """Which of the two AWC SIGMET schemas a report uses."""

    INTERNATIONAL = "international"
    US = "us"


class Hazard(Enum):
    """SIGMET hazard codes, international and US."""

    ICE = "ICE"
    MTW = "MTW"
    TC = "TC"
    TS = "TS"
    TSGR = "TSGR"
    SS = "SS"
    DS = "DS"
    TURB = "TURB"
    LLWS = "LLWS"
    VA = "VA"
    RDOACT_CLD = "RDOACT CLD"

    # US specific
    CONVECTIVE = "CONVECTIVE"
    ICING = "ICING"
    IFR = "IFR"
    MTN_OBSCN = "MTN OBSCN"
    ASH = "ASH"


class Change(Enum):
    """Forecast intensity change."""

    INTSF = "INTSF"
    NC = "NC"
    WKN = "WKN"


class GeometryType(Enum):
    """Region shape decoded by the service (``geom``); UNK falls back to the FIR outline."""

    AREA = "AREA"
    LINE = "LINE"
    POINT = "POINT"
    UNKNOWN = "UNK"


class GeometryKind(Enum):
    """GeoJSON geometry type."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"


@dataclass(frozen=True)
class Geometry:
    """
    Advisory geometry.

    The shape of ``coordinates`` follows ``kind``:
    - POINT: a single ``(lon, lat)`` pair
    - LINE_STRING: a tuple of pairs
    - POLYGON: a tuple of rings, each a tuple of pairs
    """

    kind: GeometryKind
    coordinates: Union[Pair, Tuple[Pair, ...], Tuple[Tuple[Pair, ...], ...]]


@dataclass(frozen=True)
class InternationalProperties:
    """
    Properties of an international SIGMET.

    Longitudes greater than 180 occur when a SIGMET crosses the date line;
    they are kept as reported.
    """

    raw_sigmet: str
    icao_id: Optional[str] = None
    fir_id: Optional[str] = None
    fir_name: Optional[str] = None
    series_id: Optional[str] = None
    hazard: Optional[Hazard] = None
    valid_time_from: Optional[datetime] = None
    valid_time_to: Optional[datetime] = None
    qualifier: Optional[str] = None
    geometry_type: Optional[GeometryType] = None
    coords: Optional[str] = None
    base: Optional[int] = None
    top: Optional[int] = None
    dir: Optional[str] = None
    speed: Optional[str] = None
    change: Optional[Change] = None

    family = ReportFamily.INTERNATIONAL

    @property
    def raw_text(self) -> str:
        return self.raw_sigmet


@dataclass(frozen=True)
class USProperties:
    """Properties of a US AIRMET/SIGMET."""

    raw_air_sigmet: str
    icao_id: Optional[str] = None
    hazard: Optional[Hazard] = None
    valid_time_from: Optional[datetime] = None
    valid_time_to: Optional[datetime] = None
    air_sigmet_type: Optional[str] = None
    alpha_char: Optional[str] = None
    severity: Optional[str] = None
    altitude_low1: Optional[int] = None
    altitude_low2: Optional[int] = None
    altitude_hi1: Optional[int] = None
    altitude_hi2: Optional[int] = None

    family = ReportFamily.US

    @property
    def raw_text(self) -> str:
        return self.raw_air_sigmet

    @property
    def severity_value(self) -> Optional[int]:
        """Severity as an integer (0 for an outlook), None if not numeric."""
        if self.severity is None:
            return None
        try:
            return int(self.severity.strip())
        except ValueError:
            return None

    @property
    def is_outlook(self) -> bool:
        return self.severity_value == 0


SigmetProperties = Union[InternationalProperties, USProperties]


@dataclass(frozen=True)
class Sigmet:
    """
    One hazard advisory.

    ``properties`` holds exactly one of the two report schemas; use
    ``report_family`` to tell which.
    """

    properties: SigmetProperties
    id: Optional[str] = None
    geometry: Optional[Geometry] = None

    @property
    def report_family(self) -> ReportFamily:
        return self.properties.family

    @property
    def text(self) -> str:
        """The raw advisory text, whichever schema carries it."""
        return self.properties.raw_text

    @property
    def valid_time_from(self) -> Optional[datetime]:
        return self.properties.valid_time_from

    @property
    def valid_time_to(self) -> Optional[datetime]:
        return self.properties.valid_time_to

    @property
    def hazard(self) -> Optional[Hazard]:
        return self.properties.hazard

    def is_active(self, when: datetime) -> bool:
        """True if ``when`` is inside the validity window."""
        start, end = self.valid_time_from, self.valid_time_to
        if start is None or end is None:
            return False
        return start <= when <= end

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        data = serialize(self)
        data['report_family'] = self.report_family.value
        return data

    def __repr__(self) -> str:
        hazard = f" {self.hazard.value}" if self.hazard else ""
        return f"Sigmet({self.report_family.value} {self.id}{hazard})"
