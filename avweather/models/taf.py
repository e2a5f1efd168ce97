"""TAF data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from avweather.models.common import SkyCover, serialize


class ChangeIndicator(Enum):
    """Forecast change group type."""

    TEMPO = "TEMPO"
    BECMG = "BECMG"
    FM = "FM"
    PROB = "PROB"


class CloudType(Enum):
    """Convective cloud type attached to a sky condition."""

    CB = "CB"
    TCU = "TCU"
    CU = "CU"


@dataclass(frozen=True)
class TafSkyCondition:
    """Forecast cloud layer. When ``sky_cover`` is CLR the base is 0."""

    sky_cover: SkyCover
    cloud_base_ft_agl: int
    cloud_type: Optional[CloudType] = None


@dataclass(frozen=True)
class TurbulenceCondition:
    """Turbulence layer; intensity is a WMO 306 code 0-9."""

    turbulence_intensity: int
    turbulence_min_alt_ft_agl: Optional[int] = None
    turbulence_max_alt_ft_agl: Optional[int] = None


@dataclass(frozen=True)
class IcingCondition:
    """Icing layer; intensity is a WMO 306 code 0-9."""

    icing_intensity: int
    icing_min_alt_ft_agl: Optional[int] = None
    icing_max_alt_ft_agl: Optional[int] = None


@dataclass(frozen=True)
class Temperature:
    """Forecast temperature group."""

    valid_time: datetime
    sfc_temp_c: Optional[float] = None
    max_temp_c: Optional[float] = None
    min_temp_c: Optional[float] = None


@dataclass(frozen=True)
class Forecast:
    """
    One forecast period within a TAF.

    Every weather field is optional; ``None`` means "not forecast", which is
    distinct from a forecast value of zero (e.g. calm wind).
    """

    fcst_time_from: Optional[datetime] = None
    fcst_time_to: Optional[datetime] = None
    change_indicator: Optional[ChangeIndicator] = None
    time_becoming: Optional[datetime] = None
    probability: Optional[int] = None
    wind_dir_degrees: Optional[int] = None
    wind_speed_kt: Optional[int] = None
    wind_gust_kt: Optional[int] = None
    wind_shear_hgt_ft_agl: Optional[int] = None
    wind_shear_dir_degrees: Optional[int] = None
    wind_shear_speed_kt: Optional[int] = None
    visibility_statute_mi: Optional[float] = None
    altim_in_hg: Optional[float] = None
    vert_vis_ft: Optional[float] = None
    wx_string: Optional[str] = None
    not_decoded: Optional[str] = None
    sky_condition: Tuple[TafSkyCondition, ...] = ()
    turbulence_condition: Tuple[TurbulenceCondition, ...] = ()
    icing_condition: Tuple[IcingCondition, ...] = ()
    temperature: Tuple[Temperature, ...] = ()

    def covers(self, when: datetime) -> bool:
        """True if ``when`` falls in [fcst_time_from, fcst_time_to)."""
        if self.fcst_time_from is None or self.fcst_time_to is None:
            return False
        return self.fcst_time_from <= when < self.fcst_time_to


@dataclass(frozen=True)
class Taf:
    """
    One terminal aerodrome forecast.

    Attributes:
        raw_text: The raw TAF
        station_id: Four character station identifier
        issue_time: When the forecast was prepared
        bulletin_time: Time from the WMO header
        valid_time_from: Start of the validity window
        valid_time_to: End of the validity window
        remarks: Free text remarks
        latitude: Station latitude (decimal degrees)
        longitude: Station longitude (decimal degrees)
        elevation_m: Station elevation (m)
        forecast: Forecast periods in document order
    """

    raw_text: str = ""
    station_id: str = ""
    issue_time: Optional[datetime] = None
    bulletin_time: Optional[datetime] = None
    valid_time_from: Optional[datetime] = None
    valid_time_to: Optional[datetime] = None
    remarks: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation_m: Optional[float] = None
    forecast: Tuple[Forecast, ...] = ()

    def forecast_at(self, when: datetime) -> Optional[Forecast]:
        """
        Return the last period covering ``when``.

        Later periods in document order amend earlier ones, so the last match
        wins.
        """
        match = None
        for period in self.forecast:
            if period.covers(when):
                match = period
        return match

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return serialize(self)

    def __repr__(self) -> str:
        return f"Taf({self.station_id} periods={len(self.forecast)})"
