"""METAR data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from avweather.models.common import FlightCategory, SkyCover, serialize


class MetarType(Enum):
    """Routine observation or special report."""

    METAR = "METAR"
    SPECI = "SPECI"


class QualityControlFlag(Enum):
    """
    Station quality control flags.

    Values are the child element names used inside ``quality_control_flags``.
    """

    CORRECTED = "corrected"
    AUTO = "auto"
    AUTO_STATION = "auto_station"
    MAINTENANCE_INDICATOR = "maintenance_indicator_on"
    NO_SIGNAL = "no_signal"
    LIGHTNING_SENSOR_OFF = "lightning_sensor_off"
    FREEZING_RAIN_SENSOR_OFF = "freezing_rain_sensor_off"
    PRESENT_WEATHER_SENSOR_OFF = "present_weather_sensor_off"


@dataclass(frozen=True)
class SkyCondition:
    """One cloud layer. When ``sky_cover`` is CLR, ``base`` is always 0."""

    sky_cover: SkyCover
    base: int


@dataclass(frozen=True)
class Metar:
    """
    One surface observation as returned by the AWC data server.

    Optional fields are ``None`` when the element was not in the response.

    Attributes:
        raw_text: The raw METAR
        station_id: Four character station identifier
        observation_time: Time the observation was made
        latitude: Station latitude (decimal degrees)
        longitude: Station longitude (decimal degrees)
        temperature: Air temperature (C)
        dewpoint: Dewpoint temperature (C)
        wind_direction: Direction the wind blows from (degrees, 0 = variable)
        wind_speed: Wind speed (knots); 0 with direction 0 is calm
        wind_gust: Wind gust (knots)
        visibility: Horizontal visibility (statute miles)
        altimeter: Altimeter setting (inHg)
        sea_level_pressure: Sea level pressure (mb)
        quality_control_flags: Flags describing the reporting station
        sky_condition: Up to four cloud layers
        flight_category: VFR/MVFR/IFR/LIFR
        three_hour_pressure_tendency: Pressure change over 3 hours (mb)
        max_temp_past_six_hours: Max air temperature past 6 hours (C)
        min_temp_past_six_hours: Min air temperature past 6 hours (C)
        max_temp_past_twenty_four_hours: Max air temperature past 24 hours (C)
        min_temp_past_twenty_four_hours: Min air temperature past 24 hours (C)
        precip_since_last_metar: Liquid precipitation since last METAR (in)
        precip_past_three_hours: Liquid precipitation past 3 hours (in)
        precip_past_six_hours: Liquid precipitation past 6 hours (in)
        precip_past_twenty_four_hours: Liquid precipitation past 24 hours (in)
        snow_depth: Snow depth on the ground (in)
        vertical_visibility: Vertical visibility (ft)
        wx_string: Present weather string
        metar_type: METAR or SPECI
        station_elevation: Station elevation (m)
    """

    raw_text: str = ""
    station_id: str = ""
    observation_time: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    temperature: Optional[float] = None
    dewpoint: Optional[float] = None
    wind_direction: Optional[int] = None
    wind_speed: Optional[int] = None
    wind_gust: Optional[int] = None
    visibility: Optional[float] = None
    altimeter: Optional[float] = None
    sea_level_pressure: Optional[float] = None
    quality_control_flags: Tuple[QualityControlFlag, ...] = ()
    sky_condition: Tuple[SkyCondition, ...] = ()
    flight_category: Optional[FlightCategory] = None
    three_hour_pressure_tendency: Optional[float] = None
    max_temp_past_six_hours: Optional[float] = None
    min_temp_past_six_hours: Optional[float] = None
    max_temp_past_twenty_four_hours: Optional[float] = None
    min_temp_past_twenty_four_hours: Optional[float] = None
    precip_since_last_metar: Optional[float] = None
    precip_past_three_hours: Optional[float] = None
    precip_past_six_hours: Optional[float] = None
    precip_past_twenty_four_hours: Optional[float] = None
    snow_depth: Optional[float] = None
    vertical_visibility: Optional[int] = None
    wx_string: Optional[str] = None
    metar_type: Optional[MetarType] = None
    station_elevation: Optional[float] = None

    @property
    def ceiling(self) -> Optional[int]:
        """Lowest BKN, OVC or OVX layer base in feet, or None."""
        bases = [
            layer.base for layer in self.sky_condition
            if layer.sky_cover in (SkyCover.BKN, SkyCover.OVC, SkyCover.OVX)
        ]
        return min(bases) if bases else None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return serialize(self)

    def __repr__(self) -> str:
        cat = f" {self.flight_category.value}" if self.flight_category else ""
        when = f" {self.observation_time:%d%H%MZ}" if self.observation_time else ""
        return f"Metar({self.station_id}{when}{cat})"
