"""METAR XML decoder."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from avweather.convert import to_datetime, to_enum, to_float, to_int
from avweather.decoders.base import Decoder
from avweather.decoders.events import XmlStateMachine, run_xml
from avweather.exceptions import FieldConversionFailed
from avweather.models.common import FlightCategory, SkyCover
from avweather.models.metar import Metar, MetarType, QualityControlFlag, SkyCondition

logger = logging.getLogger(__name__)


def _text(field: str, text: str) -> str:
    return text


# wire element -> (Metar attribute, converter, lenient)
# Lenient fields keep None when the text does not convert.
_FIELDS: Dict[str, Tuple[str, Callable[[str, str], Any], bool]] = {
    'raw_text': ('raw_text', _text, False),
    'station_id': ('station_id', _text, False),
    'observation_time': ('observation_time', to_datetime, False),
    'latitude': ('latitude', to_float, False),
    'longitude': ('longitude', to_float, False),
    'temp_c': ('temperature', to_float, False),
    'dewpoint_c': ('dewpoint', to_float, False),
    'wind_dir_degrees': ('wind_direction', to_int, False),
    'wind_speed_kt': ('wind_speed', to_int, False),
    'wind_gust_kt': ('wind_gust', to_int, True),
    'visibility_statute_mi': ('visibility', to_float, False),
    'altim_in_hg': ('altimeter', to_float, False),
    'sea_level_pressure_mb': ('sea_level_pressure', to_float, True),
    'wx_string': ('wx_string', _text, False),
    'flight_category': ('flight_category', lambda f, t: to_enum(f, t, FlightCategory), False),
    'three_hr_pressure_tendency_mb': ('three_hour_pressure_tendency', to_float, True),
    'maxT_c': ('max_temp_past_six_hours', to_float, True),
    'minT_c': ('min_temp_past_six_hours', to_float, True),
    'maxT24hr_c': ('max_temp_past_twenty_four_hours', to_float, True),
    'minT24hr_c': ('min_temp_past_twenty_four_hours', to_float, True),
    'precip_in': ('precip_since_last_metar', to_float, True),
    'pcp3hr_in': ('precip_past_three_hours', to_float, True),
    'pcp6hr_in': ('precip_past_six_hours', to_float, True),
    'pcp24hr_in': ('precip_past_twenty_four_hours', to_float, True),
    'snow_in': ('snow_depth', to_float, True),
    'vert_vis_ft': ('vertical_visibility', to_int, True),
    'metar_type': ('metar_type', lambda f, t: to_enum(f, t, MetarType), False),
    'elevation_m': ('station_elevation', to_float, False),
    'elevation': ('station_elevation', to_float, False),
}


class _State(Enum):
    OUTSIDE = "outside"
    REPORT = "report"


class MetarStateMachine(XmlStateMachine):
    """
    Two-state machine building Metar records.

    One instance decodes one document; create a new one per call.
    """

    report_kind = "METAR"

    def __init__(self):
        super().__init__()
        self.state = _State.OUTSIDE
        self.reports: List[Metar] = []
        self._values: Dict[str, Any] = {}
        self._sky: List[SkyCondition] = []
        self._flags: List[QualityControlFlag] = []
        self._in_flags = False

    def element_start(self, name: str, attributes: Dict[str, str]) -> None:
        if name == 'METAR':
            self.state = _State.REPORT
            self._values = {}
            self._sky = []
            self._flags = []
            self._in_flags = False
            return

        if self.state is not _State.REPORT:
            return

        if name == 'sky_condition':
            layer = self._sky_condition(attributes)
            if layer is not None:
                self._sky.append(layer)
        elif name == 'quality_control_flags':
            self._in_flags = True

    def element_end(self, name: str) -> None:
        if name == 'METAR':
            self.reports.append(Metar(
                sky_condition=tuple(self._sky),
                quality_control_flags=tuple(self._flags),
                **self._values,
            ))
            self.state = _State.OUTSIDE
            return

        if self.state is not _State.REPORT:
            return

        if name == 'quality_control_flags':
            self._in_flags = False
        elif self._in_flags:
            self._quality_flag(name)
        elif name in _FIELDS:
            self._assign(name)

    def _assign(self, name: str) -> None:
        attribute, convert, lenient = _FIELDS[name]
        try:
            self._values[attribute] = convert(name, self.buffer)
        except FieldConversionFailed:
            if not lenient:
                raise
            logger.debug("Ignoring unparseable METAR %s: %r", name, self.buffer)

    def _quality_flag(self, name: str) -> None:
        if self.buffer.strip().upper() != 'TRUE':
            return
        try:
            self._flags.append(QualityControlFlag(name))
        except ValueError:
            logger.debug("Unknown METAR quality control flag: %s", name)

    @staticmethod
    def _sky_condition(attributes: Dict[str, str]) -> Optional[SkyCondition]:
        """Build a sky layer from attributes, None if it is malformed."""
        cover = attributes.get('sky_cover')
        if cover is None:
            return None
        if cover == 'CLR':
            return SkyCondition(SkyCover.CLR, 0)
        base = attributes.get('cloud_base_ft_agl')
        if base is None:
            logger.debug("Dropping sky condition %s without base", cover)
            return None
        try:
            return SkyCondition(
                to_enum('sky_cover', cover, SkyCover),
                to_int('cloud_base_ft_agl', base),
            )
        except FieldConversionFailed as e:
            logger.debug("Dropping malformed sky condition: %s", e)
            return None


class MetarDecoder(Decoder[Metar]):
    """
    Decode the AWC data server METAR XML response.

    Records are returned in document order. A zero result count raises
    InvalidStationQuery; any core field that fails to convert raises
    FieldConversionFailed. Supplementary numerics (gust, sea level pressure,
    min/max temperatures, precipitation, snow, vertical visibility) are
    lenient and stay None when the service sends something unparseable.

    Example:
        metars = MetarDecoder().decode(response.content, "text/xml")
        print(metars[0].station_id, metars[0].flight_category)
    """

    content_type = "text/xml"

    def _decode(self, data: bytes) -> List[Metar]:
        machine = MetarStateMachine()
        run_xml(data, machine)
        logger.debug("Decoded %d METAR reports", len(machine.reports))
        return machine.reports
