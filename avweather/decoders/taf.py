"""TAF XML decoder."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from avweather.convert import EARLIEST, to_datetime, to_enum, to_float, to_int
from avweather.decoders.base import Decoder
from avweather.decoders.events import XmlStateMachine, run_xml
from avweather.exceptions import FieldConversionFailed, ServiceError
from avweather.models.common import SkyCover
from avweather.models.taf import (
    ChangeIndicator,
    CloudType,
    Forecast,
    IcingCondition,
    Taf,
    TafSkyCondition,
    Temperature,
    TurbulenceCondition,
)

logger = logging.getLogger(__name__)

Converter = Callable[[str, str], Any]


def _text(field: str, text: str) -> str:
    return text


# wire element -> (attribute, converter); the wire name is the attribute name
_TAF_FIELDS: Dict[str, Tuple[str, Converter]] = {
    'raw_text': ('raw_text', _text),
    'station_id': ('station_id', _text),
    'issue_time': ('issue_time', to_datetime),
    'bulletin_time': ('bulletin_time', to_datetime),
    'valid_time_from': ('valid_time_from', to_datetime),
    'valid_time_to': ('valid_time_to', to_datetime),
    'remarks': ('remarks', _text),
    'latitude': ('latitude', to_float),
    'longitude': ('longitude', to_float),
    'elevation_m': ('elevation_m', to_float),
}

_FORECAST_FIELDS: Dict[str, Converter] = {
    'fcst_time_from': to_datetime,
    'fcst_time_to': to_datetime,
    'change_indicator': lambda f, t: to_enum(f, t, ChangeIndicator),
    'time_becoming': to_datetime,
    'probability': to_int,
    'wind_dir_degrees': to_int,
    'wind_speed_kt': to_int,
    'wind_gust_kt': to_int,
    'wind_shear_hgt_ft_agl': to_int,
    'wind_shear_dir_degrees': to_int,
    'wind_shear_speed_kt': to_int,
    'visibility_statute_mi': to_float,
    'altim_in_hg': to_float,
    'vert_vis_ft': to_float,
    'wx_string': _text,
    'not_decoded': _text,
}

_TEMPERATURE_FIELDS: Dict[str, Converter] = {
    'valid_time': to_datetime,
    'sfc_temp_c': to_float,
    'max_temp_c': to_float,
    'min_temp_c': to_float,
}


class _State(Enum):
    OUTSIDE = "outside"
    REPORT = "report"
    FORECAST = "forecast"


class TafStateMachine(XmlStateMachine):
    """
    Three-state machine building Taf records and their forecast periods.

    Turbulence, icing and temperature groups are decoded when their layout is
    recognised; anything else is logged and skipped without aborting.
    """

    report_kind = "TAF"

    def __init__(self):
        super().__init__()
        self.state = _State.OUTSIDE
        self.reports: List[Taf] = []
        self._taf: Dict[str, Any] = {}
        self._periods: List[Forecast] = []
        self._period: Dict[str, Any] = {}
        self._sky: List[TafSkyCondition] = []
        self._turbulence: List[TurbulenceCondition] = []
        self._icing: List[IcingCondition] = []
        self._temperatures: List[Temperature] = []
        self._temperature: Optional[Dict[str, Any]] = None
        self._temperature_ok = True

    # --- events ---

    def element_start(self, name: str, attributes: Dict[str, str]) -> None:
        if name == 'TAF':
            self.state = _State.REPORT
            self._taf = {}
            self._periods = []
        elif name == 'forecast' and self.state is _State.REPORT:
            self.state = _State.FORECAST
            self._period = {}
            self._sky = []
            self._turbulence = []
            self._icing = []
            self._temperatures = []
            self._temperature = None
        elif self.state is _State.FORECAST:
            if name == 'sky_condition':
                layer = self._sky_condition(attributes)
                if layer is not None:
                    self._sky.append(layer)
            elif name == 'turbulence_condition':
                self._condition(name, attributes, 'turbulence', TurbulenceCondition, self._turbulence)
            elif name == 'icing_condition':
                self._condition(name, attributes, 'icing', IcingCondition, self._icing)
            elif name == 'temperature':
                self._temperature = {}
                self._temperature_ok = True

    def element_end(self, name: str) -> None:
        if name == 'error':
            message = self.buffer.strip()
            if message:
                raise ServiceError(message)
        elif name == 'warning':
            message = self.buffer.strip()
            if message:
                logger.warning("TAF service warning: %s", message)
        elif name == 'TAF':
            self.reports.append(Taf(forecast=tuple(self._periods), **self._taf))
            self.state = _State.OUTSIDE
        elif name == 'forecast' and self.state is _State.FORECAST:
            self._periods.append(Forecast(
                sky_condition=tuple(self._sky),
                turbulence_condition=tuple(self._turbulence),
                icing_condition=tuple(self._icing),
                temperature=tuple(self._temperatures),
                **self._period,
            ))
            self.state = _State.REPORT
        elif self.state is _State.REPORT:
            if name in _TAF_FIELDS:
                attribute, convert = _TAF_FIELDS[name]
                self._taf[attribute] = convert(name, self.buffer)
        elif self.state is _State.FORECAST:
            if self._temperature is not None:
                self._temperature_end(name)
            elif name in _FORECAST_FIELDS:
                self._period[name] = _FORECAST_FIELDS[name](name, self.buffer)

    # --- nested groups ---

    @staticmethod
    def _sky_condition(attributes: Dict[str, str]) -> Optional[TafSkyCondition]:
        cover = attributes.get('sky_cover')
        if cover is None:
            return None
        if cover == 'CLR':
            return TafSkyCondition(SkyCover.CLR, 0)
        base = attributes.get('cloud_base_ft_agl')
        if base is None:
            logger.debug("Dropping TAF sky condition %s without base", cover)
            return None
        try:
            sky_cover = to_enum('sky_cover', cover, SkyCover)
            cloud_base = to_int('cloud_base_ft_agl', base)
        except FieldConversionFailed as e:
            logger.debug("Dropping malformed TAF sky condition: %s", e)
            return None
        cloud_type = None
        if 'cloud_type' in attributes:
            try:
                cloud_type = CloudType(attributes['cloud_type'])
            except ValueError:
                logger.debug("Ignoring unknown cloud type %r", attributes['cloud_type'])
        return TafSkyCondition(sky_cover, cloud_base, cloud_type)

    @staticmethod
    def _condition(name: str, attributes: Dict[str, str], prefix: str, cls, target: list) -> None:
        """Decode a turbulence or icing layer from its attributes."""
        intensity_key = f'{prefix}_intensity'
        if intensity_key not in attributes:
            logger.warning("Skipping %s with unrecognised layout: %s", name, attributes)
            return
        values = {}
        try:
            for key in (intensity_key, f'{prefix}_min_alt_ft_agl', f'{prefix}_max_alt_ft_agl'):
                if key in attributes:
                    values[key] = to_int(key, attributes[key])
        except FieldConversionFailed as e:
            logger.warning("Skipping %s: %s", name, e)
            return
        target.append(cls(**values))

    def _temperature_end(self, name: str) -> None:
        if name == 'temperature':
            values, self._temperature = self._temperature, None
            if not self._temperature_ok:
                return
            if 'valid_time' not in values:
                logger.warning("Skipping temperature group without valid_time")
                return
            self._temperatures.append(Temperature(**values))
        elif name in _TEMPERATURE_FIELDS:
            try:
                self._temperature[name] = _TEMPERATURE_FIELDS[name](name, self.buffer)
            except FieldConversionFailed as e:
                logger.warning("Skipping temperature group: %s", e)
                self._temperature_ok = False


class TafDecoder(Decoder[Taf]):
    """
    Decode the AWC data server TAF XML response.

    Forecast periods keep document order. The returned reports are sorted by
    issue time, most recent first. Every field is mandatory-if-present: a
    value that fails to convert aborts the decode.

    Example:
        tafs = TafDecoder().decode(response.content, "text/xml")
        for period in tafs[0].forecast:
            print(period.change_indicator, period.wind_speed_kt)
    """

    content_type = "text/xml"

    def _decode(self, data: bytes) -> List[Taf]:
        machine = TafStateMachine()
        run_xml(data, machine)
        logger.debug("Decoded %d TAF reports", len(machine.reports))
        return sorted(machine.reports, key=lambda t: t.issue_time or EARLIEST, reverse=True)
