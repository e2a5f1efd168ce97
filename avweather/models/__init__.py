"""Report record families produced by the decoders."""

from avweather.models.common import FlightCategory, SkyCover
from avweather.models.metar import Metar, MetarType, QualityControlFlag, SkyCondition
from avweather.models.taf import (
    Taf,
    Forecast,
    ChangeIndicator,
    CloudType,
    TafSkyCondition,
    TurbulenceCondition,
    IcingCondition,
    Temperature,
)
from avweather.models.sigmet import (
    Sigmet,
    InternationalProperties,
    USProperties,
    Geometry,
    GeometryKind,
    GeometryType,
    Hazard,
    Change,
    ReportFamily,
)

__all__ = [
    'FlightCategory',
    'SkyCover',
    'Metar',
    'MetarType',
    'QualityControlFlag',
    'SkyCondition',
    'Taf',
    'Forecast',
    'ChangeIndicator',
    'CloudType',
    'TafSkyCondition',
    'TurbulenceCondition',
    'IcingCondition',
    'Temperature',
    'Sigmet',
    'InternationalProperties',
    'USProperties',
    'Geometry',
    'GeometryKind',
    'GeometryType',
    'Hazard',
    'Change',
    'ReportFamily',
]
