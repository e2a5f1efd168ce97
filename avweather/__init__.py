"""
Aviation weather report decoding.

Provides:
- MetarDecoder / TafDecoder: AWC data server XML to Metar / Taf records
- SigmetDecoder: AWC SIGMET GeoJSON to Sigmet records
- MetarCollection, TafCollection, SigmetCollection: queryable report lists
- AWCSource: fetch and decode live data from aviationweather.gov
- AvWeatherError and its subclasses for every failure mode

Example:
    from avweather import MetarDecoder, MetarCollection, FlightCategory

    metars = MetarCollection(MetarDecoder().decode(xml_bytes, "text/xml"))
    print(metars.worse_than(FlightCategory.VFR).count())
"""

from avweather.exceptions import (
    AvWeatherError,
    InvalidStationQuery,
    MalformedDocument,
    FieldConversionFailed,
    UnsupportedContentType,
    ServiceError,
)
from avweather.models import (
    FlightCategory,
    SkyCover,
    Metar,
    MetarType,
    QualityControlFlag,
    SkyCondition,
    Taf,
    Forecast,
    ChangeIndicator,
    TafSkyCondition,
    Sigmet,
    InternationalProperties,
    USProperties,
    Geometry,
    GeometryKind,
    Hazard,
    ReportFamily,
)
from avweather.decoders import MetarDecoder, TafDecoder, SigmetDecoder
from avweather.collection import MetarCollection, TafCollection, SigmetCollection
from avweather.sources import AWCSource

__version__ = '0.1.0'

__all__ = [
    'AvWeatherError',
    'InvalidStationQuery',
    'MalformedDocument',
    'FieldConversionFailed',
    'UnsupportedContentType',
    'ServiceError',
    'FlightCategory',
    'SkyCover',
    'Metar',
    'MetarType',
    'QualityControlFlag',
    'SkyCondition',
    'Taf',
    'Forecast',
    'ChangeIndicator',
    'TafSkyCondition',
    'Sigmet',
    'InternationalProperties',
    'USProperties',
    'Geometry',
    'GeometryKind',
    'Hazard',
    'ReportFamily',
    'MetarDecoder',
    'TafDecoder',
    'SigmetDecoder',
    'MetarCollection',
    'TafCollection',
    'SigmetCollection',
    'AWCSource',
]
