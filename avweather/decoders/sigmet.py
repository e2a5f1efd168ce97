"""SIGMET GeoJSON decoder."""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from avweather.convert import (
    EARLIEST,
    json_datetime,
    json_enum,
    json_float,
    json_int,
    json_str,
)
from avweather.decoders.base import Decoder
from avweather.exceptions import FieldConversionFailed, MalformedDocument
from avweather.models.sigmet import (
    Change,
    Geometry,
    GeometryKind,
    GeometryType,
    Hazard,
    InternationalProperties,
    ReportFamily,
    Sigmet,
    SigmetProperties,
    USProperties,
)

logger = logging.getLogger(__name__)

# Nesting depth of the numeric payload -> geometry kind
_KIND_BY_DEPTH = {
    1: GeometryKind.POINT,
    2: GeometryKind.LINE_STRING,
    3: GeometryKind.POLYGON,
}


def _common(props: Dict[str, Any]) -> Dict[str, Any]:
    """Fields shared by both report schemas."""
    return {
        'icao_id': json_str('icaoId', props.get('icaoId')),
        'hazard': json_enum('hazard', props.get('hazard'), Hazard),
        'valid_time_from': json_datetime('validTimeFrom', props.get('validTimeFrom')),
        'valid_time_to': json_datetime('validTimeTo', props.get('validTimeTo')),
    }


def decode_properties(props: Dict[str, Any]) -> SigmetProperties:
    """
    Decode a feature's properties into one of the two report schemas.

    The international schema is chosen when ``rawSigmet`` is non-empty,
    otherwise the US schema is used.

    Raises:
        FieldConversionFailed: If any present value has the wrong type or an
            unknown enum value
    """
    raw_sigmet = json_str('rawSigmet', props.get('rawSigmet'))
    if raw_sigmet:
        return InternationalProperties(
            raw_sigmet=raw_sigmet,
            fir_id=json_str('firId', props.get('firId')),
            fir_name=json_str('firName', props.get('firName')),
            series_id=json_str('seriesId', props.get('seriesId')),
            qualifier=json_str('qualifier', props.get('qualifier')),
            geometry_type=json_enum('geom', props.get('geom'), GeometryType),
            coords=json_str('coords', props.get('coords')),
            base=json_int('base', props.get('base')),
            top=json_int('top', props.get('top')),
            dir=json_str('dir', props.get('dir')),
            speed=json_str('speed', props.get('speed')),
            change=json_enum('chng', props.get('chng'), Change),
            **_common(props),
        )

    return USProperties(
        raw_air_sigmet=json_str('rawAirSigmet', props.get('rawAirSigmet')) or "",
        air_sigmet_type=json_str('airSigmetType', props.get('airSigmetType')),
        alpha_char=json_str('alphaChar', props.get('alphaChar')),
        severity=json_str('severity', props.get('severity')),
        altitude_low1=json_int('altitudeLow1', props.get('altitudeLow1')),
        altitude_low2=json_int('altitudeLow2', props.get('altitudeLow2')),
        altitude_hi1=json_int('altitudeHi1', props.get('altitudeHi1')),
        altitude_hi2=json_int('altitudeHi2', props.get('altitudeHi2')),
        **_common(props),
    )


def _depth(payload: Any) -> int:
    """
    Nesting depth of a numeric coordinate payload.

    A number has depth 0; a non-empty list whose items all share depth d has
    depth d + 1. Anything else is not a coordinate payload.
    """
    if isinstance(payload, bool):
        raise FieldConversionFailed('coordinates', payload, "not a number")
    if isinstance(payload, (int, float)):
        return 0
    if not isinstance(payload, list) or not payload:
        raise FieldConversionFailed('coordinates', payload, "expected a non-empty array")
    depths = {_depth(item) for item in payload}
    if len(depths) != 1:
        raise FieldConversionFailed('coordinates', payload, "mixed nesting depth")
    return depths.pop() + 1


def _pair(payload: List[Any]) -> Tuple[float, float]:
    if len(payload) != 2:
        raise FieldConversionFailed('coordinates', payload, "expected a coordinate pair")
    return json_float('coordinates', payload[0]), json_float('coordinates', payload[1])


def decode_geometry(geometry: Any) -> Optional[Geometry]:
    """
    Decode a GeoJSON geometry by the shape of its coordinates.

    The declared ``type`` is only used for a diagnostic when it disagrees
    with the structure; the nesting depth decides.
    """
    if geometry is None:
        return None
    if not isinstance(geometry, dict):
        raise FieldConversionFailed('geometry', geometry, "expected an object")

    payload = geometry.get('coordinates')
    kind = _KIND_BY_DEPTH.get(_depth(payload))
    if kind is None:
        raise FieldConversionFailed('coordinates', payload, "unsupported nesting depth")

    declared = geometry.get('type')
    if declared != kind.value:
        logger.debug("Geometry declared as %r decoded as %s", declared, kind.value)

    if kind is GeometryKind.POINT:
        coordinates = _pair(payload)
    elif kind is GeometryKind.LINE_STRING:
        coordinates = tuple(_pair(p) for p in payload)
    else:
        coordinates = tuple(tuple(_pair(p) for p in ring) for ring in payload)
    return Geometry(kind, coordinates)


def _feature_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise FieldConversionFailed('id', value, "expected a string or integer")
    return str(value)


class SigmetDecoder(Decoder[Sigmet]):
    """
    Decode the AWC SIGMET GeoJSON feature collection.

    The result is sorted by valid-from time, most recent first; reports
    without a valid-from time sort last.

    When the last feature is an international report, the first feature is
    dropped: the international service prepends a non-report feature to its
    responses. Keying this on the last feature is fragile if the service
    changes its feature order, but it is kept for compatibility.

    Example:
        sigmets = SigmetDecoder().decode(response.content, "application/json")
        for s in sigmets:
            print(s.report_family, s.hazard, s.text)
    """

    content_type = "application/json"

    def _decode(self, data: bytes) -> List[Sigmet]:
        try:
            document = json.loads(data)
        except ValueError as e:
            raise MalformedDocument(f"Failed to parse SIGMET JSON: {e}") from e

        sigmets = [self._feature(f) for f in self._features(document)]

        if sigmets and sigmets[-1].report_family is ReportFamily.INTERNATIONAL:
            dropped = sigmets.pop(0)
            logger.debug("Dropped leading feature %s", dropped.id)

        return sorted(sigmets, key=lambda s: s.valid_time_from or EARLIEST, reverse=True)

    @staticmethod
    def _features(document: Any) -> List[Any]:
        if not isinstance(document, dict):
            raise MalformedDocument("SIGMET document is not a JSON object")
        if document.get('type') != 'FeatureCollection':
            raise MalformedDocument(f"Expected a FeatureCollection, got {document.get('type')!r}")
        features = document.get('features')
        if not isinstance(features, list):
            raise MalformedDocument("FeatureCollection has no features array")
        return features

    @staticmethod
    def _feature(feature: Any) -> Sigmet:
        if not isinstance(feature, dict) or not isinstance(feature.get('properties'), dict):
            raise MalformedDocument("SIGMET feature has no properties object")
        return Sigmet(
            properties=decode_properties(feature['properties']),
            id=_feature_id(feature.get('id')),
            geometry=decode_geometry(feature.get('geometry')),
        )
