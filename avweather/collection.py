"""Queryable collections for decoded METAR, TAF and SIGMET reports."""

from dataclasses import fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd

from avweather.convert import EARLIEST
from avweather.queryable_collection import QueryableCollection
from avweather.models.common import FlightCategory, SkyCover
from avweather.models.metar import Metar
from avweather.models.taf import Forecast, Taf
from avweather.models.sigmet import Hazard, ReportFamily, Sigmet


def _scalar(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _layers(layers) -> Optional[str]:
    """Compact 'SCT025 BKN040' style summary of sky layers."""
    if not layers:
        return None
    parts = []
    for layer in layers:
        base = getattr(layer, 'base', None)
        if base is None:
            base = layer.cloud_base_ft_agl
        if layer.sky_cover in (SkyCover.CLR, SkyCover.SKC, SkyCover.CAVOK):
            parts.append(layer.sky_cover.value)
        else:
            parts.append(f"{layer.sky_cover.value}{base // 100:03d}")
    return " ".join(parts)


class MetarCollection(QueryableCollection[Metar]):
    """
    Queryable collection of METAR observations.

    Example:
        metars = MetarCollection(MetarDecoder().decode(body))
        latest = metars.for_station("KFME").latest()
        bad_wx = metars.worse_than(FlightCategory.MVFR).all()
    """

    def for_station(self, station_id: str) -> 'MetarCollection':
        """Reports from one station (case-insensitive)."""
        wanted = station_id.upper()
        return self.filter(lambda m: m.station_id.upper() == wanted)

    def for_stations(self, station_ids: List[str]) -> 'MetarCollection':
        """Reports from any of the given stations."""
        wanted = {s.upper() for s in station_ids}
        return self.filter(lambda m: m.station_id.upper() in wanted)

    def by_category(self, category: FlightCategory) -> 'MetarCollection':
        return self.filter(lambda m: m.flight_category == category)

    def worse_than(self, category: FlightCategory) -> 'MetarCollection':
        """
        Reports with a flight category strictly worse than ``category``.

        Reports without a category are excluded.
        """
        return self.filter(lambda m: m.flight_category is not None and m.flight_category < category)

    def at_or_worse_than(self, category: FlightCategory) -> 'MetarCollection':
        return self.filter(lambda m: m.flight_category is not None and m.flight_category <= category)

    def latest(self) -> Optional[Metar]:
        """Most recent report by observation time, or None when empty."""
        with_time = [m for m in self._items if m.observation_time is not None]
        if not with_time:
            return self.last()
        return max(with_time, key=lambda m: m.observation_time)

    def between(self, start: datetime, end: datetime) -> 'MetarCollection':
        """Reports observed within [start, end]."""
        return self.filter(
            lambda m: m.observation_time is not None and start <= m.observation_time <= end
        )

    def chronological(self) -> 'MetarCollection':
        """Oldest first; reports without an observation time come first."""
        return self.order_by(lambda m: m.observation_time or EARLIEST)

    def to_dataframe(self) -> pd.DataFrame:
        """
        One row per observation.

        Sky layers are summarised in a ``sky_condition`` string column and the
        quality control flags are joined with commas.
        """
        rows = []
        for metar in self._items:
            row: Dict[str, Any] = {}
            for f in fields(metar):
                value = getattr(metar, f.name)
                if f.name == 'sky_condition':
                    value = _layers(value)
                elif f.name == 'quality_control_flags':
                    value = ",".join(flag.value for flag in value) or None
                row[f.name] = _scalar(value)
            row['ceiling'] = metar.ceiling
            rows.append(row)
        return pd.DataFrame(rows, columns=_columns(Metar, ['ceiling']))


class TafCollection(QueryableCollection[Taf]):
    """
    Queryable collection of TAFs.

    Example:
        tafs = TafCollection(TafDecoder().decode(body))
        period = tafs.for_station("PHTO").latest().forecast_at(when)
    """

    def for_station(self, station_id: str) -> 'TafCollection':
        wanted = station_id.upper()
        return self.filter(lambda t: t.station_id.upper() == wanted)

    def latest(self) -> Optional[Taf]:
        """Most recently issued forecast, or None when empty."""
        with_time = [t for t in self._items if t.issue_time is not None]
        if not with_time:
            return self.first()
        return max(with_time, key=lambda t: t.issue_time)

    def valid_at(self, when: datetime) -> 'TafCollection':
        """Forecasts whose validity window contains ``when``."""
        return self.filter(
            lambda t: t.valid_time_from is not None and t.valid_time_to is not None
            and t.valid_time_from <= when < t.valid_time_to
        )

    def to_dataframe(self) -> pd.DataFrame:
        """
        One row per forecast period, prefixed with its TAF header fields.

        A TAF without periods still yields one row with empty period columns.
        """
        header_names = [f.name for f in fields(Taf) if f.name != 'forecast']
        period_names = [f.name for f in fields(Forecast)]
        rows = []
        for taf in self._items:
            header = {name: getattr(taf, name) for name in header_names}
            if not taf.forecast:
                rows.append(dict(header))
                continue
            for period in taf.forecast:
                row = dict(header)
                for name in period_names:
                    value = getattr(period, name)
                    if name == 'sky_condition':
                        value = _layers(value)
                    elif isinstance(value, tuple):
                        value = len(value) or None
                    row[name] = _scalar(value)
                rows.append(row)
        return pd.DataFrame(rows, columns=header_names + period_names)


class SigmetCollection(QueryableCollection[Sigmet]):
    """
    Queryable collection of SIGMETs from either service.

    Example:
        sigmets = SigmetCollection(SigmetDecoder().decode(body))
        ash = sigmets.by_hazard(Hazard.VA).active_at(now).all()
    """

    def international(self) -> 'SigmetCollection':
        return self.filter(lambda s: s.report_family is ReportFamily.INTERNATIONAL)

    def us(self) -> 'SigmetCollection':
        return self.filter(lambda s: s.report_family is ReportFamily.US)

    def by_hazard(self, hazard: Hazard) -> 'SigmetCollection':
        return self.filter(lambda s: s.hazard == hazard)

    def active_at(self, when: datetime) -> 'SigmetCollection':
        """Advisories whose validity window contains ``when``."""
        return self.filter(lambda s: s.is_active(when))

    def for_fir(self, fir_id: str) -> 'SigmetCollection':
        """International advisories for one flight information region."""
        wanted = fir_id.upper()
        return self.filter(
            lambda s: (getattr(s.properties, 'fir_id', None) or '').upper() == wanted
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per advisory with the fields common to both schemas."""
        columns = [
            'id', 'report_family', 'icao_id', 'hazard', 'valid_time_from',
            'valid_time_to', 'geometry_kind', 'text',
        ]
        rows = []
        for sigmet in self._items:
            rows.append({
                'id': sigmet.id,
                'report_family': sigmet.report_family.value,
                'icao_id': sigmet.properties.icao_id,
                'hazard': _scalar(sigmet.hazard),
                'valid_time_from': sigmet.valid_time_from,
                'valid_time_to': sigmet.valid_time_to,
                'geometry_kind': sigmet.geometry.kind.value if sigmet.geometry else None,
                'text': sigmet.text,
            })
        return pd.DataFrame(rows, columns=columns)


def _columns(record_type, extra: List[str]) -> List[str]:
    return [f.name for f in fields(record_type)] + extra
