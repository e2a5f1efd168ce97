"""Tests for the report records."""

import dataclasses
from datetime import datetime, timezone

import pytest

from avweather.models import (
    FlightCategory,
    Forecast,
    Geometry,
    GeometryKind,
    Hazard,
    InternationalProperties,
    Metar,
    QualityControlFlag,
    ReportFamily,
    Sigmet,
    SkyCondition,
    SkyCover,
    Taf,
    USProperties,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestFlightCategory:

    def test_ordering(self):
        assert FlightCategory.LIFR < FlightCategory.IFR < FlightCategory.MVFR < FlightCategory.VFR
        assert FlightCategory.IFR <= FlightCategory.IFR
        assert FlightCategory.VFR > FlightCategory.MVFR
        assert FlightCategory.MVFR >= FlightCategory.MVFR
        assert not FlightCategory.IFR > FlightCategory.MVFR

    def test_sorting(self):
        cats = [FlightCategory.VFR, FlightCategory.LIFR, FlightCategory.MVFR]
        assert sorted(cats) == [FlightCategory.LIFR, FlightCategory.MVFR, FlightCategory.VFR]


class TestMetar:

    def test_defaults(self):
        m = Metar()
        assert m.raw_text == ""
        assert m.station_id == ""
        assert m.observation_time is None
        assert m.sky_condition == ()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Metar().station_id = "KFME"

    def test_ceiling(self):
        m = Metar(sky_condition=(
            SkyCondition(SkyCover.FEW, 800),
            SkyCondition(SkyCover.OVC, 2500),
            SkyCondition(SkyCover.BKN, 1200),
        ))
        assert m.ceiling == 1200

    def test_to_dict(self):
        m = Metar(
            station_id="KFME",
            observation_time=utc(2020, 1, 20, 13, 48),
            flight_category=FlightCategory.VFR,
            quality_control_flags=(QualityControlFlag.AUTO,),
            sky_condition=(SkyCondition(SkyCover.CLR, 0),),
        )
        d = m.to_dict()
        assert d['station_id'] == "KFME"
        assert d['observation_time'] == "2020-01-20T13:48:00+00:00"
        assert d['flight_category'] == "VFR"
        assert d['quality_control_flags'] == ["auto"]
        assert d['sky_condition'] == [{'sky_cover': "CLR", 'base': 0}]

    def test_repr(self):
        m = Metar(station_id="KFME", observation_time=utc(2020, 1, 20, 13, 48),
                  flight_category=FlightCategory.VFR)
        assert repr(m) == "Metar(KFME 201348Z VFR)"


class TestTaf:

    def _taf(self):
        return Taf(
            station_id="PHTO",
            forecast=(
                Forecast(fcst_time_from=utc(2022, 12, 7, 18), fcst_time_to=utc(2022, 12, 8, 18),
                         wind_speed_kt=5),
                Forecast(fcst_time_from=utc(2022, 12, 7, 20), fcst_time_to=utc(2022, 12, 7, 23),
                         wind_speed_kt=15),
            ),
        )

    def test_forecast_at_last_match_wins(self):
        assert self._taf().forecast_at(utc(2022, 12, 7, 21)).wind_speed_kt == 15

    def test_forecast_at_before_amendment(self):
        assert self._taf().forecast_at(utc(2022, 12, 7, 19)).wind_speed_kt == 5

    def test_forecast_at_outside_window(self):
        assert self._taf().forecast_at(utc(2022, 12, 9)) is None

    def test_period_without_times_never_covers(self):
        assert not Forecast().covers(utc(2022, 12, 7, 19))

    def test_to_dict_nests_periods(self):
        d = self._taf().to_dict()
        assert len(d['forecast']) == 2
        assert d['forecast'][0]['fcst_time_from'] == "2022-12-07T18:00:00+00:00"


class TestSigmet:

    def test_international_accessors(self):
        s = Sigmet(
            properties=InternationalProperties(
                raw_sigmet="WVPR31 SPJC 280930",
                hazard=Hazard.VA,
                valid_time_from=utc(2022, 12, 28, 9, 30),
                valid_time_to=utc(2022, 12, 28, 15, 30),
            ),
            id="1274007",
        )
        assert s.report_family is ReportFamily.INTERNATIONAL
        assert s.text == "WVPR31 SPJC 280930"
        assert s.hazard == Hazard.VA
        assert s.is_active(utc(2022, 12, 28, 12))
        assert s.is_active(utc(2022, 12, 28, 15, 30))
        assert not s.is_active(utc(2022, 12, 28, 16))

    def test_us_accessors(self):
        s = Sigmet(properties=USProperties(raw_air_sigmet="SIGMET OSCAR 1", severity="0"))
        assert s.report_family is ReportFamily.US
        assert s.text == "SIGMET OSCAR 1"
        assert s.properties.is_outlook
        assert not s.is_active(utc(2022, 12, 28, 12))

    def test_non_numeric_severity(self):
        assert USProperties(raw_air_sigmet="", severity="MOD").severity_value is None

    def test_to_dict(self):
        s = Sigmet(
            properties=USProperties(raw_air_sigmet="X", hazard=Hazard.MTN_OBSCN),
            id="1",
            geometry=Geometry(GeometryKind.POINT, (-111.9, 40.8)),
        )
        d = s.to_dict()
        assert d['report_family'] == "us"
        assert d['properties']['hazard'] == "MTN OBSCN"
        assert d['geometry'] == {'kind': "Point", 'coordinates': [-111.9, 40.8]}

    def test_repr(self):
        s = Sigmet(properties=USProperties(raw_air_sigmet="", hazard=Hazard.TURB), id="932777")
        assert repr(s) == "Sigmet(us 932777 TURB)"
