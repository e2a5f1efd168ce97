"""Tests for the report collections."""

from datetime import datetime, timezone

import pandas as pd
import pytest

from avweather.collection import MetarCollection, SigmetCollection, TafCollection
from avweather.decoders import MetarDecoder, SigmetDecoder, TafDecoder
from avweather.models import (
    FlightCategory,
    Forecast,
    Hazard,
    InternationalProperties,
    Metar,
    Sigmet,
    SkyCondition,
    SkyCover,
    Taf,
    USProperties,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _make_metars():
    """Create test observations."""
    return [
        Metar(
            station_id="KFME",
            observation_time=utc(2020, 1, 20, 13, 48),
            flight_category=FlightCategory.VFR,
            sky_condition=(SkyCondition(SkyCover.CLR, 0),),
        ),
        Metar(
            station_id="KBWI",
            observation_time=utc(2020, 1, 20, 13, 54),
            flight_category=FlightCategory.IFR,
            sky_condition=(SkyCondition(SkyCover.OVC, 800),),
        ),
        Metar(
            station_id="KFME",
            observation_time=utc(2020, 1, 20, 13, 27),
            flight_category=FlightCategory.MVFR,
        ),
        Metar(
            station_id="KDCA",
            observation_time=utc(2020, 1, 20, 13, 52),
            flight_category=FlightCategory.LIFR,
        ),
        Metar(station_id="KADW"),
    ]


class TestMetarCollection:

    @pytest.fixture
    def metars(self):
        return MetarCollection(_make_metars())

    def test_for_station_case_insensitive(self, metars):
        result = metars.for_station("kfme")
        assert isinstance(result, MetarCollection)
        assert result.count() == 2

    def test_for_stations(self, metars):
        assert {m.station_id for m in metars.for_stations(["KBWI", "KDCA"])} == {"KBWI", "KDCA"}

    def test_by_category(self, metars):
        assert metars.by_category(FlightCategory.IFR).first().station_id == "KBWI"

    def test_worse_than(self, metars):
        result = metars.worse_than(FlightCategory.MVFR)
        assert {m.station_id for m in result} == {"KBWI", "KDCA"}

    def test_at_or_worse_than(self, metars):
        assert metars.at_or_worse_than(FlightCategory.MVFR).count() == 3

    def test_latest(self, metars):
        assert metars.latest().station_id == "KBWI"
        assert metars.for_station("KFME").latest().observation_time == utc(2020, 1, 20, 13, 48)

    def test_latest_empty(self):
        assert MetarCollection([]).latest() is None

    def test_between(self, metars):
        result = metars.between(utc(2020, 1, 20, 13, 45), utc(2020, 1, 20, 13, 52))
        assert [m.station_id for m in result] == ["KFME", "KDCA"]

    def test_chronological(self, metars):
        ordered = metars.chronological().all()
        assert ordered[0].station_id == "KADW"
        assert [m.observation_time.minute for m in ordered[1:]] == [27, 48, 52, 54]

    def test_chaining(self, metars):
        latest_bad = metars.at_or_worse_than(FlightCategory.IFR).chronological().last()
        assert latest_bad.station_id == "KBWI"

    def test_to_dataframe(self, metars):
        df = metars.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 5
        assert df.loc[0, 'flight_category'] == "VFR"
        assert df.loc[0, 'sky_condition'] == "CLR"
        assert df.loc[1, 'sky_condition'] == "OVC008"
        assert df.loc[1, 'ceiling'] == 800
        assert 'station_id' in df.columns

    def test_to_dataframe_empty(self):
        df = MetarCollection([]).to_dataframe()
        assert len(df) == 0
        assert 'station_id' in df.columns

    def test_from_decoder(self, read_asset):
        metars = MetarCollection(MetarDecoder().decode(read_asset('fme_metars.xml')))
        assert metars.for_station("KFME").latest().wind_direction == 330


class TestTafCollection:

    @pytest.fixture
    def tafs(self, read_asset):
        return TafCollection(TafDecoder().decode(read_asset('example_tafs.xml')))

    def test_latest(self, tafs):
        assert tafs.for_station("PHTO").latest().issue_time == utc(2022, 12, 7, 17, 41)

    def test_valid_at(self, tafs):
        assert tafs.valid_at(utc(2022, 12, 7, 14)).count() == 1
        assert tafs.valid_at(utc(2022, 12, 7, 19)).count() == 2
        assert tafs.valid_at(utc(2022, 12, 8, 18)).count() == 0

    def test_to_dataframe_one_row_per_period(self, tafs):
        df = tafs.to_dataframe()
        assert len(df) == 5
        first = df.iloc[0]
        assert first['station_id'] == "PHTO"
        assert first['wind_dir_degrees'] == 230
        assert first['sky_condition'] == "SCT025 BKN040"
        assert df.iloc[1]['change_indicator'] == "FM"

    def test_to_dataframe_taf_without_periods(self):
        df = TafCollection([Taf(station_id="PHTO")]).to_dataframe()
        assert len(df) == 1
        assert df.iloc[0]['station_id'] == "PHTO"

    def test_where(self):
        tafs = TafCollection([Taf(station_id="PHTO"), Taf(station_id="PHNL")])
        assert tafs.where(station_id="PHNL").count() == 1


class TestSigmetCollection:

    @pytest.fixture
    def sigmets(self, read_asset):
        international = SigmetDecoder().decode(read_asset('isigmets.json'))
        us = SigmetDecoder().decode(read_asset('sigmets.json'))
        return SigmetCollection(international + us)

    def test_families(self, sigmets):
        assert sigmets.international().count() == 2
        assert sigmets.us().count() == 2

    def test_by_hazard(self, sigmets):
        assert [s.id for s in sigmets.by_hazard(Hazard.VA)] == ["1274007"]

    def test_active_at(self, sigmets):
        active = sigmets.active_at(utc(2022, 12, 28, 15))
        assert {s.id for s in active} == {"1274007", "932777"}

    def test_for_fir(self, sigmets):
        assert [s.id for s in sigmets.for_fir("spim")] == ["1274007"]

    def test_to_dataframe(self, sigmets):
        df = sigmets.to_dataframe()
        assert len(df) == 4
        assert set(df['report_family']) == {"international", "us"}
        assert df.iloc[0]['geometry_kind'] == "Polygon"

    def test_manual_records(self):
        sigmets = SigmetCollection([
            Sigmet(InternationalProperties(raw_sigmet="A", hazard=Hazard.TS), id="a"),
            Sigmet(USProperties(raw_air_sigmet="B", hazard=Hazard.TS), id="b"),
        ])
        assert sigmets.by_hazard(Hazard.TS).us().first().id == "b"
