"""Tests for AWCSource: aviationweather.gov fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from avweather.exceptions import InvalidStationQuery, ServiceError, UnsupportedContentType
from avweather.models import ReportFamily
from avweather.sources.awc import AWCSource


class MockResponse:
    """Minimal mock for requests.Response."""

    def __init__(self, content=b"", status_code=200, content_type="text/xml"):
        self.content = content
        self.status_code = status_code
        self.headers = {"Content-Type": content_type} if content_type else {}


def make_session(content=b"", status_code=200, content_type="text/xml"):
    """Create a mock session returning a fixed response."""
    session = MagicMock()
    session.headers = {}
    session.get.return_value = MockResponse(content, status_code, content_type)
    return session


class TestFetchMetars:

    def test_decodes_response(self, read_asset):
        session = make_session(read_asset('fme_metars.xml'), content_type="text/xml;charset=UTF-8")
        source = AWCSource(session=session)

        metars = source.fetch_metars(["KFME"])

        assert len(metars) == 2
        assert metars[0].station_id == "KFME"

    def test_request_parameters(self, read_asset):
        session = make_session(read_asset('fme_metars.xml'))
        source = AWCSource(session=session)

        source.fetch_metars([" kfme", "KBWI", ""], hours_before_now=3, most_recent=True)

        args, kwargs = session.get.call_args
        assert args[0] == "https://aviationweather.gov/adds/dataserver_current/httpparam"
        assert kwargs['params'] == {
            "dataSource": "metars",
            "requestType": "retrieve",
            "format": "xml",
            "hoursBeforeNow": "3",
            "stationString": "KFME,KBWI",
            "mostRecent": "true",
        }
        assert kwargs['timeout'] == AWCSource.DEFAULT_TIMEOUT

    def test_single_station_string(self, read_asset):
        session = make_session(read_asset('fme_metars.xml'))
        AWCSource(session=session).fetch_metars("KFME")
        assert session.get.call_args[1]['params']['stationString'] == "KFME"

    def test_invalid_station(self, read_asset):
        session = make_session(read_asset('bad_id.xml'))
        with pytest.raises(InvalidStationQuery):
            AWCSource(session=session).fetch_metars(["XXXX"])


class TestFetchTafs:

    def test_request_parameters(self, read_asset):
        session = make_session(read_asset('example_tafs.xml'))
        source = AWCSource(session=session, timeout=5)

        tafs = source.fetch_tafs(["PHTO"], most_recent=True)

        assert tafs[0].station_id == "PHTO"
        params = session.get.call_args[1]['params']
        assert params["dataSource"] == "tafs"
        assert params["hoursBeforeNow"] == "12"
        assert params["mostRecentForEachStation"] == "constraint"
        assert "mostRecent" not in params
        assert session.get.call_args[1]['timeout'] == 5


class TestFetchSigmets:

    def test_international_endpoint(self, read_asset):
        session = make_session(read_asset('isigmets.json'), content_type="application/json")
        sigmets = AWCSource(session=session).fetch_sigmets()

        assert session.get.call_args[0][0] == "https://aviationweather.gov/cgi-bin/json/IsigmetJSON.php"
        assert [s.id for s in sigmets] == ["1274007", "1274010"]

    def test_us_endpoint(self, read_asset):
        session = make_session(read_asset('sigmets.json'), content_type="application/json")
        sigmets = AWCSource(session=session).fetch_sigmets(ReportFamily.US)

        assert session.get.call_args[0][0] == "https://aviationweather.gov/cgi-bin/json/SigmetJSON.php"
        assert len(sigmets) == 2

    def test_base_url_override(self, read_asset):
        session = make_session(read_asset('sigmets.json'), content_type="application/json")
        AWCSource(session=session, base_url="http://localhost:8080/").fetch_sigmets(ReportFamily.US)
        assert session.get.call_args[0][0] == "http://localhost:8080/cgi-bin/json/SigmetJSON.php"


class TestErrors:

    def test_http_error_status(self):
        session = make_session(b"Service Unavailable", status_code=503, content_type="text/html")
        with pytest.raises(ServiceError) as excinfo:
            AWCSource(session=session).fetch_metars(["KFME"])
        assert excinfo.value.status_code == 503

    def test_transport_error(self):
        session = make_session()
        session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(ServiceError) as excinfo:
            AWCSource(session=session).fetch_tafs(["PHTO"])
        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    def test_unexpected_content_type(self):
        session = make_session(b"<html></html>", content_type="text/html")
        with pytest.raises(UnsupportedContentType):
            AWCSource(session=session).fetch_metars(["KFME"])

    def test_missing_content_type(self, read_asset):
        session = make_session(read_asset('fme_metars.xml'), content_type=None)
        with pytest.raises(UnsupportedContentType):
            AWCSource(session=session).fetch_metars(["KFME"])


class TestSession:

    def test_user_agent_set(self):
        session = make_session()
        AWCSource(session=session)
        assert session.headers["User-Agent"] == AWCSource.USER_AGENT

    def test_existing_user_agent_kept(self):
        session = make_session()
        session.headers = {"User-Agent": "custom/1.0"}
        AWCSource(session=session)
        assert session.headers["User-Agent"] == "custom/1.0"
