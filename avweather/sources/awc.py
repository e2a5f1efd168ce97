"""Aviation Weather Center (aviationweather.gov) source for METAR, TAF and SIGMET data."""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from avweather.decoders.base import Decoder
from avweather.decoders.metar import MetarDecoder
from avweather.decoders.sigmet import SigmetDecoder
from avweather.decoders.taf import TafDecoder
from avweather.exceptions import ServiceError
from avweather.models.metar import Metar
from avweather.models.sigmet import ReportFamily, Sigmet
from avweather.models.taf import Taf

logger = logging.getLogger(__name__)


class AWCSource:
    """
    Fetch and decode reports from the aviationweather.gov data services.

    METARs and TAFs come from the ADDS data server as XML, SIGMETs from the
    JSON endpoints. Responses are decoded with the matching decoder; the
    response content type is checked by the decoder.

    Example:
        source = AWCSource()
        metars = source.fetch_metars(["KFME", "KBWI"], most_recent=True)
        for m in metars:
            print(m.station_id, m.flight_category)
    """

    BASE_URL = "https://aviationweather.gov"
    DATASERVER_PATH = "/adds/dataserver_current/httpparam"
    SIGMET_PATHS = {
        ReportFamily.INTERNATIONAL: "/cgi-bin/json/IsigmetJSON.php",
        ReportFamily.US: "/cgi-bin/json/SigmetJSON.php",
    }
    DEFAULT_TIMEOUT = 15
    USER_AGENT = "avweather/0.1 (aviation weather decoder)"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL,
    ):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
            base_url: Service root, without a trailing slash.
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._base_url = base_url.rstrip('/')
        self._session.headers.setdefault("User-Agent", self.USER_AGENT)
        self._metar_decoder = MetarDecoder()
        self._taf_decoder = TafDecoder()
        self._sigmet_decoder = SigmetDecoder()

    def fetch_metars(
        self,
        stations: Union[str, List[str]],
        hours_before_now: float = 2,
        most_recent: bool = False,
    ) -> List[Metar]:
        """
        Fetch METARs for one or more stations.

        Args:
            stations: ICAO identifier or list of identifiers.
            hours_before_now: Hours of history to request.
            most_recent: Only return the single most recent report.

        Returns:
            Decoded METARs in document order.

        Raises:
            InvalidStationQuery: If the service matched no station.
            ServiceError: On a transport failure or non-2xx response.
        """
        params = self._dataserver_params("metars", stations, hours_before_now)
        if most_recent:
            params["mostRecent"] = "true"
        return self._fetch(self.DATASERVER_PATH, params, self._metar_decoder)

    def fetch_tafs(
        self,
        stations: Union[str, List[str]],
        hours_before_now: float = 12,
        most_recent: bool = False,
    ) -> List[Taf]:
        """
        Fetch TAFs for one or more stations.

        Args:
            stations: ICAO identifier or list of identifiers.
            hours_before_now: Hours of history to request.
            most_recent: Only return the latest forecast for each station.

        Returns:
            Decoded TAFs, most recently issued first.
        """
        params = self._dataserver_params("tafs", stations, hours_before_now)
        if most_recent:
            params["mostRecentForEachStation"] = "constraint"
        return self._fetch(self.DATASERVER_PATH, params, self._taf_decoder)

    def fetch_sigmets(self, family: ReportFamily = ReportFamily.INTERNATIONAL) -> List[Sigmet]:
        """
        Fetch the current SIGMETs of one family.

        Args:
            family: INTERNATIONAL for ICAO SIGMETs, US for domestic AIRMET/SIGMETs.

        Returns:
            Decoded SIGMETs, most recent validity start first.
        """
        return self._fetch(self.SIGMET_PATHS[family], None, self._sigmet_decoder)

    @staticmethod
    def _dataserver_params(
        data_source: str,
        stations: Union[str, List[str]],
        hours_before_now: float,
    ) -> Dict[str, str]:
        if isinstance(stations, str):
            stations = [stations]
        cleaned = [s.strip().upper() for s in stations if s.strip()]
        return {
            "dataSource": data_source,
            "requestType": "retrieve",
            "format": "xml",
            "hoursBeforeNow": f"{hours_before_now:g}",
            "stationString": ",".join(cleaned),
        }

    def _fetch(self, path: str, params: Optional[Dict[str, str]], decoder: Decoder) -> List[Any]:
        """GET ``path`` and decode the body with ``decoder``."""
        url = f"{self._base_url}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("AWC fetch failed for %s: %s", path, e)
            raise ServiceError(f"Request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning("AWC returned HTTP %s for %s", response.status_code, path)
            raise ServiceError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )

        content_type = response.headers.get("Content-Type", "")
        logger.debug("Decoding %d bytes of %s from %s", len(response.content), content_type, path)
        return decoder.decode(response.content, content_type)
