import asyncio
from datetime import date

import aiohttp
import pytest

from custom_components.tide_fishing_forecast.noaa import (
    NoaaApiError,
    NoaaClient,
    c_to_f,
    parse_ndbc_water_temp,
)

NDBC_HEADER = (
    "#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE\n"
    "#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft\n"
)
NDBC_FEED = NDBC_HEADER + (
    "2026 06 15 12 50 200  5.0  6.0   0.8     6   4.5 190 1015.2  17.1  15.0  14.2   MM   MM    MM\n"
    "2026 06 15 12 40 200  5.0  6.0   0.8     6   4.5 190 1015.2  17.1  14.0  14.2   MM   MM    MM\n"
)
NDBC_MISSING = NDBC_HEADER + (
    "2026 06 15 12 50 200  5.0  6.0   0.8     6   4.5 190 1015.2  17.1    MM  14.2   MM   MM    MM\n"
)

HILO = {
    "predictions": [
        {"t": "2026-06-15 04:23", "v": "6.100", "type": "H"},
        {"t": "2026-06-15 10:30", "v": "0.200", "type": "L"},
    ]
}
HOURLY = {"predictions": [{"t": "2026-06-15 00:00", "v": "3.210"}]}


class FakeResponse:
    def __init__(self, status=200, body=None, text=""):
        self.status = status
        self._body = body
        self._text = text

    async def text(self):
        return self._text

    async def json(self, content_type=None):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class RaisingContext:
    def __init__(self, exc):
        self._exc = exc

    async def __aenter__(self):
        raise self._exc

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Routes GETs to canned responses keyed by URL host and CO-OPS interval."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params))
        key = "ndbc" if "ndbc" in url else (params or {}).get("interval")
        result = self.routes[key]
        if isinstance(result, Exception):
            return RaisingContext(result)
        return result

    async def close(self):
        self.closed = True


def test_c_to_f():
    assert c_to_f(0) == 32.0
    assert c_to_f(15.0) == pytest.approx(59.0)


def test_parse_ndbc_uses_newest_row():
    assert parse_ndbc_water_temp(NDBC_FEED) == {"t": "2026-06-15 12:50", "v": "59.0"}


@pytest.mark.parametrize(
    "text",
    [NDBC_MISSING, NDBC_HEADER, "", None, "2026 06 15 12 50 200\n", NDBC_HEADER + "2026 06 15 12 50 " + "x " * 12],
)
def test_parse_ndbc_without_reading(text):
    assert parse_ndbc_water_temp(text) is None


async def test_tide_predictions_request_parameters():
    session = FakeSession({"hilo": FakeResponse(body=HILO)})
    client = NoaaClient(session)
    tides = await client.fetch_tide_predictions(date(2026, 6, 15), date(2026, 6, 22), "8447435")

    assert tides == HILO["predictions"]
    _, params = session.requests[0]
    assert params["begin_date"] == "20260615"
    assert params["end_date"] == "20260622"
    assert params["station"] == "8447435"
    assert params["datum"] == "MLLW"
    assert params["time_zone"] == "lst_ldt"
    assert params["units"] == "english"
    assert not session.closed


async def test_non_200_raises():
    session = FakeSession({"hilo": FakeResponse(status=503, text="down")})
    with pytest.raises(NoaaApiError):
        await NoaaClient(session).fetch_tide_predictions(date(2026, 6, 15), date(2026, 6, 16))


async def test_error_payload_raises():
    body = {"error": {"message": "No Predictions data was found."}}
    session = FakeSession({"hilo": FakeResponse(body=body)})
    with pytest.raises(NoaaApiError, match="No Predictions"):
        await NoaaClient(session).fetch_tide_predictions(date(2026, 6, 15), date(2026, 6, 16))


async def test_invalid_json_raises():
    session = FakeSession({"hilo": FakeResponse(body=ValueError("bad json"), text="<html>")})
    with pytest.raises(NoaaApiError):
        await NoaaClient(session).fetch_tide_predictions(date(2026, 6, 15), date(2026, 6, 16))


@pytest.mark.parametrize("exc", [asyncio.TimeoutError(), aiohttp.ClientConnectionError("refused")])
async def test_transport_errors_raise(exc):
    session = FakeSession({"h": exc})
    with pytest.raises(NoaaApiError):
        await NoaaClient(session).fetch_hourly_tide_predictions(date(2026, 6, 15), date(2026, 6, 16))


async def test_water_temperature_degrades_to_none():
    session = FakeSession({"ndbc": FakeResponse(status=404, text="not found")})
    assert await NoaaClient(session).fetch_water_temperature("44020") is None


async def test_fetch_all_combines_results():
    session = FakeSession(
        {
            "hilo": FakeResponse(body=HILO),
            "h": FakeResponse(body=HOURLY),
            "ndbc": FakeResponse(text=NDBC_FEED),
        }
    )
    snapshot = await NoaaClient(session).fetch_all(date(2026, 6, 15), days=7)

    assert snapshot.tides == tuple(HILO["predictions"])
    assert snapshot.hourly_tides == tuple(HOURLY["predictions"])
    assert snapshot.water_temp == pytest.approx(59.0)
    ends = {params["interval"]: params["end_date"] for url, params in session.requests if params}
    assert ends == {"hilo": "20260622", "h": "20260616"}


async def test_fetch_all_without_water_temp():
    session = FakeSession(
        {
            "hilo": FakeResponse(body=HILO),
            "h": FakeResponse(body=HOURLY),
            "ndbc": FakeResponse(text=NDBC_MISSING),
        }
    )
    snapshot = await NoaaClient(session).fetch_all(date(2026, 6, 15))
    assert snapshot.water_temp is None
    assert len(snapshot.tides) == 2


async def test_fetch_all_fails_when_tides_fail():
    session = FakeSession(
        {
            "hilo": FakeResponse(status=500, text="boom"),
            "h": FakeResponse(body=HOURLY),
            "ndbc": FakeResponse(text=NDBC_FEED),
        }
    )
    with pytest.raises(NoaaApiError):
        await NoaaClient(session).fetch_all(date(2026, 6, 15))
