"""NOAA client for Tide Fishing Forecast.

Provides:
- NoaaClient: async fetch of CO-OPS tide predictions (high/low and hourly)
  and the latest NDBC buoy water temperature.
- parse_ndbc_water_temp: extracts the WTMP column from an NDBC realtime2
  text feed and converts it to deg F.

Tide requests are required inputs for scoring: any failure raises
NoaaApiError so callers never score a day against an empty tide list by
accident. The water temperature is optional and degrades to None.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .const import (
    DEFAULT_BUOY,
    DEFAULT_FORECAST_DAYS,
    DEFAULT_TIDE_STATION,
    NDBC_REALTIME_URL,
    NOAA_TIDES_URL,
    REQUEST_TIMEOUT_SECONDS,
)
from .data_schema import HourlyTideHeight, TidePrediction, WaterTemperature

_LOGGER = logging.getLogger(__name__)

# NDBC realtime2 columns:
# YY MM DD hh mm WDIR WSPD GST WVHT DPD APD MWD PRES ATMP WTMP DEWP VIS PTDY TIDE
_NDBC_WTMP_INDEX = 14
_NDBC_MISSING = "MM"


class NoaaApiError(RuntimeError):
    """A NOAA request failed or returned an unusable payload."""


@dataclass(frozen=True)
class NoaaSnapshot:
    """Everything fetched for one forecast refresh."""
    tides: Tuple[TidePrediction, ...]
    hourly_tides: Tuple[HourlyTideHeight, ...]
    water_temp: Optional[float]


def _format_date(d: date) -> str:
    return d.strftime("%Y%m%d")


def c_to_f(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def parse_ndbc_water_temp(text: str) -> Optional[WaterTemperature]:
    """Return the most recent water temperature in a realtime2 feed, or None.

    The newest observation is the first non-comment line. "MM" marks a
    missing value.
    """
    lines = [line for line in (text or "").splitlines() if line.strip() and not line.startswith("#")]
    if not lines:
        return None
    cols = lines[0].split()
    if len(cols) <= _NDBC_WTMP_INDEX:
        _LOGGER.debug("NDBC row too short for WTMP: %r", lines[0])
        return None
    wtmp = cols[_NDBC_WTMP_INDEX]
    if wtmp == _NDBC_MISSING:
        return None
    try:
        temp_f = c_to_f(float(wtmp))
    except ValueError:
        _LOGGER.debug("Non-numeric NDBC WTMP value: %r", wtmp)
        return None
    return {
        "t": f"{cols[0]}-{cols[1]}-{cols[2]} {cols[3]}:{cols[4]}",
        "v": f"{temp_f:.1f}",
    }


class NoaaClient:
    """Async client for NOAA tide predictions and buoy observations."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        # If a session is supplied, we won't close it.
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def _request(self, url: str, params: Optional[Dict[str, Any]] = None, as_json: bool = True) -> Any:
        """GET url and return parsed JSON (or raw text).

        Raises NoaaApiError for non-200 responses, timeouts, connection
        errors and unparseable JSON.
        """
        session = self._session or aiohttp.ClientSession()
        close_session = self._session is None

        _LOGGER.debug("NOAA request to %s params=%s", url, params)
        try:
            async with session.get(url, params=params, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    _LOGGER.debug("NOAA non-200 response: status=%s body=%s", resp.status, (text or "")[:1000])
                    raise NoaaApiError(f"NOAA returned status {resp.status} for {url}")
                if not as_json:
                    return text
                try:
                    return await resp.json(content_type=None)
                except ValueError as exc:
                    _LOGGER.debug("Failed to parse NOAA JSON: %s; raw body (truncated)=%s", exc, (text or "")[:1000])
                    raise NoaaApiError(f"NOAA returned invalid JSON for {url}") from exc
        except asyncio.TimeoutError as exc:
            raise NoaaApiError(f"NOAA request to {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise NoaaApiError(f"NOAA request to {url} failed: {exc}") from exc
        finally:
            if close_session:
                await session.close()

    async def _fetch_predictions(self, start: date, end: date, station: str, interval: str) -> List[Dict[str, Any]]:
        params = {
            "begin_date": _format_date(start),
            "end_date": _format_date(end),
            "station": station,
            "product": "predictions",
            "datum": "MLLW",
            "time_zone": "lst_ldt",
            "interval": interval,
            "units": "english",
            "format": "json",
        }
        data = await self._request(NOAA_TIDES_URL, params)
        if not isinstance(data, dict):
            raise NoaaApiError(f"Unexpected CO-OPS payload type: {type(data).__name__}")
        if "error" in data:
            message = (data.get("error") or {}).get("message", "unknown error")
            raise NoaaApiError(f"CO-OPS error for station {station}: {message}")
        predictions = data.get("predictions") or []
        _LOGGER.debug("CO-OPS returned %d %s predictions for %s", len(predictions), interval, station)
        return predictions

    async def fetch_tide_predictions(
        self, start: date, end: date, station: str = DEFAULT_TIDE_STATION
    ) -> List[TidePrediction]:
        """High/low tide predictions between start and end (inclusive)."""
        return await self._fetch_predictions(start, end, station, "hilo")

    async def fetch_hourly_tide_predictions(
        self, start: date, end: date, station: str = DEFAULT_TIDE_STATION
    ) -> List[HourlyTideHeight]:
        """Hourly water level predictions between start and end (inclusive)."""
        return await self._fetch_predictions(start, end, station, "h")

    async def fetch_water_temperature(self, buoy: str = DEFAULT_BUOY) -> Optional[WaterTemperature]:
        """Latest buoy water temperature, or None when the buoy has no reading."""
        try:
            text = await self._request(NDBC_REALTIME_URL.format(buoy=buoy), as_json=False)
        except NoaaApiError as exc:
            _LOGGER.warning("Water temperature unavailable from buoy %s: %s", buoy, exc)
            return None
        reading = parse_ndbc_water_temp(text)
        if reading is None:
            _LOGGER.warning("Buoy %s reported no water temperature", buoy)
        return reading

    async def fetch_all(
        self,
        start: date,
        days: int = DEFAULT_FORECAST_DAYS,
        station: str = DEFAULT_TIDE_STATION,
        buoy: str = DEFAULT_BUOY,
    ) -> NoaaSnapshot:
        """Fetch tides for the outlook, today's hourly curve and water temp concurrently."""
        tides, hourly, reading = await asyncio.gather(
            self.fetch_tide_predictions(start, start + timedelta(days=days), station),
            self.fetch_hourly_tide_predictions(start, start + timedelta(days=1), station),
            self.fetch_water_temperature(buoy),
        )
        water_temp = float(reading["v"]) if reading else None
        return NoaaSnapshot(tides=tuple(tides), hourly_tides=tuple(hourly), water_temp=water_temp)
