"""Sensor platform for Tide Fishing Forecast."""
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry
from homeassistant.components.sensor import SensorEntity
from homeassistant.util import dt as dt_util
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from datetime import datetime
from zoneinfo import ZoneInfo
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from .const import (
    DOMAIN,
    CONF_BUOY,
    CONF_CRUISE_SPEED,
    CONF_FORECAST_DAYS,
    CONF_MODES,
    CONF_TIDE_STATION,
    CONF_TIMEZONE,
    DEFAULT_BUOY,
    DEFAULT_CRUISE_SPEED_KTS,
    DEFAULT_FORECAST_DAYS,
    DEFAULT_TIDE_STATION,
    DEFAULT_TIMEZONE,
    MODE_INSHORE,
    MODE_OFFSHORE,
    SENSOR_FORECAST,
)
from .data_formatter import DataFormatter
from .data_schema import DayForecast, FishingMode, SensorAttributes
from .forecast import ForecastAssembler, tides_for_day
from .helpers.astro import AstronomyProvider, async_load_ephemeris
from .noaa import NoaaApiError, NoaaClient, NoaaSnapshot

_LOGGER = logging.getLogger(__name__)

# Default cache TTL (seconds)
_DEFAULT_CACHE_TTL = 3600  # 1 hour


class NoaaDataSource:
    """Shared, cached NOAA snapshot for all sensors of one config entry."""

    def __init__(self, client: NoaaClient, station: str, buoy: str, days: int, tz, cache_ttl: int = _DEFAULT_CACHE_TTL):
        self._client = client
        self._station = station
        self._buoy = buoy
        self._days = days
        self._tz = tz
        self._cache_ttl = int(cache_ttl)
        self._cache: Optional[NoaaSnapshot] = None
        self._last_fetch: Optional[datetime] = None
        self._lock = asyncio.Lock()

    async def async_get_snapshot(self) -> NoaaSnapshot:
        """Return the cached snapshot when fresh, otherwise refetch.

        Errors propagate: a failed fetch never replaces the cache with empty data.
        """
        async with self._lock:
            now = dt_util.now()
            if self._cache is not None and self._last_fetch is not None:
                age = (now - self._last_fetch).total_seconds()
                if age < self._cache_ttl:
                    return self._cache

            today = now.astimezone(self._tz).date()
            snapshot = await self._client.fetch_all(today, self._days, self._station, self._buoy)
            _LOGGER.debug(
                "Fetched NOAA snapshot: %d tides, %d hourly heights, water_temp=%s",
                len(snapshot.tides),
                len(snapshot.hourly_tides),
                snapshot.water_temp,
            )
            self._cache = snapshot
            self._last_fetch = now
            return snapshot


async def async_setup_entry(hass: HomeAssistant, config_entry: ConfigEntry, async_add_entities):
    """Set up forecast sensors from a config entry."""
    data = config_entry.data

    # Validate critical config keys early (fail loudly)
    for key in ("name", "latitude", "longitude"):
        if key not in data:
            _LOGGER.error("Config entry missing required key: %s", key)
            raise RuntimeError(f"Config entry missing required key: {key}")
    try:
        lat = float(data["latitude"])
        lon = float(data["longitude"])
    except (TypeError, ValueError):
        _LOGGER.error(
            "Invalid latitude/longitude in config entry: %s / %s", data.get("latitude"), data.get("longitude")
        )
        raise RuntimeError("Invalid latitude/longitude in config entry")

    tz = ZoneInfo(data.get(CONF_TIMEZONE, DEFAULT_TIMEZONE))
    days = int(data.get(CONF_FORECAST_DAYS, DEFAULT_FORECAST_DAYS))

    ephemeris, timescale = await async_load_ephemeris(hass)
    astronomy = AstronomyProvider(ephemeris, timescale, lat, lon, tz)
    assembler = ForecastAssembler(
        astronomy, tz, cruise_speed_kts=float(data.get(CONF_CRUISE_SPEED, DEFAULT_CRUISE_SPEED_KTS))
    )

    session = async_get_clientsession(hass)
    source = NoaaDataSource(
        NoaaClient(session=session),
        station=data.get(CONF_TIDE_STATION, DEFAULT_TIDE_STATION),
        buoy=data.get(CONF_BUOY, DEFAULT_BUOY),
        days=days,
        tz=tz,
    )

    sensors = [
        FishingForecastSensor(
            hass=hass,
            config_entry=config_entry,
            mode=FishingMode(mode),
            assembler=assembler,
            source=source,
            days=days,
        )
        for mode in data.get(CONF_MODES, [MODE_OFFSHORE, MODE_INSHORE])
    ]

    async_add_entities(sensors)


class FishingForecastSensor(SensorEntity):
    """Today's 1-5 fishing rating for one mode, with the full forecast as attributes."""

    should_poll = True

    def __init__(self, hass, config_entry, mode: FishingMode, assembler: ForecastAssembler, source: NoaaDataSource, days: int):
        self.hass = hass
        self._config_entry = config_entry
        self._mode = mode
        self._assembler = assembler
        self._source = source
        self._days = days

        data = config_entry.data
        name = data["name"]
        lat = data["latitude"]
        lon = data["longitude"]

        self._device_identifier = f"{name}_{lat}_{lon}"
        self._name = f"{name.lower().replace(' ', '_')}_{mode.value}_{SENSOR_FORECAST}"
        self._friendly_name = f"{name} {mode.value.title()} Fishing Forecast"
        self._state: Optional[int] = None
        self._last_update_hour: Optional[int] = None

        self._attrs: SensorAttributes = {
            "location": name,
            "mode": mode.value,
        }

    @property
    def name(self):
        return self._friendly_name

    @property
    def unique_id(self):
        return self._name

    @property
    def icon(self):
        if self._state is None:
            return "mdi:waves"
        if self._state >= 4:
            return "mdi:fish"
        return "mdi:fishbowl-outline" if self._state >= 3 else "mdi:waves"

    @property
    def native_value(self):
        return self._state

    @property
    def native_unit_of_measurement(self):
        return "/5"

    @property
    def extra_state_attributes(self):
        return self._attrs

    @property
    def device_info(self):
        return {
            "identifiers": {(DOMAIN, self._device_identifier)},
            "name": self._attrs["location"],
            "manufacturer": "Tide Fishing Forecast",
            "model": "Fishing Forecast",
            "entry_type": "service",
        }

    def _build(self, snapshot: NoaaSnapshot, today) -> Tuple[DayForecast, List[DayForecast]]:
        """Run the (blocking) astronomy + scoring work for today and the outlook."""
        forecast = self._assembler.generate_forecast(
            today,
            self._mode,
            tides_for_day(snapshot.tides, today),
            snapshot.water_temp,
            tides_for_day(snapshot.hourly_tides, today),
        )
        outlook = self._assembler.generate_outlook(today, self._mode, snapshot.tides, snapshot.water_temp, self._days)
        return forecast, outlook

    async def async_update(self):
        """Refresh the forecast."""
        now = dt_util.now()
        update_hours = [0, 6, 12, 18]

        if self._last_update_hour is not None and now.hour not in update_hours:
            _LOGGER.debug("Skipping update for %s; not in update hours: %s", self._name, now.hour)
            return

        if self._last_update_hour == now.hour:
            _LOGGER.debug("Already updated this hour for %s", self._name)
            return

        try:
            snapshot = await self._source.async_get_snapshot()
        except NoaaApiError as err:
            # Surface upstream failure instead of scoring against empty tides
            _LOGGER.error("NOAA data unavailable for %s: %s", self._name, err)
            self._state = None
            self._attrs.update(
                {
                    "status": "error",
                    "error_message": str(err),
                    "forecast": {},
                    "outlook": [],
                }
            )
            return

        try:
            today = now.astimezone(self._assembler.tz).date()
            forecast, outlook = await self.hass.async_add_executor_job(self._build, snapshot, today)

            self._state = forecast.overall_rating
            attrs: Dict[str, Any] = {
                "location": self._attrs["location"],
                "mode": self._mode.value,
                "status": "ok",
                "forecast": DataFormatter.format_day_forecast(forecast),
                "outlook": DataFormatter.format_outlook(outlook),
                "last_updated": now.isoformat(),
            }
            self._attrs = attrs
            self._last_update_hour = now.hour

            _LOGGER.debug("Updated %s: rating=%s windows=%s", self._name, self._state, len(forecast.best_windows))

        except Exception:
            _LOGGER.exception("Error updating fishing forecast for %s - bubbling up", self._name)
            raise
