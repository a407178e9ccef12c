from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from skyfield.api import Loader, wgs84
from skyfield import almanac
import os
import logging
import math

from ..data_schema import MoonData, SunTimes

_LOGGER = logging.getLogger(__name__)

EPHEMERIS_FILE = "de421.bsp"
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

# dark_twilight_day() states
_NAUTICAL = 2
_CIVIL = 3

# Phase name buckets, upper bound exclusive
_PHASE_NAMES: Tuple[Tuple[float, str], ...] = (
    (0.0625, "New Moon"),
    (0.1875, "Waxing Crescent"),
    (0.3125, "First Quarter"),
    (0.4375, "Waxing Gibbous"),
    (0.5625, "Full Moon"),
    (0.6875, "Waning Gibbous"),
    (0.8125, "Last Quarter"),
    (0.9375, "Waning Crescent"),
)


def phase_name(phase: float) -> str:
    """Name of the lunar phase bucket for a phase fraction in [0, 1)."""
    for upper, name in _PHASE_NAMES:
        if phase < upper:
            return name
    return "New Moon"


def load_ephemeris(data_dir: str = DATA_DIR):
    """Load the JPL ephemeris, downloading it into data_dir on first use.

    Blocking: call through the executor from the event loop.
    """
    os.makedirs(data_dir, exist_ok=True)
    if not os.path.exists(os.path.join(data_dir, EPHEMERIS_FILE)):
        _LOGGER.info("Skyfield ephemeris not found; downloading to %s", data_dir)
    loader = Loader(data_dir, verbose=False)
    return loader(EPHEMERIS_FILE), loader.timescale()


async def async_load_ephemeris(hass) -> Tuple[Any, Any]:
    """Load the ephemeris without blocking the Home Assistant event loop."""
    return await hass.async_add_executor_job(load_ephemeris)


class AstronomyProvider:
    """Sun and moon events for one fixed location.

    Both lookups are pure functions of (date, location) and are cached per
    date, so a 7-day outlook in two modes computes each day once.
    """

    def __init__(self, ephemeris, timescale, latitude: float, longitude: float, tz: tzinfo):
        self._eph = ephemeris
        self._ts = timescale
        self._tz = tz
        self.latitude = float(latitude)
        self.longitude = float(longitude)
        self._location = wgs84.latlon(self.latitude, self.longitude)
        self._sun_cache: Dict[date, SunTimes] = {}
        self._moon_cache: Dict[date, MoonData] = {}

    # -----------------------------
    # Helpers
    # -----------------------------

    def _local(self, day: date, hour: int = 0) -> datetime:
        return datetime.combine(day, time(hour=hour), tzinfo=self._tz)

    def _day_bounds(self, day: date):
        start = self._local(day)
        end = self._local(day + timedelta(days=1))
        return self._ts.from_datetime(start), self._ts.from_datetime(end)

    def _to_local(self, t) -> datetime:
        return t.utc_datetime().astimezone(self._tz)

    def _find_events(self, t0, t1, func, name: str) -> List[Tuple[datetime, int]]:
        times, events = almanac.find_discrete(t0, t1, func)
        found = [(self._to_local(t), int(ev)) for t, ev in zip(times, events)]
        _LOGGER.debug("%s events: %s", name, found)
        return found

    # -----------------------------
    # Public API
    # -----------------------------

    def sun_times(self, day: date) -> SunTimes:
        """Sunrise, sunset and civil/nautical twilight for a local calendar day."""
        if day in self._sun_cache:
            return self._sun_cache[day]

        t0, t1 = self._day_bounds(day)

        sunrise: Optional[datetime] = None
        sunset: Optional[datetime] = None
        for when, ev in self._find_events(t0, t1, almanac.sunrise_sunset(self._eph, self._location), "sunrise_sunset"):
            if ev == 1 and sunrise is None:
                sunrise = when
            elif ev == 0 and sunset is None:
                sunset = when

        if sunrise is None:
            _LOGGER.debug("No sunrise on %s; using 06:00 local", day)
            sunrise = self._local(day, 6)
        if sunset is None:
            _LOGGER.debug("No sunset on %s; using 18:00 local", day)
            sunset = self._local(day, 18)

        # Twilight boundaries from state transitions of dark_twilight_day
        twilight = almanac.dark_twilight_day(self._eph, self._location)
        previous = int(twilight(t0))
        dawn = dusk = nautical_dawn = nautical_dusk = None
        for when, state in self._find_events(t0, t1, twilight, "dark_twilight_day"):
            if previous < _NAUTICAL <= state and nautical_dawn is None:
                nautical_dawn = when
            if previous < _CIVIL <= state and dawn is None:
                dawn = when
            if state < _CIVIL <= previous and dusk is None:
                dusk = when
            if state < _NAUTICAL <= previous and nautical_dusk is None:
                nautical_dusk = when
            previous = state

        result = SunTimes(
            sunrise=sunrise,
            sunset=sunset,
            dawn=dawn or sunrise,
            dusk=dusk or sunset,
            nautical_dawn=nautical_dawn or dawn or sunrise,
            nautical_dusk=nautical_dusk or dusk or sunset,
        )
        self._sun_cache[day] = result
        return result

    def moon_data(self, day: date) -> MoonData:
        """Phase, illumination and rise/set for a local calendar day.

        Phase and illumination are sampled at local noon.
        """
        if day in self._moon_cache:
            return self._moon_cache[day]

        t_noon = self._ts.from_datetime(self._local(day, 12))
        phase = (float(almanac.moon_phase(self._eph, t_noon).degrees) / 360.0) % 1.0

        earth = self._eph["earth"]
        observer = earth.at(t_noon)
        sep = observer.observe(self._eph["sun"]).apparent().separation_from(
            observer.observe(self._eph["moon"]).apparent()
        ).radians
        illumination = max(0.0, min(1.0, (1.0 - math.cos(sep)) / 2.0))

        t0, t1 = self._day_bounds(day)
        moonrise: Optional[datetime] = None
        moonset: Optional[datetime] = None
        events = self._find_events(
            t0, t1, almanac.risings_and_settings(self._eph, self._eph["moon"], self._location), "moon_rise_set"
        )
        for when, ev in events:
            if ev == 1 and moonrise is None:
                moonrise = when
            elif ev == 0 and moonset is None:
                moonset = when

        result = MoonData(
            phase=phase,
            phase_name=phase_name(phase),
            illumination=illumination,
            moonrise=moonrise,
            moonset=moonset,
        )
        self._moon_cache[day] = result
        return result
