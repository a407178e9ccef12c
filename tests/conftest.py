from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from custom_components.tide_fishing_forecast.data_schema import (
    HourlyScore,
    MoonData,
    SunTimes,
)
from custom_components.tide_fishing_forecast.forecast import ForecastAssembler

TZ = ZoneInfo("America/New_York")


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)


def sun_times_for(day: date) -> SunTimes:
    """Early-summer Chatham sun times, fixed for every day."""
    return SunTimes(
        sunrise=local(day, 5, 12),
        sunset=local(day, 20, 24),
        dawn=local(day, 4, 38),
        dusk=local(day, 20, 58),
        nautical_dawn=local(day, 3, 55),
        nautical_dusk=local(day, 21, 41),
    )


class FakeAstronomy:
    """Deterministic stand-in for the skyfield provider."""

    def __init__(self, phase: float = 0.0):
        self.phase = phase
        self.calls = []

    def sun_times(self, day):
        self.calls.append(("sun", day))
        return sun_times_for(day)

    def moon_data(self, day):
        self.calls.append(("moon", day))
        return MoonData(phase=self.phase, phase_name="New Moon", illumination=0.0)


def scenario_tides(day: str = "2026-06-15"):
    return [
        {"t": f"{day} 04:23", "v": "6.1", "type": "H"},
        {"t": f"{day} 10:30", "v": "0.2", "type": "L"},
        {"t": f"{day} 16:45", "v": "6.1", "type": "H"},
        {"t": f"{day} 22:50", "v": "0.2", "type": "L"},
    ]


def make_curve(values, day: date = date(2026, 6, 15), **factors):
    """HourlyScore records with the given composite scores, one per hour."""
    return [HourlyScore(hour=local(day, i), score=v, **factors) for i, v in enumerate(values)]


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def astronomy():
    return FakeAstronomy()


@pytest.fixture
def assembler(astronomy):
    return ForecastAssembler(astronomy, TZ)
