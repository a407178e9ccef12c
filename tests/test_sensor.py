from types import SimpleNamespace

import pytest

pytest.importorskip("homeassistant")

from homeassistant.util import dt as dt_util  # noqa: E402

from custom_components.tide_fishing_forecast.data_schema import FishingMode  # noqa: E402
from custom_components.tide_fishing_forecast.forecast import ForecastAssembler  # noqa: E402
from custom_components.tide_fishing_forecast.noaa import NoaaApiError, NoaaSnapshot  # noqa: E402
from custom_components.tide_fishing_forecast.sensor import FishingForecastSensor  # noqa: E402
from conftest import TZ, FakeAstronomy, scenario_tides  # noqa: E402

ENTRY = SimpleNamespace(
    entry_id="abc123",
    data={"name": "Chatham", "latitude": 41.6823, "longitude": -69.9597},
)


class FakeHass:
    async def async_add_executor_job(self, func, *args):
        return func(*args)


class FailingSource:
    async def async_get_snapshot(self):
        raise NoaaApiError("NOAA returned status 503")


class StaticSource:
    def __init__(self, snapshot):
        self.snapshot = snapshot

    async def async_get_snapshot(self):
        return self.snapshot


def _sensor(source, mode=FishingMode.OFFSHORE):
    return FishingForecastSensor(
        hass=FakeHass(),
        config_entry=ENTRY,
        mode=mode,
        assembler=ForecastAssembler(FakeAstronomy(), TZ),
        source=source,
        days=3,
    )


async def test_upstream_failure_is_reported_not_scored():
    sensor = _sensor(FailingSource())
    await sensor.async_update()

    attrs = sensor.extra_state_attributes
    assert sensor.native_value is None
    assert attrs["status"] == "error"
    assert "503" in attrs["error_message"]
    assert attrs["forecast"] == {}
    assert attrs["outlook"] == []
    assert attrs["location"] == "Chatham"


async def test_successful_update_publishes_rating_and_forecast():
    today = dt_util.now().astimezone(TZ).date().isoformat()
    snapshot = NoaaSnapshot(tides=tuple(scenario_tides(today)), hourly_tides=(), water_temp=58.0)
    sensor = _sensor(StaticSource(snapshot), FishingMode.INSHORE)
    await sensor.async_update()

    attrs = sensor.extra_state_attributes
    assert 1 <= sensor.native_value <= 5
    assert attrs["status"] == "ok"
    assert attrs["forecast"]["date"] == today
    assert attrs["forecast"]["rating"] == sensor.native_value
    assert len(attrs["forecast"]["tides"]) == 4
    assert len(attrs["outlook"]) == 3
    assert attrs["mode"] == "inshore"
