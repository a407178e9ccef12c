from datetime import date

import pytest

from custom_components.tide_fishing_forecast.signals import (
    current_flow_score,
    moon_phase_score,
    parse_noaa_time,
    slack_tide_score,
    tidal_range,
    tide_range_score,
    time_of_day_score,
    water_temp_score,
)
from conftest import TZ, local, scenario_tides, sun_times_for

DAY = date(2026, 6, 15)


@pytest.mark.parametrize(
    "phase, expected",
    [(0.0, 1.0), (0.5, 1.0), (0.25, 0.5), (0.75, 0.5), (0.125, 0.75), (0.999, 0.998)],
)
def test_moon_phase_score(phase, expected):
    assert moon_phase_score(phase) == pytest.approx(expected)


@pytest.mark.parametrize("temp", [55, 58.0, 60.5, 63])
def test_water_temp_ideal_band(temp):
    assert water_temp_score(temp) == 1.0


def test_water_temp_decay_and_unknown():
    assert water_temp_score(45) == pytest.approx(0.0)
    assert water_temp_score(73) == pytest.approx(0.0)
    assert water_temp_score(50) == pytest.approx(0.5)
    assert water_temp_score(68) == pytest.approx(0.5)
    assert water_temp_score(30) == 0.0
    assert water_temp_score(90) == 0.0
    assert water_temp_score(None) == 0.5


@pytest.mark.parametrize(
    "range_ft, expected",
    [(2, 0.0), (6, 1.0), (4, 0.5), (0, 0.0), (10, 1.0), (-1, 0.0)],
)
def test_tide_range_score(range_ft, expected):
    assert tide_range_score(range_ft) == pytest.approx(expected)


def test_tide_range_anchors_are_configurable():
    assert tide_range_score(3, low=1, high=5) == pytest.approx(0.5)
    with pytest.raises(ValueError):
        tide_range_score(3, low=5, high=5)


def test_parse_noaa_time_attaches_local_zone():
    parsed = parse_noaa_time("2026-06-15 04:23", TZ)
    assert parsed == local(DAY, 4, 23)
    assert parsed.tzinfo is TZ
    assert parse_noaa_time("2026-06-15T04:23:00", TZ) == parsed
    with pytest.raises(ValueError):
        parse_noaa_time("not a time", TZ)


def test_tidal_range_scenario():
    assert tidal_range(scenario_tides()) == pytest.approx(5.9)


def test_tidal_range_needs_both_sides():
    highs_only = [t for t in scenario_tides() if t["type"] == "H"]
    assert tidal_range(highs_only) == 0.0
    assert tidal_range([]) == 0.0


def test_tidal_range_skips_bad_heights():
    tides = scenario_tides() + [{"t": "2026-06-15 23:59", "v": "", "type": "H"}]
    assert tidal_range(tides) == pytest.approx(5.9)


def test_slack_score_at_and_near_extremum():
    tides = scenario_tides()
    assert slack_tide_score(local(DAY, 4, 23), tides) == pytest.approx(1.0)
    # hour 4 is 23 minutes before the 04:23 high
    assert slack_tide_score(local(DAY, 4), tides) == pytest.approx(1 - 23 / 180)
    # 07:26 is more than three hours from both 04:23 and 10:30
    assert slack_tide_score(local(DAY, 7, 26), tides) == 0.0


def test_slack_score_without_extrema_is_zero():
    assert slack_tide_score(local(DAY, 4), []) == 0.0
    assert current_flow_score(local(DAY, 4), []) == 1.0


def test_slack_score_ignores_unparseable_entries():
    tides = [{"t": "garbage", "v": "1.0", "type": "H"}]
    assert slack_tide_score(local(DAY, 4), tides) == 0.0


def test_current_flow_is_complement_of_slack():
    tides = scenario_tides()
    for hour in range(24):
        h = local(DAY, hour)
        assert current_flow_score(h, tides) == pytest.approx(1 - slack_tide_score(h, tides))


def test_time_of_day_dawn_peak():
    sun = sun_times_for(DAY)
    # window opens at dawn - 30 min = 04:08
    assert time_of_day_score(local(DAY, 4, 8), sun) == pytest.approx(0.8)
    assert time_of_day_score(local(DAY, 5), sun) == pytest.approx(0.8 + 0.2 * 52 / 64)
    assert time_of_day_score(local(DAY, 5, 12), sun) == pytest.approx(1.0)
    assert time_of_day_score(local(DAY, 6), sun) == pytest.approx(1.0 - 0.3 * 48 / 120)
    assert time_of_day_score(local(DAY, 7, 12), sun) == pytest.approx(0.7)


def test_time_of_day_dusk_midday_night():
    sun = sun_times_for(DAY)
    assert time_of_day_score(local(DAY, 12), sun) == 0.2
    assert time_of_day_score(local(DAY, 18, 24), sun) == pytest.approx(0.5)
    assert time_of_day_score(local(DAY, 19), sun) == pytest.approx(0.5 + 0.3 * 36 / 120)
    assert time_of_day_score(local(DAY, 20, 24), sun) == pytest.approx(0.8)
    assert time_of_day_score(local(DAY, 22), sun) == 0.1
    assert time_of_day_score(local(DAY, 4), sun) == 0.1
    assert time_of_day_score(local(DAY, 0), sun) == 0.1
