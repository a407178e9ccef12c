import json
from datetime import date

from custom_components.tide_fishing_forecast.data_formatter import DataFormatter
from custom_components.tide_fishing_forecast.data_schema import FishingMode
from conftest import make_curve, scenario_tides


def test_day_forecast_payload_is_json_safe(assembler):
    forecast = assembler.generate_forecast(date(2026, 7, 15), FishingMode.OFFSHORE, scenario_tides("2026-07-15"), 58.0)
    payload = DataFormatter.format_day_forecast(forecast)

    assert set(payload) == {
        "date",
        "mode",
        "rating",
        "peak_score",
        "best_windows",
        "hourly_scores",
        "tides",
        "hourly_tides",
        "tidal_range_ft",
        "sun",
        "moon",
        "water_temp_f",
        "season_status",
        "species",
        "spots",
        "suggested_dock_time",
    }
    assert payload["date"] == "2026-07-15"
    assert payload["mode"] == "offshore"
    assert payload["suggested_dock_time"] == "2026-07-15T04:21:00-04:00"
    assert payload["sun"]["sunrise"] == "2026-07-15T05:12:00-04:00"
    assert payload["tidal_range_ft"] == 5.9
    assert len(payload["hourly_scores"]) == 24
    assert payload["spots"][0]["type"] == "offshore"
    json.dumps(payload)


def test_hourly_rows_carry_factors_and_highlight():
    rows = DataFormatter.format_hourly(make_curve([0.61, 0.6] + [0.1] * 22, slack_tide=0.25))
    assert rows[0]["highlight"] is True
    assert rows[1]["highlight"] is False
    assert rows[0]["slack_tide"] == 0.25
    assert rows[0]["current_flow"] == 0.0
    assert rows[0]["hour"] == "2026-06-15T00:00:00-04:00"


def test_window_format(assembler):
    forecast = assembler.generate_forecast(date(2026, 7, 15), FishingMode.INSHORE, scenario_tides("2026-07-15"), None)
    assert forecast.best_windows
    window = DataFormatter.format_window(forecast.best_windows[0])
    assert window["reason"] == " + ".join(window["factors"])
    assert len(window["factors"]) == 2


def test_outlook_summary(assembler):
    outlook = assembler.generate_outlook(date(2026, 6, 15), FishingMode.INSHORE, [], None, days=2)
    summary = DataFormatter.format_outlook(outlook)
    assert [d["day_name"] for d in summary] == ["Monday", "Tuesday"]
    assert summary[0]["moon_phase_name"] == "New Moon"
    assert all(1 <= d["rating"] <= 5 for d in summary)
    json.dumps(summary)
