"""Data formatting layer for Tide Fishing Forecast.

Provides DataFormatter which converts the scoring core's frozen records into
plain JSON-safe dicts (ISO strings, rounded floats) for sensor attributes and
the frontend card.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .const import HIGHLIGHT_THRESHOLD
from .data_schema import (
    DayForecast,
    FishingSpot,
    FishingWindow,
    HourlyScore,
    MoonData,
    SunTimes,
)
from .scoring import highlight_hours

_LOGGER = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _round(value: Optional[float], digits: int = 3) -> Optional[float]:
    return round(float(value), digits) if value is not None else None


class DataFormatter:
    """Formatter utilities producing the attribute shapes used by the sensor."""

    @staticmethod
    def format_window(window: FishingWindow) -> Dict[str, Any]:
        return {
            "start": _iso(window.start),
            "end": _iso(window.end),
            "score": _round(window.score),
            "factors": list(window.factors),
            "reason": window.reason,
        }

    @staticmethod
    def format_hourly(scores: Sequence[HourlyScore], threshold: float = HIGHLIGHT_THRESHOLD) -> List[Dict[str, Any]]:
        """Per-hour curve with the factor breakdown and a chart highlight flag."""
        highlighted = set(highlight_hours(scores, threshold))
        out: List[Dict[str, Any]] = []
        for s in scores:
            item: Dict[str, Any] = {"hour": _iso(s.hour), "score": _round(s.score)}
            item.update({name: _round(value) for name, value in s.factors().items()})
            item["highlight"] = s.hour in highlighted
            out.append(item)
        return out

    @staticmethod
    def format_sun(sun: SunTimes) -> Dict[str, Optional[str]]:
        return {
            "sunrise": _iso(sun.sunrise),
            "sunset": _iso(sun.sunset),
            "dawn": _iso(sun.dawn),
            "dusk": _iso(sun.dusk),
            "nautical_dawn": _iso(sun.nautical_dawn),
            "nautical_dusk": _iso(sun.nautical_dusk),
        }

    @staticmethod
    def format_moon(moon: MoonData) -> Dict[str, Any]:
        return {
            "phase": _round(moon.phase),
            "phase_name": moon.phase_name,
            "illumination": _round(moon.illumination),
            "moonrise": _iso(moon.moonrise),
            "moonset": _iso(moon.moonset),
        }

    @staticmethod
    def format_spot(spot: FishingSpot) -> Dict[str, Any]:
        return {
            "name": spot.name,
            "lat": spot.lat,
            "lon": spot.lon,
            "distance_nm": spot.distance_nm,
            "type": spot.type.value,
            "notes": spot.notes,
            "best_months": list(spot.best_months) if spot.best_months else None,
        }

    @staticmethod
    def format_day_forecast(forecast: DayForecast) -> Dict[str, Any]:
        """Full attribute payload for one day."""
        return {
            "date": forecast.date.isoformat(),
            "mode": forecast.mode.value,
            "rating": forecast.overall_rating,
            "peak_score": _round(forecast.peak_score),
            "best_windows": [DataFormatter.format_window(w) for w in forecast.best_windows],
            "hourly_scores": DataFormatter.format_hourly(forecast.hourly_scores),
            "tides": [dict(t) for t in forecast.tides],
            "hourly_tides": [dict(t) for t in forecast.hourly_tides],
            "tidal_range_ft": _round(forecast.tidal_range, 2),
            "sun": DataFormatter.format_sun(forecast.sun_times),
            "moon": DataFormatter.format_moon(forecast.moon_data),
            "water_temp_f": _round(forecast.water_temp, 1),
            "season_status": forecast.season_status,
            "species": list(forecast.inshore_species),
            "spots": [DataFormatter.format_spot(s) for s in forecast.spot_recommendations],
            "suggested_dock_time": _iso(forecast.suggested_dock_time),
        }

    @staticmethod
    def format_outlook(forecasts: Sequence[DayForecast]) -> List[Dict[str, Any]]:
        """Compact per-day summary for the week view."""
        out: List[Dict[str, Any]] = []
        for f in forecasts:
            best = f.best_windows[0] if f.best_windows else None
            out.append(
                {
                    "date": f.date.isoformat(),
                    "day_name": f.date.strftime("%A"),
                    "rating": f.overall_rating,
                    "best_window": DataFormatter.format_window(best) if best else None,
                    "season_status": f.season_status,
                    "moon_phase_name": f.moon_data.phase_name,
                }
            )
        return out
