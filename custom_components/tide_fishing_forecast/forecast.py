"""Forecast assembly for Tide Fishing Forecast.

ForecastAssembler turns one day's upstream data (tide extrema, optional water
temperature) into a DayForecast: hourly curve, best windows, overall rating,
spot recommendations and the suggested departure time. The seasonal/spot
catalog and the astronomy provider are injected so the assembly stays a pure
function of its inputs.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, Sequence

from .const import (
    DEFAULT_CRUISE_SPEED_KTS,
    DEFAULT_FORECAST_DAYS,
    DOCK_LEAD_MINUTES,
    WINDOW_THRESHOLD,
)
from .data_schema import (
    DayForecast,
    FishingMode,
    FishingSpot,
    HourlyTideHeight,
    TidePrediction,
)
from .fishing_data import DEFAULT_CATALOG, FishingCatalog
from .scoring import compute_hourly_scores, find_best_windows, score_to_rating
from .signals import moon_phase_score, tidal_range

_LOGGER = logging.getLogger(__name__)


def tides_for_day(tides: Iterable[TidePrediction], day: date) -> List[TidePrediction]:
    """Tide entries whose timestamp starts with the day's YYYY-MM-DD."""
    prefix = day.isoformat()
    return [t for t in tides if str(t.get("t", "")).startswith(prefix)]


class ForecastAssembler:
    """Build per-day forecasts and multi-day outlooks for one location."""

    def __init__(
        self,
        astronomy,
        tz: tzinfo,
        catalog: FishingCatalog = DEFAULT_CATALOG,
        cruise_speed_kts: float = DEFAULT_CRUISE_SPEED_KTS,
    ) -> None:
        """Initialize the assembler.

        Args:
            astronomy: object exposing sun_times(day) and moon_data(day)
            tz: time zone of the location; tide timestamps are local to it
            catalog: seasonal table and spot lists
            cruise_speed_kts: assumed vessel speed for the departure time
        """
        if cruise_speed_kts <= 0:
            raise ValueError(f"cruise speed must be positive, got {cruise_speed_kts}")
        self.astronomy = astronomy
        self.tz = tz
        self.catalog = catalog
        self.cruise_speed_kts = float(cruise_speed_kts)

    # -----------------------------
    # Derived quantities
    # -----------------------------

    def recommend_spots(self, mode: FishingMode, month: int) -> List[FishingSpot]:
        """Spots worth fishing this month.

        Offshore spots follow the seasonal table's list for the month. Inshore
        spots pass unless they carry month data that excludes this month.
        """
        mode = FishingMode(mode)
        spots = self.catalog.spots(mode)
        if mode == FishingMode.OFFSHORE:
            names = self.catalog.seasonal_info(month).offshore_spots
            return [s for s in spots if s.name in names]
        return [s for s in spots if s.active_in(month)]

    def suggest_dock_time(self, spot: FishingSpot, sunrise: datetime) -> Optional[datetime]:
        """When to leave the dock to reach `spot` 15 minutes before sunrise."""
        if spot.distance_nm <= 0:
            return None
        run_time = timedelta(hours=spot.distance_nm / self.cruise_speed_kts)
        arrival = sunrise - timedelta(minutes=DOCK_LEAD_MINUTES)
        return arrival - run_time

    def _as_local_date(self, day) -> date:
        if isinstance(day, datetime):
            if day.tzinfo is not None:
                day = day.astimezone(self.tz)
            return day.date()
        return day

    # -----------------------------
    # Public API
    # -----------------------------

    def generate_forecast(
        self,
        day,
        mode: FishingMode,
        tides: Sequence[TidePrediction],
        water_temp: Optional[float],
        hourly_tides: Sequence[HourlyTideHeight] = (),
    ) -> DayForecast:
        """Assemble the forecast for one calendar day and mode."""
        day = self._as_local_date(day)
        mode = FishingMode(mode)
        seasonal = self.catalog.seasonal_info(day.month)
        seasonal_score = seasonal.score(mode)

        sun_times = self.astronomy.sun_times(day)
        moon_data = self.astronomy.moon_data(day)
        range_ft = tidal_range(tides)

        hourly_scores = compute_hourly_scores(
            day,
            mode,
            tides,
            sun_times,
            moon_phase_score(moon_data.phase),
            seasonal_score,
            water_temp,
            range_ft,
            self.tz,
        )

        windows = find_best_windows(hourly_scores, WINDOW_THRESHOLD)
        peak = max(s.score for s in hourly_scores)
        rating = score_to_rating(peak, seasonal_score)

        spots = self.recommend_spots(mode, day.month)
        dock_time = None
        if mode == FishingMode.OFFSHORE and spots:
            closest = min(spots, key=lambda s: s.distance_nm)
            dock_time = self.suggest_dock_time(closest, sun_times.sunrise)

        _LOGGER.debug(
            "Forecast %s %s: rating=%s peak=%.3f seasonal=%.2f range=%.2fft windows=%s dock=%s",
            day.isoformat(),
            mode.value,
            rating,
            peak,
            seasonal_score,
            range_ft,
            [(w.start.hour, w.end.hour, round(w.score, 2)) for w in windows],
            dock_time.isoformat() if dock_time else None,
        )

        return DayForecast(
            date=day,
            mode=mode,
            overall_rating=rating,
            best_windows=tuple(windows),
            hourly_scores=tuple(hourly_scores),
            tides=tuple(dict(t) for t in tides),
            sun_times=sun_times,
            moon_data=moon_data,
            water_temp=water_temp,
            season_status=seasonal.status(mode),
            spot_recommendations=tuple(spots),
            suggested_dock_time=dock_time,
            tidal_range=range_ft,
            inshore_species=seasonal.inshore_species if mode == FishingMode.INSHORE else (),
            hourly_tides=tuple(dict(t) for t in hourly_tides),
        )

    def generate_outlook(
        self,
        start,
        mode: FishingMode,
        all_tides: Sequence[TidePrediction],
        water_temp: Optional[float],
        days: int = DEFAULT_FORECAST_DAYS,
    ) -> List[DayForecast]:
        """Repeat the daily assembly for `days` consecutive days from `start`.

        The shared tide list is split by calendar day. The same water
        temperature reading is applied to every day.
        """
        if days < 0:
            raise ValueError(f"days must not be negative, got {days}")
        start = self._as_local_date(start)
        forecasts: List[DayForecast] = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            forecasts.append(self.generate_forecast(day, mode, tides_for_day(all_tides, day), water_temp))
        return forecasts
