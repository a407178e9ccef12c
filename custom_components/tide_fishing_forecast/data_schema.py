"""Data structure definitions for Tide Fishing Forecast.

Upstream payloads (NOAA JSON/text) are described with TypedDicts since they
arrive as plain dicts. Everything the scoring core produces is a frozen
dataclass: records are built once and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, TypedDict

from .const import (
    FACTOR_CURRENT_FLOW,
    FACTOR_MOON_PHASE,
    FACTOR_SEASONAL,
    FACTOR_SLACK_TIDE,
    FACTOR_TIDE_RANGE,
    FACTOR_TIME_OF_DAY,
    FACTOR_WATER_TEMP,
    MODE_INSHORE,
    MODE_OFFSHORE,
)


class FishingMode(str, Enum):
    """Forecast mode."""

    OFFSHORE = MODE_OFFSHORE
    INSHORE = MODE_INSHORE


# ============================================================================
# UPSTREAM (NOAA) PAYLOADS
# ============================================================================

class TidePrediction(TypedDict):
    """One high/low tide prediction as returned by CO-OPS."""
    t: str  # "2026-06-01 04:23", local standard/daylight time
    v: str  # "6.123", feet above MLLW
    type: str  # "H" or "L"


class HourlyTideHeight(TypedDict):
    """One hourly water level prediction."""
    t: str
    v: str


class WaterTemperature(TypedDict):
    """Latest buoy water temperature reading."""
    t: str  # "2026-06-01 14:50" UTC, as reported by NDBC
    v: str  # deg F, one decimal


# ============================================================================
# ASTRONOMY
# ============================================================================

@dataclass(frozen=True)
class SunTimes:
    """Solar events for one calendar day at a fixed location."""
    sunrise: datetime
    sunset: datetime
    dawn: datetime  # civil twilight start
    dusk: datetime  # civil twilight end
    nautical_dawn: datetime
    nautical_dusk: datetime


@dataclass(frozen=True)
class MoonData:
    """Lunar state for one calendar day."""
    phase: float  # 0..1, 0 = new, 0.5 = full
    phase_name: str
    illumination: float  # 0..1
    moonrise: Optional[datetime] = None
    moonset: Optional[datetime] = None


# ============================================================================
# REFERENCE DATA
# ============================================================================

@dataclass(frozen=True)
class FishingSpot:
    """A named fishing location."""
    name: str
    lat: float
    lon: float
    distance_nm: float  # one-way from the harbor
    type: FishingMode
    notes: str
    best_months: Optional[Tuple[int, ...]] = None
    best_conditions: Optional[str] = None

    def active_in(self, month: int) -> bool:
        """Spots without month data are always active."""
        return self.best_months is None or month in self.best_months


@dataclass(frozen=True)
class SeasonalInfo:
    """Seasonal suitability for one calendar month."""
    month: int
    offshore_score: float
    offshore_status: str
    offshore_spots: Tuple[str, ...]
    inshore_score: float
    inshore_status: str
    inshore_species: Tuple[str, ...]

    def score(self, mode: FishingMode) -> float:
        return self.offshore_score if mode == FishingMode.OFFSHORE else self.inshore_score

    def status(self, mode: FishingMode) -> str:
        return self.offshore_status if mode == FishingMode.OFFSHORE else self.inshore_status


# ============================================================================
# SCORING OUTPUT
# ============================================================================

@dataclass(frozen=True)
class HourlyScore:
    """Composite score for one local hour plus every contributing factor.

    All factors are populated for both modes; the ones a mode does not weigh
    are 0.0.
    """
    hour: datetime
    score: float
    slack_tide: float = 0.0
    time_of_day: float = 0.0
    seasonal: float = 0.0
    moon_phase: float = 0.0
    water_temp: float = 0.0
    current_flow: float = 0.0
    tide_range: float = 0.0

    def factors(self) -> Dict[str, float]:
        """Factor scores keyed by factor name, in label order."""
        return {
            FACTOR_SLACK_TIDE: self.slack_tide,
            FACTOR_TIME_OF_DAY: self.time_of_day,
            FACTOR_SEASONAL: self.seasonal,
            FACTOR_MOON_PHASE: self.moon_phase,
            FACTOR_WATER_TEMP: self.water_temp,
            FACTOR_CURRENT_FLOW: self.current_flow,
            FACTOR_TIDE_RANGE: self.tide_range,
        }


@dataclass(frozen=True)
class FishingWindow:
    """Contiguous run of hours at or above the window threshold."""
    start: datetime
    end: datetime
    score: float  # best hourly score inside the run
    factors: Tuple[str, ...] = ()  # top two factor labels at the best hour

    @property
    def reason(self) -> str:
        return " + ".join(self.factors)


@dataclass(frozen=True)
class DayForecast:
    """Full forecast for one calendar day and one mode."""
    date: date
    mode: FishingMode
    overall_rating: int  # 1..5
    best_windows: Tuple[FishingWindow, ...]
    hourly_scores: Tuple[HourlyScore, ...]
    tides: Tuple[TidePrediction, ...]
    sun_times: SunTimes
    moon_data: MoonData
    water_temp: Optional[float]
    season_status: str
    spot_recommendations: Tuple[FishingSpot, ...]
    suggested_dock_time: Optional[datetime] = None
    tidal_range: float = 0.0
    inshore_species: Tuple[str, ...] = ()
    hourly_tides: Tuple[HourlyTideHeight, ...] = field(default_factory=tuple)

    @property
    def peak_score(self) -> float:
        return max((s.score for s in self.hourly_scores), default=0.0)


class SensorAttributes(TypedDict, total=False):
    """Attributes published on the forecast sensor."""
    status: str  # "ok" or "error"
    error_message: str
    mode: str
    location: str
    forecast: Dict
    outlook: List[Dict]
    last_updated: str
