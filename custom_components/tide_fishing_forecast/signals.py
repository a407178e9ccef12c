"""Signal functions for the hourly fishing score.

Each signal maps raw inputs (a local hour, the day's tide extrema, sun times,
water temperature, moon phase) to a suitability value in [0, 1]. The
functions are pure and hold no state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from .const import (
    DAWN_END_SCORE,
    DAWN_LEAD_MINUTES,
    DAWN_PEAK_HOURS_AFTER_SUNRISE,
    DAWN_PEAK_SCORE,
    DAWN_START_SCORE,
    DUSK_END_SCORE,
    DUSK_PEAK_HOURS_BEFORE_SUNSET,
    DUSK_START_SCORE,
    IDEAL_TEMP_MAX_F,
    IDEAL_TEMP_MIN_F,
    MIDDAY_SCORE,
    NIGHT_SCORE,
    SLACK_HORIZON_HOURS,
    TEMP_FALLOFF_F,
    TIDE_RANGE_MAX_FT,
    TIDE_RANGE_MIN_FT,
    UNKNOWN_TEMP_SCORE,
)
from .data_schema import SunTimes, TidePrediction

_LOGGER = logging.getLogger(__name__)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# -----------------------------
# Tide helpers
# -----------------------------


def parse_noaa_time(text: str, tz: Optional[tzinfo] = None) -> datetime:
    """Parse a CO-OPS timestamp ("2026-06-01 04:23") into an aware datetime.

    CO-OPS is queried with time_zone=lst_ldt so naive values are local wall
    clock time; tz is attached to them. Raises ValueError for bad input.
    """
    parsed = datetime.fromisoformat(str(text).strip().replace("T", " "))
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def extremum_times(tides: Sequence[TidePrediction], tz: Optional[tzinfo] = None) -> List[datetime]:
    """Return the instants of all parseable tide extrema."""
    instants: List[datetime] = []
    for tide in tides:
        try:
            instants.append(parse_noaa_time(tide["t"], tz))
        except (KeyError, TypeError, ValueError):
            _LOGGER.debug("Skipping tide prediction with unparseable time: %r", tide)
    return instants


def _heights(tides: Sequence[TidePrediction], kind: str) -> List[float]:
    values: List[float] = []
    for tide in tides:
        if tide.get("type") != kind:
            continue
        try:
            values.append(float(tide["v"]))
        except (KeyError, TypeError, ValueError):
            _LOGGER.debug("Skipping tide prediction with unparseable height: %r", tide)
    return values


def tidal_range(tides: Sequence[TidePrediction]) -> float:
    """Highest high minus lowest low for the day; 0 if either side is missing."""
    highs = _heights(tides, "H")
    lows = _heights(tides, "L")
    if not highs or not lows:
        return 0.0
    return max(highs) - min(lows)


def _seconds_between(a: datetime, b: datetime) -> float:
    # timestamp() compares absolute instants, so DST transitions are handled
    return abs(a.timestamp() - b.timestamp())


# -----------------------------
# Signals
# -----------------------------


def slack_tide_score(hour: datetime, tides: Sequence[TidePrediction]) -> float:
    """1.0 at a high/low tide, falling linearly to 0 three hours away.

    With no usable extrema there is no slack signal and the score is 0.
    """
    instants = extremum_times(tides, hour.tzinfo)
    if not instants:
        return 0.0
    nearest = min(_seconds_between(hour, t) for t in instants)
    horizon = SLACK_HORIZON_HOURS * 3600.0
    return clamp(1.0 - nearest / horizon)


def current_flow_score(hour: datetime, tides: Sequence[TidePrediction]) -> float:
    """Opposite of slack: peaks midway between extrema."""
    return clamp(1.0 - slack_tide_score(hour, tides))


def tide_range_score(
    range_ft: float,
    low: float = TIDE_RANGE_MIN_FT,
    high: float = TIDE_RANGE_MAX_FT,
) -> float:
    """Bigger (spring) tides score higher: low ft -> 0, high ft -> 1."""
    if high <= low:
        raise ValueError("tide range anchors must satisfy low < high")
    return clamp((range_ft - low) / (high - low))


def water_temp_score(
    temp: Optional[float],
    ideal_min: float = IDEAL_TEMP_MIN_F,
    ideal_max: float = IDEAL_TEMP_MAX_F,
) -> float:
    """1.0 in the ideal band, decaying to 0 over 10 deg F either side; 0.5 if unknown."""
    if temp is None:
        return UNKNOWN_TEMP_SCORE
    if ideal_min <= temp <= ideal_max:
        return 1.0
    if temp < ideal_min:
        return clamp(1.0 - (ideal_min - temp) / TEMP_FALLOFF_F)
    return clamp(1.0 - (temp - ideal_max) / TEMP_FALLOFF_F)


def time_of_day_score(hour: datetime, sun_times: SunTimes) -> float:
    """Two-peak light curve: strong dawn bite, secondary dusk bite.

    - dawn peak [dawn - 30 min, sunrise + 2 h]: 0.8 -> 1.0 at sunrise -> 0.7
    - dusk peak [sunset - 2 h, sunset]: 0.5 -> 0.8
    - midday between the peaks: 0.2
    - night: 0.1
    """
    h = hour.timestamp()
    sunrise = sun_times.sunrise.timestamp()
    sunset = sun_times.sunset.timestamp()
    peak_start = (sun_times.dawn - timedelta(minutes=DAWN_LEAD_MINUTES)).timestamp()
    peak_end = sunrise + DAWN_PEAK_HOURS_AFTER_SUNRISE * 3600.0

    if peak_start <= h <= peak_end:
        if h <= sunrise:
            span = sunrise - peak_start
            progress = (h - peak_start) / span if span > 0 else 1.0
            return clamp(DAWN_START_SCORE + (DAWN_PEAK_SCORE - DAWN_START_SCORE) * progress)
        progress = (h - sunrise) / (peak_end - sunrise)
        return clamp(DAWN_PEAK_SCORE - (DAWN_PEAK_SCORE - DAWN_END_SCORE) * progress)

    dusk_start = sunset - DUSK_PEAK_HOURS_BEFORE_SUNSET * 3600.0
    if dusk_start <= h <= sunset:
        progress = (h - dusk_start) / (sunset - dusk_start)
        return clamp(DUSK_START_SCORE + (DUSK_END_SCORE - DUSK_START_SCORE) * progress)

    if peak_end < h < dusk_start:
        return MIDDAY_SCORE

    return NIGHT_SCORE


def moon_phase_score(phase: float) -> float:
    """1.0 at new and full moon, 0.5 at the quarters."""
    dist_from_new = min(phase, 1.0 - phase)
    dist_from_full = abs(phase - 0.5)
    return clamp(1.0 - 2.0 * min(dist_from_new, dist_from_full))
