"""Hourly scoring, window detection and rating for Tide Fishing Forecast.

compute_hourly_scores() evaluates every signal at each local hour of a day
and combines them with the fixed weights of the selected mode.
find_best_windows() turns the resulting curve into ranked time ranges and
score_to_rating() folds the day's peak into a 1-5 rating.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from .const import (
    FACTOR_CURRENT_FLOW,
    FACTOR_LABELS,
    FACTOR_MOON_PHASE,
    FACTOR_SEASONAL,
    FACTOR_SLACK_TIDE,
    FACTOR_TIDE_RANGE,
    FACTOR_TIME_OF_DAY,
    FACTOR_WATER_TEMP,
    HIGHLIGHT_THRESHOLD,
    MAX_WINDOWS,
    MODE_WEIGHTS,
    RATING_BANDS,
    RATING_PEAK_WEIGHT,
    RATING_SEASONAL_WEIGHT,
    WINDOW_THRESHOLD,
)
from .data_schema import FishingMode, FishingWindow, HourlyScore, SunTimes, TidePrediction
from .signals import (
    clamp,
    current_flow_score,
    slack_tide_score,
    tide_range_score,
    time_of_day_score,
    water_temp_score,
)

_LOGGER = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def hours_of_day(day: date, tz: Optional[tzinfo]) -> List[datetime]:
    """Local wall-clock hours 0..23 of a calendar day."""
    return [datetime.combine(day, time(hour=h), tzinfo=tz) for h in range(HOURS_PER_DAY)]


def _weighted_total(mode: FishingMode, factors: Dict[str, float]) -> float:
    total = 0.0
    for name, weight in MODE_WEIGHTS[mode.value].items():
        total += factors[name] * weight
    return clamp(total)


def compute_hourly_scores(
    day: date,
    mode: FishingMode,
    tides: Sequence[TidePrediction],
    sun_times: SunTimes,
    moon_score: float,
    seasonal_score: float,
    water_temp: Optional[float],
    tidal_range_ft: float,
    tz: Optional[tzinfo] = None,
) -> List[HourlyScore]:
    """Return exactly 24 HourlyScore records for the given day and mode.

    Hours are built in `tz`, defaulting to the zone of the sun times so the
    curve never mixes naive and aware instants.
    """
    if tz is None:
        tz = sun_times.sunrise.tzinfo
    mode = FishingMode(mode)
    moon_score = clamp(moon_score)
    seasonal_score = clamp(seasonal_score)

    # Per-day constants
    temp_score = water_temp_score(water_temp)
    range_score = tide_range_score(tidal_range_ft)

    scores: List[HourlyScore] = []
    for hour in hours_of_day(day, tz):
        factors = {
            FACTOR_SLACK_TIDE: 0.0,
            FACTOR_TIME_OF_DAY: time_of_day_score(hour, sun_times),
            FACTOR_SEASONAL: seasonal_score,
            FACTOR_MOON_PHASE: moon_score,
            FACTOR_WATER_TEMP: 0.0,
            FACTOR_CURRENT_FLOW: 0.0,
            FACTOR_TIDE_RANGE: 0.0,
        }
        if mode == FishingMode.OFFSHORE:
            factors[FACTOR_SLACK_TIDE] = slack_tide_score(hour, tides)
            factors[FACTOR_WATER_TEMP] = temp_score
        else:
            factors[FACTOR_CURRENT_FLOW] = current_flow_score(hour, tides)
            factors[FACTOR_TIDE_RANGE] = range_score

        scores.append(HourlyScore(hour=hour, score=_weighted_total(mode, factors), **factors))

    _LOGGER.debug(
        "Hourly scores for %s (%s): %s",
        day.isoformat(),
        mode.value,
        [round(s.score, 2) for s in scores],
    )
    return scores


def top_factors(score: HourlyScore, count: int = 2) -> Tuple[str, ...]:
    """Labels of the highest-valued factors, best first; ties keep label order."""
    factors = score.factors()
    ranked = sorted(FACTOR_LABELS, key=lambda name: -factors[name])
    return tuple(FACTOR_LABELS[name] for name in ranked[:count])


def find_best_windows(
    scores: Sequence[HourlyScore],
    threshold: float = WINDOW_THRESHOLD,
    limit: int = MAX_WINDOWS,
) -> List[FishingWindow]:
    """Extract contiguous runs of hours scoring at or above threshold.

    A run ends on the last hour still at/above threshold. Each window carries
    its best hourly score and the top two factors at that hour. Windows are
    returned best first, at most `limit` of them.
    """
    windows: List[FishingWindow] = []
    run_start: Optional[datetime] = None
    run_end: Optional[datetime] = None
    run_max = 0.0
    run_factors: Tuple[str, ...] = ()

    for s in scores:
        if s.score >= threshold:
            if run_start is None:
                run_start = s.hour
                run_max = s.score
                run_factors = top_factors(s)
            elif s.score > run_max:
                run_max = s.score
                run_factors = top_factors(s)
            run_end = s.hour
        elif run_start is not None:
            windows.append(FishingWindow(start=run_start, end=run_end, score=run_max, factors=run_factors))
            run_start = None
            run_end = None

    if run_start is not None:
        windows.append(FishingWindow(start=run_start, end=run_end, score=run_max, factors=run_factors))

    windows.sort(key=lambda w: w.score, reverse=True)
    return windows[:limit]


def highlight_hours(scores: Sequence[HourlyScore], threshold: float = HIGHLIGHT_THRESHOLD) -> List[datetime]:
    """Hours strong enough to stand out on a chart (strictly above threshold)."""
    return [s.hour for s in scores if s.score > threshold]


def score_to_rating(peak_score: float, seasonal_score: float) -> int:
    """Combine the day's peak hourly score with the season into a 1-5 rating."""
    combined = peak_score * RATING_PEAK_WEIGHT + seasonal_score * RATING_SEASONAL_WEIGHT
    for minimum, rating in RATING_BANDS:
        if combined >= minimum:
            return rating
    return 1
