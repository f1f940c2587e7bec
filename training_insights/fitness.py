"""Aerobic fitness estimation from recent run history.

The VO2max estimate converts each qualifying run's pace into a predicted
12-minute (Cooper test) distance, applies the Cooper regression and then
scales submaximal efforts up using the heart-rate reserve. The best few
plausible per-run estimates are averaged.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import List, Optional, Sequence

from .activity_types import POWER_RIDE_TYPES, RUN_TYPES, activity_type_matches
from .config import (
    COOPER_INTERCEPT_M,
    COOPER_SLOPE,
    DEFAULT_FITNESS_SETTINGS,
    FitnessSettings,
)
from .models import (
    Activity,
    FitnessEstimate,
    FitnessSummary,
    RecoveryRecord,
    latest_recovery,
)
from .utils import round_half_up, to_utc_aware

__all__ = [
    "estimate_vo2max",
    "estimate_activity_vo2max",
    "qualifying_runs",
    "resting_heart_rate_from",
    "vo2max_level",
    "build_fitness_summary",
]

LOGGER = logging.getLogger(__name__)

_LEVELS = (
    (55, "Excellent"),
    (48, "Very good"),
    (42, "Good"),
    (36, "Average"),
)


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return to_utc_aware(now)


def _in_window(activity: Activity, cutoff: datetime) -> bool:
    if activity.start_date is None:
        return False
    return to_utc_aware(activity.start_date) >= cutoff


def resting_heart_rate_from(
    recovery: Optional[Sequence[RecoveryRecord]],
    settings: FitnessSettings = DEFAULT_FITNESS_SETTINGS,
) -> Optional[int]:
    """Return the rounded resting heart rate of the latest recovery record."""

    record = latest_recovery(recovery or [])
    if record is None or not record.resting_heart_rate:
        return None
    return round_half_up(record.resting_heart_rate)


def qualifying_runs(
    activities: Sequence[Activity],
    settings: FitnessSettings = DEFAULT_FITNESS_SETTINGS,
    now: Optional[datetime] = None,
) -> List[Activity]:
    """Return recent runs long enough and with heart rate data to estimate from."""

    cutoff = _resolve_now(now) - timedelta(days=settings.lookback_days)
    runs: List[Activity] = []
    for activity in activities:
        if not activity_type_matches(activity.type, RUN_TYPES):
            continue
        if not activity.average_heartrate:
            continue
        if activity.distance is None or activity.distance < settings.min_distance_m:
            continue
        if (
            activity.moving_time is None
            or activity.moving_time < settings.min_moving_time_s
        ):
            continue
        if not _in_window(activity, cutoff):
            continue
        runs.append(activity)
    return runs


def estimate_activity_vo2max(
    activity: Activity,
    resting_heart_rate: float,
    settings: FitnessSettings = DEFAULT_FITNESS_SETTINGS,
) -> Optional[float]:
    """Return the capped VO2max estimate for one run.

    ``None`` when the run lacks the data to compute a pace. Plausibility
    filtering is left to the caller.
    """

    if not activity.distance or not activity.moving_time:
        return None
    pace_min_per_km = (activity.moving_time / 60.0) / (activity.distance / 1000.0)
    predicted_12min_m = (12.0 / pace_min_per_km) * 1000.0 * settings.fatigue_factor
    estimate = (predicted_12min_m - COOPER_INTERCEPT_M) / COOPER_SLOPE

    reserve = settings.max_heart_rate - resting_heart_rate
    if activity.average_heartrate is not None and reserve > 0:
        hr_fraction = (activity.average_heartrate - resting_heart_rate) / reserve
        if 0 < hr_fraction < settings.submaximal_threshold:
            estimate = estimate / hr_fraction

    return min(settings.cap, estimate)


def vo2max_level(value: float) -> str:
    """Return a coarse classification label for a VO2max value."""

    for threshold, label in _LEVELS:
        if value >= threshold:
            return label
    return "Needs work"


def estimate_vo2max(
    activities: Sequence[Activity],
    recovery: Optional[Sequence[RecoveryRecord]] = None,
    settings: FitnessSettings = DEFAULT_FITNESS_SETTINGS,
    now: Optional[datetime] = None,
) -> Optional[FitnessEstimate]:
    """Estimate VO2max from recent runs, or ``None`` when there is no basis.

    Args:
        activities: Activity history of any types; non-runs are ignored.
        recovery: Wearable recovery records. The resting heart rate of the
            most recent record, when present, replaces the default.
        settings: Physiological assumptions and filters.
        now: Reference time for the lookback window (defaults to UTC now).
    """

    runs = qualifying_runs(activities, settings, now)
    if not runs:
        LOGGER.debug("No qualifying runs for a VO2max estimate")
        return None

    resting = resting_heart_rate_from(recovery, settings)
    resting_hr = (
        float(resting) if resting is not None else settings.default_resting_heart_rate
    )

    estimates: List[float] = []
    for run in runs:
        value = estimate_activity_vo2max(run, resting_hr, settings)
        if value is None:
            continue
        if settings.floor < value <= settings.cap:
            estimates.append(value)
        else:
            LOGGER.debug(
                "Discarding implausible VO2max %.1f from activity %s", value, run.id
            )
    if not estimates:
        return None

    estimates.sort(reverse=True)
    top = estimates[: settings.top_efforts]
    vo2max = round_half_up(sum(top) / len(top))
    return FitnessEstimate(
        vo2max=vo2max,
        resting_heart_rate=resting_hr,
        max_heart_rate=settings.max_heart_rate,
        heart_rate_reserve=settings.max_heart_rate - resting_hr,
        sample_size=len(top),
        level=vo2max_level(vo2max),
    )


def build_fitness_summary(
    activities: Sequence[Activity],
    recovery: Optional[Sequence[RecoveryRecord]] = None,
    settings: FitnessSettings = DEFAULT_FITNESS_SETTINGS,
    now: Optional[datetime] = None,
) -> FitnessSummary:
    """Summarise training volume, ride power and VO2max over the lookback."""

    reference = _resolve_now(now)
    cutoff = reference - timedelta(days=settings.lookback_days)
    recent = [a for a in activities if _in_window(a, cutoff)]

    total_moving_s = sum(a.moving_time or 0.0 for a in recent)
    weeks = settings.lookback_days / 7.0
    hours_per_week = (
        round_half_up(total_moving_s / 3600.0 / weeks * 10) / 10 if weeks else 0.0
    )

    watts = [
        a.average_watts
        for a in recent
        if a.average_watts and activity_type_matches(a.type, POWER_RIDE_TYPES)
    ]
    average_watts = round_half_up(sum(watts) / len(watts)) if watts else None

    return FitnessSummary(
        vo2max=estimate_vo2max(activities, recovery, settings, reference),
        resting_heart_rate=resting_heart_rate_from(recovery, settings),
        hours_per_week=hours_per_week,
        average_watts=average_watts,
    )
