"""Dataclasses describing activities, recovery data and derived results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import ActivityPayloadError
from .utils import parse_iso_datetime, to_utc_aware

LatLon = Tuple[float, float]

LOGGER = logging.getLogger(__name__)

UNNAMED_ROUTE = "Unnamed"


def _optional_float(value: Any) -> Optional[float]:
    """Return ``value`` as float, or ``None`` for missing/non-numeric input."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _optional_datetime(value: Any) -> Optional[datetime]:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return None
    return to_utc_aware(parsed)


def parse_latlng(value: Any) -> Optional[LatLon]:
    """Return a ``(lat, lng)`` pair from a list, tuple or JSON string.

    Stored rows sometimes hold the coordinate pair serialised as JSON text.
    Empty lists (Strava's marker for "no GPS") and anything that is not a
    numeric pair resolve to ``None``.
    """

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    lat = _optional_float(value[0])
    lng = _optional_float(value[1])
    if lat is None or lng is None:
        return None
    return lat, lng


@dataclass(frozen=True, slots=True)
class Activity:
    """A single completed exercise session. Read-only once created."""

    id: int | str
    type: str
    name: Optional[str] = None
    distance: Optional[float] = None
    moving_time: Optional[float] = None
    elapsed_time: Optional[float] = None
    average_heartrate: Optional[float] = None
    average_watts: Optional[float] = None
    start_date: Optional[datetime] = None
    start_latlng: Optional[LatLon] = None
    summary_polyline: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Activity":
        """Build an activity from a stored row or a raw Strava API payload.

        Stored rows carry ``summary_polyline`` at the top level while the
        Strava list endpoint nests it under ``map``.
        """

        if not isinstance(payload, Mapping):
            raise ActivityPayloadError(
                f"Activity payload must be a mapping, got {type(payload).__name__}"
            )
        activity_id = payload.get("id", payload.get("strava_id"))
        if activity_id is None or activity_id == "":
            raise ActivityPayloadError("Activity payload has no id")

        polyline = payload.get("summary_polyline")
        map_block = payload.get("map")
        if not polyline and isinstance(map_block, Mapping):
            polyline = map_block.get("summary_polyline")

        activity_type = payload.get("type") or payload.get("sport_type") or ""
        start_date = _optional_datetime(payload.get("start_date"))
        if start_date is None:
            start_date = _optional_datetime(payload.get("start_date_local"))

        name = payload.get("name")
        return cls(
            id=activity_id,
            type=str(activity_type),
            name=str(name) if name else None,
            distance=_optional_float(payload.get("distance")),
            moving_time=_optional_float(payload.get("moving_time")),
            elapsed_time=_optional_float(payload.get("elapsed_time")),
            average_heartrate=_optional_float(payload.get("average_heartrate")),
            average_watts=_optional_float(payload.get("average_watts")),
            start_date=start_date,
            start_latlng=parse_latlng(payload.get("start_latlng")),
            summary_polyline=str(polyline) if polyline else None,
        )


@dataclass(frozen=True, slots=True)
class RecoveryRecord:
    """One daily recovery measurement from a wearable."""

    date: Optional[datetime] = None
    recovery_score: Optional[float] = None
    resting_heart_rate: Optional[float] = None
    hrv_rmssd_milli: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RecoveryRecord":
        """Build a record from the flattened app shape or the Whoop API shape."""

        if not isinstance(payload, Mapping):
            raise ActivityPayloadError(
                f"Recovery payload must be a mapping, got {type(payload).__name__}"
            )
        score = payload.get("score")
        if isinstance(score, Mapping):
            return cls(
                date=_optional_datetime(payload.get("created_at")),
                recovery_score=_optional_float(score.get("recovery_score")),
                resting_heart_rate=_optional_float(score.get("resting_heart_rate")),
                hrv_rmssd_milli=_optional_float(score.get("hrv_rmssd_milli")),
            )
        return cls(
            date=_optional_datetime(payload.get("date", payload.get("created_at"))),
            recovery_score=_optional_float(payload.get("recoveryScore")),
            resting_heart_rate=_optional_float(payload.get("restingHr")),
            hrv_rmssd_milli=_optional_float(payload.get("hrv")),
        )


def latest_recovery(records: Sequence[RecoveryRecord]) -> Optional[RecoveryRecord]:
    """Return the most recent recovery record; undated records sort last."""

    if not records:
        return None
    dated = [record for record in records if record.date is not None]
    if not dated:
        return records[0]
    return max(dated, key=lambda record: record.date)  # type: ignore[arg-type,return-value]


@dataclass(slots=True)
class RouteSummary:
    """Self-contained description of one recurring route."""

    name: str
    count: int
    distance: float
    type: str
    best_time: float
    best_date: Optional[datetime]
    last_time: float
    last_date: Optional[datetime]
    time_diff: float
    polyline: Optional[str]
    best_polyline: Optional[str]
    activities: List[Activity] = field(default_factory=list)

    def to_row(self) -> Dict[str, Any]:
        """Return a flat mapping suited to tabular export."""

        return {
            "Route": self.name,
            "Type": self.type,
            "Runs": self.count,
            "Avg Distance (km)": round(self.distance / 1000.0, 2),
            "Best Time (sec)": self.best_time,
            "Best Date": _naive(self.best_date),
            "Last Time (sec)": self.last_time,
            "Last Date": _naive(self.last_date),
            "Delta (sec)": self.time_diff,
        }


@dataclass(frozen=True, slots=True)
class FitnessEstimate:
    """VO2max estimate together with the heart rate inputs that produced it."""

    vo2max: int
    resting_heart_rate: float
    max_heart_rate: float
    heart_rate_reserve: float
    sample_size: int
    level: str


@dataclass(frozen=True, slots=True)
class FitnessSummary:
    """Fitness assessment over the recent lookback window."""

    vo2max: Optional[FitnessEstimate]
    resting_heart_rate: Optional[int]
    hours_per_week: float
    average_watts: Optional[int]

    def is_empty(self) -> bool:
        return (
            self.vo2max is None
            and self.resting_heart_rate is None
            and self.hours_per_week == 0
        )


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # Excel cannot store timezone-aware datetimes.
    if value is None:
        return None
    return to_utc_aware(value).replace(tzinfo=None)
