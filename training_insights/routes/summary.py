"""Per-route statistics: best time, latest effort and the gap between them."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import List, Sequence

from ..models import UNNAMED_ROUTE, Activity, RouteSummary
from ..utils import to_utc_aware
from .matcher import RouteCluster

__all__ = ["summarize_route", "route_name", "newest_first"]

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def route_name(activities: Sequence[Activity]) -> str:
    """Return the most common activity name; ties go to the first seen."""

    counts = Counter(activity.name or UNNAMED_ROUTE for activity in activities)
    if not counts:
        return UNNAMED_ROUTE
    return counts.most_common(1)[0][0]


def newest_first(activities: Sequence[Activity]) -> List[Activity]:
    """Return ``activities`` sorted by start date, most recent first."""

    return sorted(
        activities,
        key=lambda activity: (
            to_utc_aware(activity.start_date) if activity.start_date else _UNDATED
        ),
        reverse=True,
    )


def _moving_time(activity: Activity) -> float:
    return activity.moving_time if activity.moving_time is not None else 0.0


def summarize_route(cluster: RouteCluster) -> RouteSummary:
    """Build the display summary for one cluster."""

    members = cluster.activities
    ordered = newest_first(members)
    latest = ordered[0]
    best = min(members, key=_moving_time)
    total_distance = sum(activity.distance or 0.0 for activity in members)
    best_time = _moving_time(best)
    last_time = _moving_time(latest)
    return RouteSummary(
        name=route_name(members),
        count=len(members),
        distance=total_distance / len(members),
        type=cluster.anchor.type,
        best_time=best_time,
        best_date=best.start_date,
        last_time=last_time,
        last_date=latest.start_date,
        time_diff=last_time - best_time,
        polyline=latest.summary_polyline,
        best_polyline=best.summary_polyline,
        activities=ordered,
    )
