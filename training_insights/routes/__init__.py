"""Public entry points for recurring route detection."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from ..activity_types import resolve_type_group
from ..config import DEFAULT_ROUTE_SETTINGS, ROUTE_TOP_N, RouteMatchSettings
from ..models import Activity, RouteSummary
from .geodesy import distance_between, haversine_m
from .matcher import (
    RouteCluster,
    cluster_activities,
    is_route_candidate,
    rank_recurring,
    resolve_start,
)
from .polyline import decode_polyline, first_point
from .summary import newest_first, route_name, summarize_route

__all__ = [
    "find_top_routes",
    "decode_polyline",
    "first_point",
    "haversine_m",
    "distance_between",
    "RouteCluster",
    "cluster_activities",
    "is_route_candidate",
    "rank_recurring",
    "resolve_start",
    "summarize_route",
    "route_name",
    "newest_first",
]

LOGGER = logging.getLogger(__name__)


def find_top_routes(
    activities: Sequence[Activity],
    types: str | Iterable[str],
    top_n: int = ROUTE_TOP_N,
    settings: RouteMatchSettings = DEFAULT_ROUTE_SETTINGS,
) -> List[RouteSummary]:
    """Return summaries of the ``top_n`` most frequently repeated routes.

    Args:
        activities: Activity history in the order it should be clustered.
        types: A type group name (``"run"``, ``"ride"``) or explicit Strava
            activity types.
        top_n: Maximum number of routes returned.
        settings: Matching thresholds.

    Returns:
        Route summaries sorted by member count, largest first. An empty list
        when nothing repeats.
    """

    allowed = resolve_type_group(types)
    clusters = cluster_activities(activities, allowed, settings)
    ranked = rank_recurring(clusters, top_n, settings)
    LOGGER.debug(
        "Found %d recurring routes for types=%s (returning %d)",
        sum(1 for c in clusters if c.count >= settings.min_activities),
        sorted(allowed),
        len(ranked),
    )
    return [summarize_route(cluster) for cluster in ranked]
