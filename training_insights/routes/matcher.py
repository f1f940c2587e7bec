"""Greedy grouping of activities into recurring routes.

Activities are processed in the order given. Each one is compared with the
anchor (first member) of every existing cluster and joins the first cluster
whose anchor starts within the start tolerance and whose distance is within
the relative distance tolerance. Otherwise it opens a new cluster.

Membership is only ever tested against the anchor, never against other
members or a running centre, so the final grouping depends on input order:
a route whose recorded start drifts over time can split into several
clusters depending on which activity happened to come first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, List, Optional, Sequence

from ..activity_types import activity_type_matches
from ..config import DEFAULT_ROUTE_SETTINGS, RouteMatchSettings
from ..models import Activity, LatLon
from .geodesy import distance_between
from .polyline import first_point

__all__ = [
    "RouteCluster",
    "resolve_start",
    "is_route_candidate",
    "cluster_activities",
    "rank_recurring",
]

LOGGER = logging.getLogger(__name__)


def resolve_start(activity: Activity) -> Optional[LatLon]:
    """Return the activity's start coordinate.

    Falls back to the first point of the encoded polyline when the start
    field is missing.
    """

    if activity.start_latlng is not None:
        return activity.start_latlng
    return first_point(activity.summary_polyline)


@dataclass(slots=True)
class RouteCluster:
    """Activities judged to follow the same physical route."""

    anchor_start: LatLon
    activities: List[Activity] = field(default_factory=list)

    @property
    def anchor(self) -> Activity:
        return self.activities[0]

    @property
    def count(self) -> int:
        return len(self.activities)

    def accepts(
        self,
        start: LatLon,
        distance: float,
        settings: RouteMatchSettings = DEFAULT_ROUTE_SETTINGS,
    ) -> bool:
        """Return ``True`` when a start/distance pair matches the anchor."""

        anchor_distance = self.anchor.distance
        if not anchor_distance or anchor_distance <= 0:
            return False
        if (
            distance_between(start, self.anchor_start, settings.earth_radius_m)
            > settings.start_tolerance_m
        ):
            return False
        relative = abs(distance - anchor_distance) / anchor_distance
        return relative <= settings.distance_tolerance


def is_route_candidate(
    activity: Activity,
    types: Iterable[str],
    settings: RouteMatchSettings = DEFAULT_ROUTE_SETTINGS,
) -> bool:
    """Return ``True`` when ``activity`` can take part in route matching."""

    if not activity_type_matches(activity.type, types):
        return False
    if activity.distance is None or activity.distance <= settings.min_distance_m:
        return False
    if (
        activity.moving_time is None
        or activity.moving_time <= settings.min_moving_time_s
    ):
        return False
    if not activity.summary_polyline:
        return False
    return resolve_start(activity) is not None


def cluster_activities(
    activities: Sequence[Activity],
    types: Iterable[str],
    settings: RouteMatchSettings = DEFAULT_ROUTE_SETTINGS,
) -> List[RouteCluster]:
    """Group eligible activities into clusters, preserving encounter order.

    Every cluster is returned, including single-member ones; use
    :func:`rank_recurring` to keep only recurring routes.
    """

    allowed = frozenset(types)
    clusters: List[RouteCluster] = []
    skipped = 0
    for activity in activities:
        if not is_route_candidate(activity, allowed, settings):
            skipped += 1
            continue
        start = resolve_start(activity)
        distance = activity.distance
        if start is None or distance is None:
            skipped += 1
            continue
        for cluster in clusters:
            if cluster.accepts(start, distance, settings):
                cluster.activities.append(activity)
                break
        else:
            clusters.append(RouteCluster(anchor_start=start, activities=[activity]))
    LOGGER.debug(
        "Clustered %d activities into %d routes (%d not eligible)",
        len(activities) - skipped,
        len(clusters),
        skipped,
    )
    return clusters


def rank_recurring(
    clusters: Sequence[RouteCluster],
    top_n: Optional[int] = None,
    settings: RouteMatchSettings = DEFAULT_ROUTE_SETTINGS,
) -> List[RouteCluster]:
    """Return recurring clusters sorted by size, largest first.

    Clusters below ``settings.min_activities`` are dropped. The sort is
    stable, so clusters of equal size keep their encounter order.
    ``top_n=None`` keeps every recurring cluster.
    """

    recurring = [c for c in clusters if c.count >= settings.min_activities]
    recurring.sort(key=lambda c: c.count, reverse=True)
    if top_n is not None:
        recurring = recurring[: max(top_n, 0)]
    return recurring
