"""Utilities for classifying Strava activity types into groups."""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable

__all__ = [
    "RUN_TYPES",
    "RIDE_TYPES",
    "POWER_RIDE_TYPES",
    "TYPE_GROUPS",
    "normalize_activity_type",
    "activity_type_matches",
    "resolve_type_group",
]

RUN_TYPES: FrozenSet[str] = frozenset({"Run", "TrailRun", "VirtualRun"})
RIDE_TYPES: FrozenSet[str] = frozenset(
    {"Ride", "VirtualRide", "GravelRide", "MountainBikeRide"}
)
# Only these feed the average ride power figure.
POWER_RIDE_TYPES: FrozenSet[str] = frozenset({"Ride", "VirtualRide"})

TYPE_GROUPS: dict[str, FrozenSet[str]] = {
    "run": RUN_TYPES,
    "ride": RIDE_TYPES,
}


def normalize_activity_type(value: Any) -> str | None:
    """Return a lowercase activity type string or ``None`` when missing.

    The Strava API can return either ``type`` or ``sport_type`` values, often
    with inconsistent casing. Normalising once keeps downstream comparisons
    cheap and deterministic.
    """

    if value is None:
        return None
    normalized = str(value).strip().lower()
    return normalized or None


def activity_type_matches(activity_type: Any, allowed: Iterable[str]) -> bool:
    """Return ``True`` when ``activity_type`` is one of the ``allowed`` types.

    Comparison is case-insensitive. Unlike a general purpose filter an empty
    ``allowed`` collection matches nothing: route and fitness calculations
    always operate on an explicit type group.
    """

    normalized = normalize_activity_type(activity_type)
    if normalized is None:
        return False
    return normalized in {normalize_activity_type(name) for name in allowed}


def resolve_type_group(value: str | Iterable[str]) -> FrozenSet[str]:
    """Return the set of Strava types described by ``value``.

    ``value`` is either a group name (``"run"``/``"ride"``, any casing) or an
    explicit collection of type names which is returned unchanged.
    """

    if isinstance(value, str):
        group = TYPE_GROUPS.get(value.strip().lower())
        if group is not None:
            return group
        return frozenset({value.strip()})
    return frozenset(value)
