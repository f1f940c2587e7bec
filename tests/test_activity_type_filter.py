"""Tests for activity type grouping."""

import pytest

from training_insights.activity_types import (
    POWER_RIDE_TYPES,
    RIDE_TYPES,
    RUN_TYPES,
    activity_type_matches,
    normalize_activity_type,
    resolve_type_group,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Run", "run"), ("  TrailRun ", "trailrun"), ("", None), (None, None)],
)
def test_normalize_activity_type(value, expected):
    assert normalize_activity_type(value) == expected


def test_matches_are_case_insensitive():
    assert activity_type_matches("run", RUN_TYPES)
    assert activity_type_matches("VIRTUALRIDE", RIDE_TYPES)
    assert not activity_type_matches("Walk", RUN_TYPES)
    assert not activity_type_matches(None, RUN_TYPES)


def test_empty_allowed_set_matches_nothing():
    assert not activity_type_matches("Run", [])


def test_resolve_type_group():
    assert resolve_type_group("RUN") == RUN_TYPES
    assert resolve_type_group("ride") == RIDE_TYPES
    assert resolve_type_group("Swim") == frozenset({"Swim"})
    assert resolve_type_group(["Run", "Hike"]) == frozenset({"Run", "Hike"})


def test_ride_groups():
    assert "GravelRide" in RIDE_TYPES
    assert "MountainBikeRide" in RIDE_TYPES
    assert "EBikeRide" not in RIDE_TYPES
    assert POWER_RIDE_TYPES == frozenset({"Ride", "VirtualRide"})
