"""Global pytest fixtures & helpers.

Adds project root to path and provides activity factories shared by the
route, fitness and storage tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from itertools import count

import polyline
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from training_insights.models import Activity

BERLIN = (52.5200, 13.4050)
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

_ids = count(1)


# --- Factory helpers -------------------------------------------------
def path_from(start, north_m=1000.0):
    """Return an encoded two-point path leaving ``start`` northwards."""

    lat, lng = start
    return polyline.encode([(lat, lng), (lat + north_m / 111_195.0, lng)], 5)


def make_activity(
    distance=5000.0,
    moving_time=1500.0,
    *,
    start=BERLIN,
    activity_type="Run",
    name="Morning Run",
    start_date=None,
    days_ago=1,
    heartrate=None,
    watts=None,
    summary_polyline="auto",
    activity_id=None,
):
    if summary_polyline == "auto":
        summary_polyline = path_from(start) if start is not None else None
    if start_date is None:
        start_date = NOW - timedelta(days=days_ago)
    return Activity(
        id=activity_id if activity_id is not None else next(_ids),
        type=activity_type,
        name=name,
        distance=distance,
        moving_time=moving_time,
        elapsed_time=moving_time,
        average_heartrate=heartrate,
        average_watts=watts,
        start_date=start_date,
        start_latlng=start,
        summary_polyline=summary_polyline,
    )


def make_payload(activity_id, *, days_ago=1, distance=5000.0, **extra):
    """Return a raw Strava list payload."""

    start = (NOW - timedelta(days=days_ago)).strftime("%Y-%m-%dT%H:%M:%SZ")
    payload = {
        "id": activity_id,
        "name": f"Run {activity_id}",
        "type": "Run",
        "sport_type": "Run",
        "distance": distance,
        "moving_time": 1500,
        "elapsed_time": 1600,
        "start_date": start,
        "start_latlng": list(BERLIN),
        "map": {"summary_polyline": path_from(BERLIN)},
    }
    payload.update(extra)
    return payload


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def activity_factory():
    return make_activity


@pytest.fixture
def now():
    return NOW
