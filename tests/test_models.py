"""Tests for payload parsing into activity and recovery records."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import make_payload
from training_insights.errors import ActivityPayloadError
from training_insights.models import (
    Activity,
    RecoveryRecord,
    latest_recovery,
    parse_latlng,
)


def test_activity_from_strava_payload() -> None:
    payload = make_payload(
        42,
        average_heartrate=151.2,
        average_watts=None,
        start_date="2025-05-30T06:15:00Z",
    )
    activity = Activity.from_payload(payload)
    assert activity.id == 42
    assert activity.type == "Run"
    assert activity.distance == 5000.0
    assert activity.moving_time == 1500.0
    assert activity.elapsed_time == 1600.0
    assert activity.average_heartrate == 151.2
    assert activity.average_watts is None
    assert activity.start_date == datetime(2025, 5, 30, 6, 15, tzinfo=timezone.utc)
    assert activity.start_latlng == (52.52, 13.405)
    assert activity.summary_polyline == payload["map"]["summary_polyline"]


def test_activity_from_stored_row() -> None:
    row = {
        "strava_id": "9001",
        "type": "Ride",
        "distance": "20500.5",
        "moving_time": 3600,
        "start_date": "2025-05-30T06:15:00+02:00",
        "start_latlng": "[48.1, 11.5]",
        "summary_polyline": "_p~iF~ps|U",
    }
    activity = Activity.from_payload(row)
    assert activity.id == "9001"
    assert activity.distance == 20500.5
    assert activity.start_latlng == (48.1, 11.5)
    assert activity.start_date == datetime(2025, 5, 30, 4, 15, tzinfo=timezone.utc)
    assert activity.summary_polyline == "_p~iF~ps|U"
    assert activity.name is None


def test_missing_optionals_stay_none() -> None:
    activity = Activity.from_payload({"id": 1, "type": "Run"})
    assert activity.distance is None
    assert activity.moving_time is None
    assert activity.start_date is None
    assert activity.start_latlng is None
    assert activity.summary_polyline is None


def test_zero_distance_is_not_unknown() -> None:
    activity = Activity.from_payload({"id": 1, "type": "Run", "distance": 0})
    assert activity.distance == 0.0


def test_falls_back_to_local_start_date() -> None:
    activity = Activity.from_payload(
        {"id": 1, "type": "Run", "start_date_local": "2025-01-02T08:00:00"}
    )
    assert activity.start_date == datetime(2025, 1, 2, 8, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ([1.5, 2.5], (1.5, 2.5)),
        ((1, 2), (1.0, 2.0)),
        ("[1.5, 2.5]", (1.5, 2.5)),
        ([], None),
        (None, None),
        ("not json", None),
        ([1.0], None),
        (["a", "b"], None),
    ],
)
def test_parse_latlng(value, expected) -> None:
    assert parse_latlng(value) == expected


@pytest.mark.parametrize("payload", [{"type": "Run"}, {"id": "", "type": "Run"}, ["id"]])
def test_invalid_activity_payloads(payload) -> None:
    with pytest.raises(ActivityPayloadError):
        Activity.from_payload(payload)


def test_recovery_from_whoop_payload() -> None:
    record = RecoveryRecord.from_payload(
        {
            "created_at": "2025-05-31T07:00:00.000Z",
            "score": {
                "recovery_score": 71,
                "resting_heart_rate": 48.0,
                "hrv_rmssd_milli": 65.3,
            },
        }
    )
    assert record.resting_heart_rate == 48.0
    assert record.recovery_score == 71.0
    assert record.hrv_rmssd_milli == 65.3
    assert record.date == datetime(2025, 5, 31, 7, 0, tzinfo=timezone.utc)


def test_recovery_from_flat_payload() -> None:
    record = RecoveryRecord.from_payload(
        {"date": "2025-05-31T07:00:00Z", "restingHr": 51, "recoveryScore": 80, "hrv": 70}
    )
    assert record.resting_heart_rate == 51.0
    assert record.recovery_score == 80.0


def test_latest_recovery() -> None:
    older = RecoveryRecord(date=datetime(2025, 5, 1, tzinfo=timezone.utc), resting_heart_rate=55)
    newer = RecoveryRecord(date=datetime(2025, 5, 2, tzinfo=timezone.utc), resting_heart_rate=50)
    undated = RecoveryRecord(resting_heart_rate=60)
    assert latest_recovery([older, undated, newer]) is newer
    assert latest_recovery([undated]) is undated
    assert latest_recovery([]) is None


def test_sport_type_is_a_fallback_for_type() -> None:
    activity = Activity.from_payload({"id": 1, "sport_type": "TrailRun"})
    assert activity.type == "TrailRun"
    assert not hasattr(activity, "sport_type")
