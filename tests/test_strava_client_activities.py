"""Tests for the paginated activity fetch with mocked HTTP responses."""

import json
from datetime import datetime, timezone

import pytest
import requests

from training_insights.errors import (
    StravaAPIError,
    StravaPermissionError,
    StravaRateLimitError,
)
from training_insights.strava_client import (
    fetch_athlete_activities,
    fetch_page_with_retries,
)
from training_insights.strava_client.response_handling import extract_error


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data if data is not None else []
        self._text = text
        self.url = "https://example.invalid"

    def json(self):
        if self._text is not None:
            raise ValueError("not json")
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._data)


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": dict(params)})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _page(start, size):
    return [{"id": start + i, "type": "Run"} for i in range(size)]


@pytest.fixture
def sleeps():
    return []


def _fetch(session, sleeps, **kwargs):
    return fetch_athlete_activities(
        "token", session=session, sleep=sleeps.append, **kwargs
    )


def test_pagination_stops_on_short_page(sleeps):
    session = FakeSession([FakeResp(data=_page(0, 3)), FakeResp(data=_page(3, 1))])
    activities = _fetch(session, sleeps, per_page=3)
    assert [a["id"] for a in activities] == [0, 1, 2, 3]
    assert [c["params"]["page"] for c in session.calls] == [1, 2]
    assert session.calls[0]["headers"] == {"Authorization": "Bearer token"}
    assert session.calls[0]["url"].endswith("/athlete/activities")
    assert sleeps == []


def test_empty_page_ends_pagination(sleeps):
    session = FakeSession([FakeResp(data=_page(0, 2)), FakeResp(data=[])])
    assert len(_fetch(session, sleeps, per_page=2)) == 2
    assert len(session.calls) == 2


def test_max_pages_limits_requests(sleeps):
    session = FakeSession([FakeResp(data=_page(0, 2)), FakeResp(data=_page(2, 2))])
    activities = _fetch(session, sleeps, per_page=2, max_pages=1)
    assert len(activities) == 2
    assert len(session.calls) == 1


def test_after_and_before_become_epoch_seconds(sleeps):
    session = FakeSession([FakeResp(data=[])])
    _fetch(
        session,
        sleeps,
        after=datetime(2025, 1, 1, tzinfo=timezone.utc),
        before=datetime(2025, 1, 2, tzinfo=timezone.utc),
    )
    params = session.calls[0]["params"]
    assert params["after"] == 1735689600
    assert params["before"] == 1735776000


def test_server_error_is_retried(sleeps):
    session = FakeSession([FakeResp(503, data={}), FakeResp(data=_page(0, 1))])
    activities = _fetch(session, sleeps)
    assert len(activities) == 1
    assert sleeps == [1.0]


def test_network_error_is_retried_then_raises(sleeps):
    session = FakeSession(
        [requests.ConnectionError("boom"), requests.Timeout("slow"), requests.ConnectionError("x")]
    )
    with pytest.raises(StravaAPIError):
        _fetch(session, sleeps)
    assert len(session.calls) == 3
    assert sleeps == [1.0, 2.0]


def test_unauthorized_raises_permission_error(sleeps):
    session = FakeSession([FakeResp(401, data={"message": "Authorization Error"})])
    with pytest.raises(StravaPermissionError, match="Authorization Error"):
        _fetch(session, sleeps)
    assert sleeps == []


def test_rate_limit_exhausts_retries():
    session = FakeSession([FakeResp(429, data={}), FakeResp(429, data={})])
    with pytest.raises(StravaRateLimitError):
        _fetch_with_retries(session, max_retries=2)
    assert len(session.calls) == 2


def _fetch_with_retries(session, max_retries):
    return fetch_page_with_retries(
        access_token="token",
        url="https://example.invalid/athlete/activities",
        params={"page": 1},
        page=1,
        session=session,
        max_retries=max_retries,
        sleep=lambda _s: None,
    )


def test_unexpected_json_shape_raises(sleeps):
    session = FakeSession([FakeResp(data={"message": "nope"})])
    with pytest.raises(StravaAPIError, match="unexpected JSON"):
        _fetch(session, sleeps)


def test_non_json_body_raises(sleeps):
    session = FakeSession([FakeResp(text="<html>")])
    with pytest.raises(StravaAPIError, match="non-JSON"):
        _fetch(session, sleeps)


def test_missing_token_raises():
    with pytest.raises(StravaAPIError):
        fetch_athlete_activities("", session=FakeSession([]))


def test_extract_error_collects_codes():
    resp = FakeResp(
        400,
        data={
            "message": "Bad Request",
            "errors": [{"resource": "Activity", "field": "after", "code": "invalid"}],
        },
    )
    assert extract_error(resp) == "Bad Request | Activity/after:invalid"
    assert extract_error(FakeResp(500, text="oops")) == "oops"
