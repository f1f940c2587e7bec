"""Paginated fetch of an athlete's activity list."""

from __future__ import annotations

from datetime import datetime
import logging
import time
from typing import Any, Callable, Dict, List, Optional, TypeAlias

import requests

from ..config import (
    ACTIVITY_PAGE_SIZE,
    REQUEST_TIMEOUT,
    STRAVA_BACKOFF_MAX_SECONDS,
    STRAVA_BASE_URL,
    STRAVA_MAX_RETRIES,
)
from ..errors import StravaAPIError
from ..utils import to_utc_aware
from .response_handling import classify_response_status
from .session import auth_headers, get_default_session

JSONList: TypeAlias = List[Dict[str, Any]]

LOGGER = logging.getLogger(__name__)

__all__ = ["fetch_athlete_activities", "fetch_page_with_retries"]


def fetch_page_with_retries(
    *,
    access_token: str,
    url: str,
    params: Dict[str, Any],
    page: int,
    session: requests.Session,
    timeout: int = REQUEST_TIMEOUT,
    max_retries: int = STRAVA_MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
) -> JSONList:
    """GET one page of a list endpoint with retry/backoff on transient errors.

    Network failures, 5xx and 429 responses are retried up to
    ``max_retries`` attempts with exponential backoff. Permission and other
    client errors raise immediately.
    """

    context = f"activities page={page}"
    attempts = 0
    backoff = 1.0
    while True:
        attempts += 1
        can_retry = attempts < max_retries
        try:
            resp = session.get(
                url,
                headers=auth_headers(access_token),
                params=params,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            if not can_retry:
                LOGGER.error(
                    "%s network error (giving up) attempts=%s err=%s",
                    context,
                    attempts,
                    exc,
                )
                raise StravaAPIError(f"{context} failed: {exc}") from exc
            LOGGER.warning(
                "%s network error attempt=%s err=%s; backoff %.1fs",
                context,
                attempts,
                exc.__class__.__name__,
                backoff,
            )
            sleep(backoff)
            backoff = min(backoff * 2, STRAVA_BACKOFF_MAX_SECONDS)
            continue

        action, error = classify_response_status(
            resp, context, attempt=attempts, can_retry=can_retry
        )
        if action == "retry":
            sleep(backoff)
            backoff = min(backoff * 2, STRAVA_BACKOFF_MAX_SECONDS)
            continue
        if action == "raise" and error is not None:
            raise error

        try:
            data = resp.json()
        except ValueError as exc:
            raise StravaAPIError(f"{context} returned a non-JSON body") from exc
        if not isinstance(data, list):
            raise StravaAPIError(
                f"{context} returned unexpected JSON type {type(data).__name__}"
            )
        return data


def fetch_athlete_activities(
    access_token: str,
    after: Optional[datetime] = None,
    before: Optional[datetime] = None,
    *,
    per_page: int = ACTIVITY_PAGE_SIZE,
    max_pages: Optional[int] = None,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> JSONList:
    """Fetch the authenticated athlete's activities, newest pages first.

    Pages are requested until a page comes back shorter than ``per_page``
    (or empty), or ``max_pages`` is reached. Raw Strava payloads are
    returned; use :meth:`Activity.from_payload` to parse them.
    """

    if not access_token:
        raise StravaAPIError("An access token is required to fetch activities")
    http = session or get_default_session()
    url = f"{STRAVA_BASE_URL}/athlete/activities"
    base_params: Dict[str, Any] = {"per_page": per_page}
    if after is not None:
        base_params["after"] = int(to_utc_aware(after).timestamp())
    if before is not None:
        base_params["before"] = int(to_utc_aware(before).timestamp())

    activities: JSONList = []
    page = 1
    while True:
        params = dict(base_params)
        params["page"] = page
        batch = fetch_page_with_retries(
            access_token=access_token,
            url=url,
            params=params,
            page=page,
            session=http,
            sleep=sleep,
        )
        activities.extend(batch)
        LOGGER.info("Fetched activities page %s: %s activities", page, len(batch))
        if len(batch) < per_page:
            break
        if max_pages is not None and page >= max_pages:
            break
        page += 1
    return activities
