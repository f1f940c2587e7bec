"""JSON file backed storage for activity and recovery history.

Files hold either a bare JSON array of payloads or an object with an
``activities`` (or ``records``/``recoveries``) array. Payloads are kept in
their raw Strava/Whoop shape and parsed on load.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json
import logging
from os import PathLike
from pathlib import Path
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import requests

from .errors import ActivityPayloadError, ActivityStoreError
from .models import Activity, RecoveryRecord
from .routes.summary import newest_first
from .strava_client import fetch_athlete_activities
from .utils import to_utc_aware

__all__ = [
    "read_payloads",
    "parse_activities",
    "load_activities",
    "load_recovery",
    "save_activities",
    "sync_activities",
]

LOGGER = logging.getLogger(__name__)

PathInput = str | Path | PathLike[str]

_STORE_LOCK = threading.RLock()
_LIST_KEYS = ("activities", "records", "recoveries")


def read_payloads(path: PathInput) -> List[Dict[str, Any]]:
    """Return the raw payload list stored at ``path``."""

    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Store file not found: {file_path}")
    try:
        with file_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except ValueError as exc:
        raise ActivityStoreError(f"{file_path} is not valid JSON: {exc}") from exc
    if isinstance(data, Mapping):
        for key in _LIST_KEYS:
            if isinstance(data.get(key), list):
                data = data[key]
                break
    if not isinstance(data, list):
        raise ActivityStoreError(
            f"{file_path} must contain a JSON array of payloads, "
            f"got {type(data).__name__}"
        )
    return data


def parse_activities(payloads: Iterable[Any]) -> List[Activity]:
    """Parse payloads, skipping (and logging) the ones that are malformed."""

    activities: List[Activity] = []
    for index, payload in enumerate(payloads):
        try:
            activities.append(Activity.from_payload(payload))
        except ActivityPayloadError as exc:
            LOGGER.warning("Skipping activity payload #%s: %s", index, exc)
    return activities


def load_activities(
    path: PathInput,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Activity]:
    """Load activities from ``path``, newest first.

    When ``days`` is given only activities that started within that many
    days before ``now`` are returned; undated activities are then dropped.
    """

    activities = parse_activities(read_payloads(path))
    if days is not None:
        reference = to_utc_aware(now) if now else datetime.now(timezone.utc)
        cutoff = reference - timedelta(days=days)
        activities = [
            a for a in activities if a.start_date is not None and a.start_date >= cutoff
        ]
    LOGGER.info("Loaded %s activities from %s", len(activities), path)
    return newest_first(activities)


def load_recovery(path: PathInput) -> List[RecoveryRecord]:
    """Load recovery records from ``path``, most recent first."""

    records: List[RecoveryRecord] = []
    for index, payload in enumerate(read_payloads(path)):
        try:
            records.append(RecoveryRecord.from_payload(payload))
        except ActivityPayloadError as exc:
            LOGGER.warning("Skipping recovery payload #%s: %s", index, exc)
    undated = datetime.min.replace(tzinfo=timezone.utc)
    records.sort(key=lambda r: r.date or undated, reverse=True)
    LOGGER.info("Loaded %s recovery records from %s", len(records), path)
    return records


def _payload_key(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    value = payload.get("id", payload.get("strava_id"))
    return None if value is None else str(value)


def save_activities(path: PathInput, payloads: Sequence[Mapping[str, Any]]) -> int:
    """Upsert ``payloads`` into the store at ``path`` keyed by activity id.

    Existing entries with the same id are replaced; the rest are kept.
    Payloads without an id are ignored. Returns the stored payload count.
    """

    file_path = Path(path)
    with _STORE_LOCK:
        existing: List[Dict[str, Any]] = []
        if file_path.is_file():
            existing = read_payloads(file_path)
        merged: Dict[str, Dict[str, Any]] = {}
        for payload in existing:
            key = _payload_key(payload)
            if key is not None:
                merged[key] = payload
        added = 0
        for payload in payloads:
            key = _payload_key(payload)
            if key is None:
                LOGGER.debug("Ignoring payload without id")
                continue
            if key not in merged:
                added += 1
            merged[key] = dict(payload)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(list(merged.values()), handle, ensure_ascii=False, indent=2)
        tmp_path.replace(file_path)
    LOGGER.info(
        "Stored %s activities in %s (%s new)", len(merged), file_path, added
    )
    return len(merged)


def sync_activities(
    path: PathInput,
    access_token: str,
    days: int,
    *,
    session: Optional[requests.Session] = None,
    max_pages: Optional[int] = None,
) -> int:
    """Fetch the last ``days`` of activities from Strava and store them."""

    after = datetime.now(timezone.utc) - timedelta(days=days)
    payloads = fetch_athlete_activities(
        access_token, after=after, session=session, max_pages=max_pages
    )
    return save_activities(path, payloads)
