"""Shared HTTP response helpers for Strava API interactions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..errors import StravaAPIError, StravaPermissionError, StravaRateLimitError

__all__ = [
    "classify_response_status",
    "extract_error",
]

LOGGER = logging.getLogger(__name__)


def classify_response_status(
    response: requests.Response,
    context: str,
    *,
    attempt: int,
    can_retry: bool,
) -> Tuple[str, Optional[Exception]]:
    """Return action for a response status: ``ok``, ``retry`` or ``raise``."""

    status = response.status_code
    if status < 400:
        return "ok", None

    detail = extract_error(response)

    def with_detail(message: str) -> str:
        return f"{message} | {detail}" if detail else message

    if status == 429:
        if can_retry:
            LOGGER.warning("%s rate limited (429) attempt=%s", context, attempt)
            return "retry", None
        message = with_detail(f"{context} rate limited after {attempt} attempts")
        LOGGER.error(message)
        return "raise", StravaRateLimitError(message)

    if status in (401, 403):
        message = with_detail(f"{context} forbidden (status {status})")
        LOGGER.warning(message)
        return "raise", StravaPermissionError(message)

    if 500 <= status < 600 and can_retry:
        LOGGER.warning(
            "%s server error %s attempt=%s; retrying", context, status, attempt
        )
        return "retry", None

    message = with_detail(f"{context} request failed (status {status})")
    LOGGER.error(message)
    return "raise", StravaAPIError(message)


def extract_error(resp: Optional[requests.Response]) -> Optional[str]:
    """Return compact string with Strava error info (message + codes) if present."""

    if resp is None:
        return None
    data = _safe_json(resp)
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    parts = _collect_error_parts(data)
    return " | ".join(parts) if parts else None


def _safe_json(resp: requests.Response) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except ValueError as exc:
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text extraction when JSON parsing fails."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


def _collect_error_parts(data: Dict[str, Any]) -> List[str]:
    """Build error snippets from the standard Strava error response."""

    parts: List[str] = []
    message = data.get("message")
    if message:
        parts.append(str(message))
    errors = data.get("errors")
    if isinstance(errors, list):
        for err in errors:
            if not isinstance(err, dict):
                continue
            resource = err.get("resource")
            field = err.get("field")
            code = err.get("code")
            target = "/".join(filter(None, (resource, field)))
            if code and target:
                parts.append(f"{target}:{code}")
            elif code:
                parts.append(str(code))
    return parts
