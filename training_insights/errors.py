"""Central error types used across the application."""

from __future__ import annotations


class TrainingInsightsError(RuntimeError):
    """Base error for all package failures."""


class ActivityPayloadError(TrainingInsightsError, ValueError):
    """Raised when an activity or recovery payload cannot be interpreted."""


class ActivityStoreError(TrainingInsightsError):
    """Raised when a stored activity file is unreadable or has the wrong shape."""


class StravaAPIError(TrainingInsightsError):
    """Base error for Strava API failures."""


class StravaPermissionError(StravaAPIError):
    """Raised when the API reports insufficient scopes or authentication issues."""


class StravaRateLimitError(StravaAPIError):
    """Raised when Strava keeps answering HTTP 429 after all retries."""


__all__ = [
    "TrainingInsightsError",
    "ActivityPayloadError",
    "ActivityStoreError",
    "StravaAPIError",
    "StravaPermissionError",
    "StravaRateLimitError",
]
