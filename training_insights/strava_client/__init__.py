"""Minimal Strava API client (session, paginated activity fetch)."""

from .activities import fetch_athlete_activities, fetch_page_with_retries  # noqa: F401
from .response_handling import classify_response_status, extract_error  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
