"""Central configuration for the training insights toolkit.

Values are module constants imported by the rest of the package. Most of them
can be overridden through environment variables (optionally via a local
`.env`). The route matching and fitness estimation functions never read these
constants directly; they receive an immutable settings object that defaults
to the values below, so callers and tests can pass alternatives explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Input/Output
# ---------------------------------------------------------------------------
# Default locations used by the command line entry point.
ACTIVITIES_FILE = os.getenv("TRAINING_ACTIVITIES_FILE", "activities.json")
RECOVERY_FILE = os.getenv("TRAINING_RECOVERY_FILE", "")
OUTPUT_FILE = os.getenv("TRAINING_OUTPUT_FILE", "training_report")

# Append _YYYYMMDD_HHMMSS to the output name when True.
OUTPUT_FILE_TIMESTAMP_ENABLED = _env_bool("TRAINING_OUTPUT_TIMESTAMP", True)

# Lookback applied when loading activities for the route overview.
ACTIVITY_LOOKBACK_DAYS = _env_int("ACTIVITY_LOOKBACK_DAYS", 365)


# ---------------------------------------------------------------------------
# Route matching
# ---------------------------------------------------------------------------
# Mean Earth radius (metres) used by the haversine distance.
EARTH_RADIUS_M = 6_371_000.0

# Maximum distance (metres) between two start points on the same route.
ROUTE_START_TOLERANCE_M = _env_float("ROUTE_START_TOLERANCE_M", 200.0)

# Maximum relative distance difference against the route's anchor activity.
ROUTE_DISTANCE_TOLERANCE = _env_float("ROUTE_DISTANCE_TOLERANCE", 0.10)

# Activities at or below these values never take part in route matching.
ROUTE_MIN_DISTANCE_M = _env_float("ROUTE_MIN_DISTANCE_M", 500.0)
ROUTE_MIN_MOVING_TIME_S = _env_float("ROUTE_MIN_MOVING_TIME_S", 120.0)

# A route needs at least this many activities to count as recurring.
ROUTE_MIN_ACTIVITIES = _env_int("ROUTE_MIN_ACTIVITIES", 2)

# Number of recurring routes surfaced per activity group.
ROUTE_TOP_N = _env_int("ROUTE_TOP_N", 3)


# ---------------------------------------------------------------------------
# Fitness estimation
# ---------------------------------------------------------------------------
# Assumed maximum heart rate (bpm).
VO2MAX_MAX_HEART_RATE = _env_float("VO2MAX_MAX_HEART_RATE", 172.0)

# Resting heart rate used when no recovery record is available (bpm).
VO2MAX_DEFAULT_RESTING_HR = _env_float("VO2MAX_DEFAULT_RESTING_HR", 52.0)

# Pace to 12-minute effort extrapolation factor. Fixed, not read from env.
VO2MAX_FATIGUE_FACTOR = 0.92

# Cooper test regression constants.
COOPER_INTERCEPT_M = 504.9
COOPER_SLOPE = 44.73

# Plausibility window: estimates are capped at the ceiling and anything at or
# below the floor is dropped.
VO2MAX_CAP = 65.0
VO2MAX_FLOOR = 30.0

# Heart-rate reserve fraction from which an effort counts as maximal.
VO2MAX_SUBMAXIMAL_THRESHOLD = 0.95

# Qualifying run filter.
VO2MAX_LOOKBACK_DAYS = _env_int("VO2MAX_LOOKBACK_DAYS", 90)
VO2MAX_MIN_DISTANCE_M = _env_float("VO2MAX_MIN_DISTANCE_M", 3000.0)
VO2MAX_MIN_MOVING_TIME_S = _env_float("VO2MAX_MIN_MOVING_TIME_S", 600.0)

# Number of best per-activity estimates averaged into the final value.
VO2MAX_TOP_EFFORTS = _env_int("VO2MAX_TOP_EFFORTS", 3)


# ---------------------------------------------------------------------------
# Strava settings
# ---------------------------------------------------------------------------
STRAVA_BASE_URL = "https://www.strava.com/api/v3"

# Access token used by the sync helpers. Token refresh is handled elsewhere.
STRAVA_ACCESS_TOKEN = os.getenv("STRAVA_ACCESS_TOKEN", "")

# HTTP session pool sizes for concurrent requests.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 15)

# Retry/backoff behaviour for the activity fetch loop.
STRAVA_MAX_RETRIES = _env_int("STRAVA_MAX_RETRIES", 3)
STRAVA_BACKOFF_MAX_SECONDS = _env_float("STRAVA_BACKOFF_MAX_SECONDS", 4.0)

# Page size for the athlete activity list endpoint (Strava maximum is 200).
ACTIVITY_PAGE_SIZE = 200


# ---------------------------------------------------------------------------
# Excel formatting
# ---------------------------------------------------------------------------
EXCEL_AUTOSIZE_COLUMNS = True
EXCEL_AUTOSIZE_MAX_WIDTH = 50  # characters
EXCEL_AUTOSIZE_MIN_WIDTH = 6  # characters
EXCEL_AUTOSIZE_PADDING = 2  # extra characters added to the detected max


@dataclass(frozen=True, slots=True)
class RouteMatchSettings:
    """Thresholds used when grouping activities into recurring routes."""

    start_tolerance_m: float = ROUTE_START_TOLERANCE_M
    distance_tolerance: float = ROUTE_DISTANCE_TOLERANCE
    min_distance_m: float = ROUTE_MIN_DISTANCE_M
    min_moving_time_s: float = ROUTE_MIN_MOVING_TIME_S
    min_activities: int = ROUTE_MIN_ACTIVITIES
    earth_radius_m: float = EARTH_RADIUS_M


@dataclass(frozen=True, slots=True)
class FitnessSettings:
    """Physiological assumptions and filters used by the VO2max estimate."""

    max_heart_rate: float = VO2MAX_MAX_HEART_RATE
    default_resting_heart_rate: float = VO2MAX_DEFAULT_RESTING_HR
    fatigue_factor: float = VO2MAX_FATIGUE_FACTOR
    cap: float = VO2MAX_CAP
    floor: float = VO2MAX_FLOOR
    submaximal_threshold: float = VO2MAX_SUBMAXIMAL_THRESHOLD
    lookback_days: int = VO2MAX_LOOKBACK_DAYS
    min_distance_m: float = VO2MAX_MIN_DISTANCE_M
    min_moving_time_s: float = VO2MAX_MIN_MOVING_TIME_S
    top_efforts: int = VO2MAX_TOP_EFFORTS


DEFAULT_ROUTE_SETTINGS = RouteMatchSettings()
DEFAULT_FITNESS_SETTINGS = FitnessSettings()
