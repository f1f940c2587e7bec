"""Recurring route detection and fitness estimation over training history."""

from .errors import ActivityStoreError, StravaAPIError, TrainingInsightsError
from .fitness import build_fitness_summary, estimate_vo2max
from .models import Activity, FitnessEstimate, RecoveryRecord, RouteSummary
from .routes import decode_polyline, find_top_routes

__all__ = [
    "Activity",
    "RecoveryRecord",
    "RouteSummary",
    "FitnessEstimate",
    "find_top_routes",
    "decode_polyline",
    "estimate_vo2max",
    "build_fitness_summary",
    "TrainingInsightsError",
    "ActivityStoreError",
    "StravaAPIError",
]
