"""Command line entry point: recurring routes and fitness from stored history."""

from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .activity_store import load_activities, load_recovery, sync_activities
from .config import (
    ACTIVITIES_FILE,
    ACTIVITY_LOOKBACK_DAYS,
    OUTPUT_FILE,
    OUTPUT_FILE_TIMESTAMP_ENABLED,
    RECOVERY_FILE,
    ROUTE_TOP_N,
    STRAVA_ACCESS_TOKEN,
)
from .errors import ActivityStoreError, StravaAPIError
from .excel_writer import write_report
from .fitness import build_fitness_summary
from .models import Activity, FitnessSummary, RecoveryRecord, RouteSummary
from .routes import find_top_routes
from .utils import format_distance, format_time, format_time_delta
from .visualization import create_route_map, route_map_filename

LOGGER = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _resolve_output_path(output: Optional[str]) -> Path:
    if output:
        return Path(output)
    if OUTPUT_FILE_TIMESTAMP_ENABLED:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return Path(f"{OUTPUT_FILE}_{timestamp}.xlsx")
    return Path(f"{OUTPUT_FILE}.xlsx")


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser."""

    parser = argparse.ArgumentParser(
        description=(
            "Find recurring training routes and estimate VO2max from stored "
            "activity history."
        )
    )
    parser.add_argument("--activities", default=ACTIVITIES_FILE)
    parser.add_argument("--recovery", default=RECOVERY_FILE or None)
    parser.add_argument(
        "--groups",
        nargs="+",
        default=["run", "ride"],
        help="Activity groups to search for routes (run, ride or Strava types).",
    )
    parser.add_argument("--top", type=int, default=ROUTE_TOP_N)
    parser.add_argument(
        "--days",
        type=int,
        default=ACTIVITY_LOOKBACK_DAYS,
        help="Only consider activities from the last N days.",
    )
    parser.add_argument(
        "--sync-days",
        type=int,
        default=None,
        help="Fetch the last N days from Strava into the store before analysing.",
    )
    parser.add_argument("--output", help="Write an Excel report to this path.")
    parser.add_argument(
        "--excel",
        action="store_true",
        help="Write an Excel report using the default output name.",
    )
    parser.add_argument("--map-dir", type=Path, help="Write route maps here.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _log_routes(group: str, routes: Sequence[RouteSummary]) -> None:
    if not routes:
        LOGGER.info("No recurring %s routes found", group)
        return
    for idx, route in enumerate(routes, start=1):
        LOGGER.info(
            "%s #%d %s: %dx %s best=%s latest=%s (%s)",
            group,
            idx,
            route.name,
            route.count,
            format_distance(route.distance),
            format_time(route.best_time),
            format_time(route.last_time),
            format_time_delta(route.time_diff),
        )


def _log_fitness(summary: FitnessSummary) -> None:
    if summary.vo2max is not None:
        LOGGER.info(
            "VO2max %s (%s) from %d efforts, resting HR %.0f",
            summary.vo2max.vo2max,
            summary.vo2max.level,
            summary.vo2max.sample_size,
            summary.vo2max.resting_heart_rate,
        )
    else:
        LOGGER.info("No VO2max estimate available")
    LOGGER.info("Training volume %.1f h/week", summary.hours_per_week)
    if summary.average_watts is not None:
        LOGGER.info("Average ride power %d W", summary.average_watts)


def _write_maps(map_dir: Path, routes_by_group: Dict[str, List[RouteSummary]]) -> int:
    written = 0
    for routes in routes_by_group.values():
        for idx, route in enumerate(routes, start=1):
            path = map_dir / route_map_filename(idx, route)
            try:
                create_route_map(route, output_html_path=path)
            except ValueError as exc:
                LOGGER.warning("Skipping map for %s: %s", route.name, exc)
                continue
            written += 1
    return written


def analyse(
    activities: Sequence[Activity],
    groups: Sequence[str],
    top_n: int,
    recovery: Optional[Sequence[RecoveryRecord]] = None,
) -> tuple[Dict[str, List[RouteSummary]], FitnessSummary]:
    """Run route detection for every group and build the fitness summary."""

    routes_by_group = {
        group: find_top_routes(activities, group, top_n) for group in groups
    }
    fitness = build_fitness_summary(activities, recovery)
    return routes_by_group, fitness


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m training_insights``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.sync_days is not None:
        try:
            sync_activities(args.activities, STRAVA_ACCESS_TOKEN, args.sync_days)
        except StravaAPIError as exc:
            LOGGER.error("Strava sync failed: %s", exc)
            return 1

    try:
        activities = load_activities(args.activities, days=args.days)
        recovery = load_recovery(args.recovery) if args.recovery else None
    except (ActivityStoreError, FileNotFoundError) as exc:
        LOGGER.error("Failed to load stored history: %s", exc)
        return 1

    routes_by_group, fitness = analyse(activities, args.groups, args.top, recovery)
    for group, routes in routes_by_group.items():
        _log_routes(group, routes)
    _log_fitness(fitness)

    if args.output or args.excel:
        output_path = write_report(
            _resolve_output_path(args.output), routes_by_group, fitness
        )
        LOGGER.info("Report saved to %s", output_path)
    if args.map_dir is not None:
        count = _write_maps(args.map_dir, routes_by_group)
        LOGGER.info("Wrote %d route maps to %s", count, args.map_dir)
    return 0
