"""Excel report writer for recurring routes and the fitness assessment."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    EXCEL_AUTOSIZE_COLUMNS,
    EXCEL_AUTOSIZE_MAX_WIDTH,
    EXCEL_AUTOSIZE_MIN_WIDTH,
    EXCEL_AUTOSIZE_PADDING,
)
from .models import FitnessSummary, RouteSummary
from .utils import format_distance, format_time, format_time_delta

FITNESS_SHEET = "Fitness"
ROUTE_COLUMN_ORDER = [
    "Route",
    "Type",
    "Runs",
    "Avg Distance (km)",
    "Distance",
    "Best Time (sec)",
    "Best Time",
    "Best Date",
    "Last Time (sec)",
    "Last Time",
    "Last Date",
    "Delta (sec)",
    "Delta",
]
MAX_SHEET_NAME_LEN = 31
EXCEL_DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"

__all__ = ["write_report", "route_rows", "fitness_rows"]

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(patternType="solid", fgColor="FFFF40FF")
HEADER_BORDER = Border(
    left=Side(style="thin", color="000000"),
    right=Side(style="thin", color="000000"),
    top=Side(style="thin", color="000000"),
    bottom=Side(style="thin", color="000000"),
)

LOGGER = logging.getLogger(__name__)

PathInput = str | Path | PathLike[str]


def _unique_sheet_name(base: str, used: set[str]) -> str:
    base = base[:MAX_SHEET_NAME_LEN]
    name = base
    i = 1
    while name in used:
        suffix = f"_{i}"
        name = base[: MAX_SHEET_NAME_LEN - len(suffix)] + suffix
        i += 1
    used.add(name)
    return name


def _autosize(ws: Worksheet) -> None:
    if not EXCEL_AUTOSIZE_COLUMNS:
        return
    for col_cells in ws.columns:
        max_len = 0
        col_letter = getattr(col_cells[0], "column_letter", None)
        for cell in col_cells:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        width = min(
            EXCEL_AUTOSIZE_MAX_WIDTH,
            max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
        )
        if col_letter:
            ws.column_dimensions[col_letter].width = width


def _style_header_row(ws: Worksheet, max_col: int) -> None:
    for col_idx in range(1, max_col + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER


def route_rows(routes: Sequence[RouteSummary]) -> List[Dict[str, Any]]:
    """Return one export row per route, with human readable companions."""

    rows: List[Dict[str, Any]] = []
    for route in routes:
        row = route.to_row()
        row["Distance"] = format_distance(route.distance)
        row["Best Time"] = format_time(route.best_time)
        row["Last Time"] = format_time(route.last_time)
        row["Delta"] = format_time_delta(route.time_diff)
        rows.append({col: row.get(col) for col in ROUTE_COLUMN_ORDER})
    return rows


def fitness_rows(summary: FitnessSummary) -> List[Dict[str, Any]]:
    """Return metric/value rows describing the fitness assessment."""

    estimate = summary.vo2max
    return [
        {"Metric": "VO2max", "Value": estimate.vo2max if estimate else None},
        {"Metric": "VO2max Level", "Value": estimate.level if estimate else None},
        {
            "Metric": "VO2max Efforts Averaged",
            "Value": estimate.sample_size if estimate else None,
        },
        {"Metric": "Resting HR (bpm)", "Value": summary.resting_heart_rate},
        {"Metric": "Training Hours / Week", "Value": summary.hours_per_week},
        {"Metric": "Avg Ride Power (W)", "Value": summary.average_watts},
    ]


def _write_sheet(
    writer: pd.ExcelWriter,
    base_name: str,
    rows: List[Dict[str, Any]],
    used_sheet_names: set[str],
    columns: Optional[List[str]] = None,
) -> str:
    df = pd.DataFrame(rows, columns=columns)
    sheet_name = _unique_sheet_name(base_name, used_sheet_names)
    df.to_excel(writer, sheet_name=sheet_name, index=False)
    ws = writer.sheets[sheet_name]
    _style_header_row(ws, len(df.columns))
    _autosize(ws)
    LOGGER.info("Wrote sheet %s rows=%s", sheet_name, len(rows))
    return sheet_name


def write_report(
    filepath: PathInput,
    routes_by_group: Mapping[str, Sequence[RouteSummary]],
    fitness: Optional[FitnessSummary] = None,
) -> Path:
    """Write one sheet per route group plus an optional fitness sheet.

    Groups without recurring routes still get a sheet with headers only, so
    the workbook layout stays stable between runs.
    """

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(
        path, engine="openpyxl", datetime_format=EXCEL_DATETIME_FORMAT
    ) as writer:
        used_sheet_names: set[str] = set()
        for group, routes in routes_by_group.items():
            _write_sheet(
                writer,
                f"Routes {group.title()}",
                route_rows(routes),
                used_sheet_names,
                columns=ROUTE_COLUMN_ORDER,
            )
        if fitness is not None:
            _write_sheet(writer, FITNESS_SHEET, fitness_rows(fitness), used_sheet_names)
        if not used_sheet_names:
            pd.DataFrame({"Message": ["No results to display."]}).to_excel(
                writer, sheet_name="Summary", index=False
            )
    return path
