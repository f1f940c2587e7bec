"""Interactive maps of recurring routes."""

from __future__ import annotations

import html
from pathlib import Path
from typing import List, Optional, Tuple, Union

import folium  # Using folium to build an interactive Leaflet map.

from .models import RouteSummary
from .routes.polyline import decode_polyline
from .utils import format_distance, format_time, format_time_delta

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

_LATEST_COLOR = "#2c7bb6"
_BEST_COLOR = "#1a9641"
_START_COLOR = "#d73027"

__all__ = ["create_route_map", "route_map_filename"]


def _to_points(encoded: Optional[str]) -> List[LatLon]:
    return [(lat, lng) for lat, lng in decode_polyline(encoded)]


def route_map_filename(index: int, route: RouteSummary) -> str:
    """Return a filesystem friendly HTML filename for a route."""

    slug = "".join(ch if ch.isalnum() else "_" for ch in route.name.lower())
    slug = "_".join(part for part in slug.split("_") if part) or "route"
    return f"{index:02d}_{route.type.lower()}_{slug[:40]}.html"


def create_route_map(
    route: RouteSummary,
    *,
    output_html_path: Optional[PathLike] = None,
    show_best: bool = True,
) -> folium.Map:
    """Create a map of the latest effort on a route.

    Args:
        route: Summary produced by :func:`training_insights.routes.find_top_routes`.
        output_html_path: Optional path to persist the map as an HTML file.
        show_best: Also draw the best effort's path when it differs from the
            latest one.

    Returns:
        A :class:`folium.Map` instance.

    Raises:
        ValueError: If the route carries no decodable path.
    """

    latest_points = _to_points(route.polyline)
    if not latest_points:
        raise ValueError(f"Route {route.name!r} has no path to draw")

    folium_map = folium.Map(location=latest_points[0], zoom_start=14, control_scale=True)

    if show_best and route.best_polyline and route.best_polyline != route.polyline:
        best_points = _to_points(route.best_polyline)
        if len(best_points) >= 2:
            folium.PolyLine(
                best_points,
                color=_BEST_COLOR,
                weight=4,
                opacity=0.6,
                tooltip=f"Best: {format_time(route.best_time)}",
            ).add_to(folium_map)

    folium.PolyLine(
        latest_points,
        color=_LATEST_COLOR,
        weight=5,
        opacity=0.8,
        tooltip=f"Latest: {format_time(route.last_time)}",
    ).add_to(folium_map)

    popup = folium.Popup(
        html=(
            f"<strong>{html.escape(route.name)}</strong><br>"
            f"{route.count}x {format_distance(route.distance)}<br>"
            f"Best {format_time(route.best_time)} / "
            f"Latest {format_time(route.last_time)} "
            f"({format_time_delta(route.time_diff)})"
        ),
        max_width=300,
    )
    folium.CircleMarker(
        location=latest_points[0],
        radius=7,
        color=_START_COLOR,
        fill=True,
        fill_color=_START_COLOR,
        tooltip="Start",
        popup=popup,
    ).add_to(folium_map)

    if len(latest_points) >= 2:
        lats = [lat for lat, _ in latest_points]
        lngs = [lng for _, lng in latest_points]
        folium_map.fit_bounds([[min(lats), min(lngs)], [max(lats), max(lngs)]])

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map
