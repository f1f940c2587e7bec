"""Tests for the folium route map."""

from __future__ import annotations

import folium
import pytest

from conftest import BERLIN, make_activity, path_from
from training_insights.routes import find_top_routes
from training_insights.visualization import create_route_map, route_map_filename


def _route(best_path=None):
    latest = make_activity(5000.0, 1500.0, days_ago=1, name="Canal Loop")
    best = make_activity(
        5000.0,
        1400.0,
        days_ago=5,
        name="Canal Loop",
        summary_polyline=best_path or path_from(BERLIN, 1200.0),
    )
    (route,) = find_top_routes([latest, best], "run")
    return route


def test_create_route_map_writes_html(tmp_path):
    route = _route()
    output = tmp_path / "maps" / "route.html"
    folium_map = create_route_map(route, output_html_path=output)
    assert isinstance(folium_map, folium.Map)
    assert output.exists()
    html = output.read_text(encoding="utf-8")
    assert "Canal Loop" in html
    assert "#1a9641" in html
    assert "#2c7bb6" in html


def test_best_path_can_be_hidden(tmp_path):
    output = tmp_path / "route.html"
    create_route_map(_route(), output_html_path=output, show_best=False)
    assert "#1a9641" not in output.read_text(encoding="utf-8")


def test_route_without_path_raises():
    route = _route()
    route.polyline = None
    with pytest.raises(ValueError):
        create_route_map(route)


def test_route_map_filename():
    route = _route()
    assert route_map_filename(1, route) == "01_run_canal_loop.html"


def test_route_name_is_escaped_in_popup(tmp_path):
    route = _route()
    route.name = "<script>alert(1)</script> Loop"
    output = tmp_path / "route.html"
    create_route_map(route, output_html_path=output)
    html = output.read_text(encoding="utf-8")
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
