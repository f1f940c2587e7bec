"""Tests for the encoded polyline decoder."""

from __future__ import annotations

import random

import polyline
import pytest

from training_insights.routes.polyline import decode_polyline, first_point

GOOGLE_EXAMPLE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
GOOGLE_POINTS = [[38.5, -120.2], [40.7, -120.95], [43.252, -126.453]]


def test_decodes_reference_example() -> None:
    assert decode_polyline(GOOGLE_EXAMPLE) == GOOGLE_POINTS


@pytest.mark.parametrize("value", ["", None])
def test_empty_input_returns_empty_list(value) -> None:
    assert decode_polyline(value) == []


def test_decoding_is_deterministic() -> None:
    first = decode_polyline(GOOGLE_EXAMPLE)
    second = decode_polyline(GOOGLE_EXAMPLE)
    assert first == second
    assert first is not second


def test_round_trip_with_reference_encoder() -> None:
    rng = random.Random(1234)
    coords = [
        (round(rng.uniform(-89.0, 89.0), 5), round(rng.uniform(-179.0, 179.0), 5))
        for _ in range(250)
    ]
    encoded = polyline.encode(coords, 5)
    assert decode_polyline(encoded) == [list(pt) for pt in coords]


def test_matches_reference_decoder_on_dense_track() -> None:
    rng = random.Random(7)
    lat, lng = 51.48, -3.18
    track = []
    for _ in range(500):
        lat = round(lat + rng.uniform(-0.0003, 0.0003), 5)
        lng = round(lng + rng.uniform(-0.0003, 0.0003), 5)
        track.append((lat, lng))
    encoded = polyline.encode(track, 5)
    expected = [[lat, lng] for lat, lng in polyline.decode(encoded, 5)]
    assert decode_polyline(encoded) == expected


def test_truncated_longitude_returns_complete_prefix() -> None:
    # Drop the final longitude's terminal chunk.
    assert decode_polyline(GOOGLE_EXAMPLE[:-2]) == GOOGLE_POINTS[:2]


def test_truncated_latitude_returns_complete_prefix() -> None:
    assert decode_polyline("_p~iF~ps|U_ul") == GOOGLE_POINTS[:1]


def test_point_without_longitude_is_dropped() -> None:
    assert decode_polyline("_p~iF") == []


def test_characters_outside_alphabet_terminate() -> None:
    # Output is undefined for such input; it must still return.
    result = decode_polyline("!!!!" * 10)
    assert isinstance(result, list)
    assert len(result) <= 20


def test_first_point() -> None:
    assert first_point(GOOGLE_EXAMPLE) == (38.5, -120.2)
    assert first_point("") is None
    assert first_point("_p~iF") is None
