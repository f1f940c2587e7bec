"""Decoder for Google encoded polyline strings.

Each coordinate is stored as a fixed-point delta (degrees x 1e5) against the
previous point, zig-zag encoded and split into 5-bit chunks offset by 63 so
the result is printable ASCII. Latitude comes first, then longitude.

Decoding never reads past the end of the input: a truncated string yields the
points that were complete before the truncation. Characters below ASCII 63
are not part of the alphabet; their output is undefined, but still bounded.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

__all__ = ["decode_polyline", "first_point"]

_CHUNK_MASK = 0x1F
_CONTINUATION_BIT = 0x20
_ASCII_OFFSET = 63


def _read_value(encoded: str, index: int) -> Tuple[Optional[int], int]:
    """Read one signed value starting at ``index``.

    Returns the decoded delta and the index of the next unread character, or
    ``None`` when the input ends before the value's terminal chunk.
    """

    result = 0
    shift = 0
    length = len(encoded)
    while index < length:
        chunk = ord(encoded[index]) - _ASCII_OFFSET
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION_BIT:
            if result & 1:
                return ~(result >> 1), index
            return result >> 1, index
    return None, index


def decode_polyline(encoded: Optional[str], precision: int = 5) -> List[List[float]]:
    """Decode ``encoded`` into a list of ``[latitude, longitude]`` pairs.

    ``None`` and the empty string decode to an empty list. The function is
    pure: decoding the same string always returns an equal, freshly built
    list.
    """

    if not encoded:
        return []

    factor = 10**precision
    points: List[List[float]] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        lat_delta, index = _read_value(encoded, index)
        if lat_delta is None:
            break
        lng_delta, index = _read_value(encoded, index)
        if lng_delta is None:
            break
        lat += lat_delta
        lng += lng_delta
        points.append([round(lat / factor, precision), round(lng / factor, precision)])
    return points


def first_point(encoded: Optional[str]) -> Optional[Tuple[float, float]]:
    """Return the first coordinate of ``encoded`` without decoding the rest."""

    if not encoded:
        return None
    lat, index = _read_value(encoded, 0)
    if lat is None:
        return None
    lng, _ = _read_value(encoded, index)
    if lng is None:
        return None
    return round(lat / 1e5, 5), round(lng / 1e5, 5)
