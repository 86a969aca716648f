"""Encoded polyline codec.

Valhalla encodes route shapes with 6 decimal digits of precision, Google and
OSRM with 5. Both use the same bit-shifting scheme, only the scale differs.
"""

from __future__ import annotations

import logging
from typing import Sequence

logger = logging.getLogger(__name__)


def _decode_value(polyline: str, index: int) -> tuple[int, int]:
    shift = 0
    result = 0
    while True:
        b = ord(polyline[index]) - 63
        if b < 0:
            raise ValueError(f"Invalid polyline character at offset {index}.")
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if (result & 1) else (result >> 1)
    return delta, index


def decode_polyline(polyline: str, precision: int = 6) -> list[tuple[float, float]]:
    """Decode an encoded polyline string to a list of (lat, lon) coordinates.

    Malformed input (a truncated chunk or characters outside the encoding
    alphabet) yields an empty list instead of raising, so callers can skip
    rendering or guidance without special casing.
    """
    factor = 10**precision
    coordinates: list[tuple[float, float]] = []
    index = 0
    lat = 0
    lon = 0

    try:
        while index < len(polyline):
            dlat, index = _decode_value(polyline, index)
            dlon, index = _decode_value(polyline, index)
            lat += dlat
            lon += dlon
            coordinates.append((lat / factor, lon / factor))
    except (IndexError, ValueError) as exc:
        logger.warning(f"Failed to decode polyline of length {len(polyline)}: {exc}")
        return []

    return coordinates


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(coordinates: Sequence[tuple[float, float]], precision: int = 6) -> str:
    """Encode (lat, lon) coordinates into a polyline string."""
    factor = 10**precision
    output = []
    prev_lat = 0
    prev_lon = 0
    for lat, lon in coordinates:
        lat_i = int(round(lat * factor))
        lon_i = int(round(lon * factor))
        output.append(_encode_value(lat_i - prev_lat))
        output.append(_encode_value(lon_i - prev_lon))
        prev_lat, prev_lon = lat_i, lon_i
    return "".join(output)
