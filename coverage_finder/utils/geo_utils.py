"""
Geographic utility functions.

Coordinate parsing and distance calculations.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

Coord = Tuple[float, float]  # (lat, lon)


def parse_coordinates(text: str) -> Optional[Coord]:
    """
    Parse a combined "lat, lon" text field.

    Args:
        text: e.g. "41.9028, 12.4964".

    Returns:
        (lat, lon) or None if the text is not two numbers in valid range.
    """
    if not text:
        return None

    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        return None

    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError:
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return (lat, lon)


def haversine_distance(coord1: Coord, coord2: Coord) -> float:
    """
    Calculate the great-circle distance between two points in meters.

    Args:
        coord1: (lat, lon) in degrees.
        coord2: (lat, lon) in degrees.

    Returns:
        Distance in meters.
    """
    R = 6_371_000  # Earth radius in meters

    lat1, lon1 = math.radians(coord1[0]), math.radians(coord1[1])
    lat2, lon2 = math.radians(coord2[0]), math.radians(coord2[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(a))

    return R * c
