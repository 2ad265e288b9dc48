"""
Radio horizon estimate for an antenna of a given height.

Uses the usual line-of-sight approximation d_km = 3.57 * sqrt(h_m),
which ignores terrain and atmospheric refraction.
"""

from __future__ import annotations

import math
from typing import Union

HORIZON_FACTOR_KM = 3.57


def estimate_radius(height: Union[str, float, int, None]) -> float:
    """
    Estimate coverage radius in meters for an antenna height.

    Args:
        height: Antenna height in meters. Strings are parsed.

    Returns:
        Radius in meters, or 0 for non-numeric, non-finite or non-positive heights.
    """
    try:
        h = float(height)
    except (TypeError, ValueError):
        return 0.0

    if not math.isfinite(h) or h <= 0:
        return 0.0

    return HORIZON_FACTOR_KM * math.sqrt(h) * 1000


def format_radius_km(radius_m: float) -> str:
    """Hint text for a radius, e.g. '~19.55 km'."""
    return f"~{radius_m / 1000:.2f} km"
