"""
Tabular export of search results.
"""

from __future__ import annotations

from typing import List, Optional

import pandas as pd

from coverage_finder.address import business_category, business_phone, format_address
from coverage_finder.models import BusinessRecord
from coverage_finder.utils.geo_utils import Coord, haversine_distance

COLUMNS = [
    "osm_id", "name", "category", "type", "address", "city", "phone",
    "coverage", "coverage_error", "lat", "lon", "distance_m",
]


def businesses_to_dataframe(
    businesses: List[BusinessRecord],
    center: Optional[Coord] = None,
) -> pd.DataFrame:
    """Convert business records to a DataFrame, one row per business in list order."""
    records = []
    for b in businesses:
        info = business_category(b.tags)
        records.append({
            "osm_id": b.id,
            "name": b.name,
            "category": info["category"],
            "type": info["type"],
            "address": format_address(b.tags),
            "city": b.city,
            "phone": business_phone(b.tags),
            "coverage": b.coverage_status.value if b.coverage_status else "",
            "coverage_error": b.coverage_error or "",
            "lat": b.lat,
            "lon": b.lon,
            "distance_m": round(haversine_distance(center, (b.lat, b.lon))) if center else None,
        })
    return pd.DataFrame(records, columns=COLUMNS)


def dataframe_to_csv(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
