"""
Build Overpass QL queries for businesses around an antenna site.

Each enabled category contributes one `node[...](around:...)` clause per
tag selector. Clauses are emitted lodging first, then commercial, then
industrial, always in the same order.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from config import OVERPASS_TIMEOUT
from coverage_finder.models import CategorySelection

# Tag selectors per category. A value of None matches any value of the key.
CATEGORY_SELECTORS: Dict[str, List[Tuple[str, object]]] = {
    "lodging": [
        ("tourism", "hotel"),
        ("tourism", "guest_house"),
        ("tourism", "hostel"),
    ],
    "commercial": [
        ("amenity", "restaurant"),
        ("shop", None),
        ("office", None),
    ],
    "industrial": [
        ("landuse", "industrial"),
    ],
}

CATEGORY_LABELS = {
    "lodging": "Lodging",
    "commercial": "Commercial",
    "industrial": "Industrial areas",
}


def _tag_filter(key: str, value) -> str:
    if value is None:
        return f'["{key}"]'
    return f'["{key}"="{value}"]'


def build_query_clauses(
    selection: CategorySelection,
    lat: float,
    lon: float,
    radius_m: float,
) -> List[str]:
    """
    Build one Overpass clause per tag selector of each enabled category.

    Args:
        selection: Enabled categories.
        lat: Center latitude.
        lon: Center longitude.
        radius_m: Search radius in meters.

    Returns:
        Clauses in category declaration order, or an empty list when no
        category is enabled.
    """
    radius = int(radius_m)
    clauses: List[str] = []
    for category, selectors in CATEGORY_SELECTORS.items():
        if not getattr(selection, category):
            continue
        for key, value in selectors:
            clauses.append(f"node{_tag_filter(key, value)}(around:{radius},{lat},{lon});")
    return clauses


def compose_query(clauses: List[str], timeout: int = OVERPASS_TIMEOUT) -> str:
    """Wrap clauses in a single union query returning JSON."""
    body = "\n".join(f"  {clause}" for clause in clauses)
    return f"""[out:json][timeout:{timeout}];
(
{body}
);
out body qt;"""
