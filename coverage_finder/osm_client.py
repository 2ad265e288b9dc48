"""
Search OpenStreetMap for businesses through the Overpass API.

Sends the clauses produced by the query builder as one batch query and
parses the returned nodes into BusinessRecords.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests

from config import OVERPASS_TIMEOUT, OVERPASS_URLS
from coverage_finder.errors import QueryError, ValidationError
from coverage_finder.models import BusinessRecord
from coverage_finder.query_builder import compose_query

logger = logging.getLogger(__name__)


def query_overpass(query: str, urls: Optional[Sequence[str]] = None) -> dict:
    """
    Execute an Overpass API query, falling back to the next server on failure.

    Raises:
        QueryError: If no server answered with a successful JSON response.
    """
    last_error: Optional[Exception] = None
    for url in urls or OVERPASS_URLS:
        try:
            logger.info(f"Querying Overpass API at {url}...")
            response = requests.post(
                url,
                data={"data": query},
                timeout=OVERPASS_TIMEOUT + 30,
            )
            response.raise_for_status()
            data = response.json()
            logger.info(f"Overpass returned {len(data.get('elements', []))} elements")
            return data

        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Overpass server {url} failed: {e}")
            last_error = e
            continue

    raise QueryError(f"Map-data service request failed: {last_error}")


def parse_business_elements(raw_data: dict) -> List[BusinessRecord]:
    """
    Parse raw Overpass response into business records, in response order.

    Elements without coordinates are skipped.
    """
    businesses: List[BusinessRecord] = []

    for element in raw_data.get("elements", []) or []:
        lat = element.get("lat", (element.get("center") or {}).get("lat"))
        lon = element.get("lon", (element.get("center") or {}).get("lon"))
        if lat is None or lon is None:
            logger.debug(f"Skipping element {element.get('id')}: no coordinates")
            continue

        businesses.append(BusinessRecord(
            id=element["id"],
            lat=float(lat),
            lon=float(lon),
            tags=dict(element.get("tags", {})),
        ))

    logger.info(f"Parsed {len(businesses)} businesses")
    return businesses


def search(query_clauses: Sequence[str]) -> List[BusinessRecord]:
    """
    Run a batch search for the given clauses.

    Args:
        query_clauses: Clauses from build_query_clauses.

    Returns:
        Businesses in the order the service returned them.

    Raises:
        ValidationError: If no clauses were given.
        QueryError: If the service request failed.
    """
    if not query_clauses:
        raise ValidationError("Select at least one business category")

    query = compose_query(list(query_clauses))
    raw_data = query_overpass(query)
    return parse_business_elements(raw_data)
