"""
Data model shared by the search, lookup and enrichment modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from coverage_finder.errors import ValidationError
from coverage_finder.radio_range import estimate_radius
from coverage_finder.utils.geo_utils import parse_coordinates

logger = logging.getLogger(__name__)


class CoverageStatus(str, Enum):
    """Coverage badge shown next to a business."""
    FTTH = "FTTH"
    FWA = "FWA"
    NOT_COVERED = "Not covered"
    CHECKING = "Checking..."  # transient, set while a lookup is in flight
    ERROR = "Error"

    @property
    def is_definitive(self) -> bool:
        return self in (CoverageStatus.FTTH, CoverageStatus.FWA, CoverageStatus.NOT_COVERED)


class LookupKind(str, Enum):
    """How a coverage or address lookup ended."""
    OK = "ok"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_ADDRESS = "invalid_address"
    RATE_LIMITED = "rate_limited"
    SCRAPE_FAILED = "scrape_failed"
    EMPTY_CONTENT = "empty_content"


@dataclass
class BusinessRecord:
    """A point of interest returned by the map-data service."""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    coverage_status: Optional[CoverageStatus] = None
    coverage_error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.tags.get("name", "")

    @property
    def city(self) -> str:
        return self.tags.get("addr:city", "")


@dataclass
class CategorySelection:
    """Which business categories a search covers."""
    lodging: bool = True
    commercial: bool = True
    industrial: bool = False

    def any_selected(self) -> bool:
        return self.lodging or self.commercial or self.industrial


@dataclass
class SearchParameters:
    """Center point and radius of a search."""
    lat: float
    lon: float
    height: float
    manual_radius: Optional[int] = None

    @property
    def derived_radius(self) -> float:
        return estimate_radius(self.height)

    @property
    def radius(self) -> int:
        """Manual radius when set, otherwise the radius derived from height."""
        if self.manual_radius:
            return self.manual_radius
        return int(self.derived_radius)

    @classmethod
    def from_inputs(cls, coordinates: str, height: str, manual_radius: str = "") -> "SearchParameters":
        """
        Build parameters from the raw text fields of the search form.

        Raises:
            ValidationError: If coordinates don't parse or no positive radius results.
        """
        coords = parse_coordinates(coordinates)
        if coords is None:
            raise ValidationError(f"Invalid coordinates: {coordinates!r} (expected 'lat, lon')")

        try:
            h = float(height)
        except (TypeError, ValueError):
            h = 0.0

        manual: Optional[int] = None
        if manual_radius and manual_radius.strip():
            try:
                manual = int(float(manual_radius.strip()))
            except ValueError:
                logger.debug(f"Ignoring unparseable radius {manual_radius!r}")
            if manual is not None and manual <= 0:
                manual = None

        params = cls(lat=coords[0], lon=coords[1], height=h, manual_radius=manual)
        if params.radius <= 0:
            raise ValidationError("Enter a positive antenna height or a custom radius")
        return params


@dataclass
class CoverageResult:
    """Outcome of a coverage lookup. Never raised, always returned."""
    success: bool
    kind: LookupKind
    coverage: Optional[CoverageStatus] = None
    error: Optional[str] = None
    cached: bool = False


@dataclass
class AddressResult:
    """Outcome of a fallback address lookup."""
    success: bool
    kind: LookupKind
    address: str = ""
    error: Optional[str] = None
