"""Tests for result cards and coverage badges."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from coverage_finder.components.results import business_card_html, coverage_badge_html
from coverage_finder.models import BusinessRecord, CoverageStatus


def test_error_badge_carries_tooltip():
    html = coverage_badge_html(CoverageStatus.ERROR, "Rate <limit>")
    assert 'title="Rate &lt;limit&gt;"' in html
    assert coverage_badge_html(None) == ""


def test_business_card_escapes_and_links():
    record = BusinessRecord(
        id=1, lat=41.9, lon=12.5,
        tags={"name": "Bar <Roma>", "amenity": "bar", "addr:street": "Via Roma", "addr:city": "Roma"},
        coverage_status=CoverageStatus.FTTH,
    )

    html = business_card_html(record)

    assert "Bar &lt;Roma&gt;" in html
    assert "FTTH" in html
    assert "https://www.google.com/search?q=" in html
    assert "https://maps.google.com/?q=" in html


def test_business_card_without_address():
    html = business_card_html(BusinessRecord(id=2, lat=0.0, lon=0.0))
    assert "Name not available" in html
    assert "Address not available" in html
