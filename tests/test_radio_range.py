"""Tests for the radio range estimator."""

import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from coverage_finder.radio_range import estimate_radius, format_radius_km


def test_height_25_gives_about_17850_m():
    assert estimate_radius(25) == pytest.approx(17850, abs=0.01)


def test_string_height_is_parsed():
    assert estimate_radius("25") == pytest.approx(17850, abs=0.01)


@pytest.mark.parametrize("height", [0, -5, "0", "-1", "abc", "", None, math.nan, "nan", math.inf])
def test_invalid_heights_give_zero(height):
    assert estimate_radius(height) == 0


def test_radius_grows_with_height():
    assert estimate_radius(100) > estimate_radius(30) > estimate_radius(10)


def test_format_radius_km():
    assert format_radius_km(17850) == "~17.85 km"
    assert format_radius_km(0) == "~0.00 km"
