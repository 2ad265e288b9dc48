"""Tests for the results table export."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from coverage_finder.models import BusinessRecord, CoverageStatus
from coverage_finder.results_table import COLUMNS, businesses_to_dataframe, dataframe_to_csv


def sample_businesses():
    return [
        BusinessRecord(
            id=1, lat=41.9, lon=12.5,
            tags={"name": "Hotel Uno", "tourism": "hotel", "addr:street": "Via Roma",
                  "addr:housenumber": "1", "addr:city": "Roma", "phone": "+39 06 123"},
            coverage_status=CoverageStatus.FTTH,
        ),
        BusinessRecord(
            id=2, lat=41.91, lon=12.5, tags={"shop": "bakery"},
            coverage_status=CoverageStatus.ERROR, coverage_error="Blocked",
        ),
        BusinessRecord(id=3, lat=41.92, lon=12.5),
    ]


def test_one_row_per_business_in_order():
    df = businesses_to_dataframe(sample_businesses())

    assert list(df.columns) == COLUMNS
    assert list(df["osm_id"]) == [1, 2, 3]
    assert df.iloc[0]["address"] == "Via Roma 1, Roma"
    assert df.iloc[0]["category"] == "Lodging"
    assert df.iloc[0]["coverage"] == "FTTH"
    assert df.iloc[1]["coverage_error"] == "Blocked"
    assert df.iloc[2]["coverage"] == ""
    assert df.iloc[2]["category"] == "Other"


def test_distance_from_center():
    df = businesses_to_dataframe(sample_businesses(), center=(41.9, 12.5))

    assert df.iloc[0]["distance_m"] == 0
    assert 1100 < df.iloc[1]["distance_m"] < 1125


def test_empty_list():
    df = businesses_to_dataframe([])
    assert df.empty
    assert list(df.columns) == COLUMNS


def test_csv_export():
    csv = dataframe_to_csv(businesses_to_dataframe(sample_businesses()))

    assert isinstance(csv, bytes)
    lines = csv.decode("utf-8").splitlines()
    assert lines[0] == ",".join(COLUMNS)
    assert len(lines) == 4
