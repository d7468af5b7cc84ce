import pandas as pd
import pytest

from groundfish.validators.schema import CATCH_SCHEMA

BASE = {
    "trip_id": 100,
    "haul_num": 1,
    "drvid": "V1",
    "set_datetime": pd.Timestamp("2019-06-01 08:00"),
    "avg_lat": 45.0,
    "avg_long": -124.5,
    "avg_depth": 150.0,
    "gear_type": "Midwater Trawl",
    "area": "Columbia",
    "sector": "Midwater Hake",
    "target": "Pacific Hake",
    "catch_disposition": "Retained",
    "scientific_name": "Unknown",
    "species_category": "Fish",
    "species_groupings": "Roundfish",
    "groundfish_fmp": True,
    "discard_mt": 0.0,
    "retained_mt": 0.0,
}


def records(rows) -> pd.DataFrame:
    """Parsed catch records; each row needs at least haul_id, common_name, mt."""
    df = pd.DataFrame([{**BASE, **r} for r in rows])
    df = df[list(CATCH_SCHEMA)]
    for c in ("haul_id", "trip_id", "haul_num"):
        df[c] = df[c].astype("Int64")
    for c, kind in CATCH_SCHEMA.items():
        if kind == "text":
            df[c] = df[c].astype("string")
        elif kind == "double":
            df[c] = df[c].astype("float64")
    df["groundfish_fmp"] = df["groundfish_fmp"].astype("boolean")
    df["set_datetime"] = pd.to_datetime(df["set_datetime"])
    return df


@pytest.fixture
def make_records():
    return records
