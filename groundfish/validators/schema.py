from __future__ import annotations
import pandas as pd

from groundfish.errors import SchemaError

# Declared type per raw column: text | double | boolean | integer | timestamp
CATCH_SCHEMA = {
    "haul_id": "integer",
    "trip_id": "integer",
    "haul_num": "integer",
    "drvid": "text",
    "set_datetime": "timestamp",
    "avg_lat": "double",
    "avg_long": "double",
    "avg_depth": "double",
    "gear_type": "text",
    "area": "text",
    "sector": "text",
    "target": "text",
    "catch_disposition": "text",
    "common_name": "text",
    "scientific_name": "text",
    "species_category": "text",
    "species_groupings": "text",
    "groundfish_fmp": "boolean",
    "discard_mt": "double",
    "retained_mt": "double",
    "mt": "double",
}

VARIABLE_COLS = ["variable", "description"]

_BOOL_MAP = {
    "true": True, "t": True, "yes": True, "y": True, "1": True,
    "false": False, "f": False, "no": False, "n": False, "0": False,
}


def validate_frame(df: pd.DataFrame, required=CATCH_SCHEMA) -> None:
    miss = set(required) - set(df.columns)
    if miss:
        raise SchemaError(f"Missing expected columns: {sorted(miss)}")


def _raw_text(s: pd.Series) -> pd.Series:
    s = s.astype("string").str.strip()
    return s.mask(s == "", pd.NA)


def _check_parsed(col: str, kind: str, raw: pd.Series, parsed: pd.Series) -> None:
    bad_mask = raw.notna() & parsed.isna()
    if bad_mask.any():
        bad = raw[bad_mask].unique().tolist()[:5]
        raise SchemaError(
            f"Column {col!r}: {int(bad_mask.sum())} value(s) not parseable as {kind}: {bad}"
        )


def _parse_double(col: str, raw: pd.Series) -> pd.Series:
    parsed = pd.to_numeric(raw, errors="coerce").astype("float64")
    _check_parsed(col, "double", raw, parsed)
    return parsed


def _parse_integer(col: str, raw: pd.Series) -> pd.Series:
    num = pd.to_numeric(raw, errors="coerce").astype("float64")
    # 12.5 is a number but not an integer
    num = num.where(num.isna() | (num == num.round()))
    _check_parsed(col, "integer", raw, num)
    return num.astype("Int64")


def _parse_boolean(col: str, raw: pd.Series) -> pd.Series:
    parsed = raw.str.lower().map(_BOOL_MAP)
    _check_parsed(col, "boolean", raw, parsed)
    return parsed.astype("boolean")


def _parse_timestamp(col: str, raw: pd.Series) -> pd.Series:
    values = raw.astype("object").where(raw.notna(), None)
    parsed = pd.to_datetime(values, errors="coerce", format="mixed")
    _check_parsed(col, "timestamp", raw, parsed)
    return parsed


def _parse_text(col: str, raw: pd.Series) -> pd.Series:
    return raw.str.replace(r"\s+", " ", regex=True)


PARSERS = {
    "double": _parse_double,
    "integer": _parse_integer,
    "boolean": _parse_boolean,
    "timestamp": _parse_timestamp,
    "text": _parse_text,
}


def coerce_schema(df: pd.DataFrame, schema: dict[str, str] = CATCH_SCHEMA) -> pd.DataFrame:
    """
    Parse every declared column to its type. Blank cells become null; any other
    value that does not parse raises SchemaError naming the column.
    Undeclared columns pass through untouched.
    """
    validate_frame(df, schema)
    out = df.copy()
    for col, kind in schema.items():
        out[col] = PARSERS[kind](col, _raw_text(df[col]))
    return out


def validate_ranges(df: pd.DataFrame) -> None:
    """Sanity checks on parsed catch records; raise on critical issues."""
    lat = df["avg_lat"].dropna()
    if not lat.between(-90, 90).all():
        raise ValueError(f"Out-of-range latitudes: {lat[~lat.between(-90, 90)].unique().tolist()[:5]}")
    lon = df["avg_long"].dropna()
    if not lon.between(-180, 180).all():
        raise ValueError(f"Out-of-range longitudes: {lon[~lon.between(-180, 180)].unique().tolist()[:5]}")

    for c in ["mt", "discard_mt", "retained_mt"]:
        if c in df.columns and (df[c].dropna() < 0).any():
            raise ValueError(f"Negative values in {c}")
