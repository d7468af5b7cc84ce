from __future__ import annotations
import logging
from pathlib import Path
import pandas as pd

from groundfish.cleaning import standardize_headers
from groundfish.config import HAUL_ID_COLS
from groundfish.validators.schema import (
    VARIABLE_COLS,
    coerce_schema,
    validate_frame,
    validate_ranges,
)

READERS = {
    ".parquet": pd.read_parquet,
    ".feather": pd.read_feather,
    ".csv": pd.read_csv,
}


def _require(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path


def read_raw_catch(path: str | Path, sep: str = ",") -> pd.DataFrame:
    """
    Load the long-format observer catch file.
    Every cell is read as text first, then parsed to its declared type, so a
    malformed value fails the load instead of silently becoming null.
    """
    path = _require(path)
    df = pd.read_csv(path, sep=sep, dtype="string", keep_default_na=True)
    df = standardize_headers(df)
    df = coerce_schema(df)
    validate_ranges(df)
    logging.info(f"Loaded {path.name}: {df.shape[0]:,} rows × {df.shape[1]} cols")
    return df


def read_variable_descriptions(path: str | Path, sep: str = ",") -> pd.DataFrame:
    """Two-column data dictionary (variable, description). Informational only."""
    path = _require(path)
    df = pd.read_csv(path, sep=sep, dtype="string")
    df = standardize_headers(df)
    validate_frame(df, VARIABLE_COLS)
    out = df[VARIABLE_COLS].copy()
    out["variable"] = out["variable"].str.strip()
    return out


def write_table(df: pd.DataFrame, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(path, index=False)
    elif suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported output format: {suffix}")
    logging.info(f"Wrote {path} ({len(df):,} rows)")
    return path


def read_wide_table(path: str | Path) -> pd.DataFrame:
    """Load a wide haul table written by write_table and restore id column types."""
    path = _require(path)
    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported input format: {path.suffix}")
    df = reader(path)

    validate_frame(df, HAUL_ID_COLS)
    df["haul_id"] = pd.to_numeric(df["haul_id"], errors="raise").astype("Int64")
    df["trip_id"] = pd.to_numeric(df["trip_id"], errors="raise").astype("Int64")
    df["set_datetime"] = pd.to_datetime(df["set_datetime"], errors="raise")
    df["is_hake"] = df["is_hake"].astype("boolean")
    for c in ("sector", "drvid", "area", "gear_type", "target"):
        df[c] = df[c].astype("string")
    return df
