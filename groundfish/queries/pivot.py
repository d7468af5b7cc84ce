# groundfish/queries/pivot.py
"""
Long-to-wide reshaping of catch records.

One row per haul, one float column per retained species. The pivot is done in
two explicit steps: sum weight per (haul, species), then materialize the whole
haul × species grid so that a species not caught in a haul is exactly 0.0.
"""
from __future__ import annotations
import logging
from typing import Iterable
import numpy as np
import pandas as pd

from groundfish.cleaning import add_hake_flag
from groundfish.config import HAUL_ID_COLS, SPECIES_COL, WEIGHT_COL
from groundfish.errors import HaulCollisionError, NoDataError
from groundfish.validators.schema import validate_frame


def species_columns(wide: pd.DataFrame) -> list[str]:
    return [c for c in wide.columns if c not in HAUL_ID_COLS]


def haul_attributes(df: pd.DataFrame) -> pd.DataFrame:
    """
    Distinct per-haul attribute combinations, one row per haul id.
    Raises HaulCollisionError when a haul id carries two different
    combinations (e.g. two vessels), rather than splitting it into two rows.
    """
    attrs = df[HAUL_ID_COLS].drop_duplicates()
    dup = attrs["haul_id"].duplicated(keep=False)
    if dup.any():
        raise HaulCollisionError(sorted(int(h) for h in attrs.loc[dup, "haul_id"].unique()))
    return attrs.sort_values("haul_id", kind="mergesort").reset_index(drop=True)


def aggregate_haul_species(df: pd.DataFrame, species: Iterable[str]) -> pd.Series:
    """Sum weight per (haul, species); collapses discarded/retained rows of one species."""
    sub = df[df[SPECIES_COL].isin(list(species))]
    if (sub[WEIGHT_COL] < 0).any():
        raise ValueError(f"Negative values in {WEIGHT_COL}")
    keys = [sub["haul_id"].astype("int64").rename("haul_id"), sub[SPECIES_COL].astype(str)]
    return sub.groupby(keys)[WEIGHT_COL].sum().astype("float64")


def densify(grouped: pd.Series, haul_ids: list[int], species: list[str]) -> pd.DataFrame:
    """Expand sparse (haul, species) sums to the full grid, absent pairs as 0.0."""
    full = pd.MultiIndex.from_product([haul_ids, species], names=["haul_id", SPECIES_COL])
    dense = grouped.reindex(full, fill_value=0.0).unstack(SPECIES_COL)
    dense = dense.reindex(index=haul_ids, columns=species)
    dense.columns.name = None
    return dense.astype("float64")


def build_wide_table(df: pd.DataFrame, species: Iterable[str]) -> pd.DataFrame:
    """Identifying columns followed by one weight column per species, sorted by haul id."""
    species = list(dict.fromkeys(str(s) for s in species))
    if not species:
        raise NoDataError("No species retained; nothing to pivot")
    if "is_hake" not in df.columns:
        df = add_hake_flag(df)
    validate_frame(df, HAUL_ID_COLS + [SPECIES_COL, WEIGHT_COL])

    sub = df[df[SPECIES_COL].isin(species)]
    if sub.empty:
        raise NoDataError("No records for the retained species")

    attrs = haul_attributes(sub)
    haul_ids = [int(h) for h in attrs["haul_id"]]
    dense = densify(aggregate_haul_species(sub, species), haul_ids, species)

    wide = pd.concat([attrs, dense.reset_index(drop=True)], axis=1)
    assert len(wide) == len(attrs)
    assert wide.shape[1] == len(HAUL_ID_COLS) + len(species)
    logging.info(f"Wide table: {len(wide):,} hauls × {len(species)} species")
    return wide


def reconcile_totals(records: pd.DataFrame, wide: pd.DataFrame, species: Iterable[str]) -> pd.DataFrame:
    """Compare long-format species totals with the wide table's column sums."""
    species = list(species)
    long_mt = (
        records[records[SPECIES_COL].isin(species)]
        .groupby(SPECIES_COL)[WEIGHT_COL].sum()
        .reindex(species, fill_value=0.0)
    )
    wide_mt = wide[species].sum().reindex(species)
    out = pd.DataFrame({
        SPECIES_COL: species,
        "long_mt": long_mt.to_numpy(dtype="float64"),
        "wide_mt": wide_mt.to_numpy(dtype="float64"),
    })
    out["matches"] = np.isclose(out["long_mt"], out["wide_mt"], rtol=1e-9, atol=1e-12)
    bad = out.loc[~out["matches"], SPECIES_COL].tolist()
    if bad:
        logging.warning(f"Wide totals differ from long totals for: {bad}")
    return out
