# groundfish/queries/species.py
from __future__ import annotations
import logging
from typing import Iterable
import pandas as pd

from groundfish.config import RETENTION_THRESHOLDS, SPECIES_COL, UNID_MARKER, WEIGHT_COL
from groundfish.errors import NoDataError


def restrict_to_fmp(df: pd.DataFrame) -> pd.DataFrame:
    """Keep species managed under the groundfish FMP."""
    return df[df["groundfish_fmp"].fillna(False).astype(bool)].copy()


def exclude_unidentified(df: pd.DataFrame, marker: str = UNID_MARKER) -> pd.DataFrame:
    """Drop unidentified catch categories (name contains the marker, any case)."""
    names = df[SPECIES_COL].astype("string")
    unid = names.str.contains(marker, case=False, na=False, regex=False).astype(bool)
    return df[~unid & names.notna().astype(bool)].copy()


def select_candidates(df: pd.DataFrame, marker: str = UNID_MARKER) -> pd.DataFrame:
    out = restrict_to_fmp(df)
    logging.info(f"FMP species rows: {len(out):,} of {len(df):,}")
    n = len(out)
    out = exclude_unidentified(out, marker)
    logging.info(f"Dropped {n - len(out):,} unidentified-category rows")
    return out


def _rank_desc(s: pd.Series) -> pd.Series:
    # Ties share the lowest rank; following ranks keep their gap (1, 2, 2, 4)
    return s.rank(method="min", ascending=False).astype(int)


def species_rank(df: pd.DataFrame) -> pd.DataFrame:
    """
    Total landed weight per species, its share of all landed weight, and rank.

    Rows are ordered by proportion (descending) and then species name, so
    tied species always come out in the same order.
    """
    if df.empty:
        raise NoDataError("No catch records to rank")
    totals = df.groupby(SPECIES_COL, dropna=True)[WEIGHT_COL].sum()
    grand = float(totals.sum())
    if grand <= 0:
        raise NoDataError("Total landed weight is zero; species proportions are undefined")

    out = totals.rename("mt").reset_index()
    out[SPECIES_COL] = out[SPECIES_COL].astype(str)
    out["proportion"] = out["mt"] / grand
    out["rank"] = _rank_desc(out["proportion"])
    return (
        out.sort_values(["proportion", SPECIES_COL], ascending=[False, True], kind="mergesort")
           .reset_index(drop=True)
    )


def haul_species_proportions(df: pd.DataFrame) -> pd.DataFrame:
    """Each species' share of its haul's total weight, ranked within the haul."""
    if df.empty:
        raise NoDataError("No catch records to rank")
    g = (
        df.groupby(["haul_id", SPECIES_COL], dropna=True)[WEIGHT_COL]
          .sum()
          .rename("mt")
          .reset_index()
    )
    g[SPECIES_COL] = g[SPECIES_COL].astype(str)
    g["haul_mt"] = g.groupby("haul_id")["mt"].transform("sum")

    empty = g.loc[g["haul_mt"] <= 0, "haul_id"].unique().tolist()
    if empty:
        raise NoDataError(f"Hauls with zero total weight: {[int(h) for h in empty[:10]]}")

    g["proportion"] = g["mt"] / g["haul_mt"]
    g["rank"] = g.groupby("haul_id")["proportion"].rank(method="min", ascending=False).astype(int)
    return (
        g.sort_values(["haul_id", "proportion", SPECIES_COL], ascending=[True, False, True], kind="mergesort")
         .reset_index(drop=True)
    )


def haul_rank_summary(per_haul: pd.DataFrame) -> pd.DataFrame:
    """Mean within-haul proportion per species over the hauls that caught it."""
    out = (
        per_haul.groupby(SPECIES_COL)
                .agg(hauls=("haul_id", "nunique"), mean_proportion=("proportion", "mean"))
                .reset_index()
    )
    out["rank"] = _rank_desc(out["mean_proportion"])
    return (
        out.sort_values(["mean_proportion", SPECIES_COL], ascending=[False, True], kind="mergesort")
           .reset_index(drop=True)
    )


def _check_threshold(threshold: float) -> float:
    threshold = float(threshold)
    if not 0 <= threshold < 1:
        raise ValueError(f"Threshold must be in [0, 1), got {threshold}")
    return threshold


def retained_species(ranks: pd.DataFrame, threshold: float) -> list[str]:
    """Species whose dataset-wide proportion is strictly above the threshold, in rank order."""
    threshold = _check_threshold(threshold)
    keep = ranks.loc[ranks["proportion"] > threshold, SPECIES_COL]
    return [str(s) for s in keep]


def threshold_summary(ranks: pd.DataFrame, thresholds: Iterable[float] = RETENTION_THRESHOLDS) -> pd.DataFrame:
    rows = []
    for t in thresholds:
        t = _check_threshold(t)
        kept = ranks[ranks["proportion"] > t]
        rows.append({
            "threshold": t,
            "n_species": int(len(kept)),
            "weight_share": float(kept["proportion"].sum()),
        })
    return pd.DataFrame(rows, columns=["threshold", "n_species", "weight_share"])
