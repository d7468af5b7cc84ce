# groundfish/queries/cooccurrence.py
from __future__ import annotations
from typing import Iterable
import pandas as pd

from groundfish.errors import NoDataError


def presence_absence(wide: pd.DataFrame, species: Iterable[str]) -> pd.DataFrame:
    """1 where a species' haul weight is > 0, else 0; indexed by haul id."""
    species = list(species)
    missing = [s for s in species if s not in wide.columns]
    if missing:
        raise ValueError(f"Species not in wide table: {missing}")
    pa = (wide[species] > 0).astype("int8")
    pa.index = pd.Index(wide["haul_id"], name="haul_id")
    return pa


def cooccurrence_matrix(pa: pd.DataFrame, species: Iterable[str]) -> pd.DataFrame:
    """
    Row A, column B: share of A's hauls that also caught B, divided by the
    largest share in row A. A always co-occurs with itself, so the diagonal
    is the row maximum and equals 1.0. The matrix is not symmetric.
    """
    species = list(species)
    missing = [s for s in species if s not in pa.columns]
    if missing:
        raise ValueError(f"Species not in presence/absence matrix: {missing}")

    rows = {}
    for a in species:
        hauls = pa.loc[pa[a] == 1, species]
        if hauls.empty:
            raise NoDataError(f"Species {a!r} is present in zero hauls")
        frac = hauls.mean()
        rows[a] = frac / frac.max()

    out = pd.DataFrame([rows[a] for a in species], index=species)[species].astype("float64")
    out.index.name = "species"
    return out


def cooccurrence_long(matrix: pd.DataFrame) -> pd.DataFrame:
    """Tidy (species, with_species, value) form of the matrix."""
    out = matrix.copy()
    out.index.name = "species"
    out = out.reset_index().melt(id_vars="species", var_name="with_species", value_name="value")
    return out[["species", "with_species", "value"]]
