# groundfish/clustering.py
"""
Per-sector hierarchical clustering of hauls on their species weights.

The cluster count is chosen the NbClust way: build one linkage tree, cut it at
each candidate k, let several internal validity indices each vote for their
best k, and take the majority. Linkage and scoring are delegated to scipy and
scikit-learn; their errors propagate unchanged.
"""
from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import fcluster, linkage
from sklearn.metrics import calinski_harabasz_score, davies_bouldin_score, silhouette_score

from groundfish.config import (
    CLUSTER_INDICES,
    LINKAGE_METHOD,
    MAX_NC,
    MIN_NC,
    MIN_SECTOR_HAULS,
)

# index name -> (scorer, whether larger is better)
VALIDITY_INDICES = {
    "silhouette": (silhouette_score, True),
    "calinski_harabasz": (calinski_harabasz_score, True),
    "davies_bouldin": (davies_bouldin_score, False),
}


@dataclass
class ClusterCountResult:
    best_k: int
    votes: Dict[str, int]
    scores: pd.DataFrame
    labels: np.ndarray = field(repr=False)


def split_by_sector(wide: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Return dict of sector -> subset of the wide table."""
    if wide.empty:
        return {}
    sectors = sorted(wide["sector"].dropna().unique().tolist())
    out = {}
    for s in sectors:
        mask = (wide["sector"] == s).fillna(False).astype(bool)
        out[str(s)] = wide[mask].copy()
    return out


def species_matrix(sector_df: pd.DataFrame, species: Iterable[str]) -> np.ndarray:
    """Species weight columns only, as a float array (hauls × species)."""
    return sector_df[list(species)].to_numpy(dtype="float64")


def optimal_cluster_count(
    X: np.ndarray,
    method: str = LINKAGE_METHOD,
    min_nc: int = MIN_NC,
    max_nc: int = MAX_NC,
    indices: Iterable[str] = CLUSTER_INDICES,
) -> ClusterCountResult:
    """
    Pick the number of clusters by majority vote across validity indices.
    Ties between candidate counts go to the smaller k.
    """
    indices = list(indices)
    unknown = sorted(set(indices) - set(VALIDITY_INDICES))
    if unknown:
        raise ValueError(f"Unknown validity indices: {unknown}")
    if min_nc < 2 or max_nc < min_nc:
        raise ValueError(f"Invalid cluster range: {min_nc}..{max_nc}")

    X = np.asarray(X, dtype="float64")
    Z = linkage(X, method=method, metric="euclidean")

    scores: Dict[int, Dict[str, float]] = {}
    cuts: Dict[int, np.ndarray] = {}
    for k in range(min_nc, max_nc + 1):
        labels = fcluster(Z, t=k, criterion="maxclust")
        found = len(np.unique(labels))
        # maxclust can return fewer groups than asked for when merge heights tie
        if found != k or found >= len(X):
            logging.debug(f"k={k}: cut gives {found} clusters for {len(X)} hauls, skipped")
            continue
        scores[k] = {name: float(VALIDITY_INDICES[name][0](X, labels)) for name in indices}
        cuts[k] = labels

    if not scores:
        raise ValueError(
            f"No candidate cluster count in {min_nc}..{max_nc} could be scored for {len(X)} hauls"
        )

    table = pd.DataFrame.from_dict(scores, orient="index")[indices].sort_index()
    table.index.name = "k"

    votes = {}
    for name in indices:
        larger_better = VALIDITY_INDICES[name][1]
        col = table[name]
        votes[name] = int(col.idxmax() if larger_better else col.idxmin())

    tally = Counter(votes.values())
    top = max(tally.values())
    best_k = min(k for k, n in tally.items() if n == top)
    logging.info(f"Optimal clusters: k={best_k} (votes: {votes})")
    return ClusterCountResult(best_k=best_k, votes=votes, scores=table, labels=cuts[best_k])


def cluster_sector(
    sector_df: pd.DataFrame,
    species: List[str],
    method: str = LINKAGE_METHOD,
    min_nc: int = MIN_NC,
    max_nc: int = MAX_NC,
    indices: Iterable[str] = CLUSTER_INDICES,
) -> Tuple[pd.DataFrame, ClusterCountResult]:
    """Cluster one sector's hauls; returns (haul_id, sector, cluster) rows and the count result."""
    X = species_matrix(sector_df, species)
    result = optimal_cluster_count(X, method=method, min_nc=min_nc, max_nc=max_nc, indices=indices)
    assignments = pd.DataFrame({
        "haul_id": sector_df["haul_id"].to_numpy(),
        "sector": sector_df["sector"].to_numpy(),
        "cluster": result.labels.astype(int),
    })
    return assignments, result


def cluster_all_sectors(
    wide: pd.DataFrame,
    species: List[str],
    sectors: Optional[Iterable[str]] = None,
    min_hauls: int = MIN_SECTOR_HAULS,
    **kwargs,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Cluster each sector independently.
    Returns (assignments, votes) where votes has one row per (sector, index).
    """
    groups = split_by_sector(wide)
    if sectors:
        wanted = list(sectors)
        missing = [s for s in wanted if s not in groups]
        if missing:
            logging.warning(f"Requested sectors not found: {missing}")
        groups = {s: groups[s] for s in wanted if s in groups}

    min_rows = max(min_hauls, kwargs.get("min_nc", MIN_NC) + 1)
    assigned, votes = [], []
    for sector, sub in groups.items():
        if len(sub) < min_rows:
            logging.warning(f"Skipping sector {sector!r}: {len(sub)} hauls (< {min_rows})")
            continue
        logging.info(f"Clustering sector {sector!r} ({len(sub):,} hauls)")
        a, res = cluster_sector(sub, species, **kwargs)
        assigned.append(a)
        for name, k in res.votes.items():
            votes.append({"sector": sector, "index": name, "k": k, "best_k": res.best_k})

    assignments = (
        pd.concat(assigned, ignore_index=True) if assigned
        else pd.DataFrame(columns=["haul_id", "sector", "cluster"])
    )
    return assignments, pd.DataFrame(votes, columns=["sector", "index", "k", "best_k"])
