import logging
import numpy as np
import pandas as pd
import pytest

from groundfish.clustering import (
    cluster_all_sectors,
    cluster_sector,
    optimal_cluster_count,
    species_matrix,
    split_by_sector,
)

CENTERS = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]


def _blobs(per=5, seed=0):
    rng = np.random.default_rng(seed)
    pts = [np.asarray(c) + rng.normal(scale=0.1, size=(per, 2)) for c in CENTERS]
    return np.vstack(pts)


def _wide(sectors):
    """Sector -> number of blob points; species weights are the blob coordinates shifted positive."""
    frames = []
    start = 1
    for sector, per in sectors.items():
        X = _blobs(per) + 1.0
        n = len(X)
        frames.append(pd.DataFrame({
            "haul_id": range(start, start + n),
            "sector": sector,
            "A": X[:, 0],
            "B": X[:, 1],
        }))
        start += n
    return pd.concat(frames, ignore_index=True)


def test_three_blobs_give_three_clusters():
    res = optimal_cluster_count(_blobs(), min_nc=2, max_nc=6)
    assert res.best_k == 3
    assert res.votes == {"silhouette": 3, "calinski_harabasz": 3, "davies_bouldin": 3}
    assert list(res.scores.index) == [2, 3, 4, 5, 6]
    # every blob lands in a single cluster, and the clusters differ
    groups = res.labels.reshape(3, 5)
    assert all(len(set(g)) == 1 for g in groups)
    assert len({g[0] for g in groups}) == 3


def test_single_index_vote():
    res = optimal_cluster_count(_blobs(), max_nc=5, indices=["silhouette"])
    assert res.best_k == 3
    assert list(res.scores.columns) == ["silhouette"]


def test_bad_arguments():
    X = _blobs()
    with pytest.raises(ValueError, match="Unknown"):
        optimal_cluster_count(X, indices=["gap"])
    with pytest.raises(ValueError, match="range"):
        optimal_cluster_count(X, min_nc=1)
    with pytest.raises(ValueError, match="range"):
        optimal_cluster_count(X, min_nc=5, max_nc=4)


def test_too_few_hauls_to_score():
    with pytest.raises(ValueError, match="could be scored"):
        optimal_cluster_count(np.array([[0.0, 1.0], [2.0, 3.0]]), min_nc=2, max_nc=3)


def test_library_errors_propagate():
    X = _blobs()
    X[0, 0] = np.nan
    with pytest.raises(ValueError):
        optimal_cluster_count(X)


def test_split_by_sector():
    wide = _wide({"Midwater Hake": 3, "Catcher Processor": 2})
    groups = split_by_sector(wide)
    assert list(groups) == ["Catcher Processor", "Midwater Hake"]
    assert len(groups["Midwater Hake"]) == 9
    assert species_matrix(groups["Catcher Processor"], ["B", "A"]).shape == (6, 2)


def test_cluster_sector_assignments():
    wide = _wide({"Midwater Hake": 5})
    a, res = cluster_sector(wide, ["A", "B"], max_nc=6)
    assert list(a.columns) == ["haul_id", "sector", "cluster"]
    assert a["haul_id"].tolist() == wide["haul_id"].tolist()
    assert a["cluster"].nunique() == res.best_k == 3


def test_cluster_all_sectors_skips_small(caplog):
    wide = _wide({"Midwater Hake": 5, "Shoreside Hake": 1})
    wide = wide[~((wide["sector"] == "Shoreside Hake") & (wide["haul_id"] > 17))]
    with caplog.at_level(logging.WARNING):
        assignments, votes = cluster_all_sectors(wide, ["A", "B"], min_hauls=3, max_nc=6)
    assert set(assignments["sector"]) == {"Midwater Hake"}
    assert "Shoreside Hake" in caplog.text
    assert set(votes["index"]) == {"silhouette", "calinski_harabasz", "davies_bouldin"}
    assert (votes["best_k"] == 3).all()


def test_cluster_all_sectors_selected():
    wide = _wide({"Midwater Hake": 5, "Catcher Processor": 5})
    assignments, _ = cluster_all_sectors(wide, ["A", "B"], sectors=["Catcher Processor"], max_nc=6)
    assert set(assignments["sector"]) == {"Catcher Processor"}
    assert len(assignments) == 15
