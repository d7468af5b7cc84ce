# groundfish/etl/clean_transform.py
"""
Stage 1: clean observer catch records and build the wide per-haul table.

Usage:
  python -m groundfish.etl.clean_transform \
    --input data/raw/observer_catch.csv \
    --outdir data/processed \
    --threshold 0.001

Outputs (in --outdir):
    wide_hauls.csv          one row per haul, one column per retained species
    species_rank.csv        total weight, proportion and rank per species
    haul_rank_summary.csv   mean within-haul proportion per species
    filter_report.csv       rows dropped by each missing-value filter
    threshold_summary.csv   species kept / weight covered at each explored cutoff
"""

from __future__ import annotations
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import pandas as pd

from groundfish.cleaning import FilterReport, add_hake_flag, filter_records
from groundfish.config import (
    DEFAULT_THRESHOLD,
    PROC_DIR,
    RAW_CATCH_FILE,
    RETENTION_THRESHOLDS,
    SNAP_DIR,
    SPECIES_RANK_NAME,
    UNID_MARKER,
    WIDE_TABLE_NAME,
)
from groundfish.io import read_raw_catch, read_variable_descriptions, write_table
from groundfish.queries.pivot import build_wide_table, reconcile_totals
from groundfish.queries.species import (
    haul_rank_summary,
    haul_species_proportions,
    retained_species,
    select_candidates,
    species_rank,
    threshold_summary,
)
from groundfish.snapshot import snapshot_wide_table


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )


@dataclass
class Prepared:
    records: pd.DataFrame
    report: FilterReport
    candidates: pd.DataFrame
    ranks: pd.DataFrame
    haul_ranks: pd.DataFrame
    species: List[str]
    wide: pd.DataFrame


def prepare(raw: pd.DataFrame, threshold: float = DEFAULT_THRESHOLD, marker: str = UNID_MARKER) -> Prepared:
    """Raw records -> filtered records -> species ranks -> wide haul table."""
    records, report = filter_records(raw)
    records = add_hake_flag(records)

    candidates = select_candidates(records, marker)
    ranks = species_rank(candidates)

    # Hauls whose candidate catch weighs nothing have no within-haul shares
    haul_mt = candidates.groupby("haul_id")["mt"].transform("sum")
    weighed = candidates[(haul_mt > 0).to_numpy()]
    if len(weighed) < len(candidates):
        logging.info(f"Per-haul ranking skips {len(candidates) - len(weighed):,} rows from zero-weight hauls")
    haul_ranks = haul_rank_summary(haul_species_proportions(weighed)) if not weighed.empty else pd.DataFrame(
        columns=["common_name", "hauls", "mean_proportion", "rank"]
    )

    species = retained_species(ranks, threshold)
    logging.info(f"Retained {len(species)} of {len(ranks)} species above {threshold:.2%}")

    wide = build_wide_table(candidates, species)
    reconcile_totals(candidates, wide, species)
    return Prepared(records, report, candidates, ranks, haul_ranks, species, wide)


def summarize(p: Prepared) -> dict:
    wide = p.wide
    if wide.empty:
        return {"hauls": 0}
    return {
        "records_in": p.report.original,
        "records_kept": p.report.kept,
        "hauls": int(len(wide)),
        "species": len(p.species),
        "sectors": int(wide["sector"].nunique()),
        "vessels": int(wide["drvid"].nunique()),
        "total_weight": float(wide[p.species].to_numpy().sum()),
        "date_span": (str(wide["set_datetime"].min().date()), str(wide["set_datetime"].max().date())),
    }


def write_outputs(p: Prepared, outdir: Path) -> Path:
    outdir.mkdir(parents=True, exist_ok=True)
    wide_path = write_table(p.wide, outdir / WIDE_TABLE_NAME)
    write_table(p.ranks, outdir / SPECIES_RANK_NAME)
    write_table(p.haul_ranks, outdir / "haul_rank_summary.csv")
    write_table(p.report.to_frame(), outdir / "filter_report.csv")
    write_table(threshold_summary(p.ranks, RETENTION_THRESHOLDS), outdir / "threshold_summary.csv")
    return wide_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Clean observer catch records and build the wide haul table.")
    parser.add_argument("--input", type=Path, default=RAW_CATCH_FILE, help="Path to raw catch records file")
    parser.add_argument("--outdir", type=Path, default=PROC_DIR, help="Destination directory for processed tables")
    parser.add_argument("--descriptions", type=Path, help="Optional variable-description file")
    parser.add_argument("--sep", default=",", help="Field delimiter of the raw file")
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD,
                        help="Keep species whose share of landed weight is strictly above this")
    parser.add_argument("--unid-marker", default=UNID_MARKER, help="Substring marking unidentified species")
    parser.add_argument("--snapshot", type=Path, nargs="?", const=SNAP_DIR,
                        help="Also snapshot the wide table (optionally into this directory)")
    parser.add_argument("--charts", action="store_true", help="Also write an HTML species rank chart")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if args.descriptions:
        variables = read_variable_descriptions(args.descriptions, sep=args.sep)
        logging.info(f"Variable descriptions: {len(variables)} entries")

    logging.info("Reading raw catch records…")
    raw = read_raw_catch(args.input, sep=args.sep)

    p = prepare(raw, threshold=args.threshold, marker=args.unid_marker)
    wide_path = write_outputs(p, args.outdir)

    if args.charts:
        from groundfish.viz.charts import bar_species_rank
        html = args.outdir / "species_rank.html"
        bar_species_rank(p.ranks, args.threshold).save(str(html))
        logging.info(f"Wrote {html}")

    if args.snapshot:
        snapshot_wide_table(wide_path, args.snapshot)

    logging.info(f"[Summary] {summarize(p)} -> {wide_path}")


if __name__ == "__main__":
    main()
