# groundfish/etl/cooccur_cluster.py
"""
Stage 2: species co-occurrence and per-sector haul clustering.

Usage:
  python -m groundfish.etl.cooccur_cluster \
    --wide data/processed/wide_hauls.csv \
    --outdir data/processed \
    --sector "Catcher Processor" "Midwater Hake" \
    --method ward --min-nc 2 --max-nc 10 --charts
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path

from groundfish.clustering import cluster_all_sectors
from groundfish.config import LINKAGE_METHOD, MAX_NC, MIN_NC, MIN_SECTOR_HAULS, PROC_DIR, WIDE_TABLE_NAME
from groundfish.etl.clean_transform import _setup_logging
from groundfish.io import read_wide_table, write_table
from groundfish.queries.cooccurrence import cooccurrence_matrix, presence_absence
from groundfish.queries.pivot import species_columns


def main(argv=None):
    parser = argparse.ArgumentParser(description="Species co-occurrence and per-sector clustering of hauls.")
    parser.add_argument("--wide", type=Path, default=PROC_DIR / WIDE_TABLE_NAME, help="Wide haul table from clean_transform")
    parser.add_argument("--outdir", type=Path, default=PROC_DIR)
    parser.add_argument("--sector", nargs="+", help="Sectors to cluster (default: all)")
    parser.add_argument("--method", default=LINKAGE_METHOD, help="Linkage method (ward, average, complete, ...)")
    parser.add_argument("--min-nc", type=int, default=MIN_NC)
    parser.add_argument("--max-nc", type=int, default=MAX_NC)
    parser.add_argument("--min-hauls", type=int, default=MIN_SECTOR_HAULS)
    parser.add_argument("--charts", action="store_true", help="Also write an HTML co-occurrence heatmap")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    wide = read_wide_table(args.wide)
    species = species_columns(wide)
    logging.info(f"Wide table: {len(wide):,} hauls × {len(species)} species")

    matrix = cooccurrence_matrix(presence_absence(wide, species), species)
    args.outdir.mkdir(parents=True, exist_ok=True)
    matrix.to_csv(args.outdir / "cooccurrence.csv")
    logging.info(f"Wrote {args.outdir / 'cooccurrence.csv'}")

    if args.charts:
        from groundfish.viz.charts import heatmap_cooccurrence
        html = args.outdir / "cooccurrence_heatmap.html"
        heatmap_cooccurrence(matrix).save(str(html))
        logging.info(f"Wrote {html}")

    assignments, votes = cluster_all_sectors(
        wide, species, sectors=args.sector, min_hauls=args.min_hauls,
        method=args.method, min_nc=args.min_nc, max_nc=args.max_nc,
    )
    write_table(assignments, args.outdir / "cluster_assignments.csv")
    write_table(votes, args.outdir / "cluster_votes.csv")

    for sector, sub in assignments.groupby("sector"):
        sizes = sub["cluster"].value_counts().sort_index().to_dict()
        logging.info(f"[Summary] {sector}: cluster sizes {sizes}")


if __name__ == "__main__":
    main()
