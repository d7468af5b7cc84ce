from pathlib import Path

# Root-relative data directories
DATA_DIR = Path("data")
RAW_DIR = DATA_DIR / "raw"
PROC_DIR = DATA_DIR / "processed"
SNAP_DIR = DATA_DIR / "snapshots"

RAW_CATCH_FILE = RAW_DIR / "observer_catch.csv"
WIDE_TABLE_NAME = "wide_hauls.csv"
SPECIES_RANK_NAME = "species_rank.csv"

# Fields that must all be present for a record to be usable
REQUIRED_FIELDS = ["mt", "set_datetime", "avg_lat", "avg_long", "haul_id"]

# Per-haul identifying columns carried into the wide table (in output order)
HAUL_ID_COLS = [
    "haul_id", "sector", "is_hake", "drvid", "trip_id", "area",
    "avg_lat", "avg_long", "avg_depth", "gear_type", "target", "set_datetime",
]

SPECIES_COL = "common_name"
WEIGHT_COL = "mt"

# Substring marking unidentified catch categories ("Unid. Rockfish", "Unid Skate")
UNID_MARKER = "unid"

# Weight-proportion cutoffs explored for the retention set
RETENTION_THRESHOLDS = (0.01, 0.001)
DEFAULT_THRESHOLD = 0.001

# Hierarchical clustering defaults
LINKAGE_METHOD = "ward"
MIN_NC = 2
MAX_NC = 10
CLUSTER_INDICES = ("silhouette", "calinski_harabasz", "davies_bouldin")
MIN_SECTOR_HAULS = 3
