from .species import select_candidates, species_rank, retained_species, threshold_summary
from .pivot import build_wide_table, species_columns
from .cooccurrence import presence_absence, cooccurrence_matrix, cooccurrence_long

__all__ = [
    "select_candidates", "species_rank", "retained_species", "threshold_summary",
    "build_wide_table", "species_columns",
    "presence_absence", "cooccurrence_matrix", "cooccurrence_long",
]
