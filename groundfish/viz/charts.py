# groundfish/viz/charts.py
from __future__ import annotations
import altair as alt
import pandas as pd

from groundfish.config import SPECIES_COL
from groundfish.queries.cooccurrence import cooccurrence_long


def _no_data() -> alt.Chart:
    return alt.Chart(pd.DataFrame({"note": ["No data"]})).mark_text(size=16).encode(text="note")


def bar_species_rank(ranks: pd.DataFrame, threshold: float, top_n: int = 40) -> alt.Chart:
    """Share of landed weight per species, coloured by whether it clears the threshold."""
    if ranks.empty:
        return _no_data()
    base = ranks.head(top_n).copy()
    base["retained"] = base["proportion"] > threshold
    return (
        alt.Chart(base)
        .mark_bar()
        .encode(
            x=alt.X("proportion:Q", title="Share of landed weight", axis=alt.Axis(format="%")),
            y=alt.Y(f"{SPECIES_COL}:N", sort="-x", title="Species"),
            color=alt.Color("retained:N", legend=alt.Legend(title=f"> {threshold:.1%}")),
            tooltip=[
                f"{SPECIES_COL}:N",
                alt.Tooltip("mt:Q", title="Weight (mt)", format=",.2f"),
                alt.Tooltip("proportion:Q", title="Share", format=".2%"),
                "rank:O",
            ],
        )
        .properties(title="Species by landed weight")
    )


def heatmap_cooccurrence(matrix: pd.DataFrame, title: str = "Species co-occurrence") -> alt.Chart:
    """Row species on y, co-caught species on x; rows are normalized to a peak of 1."""
    if matrix.empty:
        return _no_data()
    order = [str(s) for s in matrix.index]
    long = cooccurrence_long(matrix)
    return (
        alt.Chart(long)
        .mark_rect()
        .encode(
            x=alt.X("with_species:N", sort=order, title="Also caught"),
            y=alt.Y("species:N", sort=order, title="Species"),
            color=alt.Color("value:Q", scale=alt.Scale(domain=[0, 1]), title="Co-occurrence"),
            tooltip=["species:N", "with_species:N", alt.Tooltip("value:Q", format=".2f")],
        )
        .properties(title=title)
    )
