# groundfish/cleaning.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
import pandas as pd


def standardize_headers(df: pd.DataFrame) -> pd.DataFrame:
    """Lower-case headers and turn spaces/dots into underscores ("AVG LAT" -> "avg_lat")."""
    rename_map = {
        c: str(c).strip().lower().replace(" ", "_").replace(".", "_")
        for c in df.columns
    }
    return df.rename(columns=rename_map)


def add_hake_flag(df: pd.DataFrame) -> pd.DataFrame:
    """Mark hauls from the hake sectors (At-Sea Hake CP, Midwater Hake, ...)."""
    out = df.copy()
    out["is_hake"] = (
        out["sector"].astype("string").str.contains("hake", case=False, na=False).astype("boolean")
    )
    return out


# -------- record filter --------
def drop_missing_weight(df: pd.DataFrame) -> pd.DataFrame:
    # Null only; a recorded zero is a valid weight
    return df.dropna(subset=["mt"])


def drop_missing_set_position(df: pd.DataFrame) -> pd.DataFrame:
    return df.dropna(subset=["set_datetime", "avg_lat", "avg_long"])


def drop_missing_haul(df: pd.DataFrame) -> pd.DataFrame:
    return df.dropna(subset=["haul_id"])


FILTER_STEPS = [
    ("missing weight", drop_missing_weight),
    ("missing set date or position", drop_missing_set_position),
    ("missing haul id", drop_missing_haul),
]


@dataclass(frozen=True)
class FilterStep:
    name: str
    removed: int
    pct_of_original: float


@dataclass
class FilterReport:
    original: int
    steps: list[FilterStep] = field(default_factory=list)

    @property
    def kept(self) -> int:
        return self.original - sum(s.removed for s in self.steps)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(s.name, s.removed, s.pct_of_original) for s in self.steps],
            columns=["step", "removed", "pct_of_original"],
        )


def filter_records(df: pd.DataFrame) -> tuple[pd.DataFrame, FilterReport]:
    """
    Drop records lacking weight, set date, latitude, longitude or haul id.
    Each step's removal count is reported relative to the original row count.
    """
    report = FilterReport(original=len(df))
    out = df
    for name, step in FILTER_STEPS:
        before = len(out)
        out = step(out)
        removed = before - len(out)
        pct = 100.0 * removed / report.original if report.original else 0.0
        report.steps.append(FilterStep(name, removed, pct))
        logging.info(f"Dropped {removed:,} rows with {name} ({pct:.2f}% of original)")

    logging.info(f"Kept {report.kept:,} of {report.original:,} records")
    return out.copy(), report
