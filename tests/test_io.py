from pathlib import Path
import pandas as pd
import pytest

from groundfish.errors import SchemaError
from groundfish.io import read_raw_catch, read_variable_descriptions, read_wide_table, write_table
from groundfish.queries.pivot import build_wide_table


def test_read_raw_catch_roundtrip(tmp_path: Path, make_records):
    df = make_records([
        {"haul_id": 1, "common_name": "Pacific Hake", "mt": 3.0},
        {"haul_id": 2, "common_name": "Sablefish", "mt": None},
    ])
    path = tmp_path / "catch.csv"
    df.to_csv(path, index=False)

    out = read_raw_catch(path)
    assert len(out) == 2
    assert out["mt"].isna().tolist() == [False, True]
    assert out["haul_id"].dtype == "Int64"
    assert out["groundfish_fmp"].all()


def test_read_raw_catch_normalizes_headers_and_delimiter(tmp_path: Path, make_records):
    df = make_records([{"haul_id": 1, "common_name": "Lingcod", "mt": 0.4}])
    df.columns = [c.upper().replace("_", " ") for c in df.columns]
    path = tmp_path / "catch.tsv"
    df.to_csv(path, index=False, sep="\t")

    out = read_raw_catch(path, sep="\t")
    assert "avg_lat" in out.columns
    assert out.loc[0, "common_name"] == "Lingcod"


def test_read_raw_catch_bad_value(tmp_path: Path, make_records):
    df = make_records([{"haul_id": 1, "common_name": "Lingcod", "mt": 0.4}]).astype("string")
    df.loc[0, "avg_depth"] = "deep"
    path = tmp_path / "catch.csv"
    df.to_csv(path, index=False)
    with pytest.raises(SchemaError, match="avg_depth"):
        read_raw_catch(path)


def test_read_raw_catch_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_raw_catch(tmp_path / "nope.csv")


def test_read_variable_descriptions(tmp_path: Path):
    path = tmp_path / "vars.csv"
    path.write_text("Variable,Description\nhaul_id, Haul identifier\nmt,Total weight (mt)\n")
    out = read_variable_descriptions(path)
    assert list(out.columns) == ["variable", "description"]
    assert out["variable"].tolist() == ["haul_id", "mt"]


def test_read_variable_descriptions_wrong_shape(tmp_path: Path):
    path = tmp_path / "vars.csv"
    path.write_text("name,text\na,b\n")
    with pytest.raises(SchemaError):
        read_variable_descriptions(path)


def test_wide_table_survives_csv(tmp_path: Path, make_records):
    df = make_records([
        {"haul_id": 2, "common_name": "Pacific Hake", "mt": 3.0},
        {"haul_id": 1, "common_name": "Sablefish", "mt": 0.5, "drvid": "V2", "sector": "Limited Entry Trawl"},
    ])
    wide = build_wide_table(df, ["Pacific Hake", "Sablefish"])
    path = write_table(wide, tmp_path / "wide.csv")

    back = read_wide_table(path)
    assert back["haul_id"].tolist() == [1, 2]
    assert back["is_hake"].tolist() == [False, True]
    assert back["set_datetime"].dtype.kind == "M"
    assert back["Sablefish"].tolist() == [0.5, 0.0]


def test_write_table_unknown_format(tmp_path: Path):
    with pytest.raises(ValueError, match="Unsupported"):
        write_table(pd.DataFrame({"a": [1]}), tmp_path / "out.xlsx")
