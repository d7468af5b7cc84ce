import hashlib
from pathlib import Path

import pytest

from groundfish.snapshot import sha256_file, snapshot_wide_table


def test_snapshot_writes_manifest(tmp_path: Path):
    src = tmp_path / "wide_hauls.csv"
    src.write_text("haul_id,A\n1,2.0\n")
    out_dir = snapshot_wide_table(src, tmp_path / "snaps")

    assert (out_dir / "wide_hauls.csv").read_bytes() == src.read_bytes()
    lines = (out_dir / "MANIFEST.csv").read_text().splitlines()
    assert lines[0] == "file,bytes,sha256"
    name, size, digest = lines[1].split(",")
    assert name == "wide_hauls.csv"
    assert int(size) == src.stat().st_size
    assert digest == hashlib.sha256(src.read_bytes()).hexdigest() == sha256_file(src)


def test_snapshot_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        snapshot_wide_table(tmp_path / "missing.csv", tmp_path)
