from __future__ import annotations
from pathlib import Path
from datetime import datetime
import hashlib
import logging
import shutil

from groundfish.config import SNAP_DIR


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def snapshot_wide_table(path: str | Path, snap_dir: str | Path = SNAP_DIR) -> Path:
    """Copy the wide table into a timestamped folder next to a MANIFEST.csv."""
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Wide table not found: {src}")

    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    out_dir = Path(snap_dir) / ts
    out_dir.mkdir(parents=True, exist_ok=True)

    dest = out_dir / src.name
    shutil.copy2(src, dest)
    manifest_lines = ["file,bytes,sha256", f"{dest.name},{dest.stat().st_size},{sha256_file(dest)}"]
    (out_dir / "MANIFEST.csv").write_text("\n".join(manifest_lines), encoding="utf-8")
    logging.info(f"Wrote snapshot -> {out_dir}")
    return out_dir
