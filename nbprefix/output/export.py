# nbprefix/output/export.py

from __future__ import annotations
import gzip
from pathlib import Path
from typing import Union

import pandas as pd

from nbprefix.utils.logging import get_logger

log = get_logger(__name__)


PathLike = Union[str, Path]


def _write_with_compression(
    text: str,
    path: Path,
    compress: bool = True
) -> tuple[int, int]:
    """
    Write text to file, optionally with a gzipped copy beside it.

    Returns:
        tuple of (original_size_bytes, written_size_bytes)
    """
    data = text.encode("utf-8")
    original_size = len(data)

    path.write_bytes(data)

    if compress:
        gz_path = path.with_suffix(path.suffix + ".gz")
        with gzip.open(gz_path, "wb", compresslevel=9) as f:
            f.write(data)
        compressed_size = gz_path.stat().st_size

        log.info(
            f"Wrote {path} ({original_size} bytes) and "
            f"{gz_path.name} ({compressed_size} bytes)"
        )
        return original_size, compressed_size

    log.info(f"Wrote {path} ({original_size} bytes)")
    return original_size, original_size


def save_csv(df: pd.DataFrame, path: PathLike, compress: bool = False) -> Path:
    out_path = Path(path)
    log.info("Saving CSV table to %s", out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    _write_with_compression(df.to_csv(index=False), out_path, compress=compress)
    return out_path


def save_json(df: pd.DataFrame, path: PathLike, compress: bool = False) -> Path:
    """
    Save a table as a JSON list of row objects.

    Parameters
    ----------
    df : pandas.DataFrame
        Table to write.
    path : str | Path
        Output path.
    compress : bool, default False
        Also write ``<path>.gz``.
    """
    out_path = Path(path)
    log.info("Saving JSON table to %s", out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    _write_with_compression(df.to_json(orient="records", indent=2), out_path, compress=compress)
    return out_path


def save_table(df: pd.DataFrame, path: PathLike, compress: bool = False) -> Path:
    """Pick CSV or JSON from the file suffix (CSV unless it ends in .json)."""
    out_path = Path(path)
    if out_path.suffix.lower() == ".json":
        return save_json(df, out_path, compress=compress)
    if out_path.suffix.lower() != ".csv":
        out_path = out_path.with_suffix(".csv")
    return save_csv(df, out_path, compress=compress)
