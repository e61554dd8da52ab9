"""
Loading and sampling of header-less LAR extracts.

The 2007-2017 public LAR files carry no header row, so the loader is always
given the full ordered list of column names. Every column is loaded as a
string; typing happens in the cleaner where parse failures can be counted.
"""

import csv
import logging
from pathlib import Path
from typing import Sequence

import polars as pl

from ..utils.io import find_ragged_rows, get_delimiter, unzip_hmda_file
from .config import LAR_2007_2017_COLUMNS, SAMPLE_FRACTION
from .errors import SchemaMismatchError

logger = logging.getLogger(__name__)


def _resolve_separator(path: Path, separator: str | None) -> str:
    if separator is not None:
        return separator
    try:
        return get_delimiter(path, bytes=16000)
    except csv.Error as e:
        raise SchemaMismatchError(f"Could not determine the delimiter of {path}: {e}") from e


def load_lar_sample(
    path: Path | str,
    columns: Sequence[str] = LAR_2007_2017_COLUMNS,
    separator: str | None = None,
) -> pl.DataFrame:
    """Load a header-less LAR extract with every column as a string.

    Parameters
    ----------
    path : Path | str
        Delimited text file without a header row.
    columns : Sequence[str]
        Full ordered list of column names. Defaults to the 45-column
        2007-2017 LAR layout.
    separator : str | None
        Field delimiter. Sniffed from the head of the file when None.

    Returns
    -------
    pl.DataFrame
        One row per record, all columns of type String.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    SchemaMismatchError
        If the file is empty or any row's width differs from ``len(columns)``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"LAR extract not found: {path}")
    columns = list(columns)
    if len(set(columns)) != len(columns):
        raise SchemaMismatchError("Column names supplied for the LAR extract are not unique")

    if path.stat().st_size == 0:
        raise SchemaMismatchError(f"{path} is empty; expected {len(columns)} fields per row")

    separator = _resolve_separator(path, separator)
    ragged = find_ragged_rows(path, separator, len(columns))
    if ragged.height:
        first = ragged.row(0, named=True)
        raise SchemaMismatchError(
            f"{path} has {ragged.height} rows whose width differs from the "
            f"{len(columns)} supplied column names (line {first['line_number']} "
            f"has {first['fields']} fields)"
        )

    try:
        df = pl.read_csv(
            path,
            separator=separator,
            has_header=False,
            new_columns=columns,
            infer_schema=False,
            encoding="utf8-lossy",
        )
    except pl.exceptions.ComputeError as e:
        raise SchemaMismatchError(f"{path} does not match the supplied schema: {e}") from e

    if df.width != len(columns):
        raise SchemaMismatchError(
            f"{path} loaded with {df.width} columns, expected {len(columns)}"
        )

    logger.info("Loaded %d records from %s", df.height, path)
    return df


def sample_lar_file(
    source: Path | str,
    destination: Path | str,
    fraction: float = SAMPLE_FRACTION,
    seed: int | None = None,
    separator: str | None = None,
) -> int:
    """Write a row sample of a full LAR file to ``destination``.

    Without a seed every ``1 / fraction``-th row is kept. With a seed a row
    is kept when a seeded hash of its index falls in the same ``1 / fraction``
    bucket, giving a reproducible pseudo-random sample of roughly the
    requested size. Both paths filter the lazy scan, so the full file is
    never held in memory.

    Parameters
    ----------
    source : Path | str
        Full LAR file, either delimited text or a zip archive containing one.
    destination : Path | str
        Output path for the header-less sample.
    fraction : float
        Share of rows to keep, in (0, 1].
    seed : int | None
        Hash seed. None selects systematic (every k-th row) sampling.
    separator : str | None
        Field delimiter. Sniffed when None; the sample keeps the same one.

    Returns
    -------
    int
        Number of sampled rows written.
    """
    if not 0 < fraction <= 1:
        raise ValueError(f"Sample fraction must be in (0, 1], got {fraction}")

    source = Path(source)
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    if source.suffix.lower() == ".zip":
        source = unzip_hmda_file(source, destination.parent)

    separator = _resolve_separator(source, separator)
    lf = pl.scan_csv(
        source,
        separator=separator,
        has_header=False,
        infer_schema=False,
        low_memory=True,
    )

    sample_step = max(int(round(1 / fraction)), 1)
    row_key = pl.col("row_num") if seed is None else pl.col("row_num").hash(seed)
    sampled_df = (
        lf.with_row_index("row_num")
        .filter(row_key % sample_step == 0)
        .drop("row_num")
        .collect()
    )

    sampled_df.write_csv(destination, include_header=False, separator=separator)
    logger.info(
        "Sampled %d rows (fraction %.4f) from %s to %s",
        sampled_df.height,
        fraction,
        source,
        destination,
    )
    return sampled_df.height


__all__ = [
    "load_lar_sample",
    "sample_lar_file",
]
