"""
Input/Output utilities for LAR extracts (delimiters, row widths, unzip).
"""

import io
import logging
import zipfile
from csv import Sniffer
from pathlib import Path

import polars as pl


logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",|\t;"
# Unit separator; never present in LAR text, so each line reads as one field
LINE_SEPARATOR = "\x1f"


def should_process_output(path: Path, replace: bool) -> bool:
    """Return True when the target path should be generated.

    Parameters
    ----------
    path : Path
        Target output file path
    replace : bool
        Whether to replace existing files

    Returns
    -------
    bool
        True if file should be processed
    """
    return replace or not path.exists()


def get_delimiter(file_path: Path | str, bytes: int = 4096) -> str:
    """Determine the delimiter used in a delimited text file."""
    sniffer = Sniffer()
    with io.open(file_path, mode="r", encoding="latin-1") as f:
        data = f.read(bytes)
    return sniffer.sniff(data, delimiters=CANDIDATE_DELIMITERS).delimiter


def find_ragged_rows(file_path: Path | str, separator: str, n_fields: int) -> pl.DataFrame:
    """Return the rows of a delimited file whose field count is not ``n_fields``.

    Each line is scanned as a single text column and its separators counted,
    so short rows are caught as well as long ones.

    Returns
    -------
    pl.DataFrame
        Columns ``line_number`` (1-based) and ``fields``; empty when every row
        has the expected width.
    """
    lines = pl.scan_csv(
        file_path,
        separator=LINE_SEPARATOR,
        has_header=False,
        new_columns=["line"],
        quote_char=None,
        infer_schema=False,
        encoding="utf8-lossy",
    )
    return (
        lines.with_row_index("line_number", offset=1)
        .select(
            "line_number",
            (pl.col("line").str.count_matches(separator, literal=True) + 1).alias("fields"),
        )
        .filter(pl.col("fields") != n_fields)
        .collect()
    )


def unzip_hmda_file(
    zip_file: Path | str, raw_folder: Path | str, replace: bool = False
) -> Path:
    """Extract the delimited file from a compressed LAR archive and return its path."""
    zip_file = Path(zip_file)
    raw_folder = Path(raw_folder)
    if zip_file.suffix.lower() != ".zip":
        raise ValueError(f"Expected a zip archive, got: {zip_file}")

    with zipfile.ZipFile(zip_file) as z:
        delimited_files = [
            x for x in z.namelist() if (x.endswith(".txt") or x.endswith(".csv")) and "/" not in x
        ]
        if len(delimited_files) != 1:
            raise ValueError(
                f"Expected exactly one delimited file in {zip_file}, found {len(delimited_files)}"
            )
        file = delimited_files[0]
        raw_file_name = raw_folder / file
        if should_process_output(raw_file_name, replace):
            logger.info("Extracting file: %s", file)
            z.extract(file, path=raw_folder)

    return raw_file_name


__all__ = [
    "should_process_output",
    "get_delimiter",
    "find_ragged_rows",
    "unzip_hmda_file",
]
