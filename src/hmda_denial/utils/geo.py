"""
Geographic helpers (FIPS keys and the region name reference table).
"""

import logging
from pathlib import Path

import polars as pl


logger = logging.getLogger(__name__)

STATE_FIPS_PATTERN = r"^\d{2}$"
COUNTY_FIPS_PATTERN = r"^\d{5}$"


def add_geographic_keys(df: pl.DataFrame) -> pl.DataFrame:
    """Build the 2-digit state and 5-digit county FIPS keys.

    Raw LAR files split the county key into ``state_code`` and a 3-digit
    ``county_code``. Frames that already carry ``county_fips`` are returned
    unchanged. A null state or county code yields a null county key.
    """
    if "county_fips" in df.columns:
        return df.clone()
    state = pl.col("state_code").cast(pl.String).str.strip_chars().str.zfill(2)
    county = pl.col("county_code").cast(pl.String).str.strip_chars().str.zfill(3)
    return df.with_columns(
        state.alias("state_code"),
        pl.concat_str([state, county]).alias("county_fips"),
    ).drop("county_code")


def load_region_reference(
    path: Path | str,
    fips_col: str = "fips",
    name_col: str = "name",
) -> pl.DataFrame:
    """Load the county name lookup used for display.

    Parameters
    ----------
    path : Path | str
        CSV file with a FIPS column and a region name column.
    fips_col : str
        Name of the FIPS column. Values are zero-padded to 5 digits.
    name_col : str
        Name of the region name column.

    Returns
    -------
    pl.DataFrame
        Columns ``county_fips`` and ``region_name``, one row per key.
    """
    path = Path(path)
    reference = pl.read_csv(path, infer_schema=False)
    missing = [column for column in (fips_col, name_col) if column not in reference.columns]
    if missing:
        raise ValueError(f"Region reference {path} is missing columns: {missing}")
    reference = (
        reference.select(
            pl.col(fips_col).str.strip_chars().str.zfill(5).alias("county_fips"),
            pl.col(name_col).str.strip_chars().alias("region_name"),
        )
        .unique(subset=["county_fips"], keep="first", maintain_order=True)
    )
    logger.debug("Loaded %d regions from %s", reference.height, path)
    return reference


def attach_region_names(
    df: pl.DataFrame,
    reference: pl.DataFrame,
    key: str = "county_fips",
) -> pl.DataFrame:
    """Left-join region names onto a county-keyed table."""
    if key not in df.columns:
        raise ValueError(f"Cannot attach region names: {key} not in frame")
    out = df.join(reference.select(key, "region_name"), on=key, how="left")
    unmatched = out.filter(pl.col("region_name").is_null()).height
    if unmatched:
        logger.warning("%d of %d keys have no region name", unmatched, out.height)
    return out


__all__ = [
    "STATE_FIPS_PATTERN",
    "COUNTY_FIPS_PATTERN",
    "add_geographic_keys",
    "load_region_reference",
    "attach_region_names",
]
