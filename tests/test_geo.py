"""Tests for FIPS keys and the region name reference."""

import polars as pl
import pytest

from hmda_denial.utils.geo import add_geographic_keys, attach_region_names, load_region_reference


def test_add_geographic_keys_pads_and_combines():
    df = pl.DataFrame({"state_code": ["6", "36", None], "county_code": ["37", "061", "001"]})

    result = add_geographic_keys(df)

    assert result["state_code"].to_list() == ["06", "36", None]
    assert result["county_fips"].to_list() == ["06037", "36061", None]
    assert "county_code" not in result.columns


def test_add_geographic_keys_keeps_existing_key():
    df = pl.DataFrame({"state_code": ["06"], "county_fips": ["06037"]})

    assert add_geographic_keys(df).equals(df)


def test_load_region_reference_pads_fips(tmp_path):
    path = tmp_path / "regions.csv"
    path.write_text("fips,name\n6037, Los Angeles\n6037,Duplicate\n36061,New York\n")

    reference = load_region_reference(path)

    assert reference["county_fips"].to_list() == ["06037", "36061"]
    assert reference["region_name"].to_list() == ["Los Angeles", "New York"]


def test_load_region_reference_requires_columns(tmp_path):
    path = tmp_path / "regions.csv"
    path.write_text("code,label\n6037,Los Angeles\n")

    with pytest.raises(ValueError):
        load_region_reference(path)


def test_attach_region_names_leaves_unmatched_null():
    summary = pl.DataFrame({"county_fips": ["06037", "99999"], "loan_count": [3, 1]})
    reference = pl.DataFrame({"county_fips": ["06037"], "region_name": ["Los Angeles"]})

    result = attach_region_names(summary, reference)

    assert result["region_name"].to_list() == ["Los Angeles", None]
    assert result.height == 2
