# -*- coding: utf-8 -*-
"""
Tests for the shared identifier and list helpers.
"""

import numpy as np
import pandas as pd
import pytest

from synoptic.transforms import (
    coerce_numeric_columns,
    first_match,
    format_id,
    is_blank,
    join_sorted,
    split_list,
    to_number,
    unpack,
)

pytestmark = pytest.mark.unit


class TestFormatId:

    def test_integral_float_matches_int(self):
        assert format_id(7.0) == format_id(7) == format_id("7") == "7"

    def test_numpy_scalars(self):
        assert format_id(np.int64(101)) == "101"
        assert format_id(np.float64(101.0)) == "101"

    def test_blank_is_none(self):
        assert format_id(None) is None
        assert format_id(np.nan) is None
        assert format_id("  ") is None

    def test_strips_text(self):
        assert format_id(" SEL-19-05 ") == "SEL-19-05"
        assert format_id(2.5) == "2.5"


class TestListHelpers:

    def test_split_list_dedups_in_order(self):
        assert split_list("B: A:B::C", ":") == ["B", "A", "C"]

    def test_split_list_blank(self):
        assert split_list(None, ":") == []
        assert split_list("", ":") == []

    def test_join_sorted(self):
        assert join_sorted(["b", "a", "b"]) == "a,b"
        assert join_sorted([]) == ""

    def test_unpack(self):
        assert unpack("C1, C2") == ["C1", "C2"]
        assert unpack("") == []

    def test_coerce_numeric_columns(self):
        df = pd.DataFrame({"Year": ["2010", "x"], "Name": ["a", "b"]})
        result = coerce_numeric_columns(df, ["Year", "Missing"])
        assert result["Year"].tolist()[0] == 2010
        assert pd.isna(result["Year"].tolist()[1])
        assert df["Year"].tolist() == ["2010", "x"]

    def test_to_number(self):
        assert to_number("7") == 7.0
        assert to_number(7) == 7.0
        assert to_number("seven") is None
        assert to_number(None) is None

    def test_first_match(self):
        df = pd.DataFrame({"a": [1, 2, 2]}, index=["x", "y", "z"])
        assert first_match(df, df["a"] == 2) == "y"
        assert first_match(df, df["a"] == 5) is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank(np.nan)
    assert is_blank(pd.NA)
    assert is_blank(" ")
    assert not is_blank(0)
    assert not is_blank("C1")
