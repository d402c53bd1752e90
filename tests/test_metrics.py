# -*- coding: utf-8 -*-
"""
Tests for reshaping the long CU metrics series into the wide metrics table.
"""

import pandas as pd
import pytest

from synoptic.metrics import as_status, metric_key, metric_names, metric_years, reshape_metrics, status_column

pytestmark = pytest.mark.unit


@pytest.fixture
def series():
    return pd.DataFrame({
        "CU_ID": ["C1", "C1", "C1", "C2"],
        "DataType": ["Annual", "Annual", "Annual", "Change"],
        "Year": [2010, 2010, 2011, 2010],
        "Metric": ["RelAbd", "LongTrend", "RelAbd", "RelAbd"],
        "Value": [0.5, 1.2, 0.4, -0.1],
        "Status": ["Green", "Amber", "Red", None],
    })


class TestHelpers:

    def test_metric_key(self):
        assert metric_key("C1", "Annual", 2010) == "C1.Annual.2010"
        assert metric_key("C1", "Annual", 2010.0) == "C1.Annual.2010"

    def test_status_column(self):
        assert status_column("RelAbd") == "RelAbd.Status"

    def test_metric_names_first_seen(self, series):
        assert metric_names(series) == ["RelAbd", "LongTrend"]

    def test_as_status_unknown_becomes_na(self):
        status = as_status(pd.Series(["Green", " Red ", "Purple", None]))
        assert list(status.categories) == ["Red", "Amber", "Green"]
        assert status.ordered
        assert status[0] == "Green"
        assert status[1] == "Red"
        assert pd.isna(status[2])
        assert pd.isna(status[3])


class TestReshapeMetrics:

    def test_one_row_per_key(self, series):
        wide = reshape_metrics(series)
        assert len(wide) == 3
        assert wide.index.is_unique
        assert list(wide.index) == ["C1.Annual.2010", "C1.Annual.2011", "C2.Change.2010"]
        assert wide["Metric_Key"].tolist() == list(wide.index)

    def test_values_and_status(self, series):
        wide = reshape_metrics(series)
        row = wide.loc["C1.Annual.2010"]
        assert row["RelAbd"] == 0.5
        assert row["RelAbd.Status"] == "Green"
        assert row["LongTrend"] == 1.2
        assert row["LongTrend.Status"] == "Amber"

    def test_status_ordering(self, series):
        wide = reshape_metrics(series)
        status = wide["RelAbd.Status"]
        assert status.cat.ordered
        assert (status > "Amber").tolist() == [True, False, False]

    def test_missing_metric_is_na(self, series):
        wide = reshape_metrics(series)
        assert pd.isna(wide.loc["C1.Annual.2011", "LongTrend"])
        assert pd.isna(wide.loc["C1.Annual.2011", "LongTrend.Status"])
        assert pd.isna(wide.loc["C2.Change.2010", "RelAbd.Status"])

    def test_column_layout(self, series):
        wide = reshape_metrics(series)
        assert list(wide.columns) == [
            "CU_ID", "DataType", "Year", "Metric_Key",
            "RelAbd", "RelAbd.Status", "LongTrend", "LongTrend.Status",
        ]

    def test_collision_keeps_last(self, series, diagnostics):
        extra = pd.DataFrame([{
            "CU_ID": "C1", "DataType": "Annual", "Year": 2010,
            "Metric": "RelAbd", "Value": 0.7, "Status": "Red",
        }])
        wide = reshape_metrics(pd.concat([series, extra], ignore_index=True), diagnostics)
        assert len(wide) == 3
        assert wide.loc["C1.Annual.2010", "RelAbd"] == 0.7
        assert wide.loc["C1.Annual.2010", "RelAbd.Status"] == "Red"
        assert diagnostics.count("metric_collision") == 1

    def test_blank_metric_keeps_row(self, series):
        extra = pd.DataFrame([{
            "CU_ID": "C3", "DataType": "Annual", "Year": 2012,
            "Metric": None, "Value": 1.0, "Status": "Red",
        }])
        wide = reshape_metrics(pd.concat([series, extra], ignore_index=True))
        assert "C3.Annual.2012" in wide.index
        row = wide.loc["C3.Annual.2012"]
        assert row["CU_ID"] == "C3"
        for col in ["RelAbd", "RelAbd.Status", "LongTrend", "LongTrend.Status"]:
            assert pd.isna(row[col]), col

    def test_one_row_per_triple_with_blank_metrics(self, series):
        extra = pd.DataFrame([
            {"CU_ID": "C3", "DataType": "Annual", "Year": 2012, "Metric": None, "Value": 1.0, "Status": None},
            {"CU_ID": "C3", "DataType": "Annual", "Year": 2013, "Metric": "  ", "Value": 2.0, "Status": None},
            {"CU_ID": "C1", "DataType": "Annual", "Year": 2010, "Metric": "", "Value": 3.0, "Status": None},
        ])
        long_form = pd.concat([series, extra], ignore_index=True)
        wide = reshape_metrics(long_form)
        assert len(wide) == long_form[["CU_ID", "DataType", "Year"]].drop_duplicates().shape[0]
        assert wide.loc["C1.Annual.2010", "RelAbd"] == 0.5
        assert list(wide.columns[4:]) == ["RelAbd", "RelAbd.Status", "LongTrend", "LongTrend.Status"]

    def test_only_blank_metrics(self):
        long_form = pd.DataFrame([{
            "CU_ID": "C3", "DataType": "Annual", "Year": 2012,
            "Metric": "", "Value": 1.0, "Status": None,
        }])
        wide = reshape_metrics(long_form)
        assert list(wide.index) == ["C3.Annual.2012"]
        assert list(wide.columns) == ["CU_ID", "DataType", "Year", "Metric_Key"]

    def test_metric_years(self, series):
        assert metric_years(reshape_metrics(series)) == ["2010", "2011"]
