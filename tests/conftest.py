# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for the Synoptic tests.

Provides a small, hand-built set of input tables covering:
- CUs with and without metrics and time series data
- Populations matched by ID, by name, and not at all
- Map sites with repeated Pop_UIDs
- Stream segments with unknown CUs and zero-padded codes
"""

import pandas as pd
import pytest

from synoptic.config import INPUT_FILES
from synoptic.diagnostics import Diagnostics


# ==============================================================================
# Raw input tables
# ==============================================================================

@pytest.fixture
def cu_lookup():
    """CU lookup: C3 has no metrics rows and no time series ID."""
    return pd.DataFrame({
        "CU_ID": ["C1", "C2", "C3"],
        "CU_Name": ["Chilko", "Stuart", "Harrison"],
        "CU_MetricsData_CU_ID": ["M1", "M2", "M3"],
        "CU_TimeSeriesData_CU_ID": ["T1", "T2", None],
        "MapData_CU_ID": [101, 102, 103],
        "Pop_TimeSeriesData_CU_ID": ["P1", "P2", "P3"],
        "Species": ["Sk", "Sk", "Ck"],
        "FAZ": ["UFR", "MFR", "LFR"],
        "Area": ["Fraser_Upper", "Fraser_Mid", "Fraser_Lower"],
        "RunTiming": ["Summer", "Estu", None],
        "LifeHistory": ["Lake", None, "Ocean"],
        "AvGen": [4, 4, 5],
    })


@pytest.fixture
def pop_lookup():
    """Population lookup: the last row belongs to a CU missing from the CU lookup."""
    return pd.DataFrame({
        "MapData_CU_ID": [101, 101, 102, 999],
        "Pop_ID": [7, 8, 3, 4],
        "Pop_Name": ["Chilko River", "Chilko Lake South", "Stuart Creek", "Orphan"],
        "MapData_Pop_Name": ["CHILKO RIVER", "CHILKO LAKE", "STUART CREEK", "ORPHAN"],
        "TimeSeriesData_Species": ["Sk", "Sk", "Co", "Sk"],
        "TimeSeriesData_Pop_Name": ["Chilko River", "Chilko Lake", "Stuart Creek", "Orphan"],
        "Species": ["Sk", "Sk", "Co", "Sk"],
    })


@pytest.fixture
def cu_metrics_series():
    """Long metrics: MX is not in the CU lookup."""
    return pd.DataFrame({
        "CU_ID": ["M1", "M1", "M1", "M2", "MX"],
        "DataType": ["Annual", "Annual", "Annual", "Change", "Annual"],
        "Year": [2010, 2010, 2011, 2010, 2010],
        "Metric": ["RelAbd", "LongTrend", "RelAbd", "RelAbd", "RelAbd"],
        "Value": [0.5, 1.2, 0.4, -0.1, 0.9],
        "Status": ["Green", "Amber", "Red", None, "Green"],
    })


@pytest.fixture
def cu_time_series():
    return pd.DataFrame({
        "CU_ID": ["T1", "T1", "T2", "TZ"],
        "Year": [1995, 2005, 2000, 2000],
        "SpnForAbd_Total": [10.0, 12.0, 5.0, 1.0],
    })


@pytest.fixture
def pop_time_series():
    """
    Population series: two series names for C1.7, a name-only Coho record
    with a repeated year, and one record that matches nothing.
    """
    return pd.DataFrame({
        "CU_ID": ["P1", "P1", "P1", "P2", "P2", "P1"],
        "Pop_ID": [7, 7, 7, None, None, 99],
        "Pop_Name": [
            "Chilko River", "Chilko River", "Chilko River alt",
            "Stuart Creek", "Stuart Creek", "Unknown",
        ],
        "DataSet": ["Sk", "Sk", "Sk", "Co", "Co", "Sk"],
        "Year": [2000, 2001, 2001, 1999, 1999, 2000],
        "SpnForAbd_Wild": [100.0, 110.0, 105.0, 50.0, 51.0, 1.0],
    })


@pytest.fixture
def pop_spatial():
    """Map sites: C1.7 appears twice, only one with the lookup's site name."""
    return pd.DataFrame({
        "CU_INDEX": [101, 101, 101, 102, 555],
        "POP_ID": [7, 7, 8, 3, 1],
        "SITE_NAME": ["CHILKO RIVER", "CHILKO RIVER LOWER", "CHILKO LAKE", "STUART CREEK", "NOWHERE"],
        "YLAT": [51.6, 51.5, 51.3, 54.4, 50.0],
        "XLONG": [-124.1, -124.0, -124.2, -124.3, -120.0],
        "FAZ_ACRO": ["UFR", "UFR", "UFR", "MFR", "LFR"],
        "FWA_WATERSHED_KEY": [1, 2, 3, 4, 5],
    })


@pytest.fixture
def cu_spatial():
    """CU boundaries without geometry; 104 is unknown."""
    return pd.DataFrame({
        "CU_INDEX": [101, 102, 104],
        "CU_NAME": ["CHILKO", "STUART", "UNKNOWN"],
        "SHAPE_AREA": [1.0, 2.0, 3.0],
    })


@pytest.fixture
def streams():
    return pd.DataFrame({
        "FWA_WATERSHED_CODE": ["100-000000-000000", "100-200-000000", "100-200-300", "100-300-000000"],
        "CUs": ["C1:C2:CX", "C2", "CX", "C1"],
        "SITES": ["C1.7:C2.3", None, "C1.8", "C1.8:C1.9"],
        "WS_NAME": ["Fraser River", "", "Nowhere Creek", None],
    })


@pytest.fixture
def raw_tables(cu_lookup, pop_lookup, cu_metrics_series, cu_time_series,
               pop_time_series, pop_spatial, cu_spatial, streams):
    """All input tables keyed by input table name."""
    tables = {
        "cu_lookup": cu_lookup,
        "pop_lookup": pop_lookup,
        "cu_metrics_series": cu_metrics_series,
        "cu_time_series": cu_time_series,
        "pop_time_series": pop_time_series,
        "pop_spatial": pop_spatial,
        "cu_spatial": cu_spatial,
        "streams": streams,
    }
    assert set(tables) == set(INPUT_FILES)
    return tables


@pytest.fixture
def diagnostics():
    return Diagnostics()


# ==============================================================================
# Input directory on disk
# ==============================================================================

@pytest.fixture
def data_dir(tmp_path, raw_tables, monkeypatch):
    """
    Input directory with every table written under its default file name.

    GIS layers are written as empty placeholder files and served from memory
    by patching geopandas.read_file.
    """
    from synoptic import io as synoptic_io
    from synoptic.config import GIS_TABLES

    directory = tmp_path / "data"
    directory.mkdir()
    gis_frames = {}
    for name, file_name in INPUT_FILES.items():
        path = directory / file_name
        if name in GIS_TABLES:
            path.touch()
            gis_frames[path.name] = raw_tables[name]
        else:
            raw_tables[name].to_csv(path, index=False)

    def fake_read_file(path, *args, **kwargs):
        return gis_frames[path.name].copy()

    monkeypatch.setattr(synoptic_io.gpd, "read_file", fake_read_file)
    return directory
