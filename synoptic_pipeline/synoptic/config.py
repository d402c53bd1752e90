#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Configuration
Defines input tables, column names, key separators and attribute orderings.
"""

from pathlib import Path
from typing import Dict, List

# ---------------------------------------------------------------------------
# INPUT TABLES
# ---------------------------------------------------------------------------

# Default file names, relative to the data directory
INPUT_FILES: Dict[str, str] = {
    "cu_lookup": "CULookup.csv",
    "pop_lookup": "PopLookup.csv",
    "cu_metrics_series": "METRICS_FILE_BY_CU.csv",
    "cu_time_series": "MERGED_FLAT_FILE_BY_CU.csv",
    "pop_time_series": "MERGED_FLAT_FILE_BY_POP.csv",
    "pop_spatial": "All_Species_Sites_with_FWA_watershed_key_Fraser.csv",
    "cu_spatial": "All_Species_CU_Boundaries_Fraser.shp",
    "streams": "SiteSelectorNetwork_Fraser.gpkg",
}

# Tables read with geopandas instead of pandas
GIS_TABLES = ["cu_spatial", "streams"]

# Columns each input table must carry (fatal if absent)
REQUIRED_COLUMNS: Dict[str, List[str]] = {
    "cu_lookup": [
        "CU_ID", "CU_Name",
        "CU_MetricsData_CU_ID", "CU_TimeSeriesData_CU_ID",
        "MapData_CU_ID", "Pop_TimeSeriesData_CU_ID",
    ],
    "pop_lookup": [
        "MapData_CU_ID", "Pop_ID", "Pop_Name", "MapData_Pop_Name",
        "TimeSeriesData_Species", "TimeSeriesData_Pop_Name",
    ],
    "cu_metrics_series": ["CU_ID", "DataType", "Year", "Metric", "Value", "Status"],
    "cu_time_series": ["CU_ID", "Year"],
    "pop_time_series": ["CU_ID", "Pop_ID", "Pop_Name", "DataSet", "Year"],
    "pop_spatial": ["CU_INDEX", "POP_ID", "SITE_NAME", "YLAT", "XLONG"],
    "cu_spatial": ["CU_INDEX"],
    "streams": ["FWA_WATERSHED_CODE", "CUs", "SITES", "WS_NAME"],
}

# ---------------------------------------------------------------------------
# COLUMN DEFINITIONS
# ---------------------------------------------------------------------------

CU_ID_COL = "CU_ID"
CU_NAME_COL = "CU_Name"
POP_ID_COL = "Pop_ID"
POP_UID_COL = "Pop_UID"
POP_NAME_COL = "Pop_Name"
YEAR_COL = "Year"
DATATYPE_COL = "DataType"
METRIC_COL = "Metric"
VALUE_COL = "Value"
STATUS_COL = "Status"
METRIC_KEY_COL = "Metric_Key"

# Map layers carry the legacy CU identifier in this column
SPATIAL_CU_INDEX_COL = "CU_INDEX"

# Lookup columns holding the legacy CU identifiers of each source, in the
# order the translations are applied: (table, lookup column, value column)
CU_ID_TRANSLATIONS = [
    ("cu_metrics_series", "CU_MetricsData_CU_ID", "CU_ID"),
    ("cu_time_series", "CU_TimeSeriesData_CU_ID", "CU_ID"),
    ("cu_spatial", "MapData_CU_ID", SPATIAL_CU_INDEX_COL),
    ("pop_time_series", "Pop_TimeSeriesData_CU_ID", "CU_ID"),
    ("pop_spatial", "MapData_CU_ID", SPATIAL_CU_INDEX_COL),
    ("pop_lookup", "MapData_CU_ID", "MapData_CU_ID"),
]

# Population lookup columns used when matching time series records
TS_SPECIES_COL = "TimeSeriesData_Species"
TS_POP_NAME_COL = "TimeSeriesData_Pop_Name"
MAP_POP_NAME_COL = "MapData_Pop_Name"
TS_DATASET_COL = "DataSet"
TS_NAME_COL = "TS_Name"
TS_NAMES_COL = "tsNames"

# Map layer columns
SITE_NAME_COL = "SITE_NAME"
SPATIAL_POP_ID_COL = "POP_ID"
SPATIAL_RENAMES = {"YLAT": "Lat", "XLONG": "Lon", "FAZ_ACRO": "FAZ"}
CU_SPATIAL_KEEP = ["CU_NAME", "CU_ID"]
POP_SPATIAL_KEEP = [
    "Pop_UID", "CU_ID", "POP_ID", "SITE_NAME", "Species",
    "Lat", "Lon", "FAZ", "FWA_WATERSHED_KEY",
]

# Stream selector network columns
STREAM_CODE_COL = "FWA_WATERSHED_CODE"
STREAM_CUS_COL = "CUs"
STREAM_SITES_COL = "SITES"
STREAM_NAME_SRC_COL = "WS_NAME"

# Availability annotations
HAS_METRICS_COL = "HasMetricsData"
HAS_TS_COL = "HasTimeSeriesData"
START_YEAR_COL = "DataStartYear"
END_YEAR_COL = "DataEndYear"

# ---------------------------------------------------------------------------
# KEYS AND DELIMITERS
# ---------------------------------------------------------------------------

KEY_SEP = "."             # Pop_UID and wide metric row keys
SOURCE_LIST_SEP = ":"     # lists as stored in the source layers
SELECTION_SEP = ","       # lists as handed to the presentation layer
TS_NAMES_SEP = ":"
ZERO_SEGMENT = "000000"

# ---------------------------------------------------------------------------
# ORDERED CATEGORIES
# ---------------------------------------------------------------------------

STATUS_LEVELS = ["Red", "Amber", "Green"]

# Attributes pulled from the CU lookup onto the metrics table
ATTRIB_COLUMNS = ["Species", "FAZ", "Area", "RunTiming", "LifeHistory", "AvGen"]

# Order in which the values of each attribute appear in graphs and tables
ATTRIB_LEVELS: Dict[str, List[str]] = {
    "Species": ["Sk", "Ck", "Co"],
    "FAZ": ["LFR", "FRCany", "LILL", "MFR", "UFR", "LTh", "STh", "NTh"],
    "Area": [
        "Fraser_Lower", "Fraser_Canyon", "Fraser_Mid", "Fraser_Upper",
        "Fraser_Thompson_Lower", "Fraser_Thompson",
    ],
    "RunTiming": ["Estu", "Spring", "Early_Summer", "Summer", "Late", "Fall", "NA"],
    "LifeHistory": ["Ocean", "Stream", "River", "Lake", "NA"],
    "AvGen": ["3", "4", "5", "?"],
}

NA_CATEGORY = "NA"

# ---------------------------------------------------------------------------
# OUTPUT TABLE NAMES
# ---------------------------------------------------------------------------

OUTPUT_TABLES = {
    "cu_lookup": "cu_lookup",
    "pop_lookup": "pop_lookup",
    "cu_metrics": "cu_metrics",
    "cu_metrics_series": "cu_metrics_series",
    "cu_time_series": "cu_time_series",
    "pop_time_series": "pop_time_series",
    "cu_spatial": "cu_spatial",
    "pop_spatial": "pop_spatial",
    "streams": "streams",
    "qa_diagnostics": "qa_diagnostics",
}


def get_config_path() -> Path:
    """Return path to config directory."""
    return Path(__file__).parent.parent / "config"


def get_params_yaml_path() -> Path:
    """Return path to params.yaml config file."""
    return get_config_path() / "params.yaml"
