"""
Data availability annotations for Synoptic.
Flags which CUs and populations have metrics and time series data, and over which years.
"""

import logging
from typing import Tuple

import pandas as pd

from .config import (
    CU_ID_COL,
    END_YEAR_COL,
    HAS_METRICS_COL,
    HAS_TS_COL,
    POP_UID_COL,
    START_YEAR_COL,
    YEAR_COL,
)

logger = logging.getLogger(__name__)


def has_data(keys: pd.Series, table: pd.DataFrame, key_col: str) -> pd.Series:
    """'Yes' for keys present in table[key_col], 'No' otherwise."""
    present = set(table[key_col].dropna()) if key_col in table.columns else set()
    return keys.map(lambda k: "Yes" if k in present else "No")


def year_range(table: pd.DataFrame, key_col: str) -> pd.DataFrame:
    """
    First and last data year per key.

    Args:
        table: Time series table with a Year column
        key_col: Key column (CU_ID or Pop_UID)

    Returns:
        DataFrame indexed by key with DataStartYear and DataEndYear
    """
    if table.empty or key_col not in table.columns:
        return pd.DataFrame(columns=[START_YEAR_COL, END_YEAR_COL])
    years = pd.DataFrame({key_col: table[key_col], YEAR_COL: pd.to_numeric(table[YEAR_COL], errors="coerce")})
    years = years.dropna()
    return years.groupby(key_col)[YEAR_COL].agg(["min", "max"]).rename(
        columns={"min": START_YEAR_COL, "max": END_YEAR_COL}
    )


def _attach_years(lookup: pd.DataFrame, key_col: str, series: pd.DataFrame) -> None:
    ranges = year_range(series, key_col)
    for col in (START_YEAR_COL, END_YEAR_COL):
        lookup[col] = pd.to_numeric(lookup[key_col].map(ranges[col]), errors="coerce").astype("Int64")


def annotate_availability(
    cu_lookup: pd.DataFrame,
    pop_lookup: pd.DataFrame,
    cu_metrics: pd.DataFrame,
    cu_time_series: pd.DataFrame,
    pop_time_series: pd.DataFrame,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Add information about available metrics and time series data to the lookups.

    Must run on the final, filtered tables.

    Returns:
        Tuple of (annotated CU lookup, annotated population lookup)
    """
    cu_lookup = cu_lookup.copy()
    pop_lookup = pop_lookup.copy()

    cu_lookup[HAS_METRICS_COL] = has_data(cu_lookup[CU_ID_COL], cu_metrics, CU_ID_COL)
    cu_lookup[HAS_TS_COL] = has_data(cu_lookup[CU_ID_COL], cu_time_series, CU_ID_COL)
    _attach_years(cu_lookup, CU_ID_COL, cu_time_series)

    pop_lookup[HAS_TS_COL] = has_data(pop_lookup[POP_UID_COL], pop_time_series, POP_UID_COL)
    _attach_years(pop_lookup, POP_UID_COL, pop_time_series)

    logger.info(
        f"Availability: {int((cu_lookup[HAS_METRICS_COL] == 'Yes').sum())} CUs with metrics, "
        f"{int((cu_lookup[HAS_TS_COL] == 'Yes').sum())} CUs and "
        f"{int((pop_lookup[HAS_TS_COL] == 'Yes').sum())} populations with time series"
    )
    return cu_lookup, pop_lookup
