#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Metrics Module
Rearranges the long CU metric series into one row per CU, data type and year.
"""

import logging
from typing import Any, List, Optional

import pandas as pd

from .config import (
    CU_ID_COL,
    DATATYPE_COL,
    KEY_SEP,
    METRIC_COL,
    METRIC_KEY_COL,
    STATUS_COL,
    STATUS_LEVELS,
    VALUE_COL,
    YEAR_COL,
)
from .diagnostics import Diagnostics
from .transforms import format_id, is_blank

logger = logging.getLogger(__name__)


def metric_key(cu_id: Any, data_type: Any, year: Any) -> str:
    """Row key of the wide metrics table: "<CU_ID>.<DataType>.<Year>"."""
    return KEY_SEP.join(format_id(v) or "" for v in (cu_id, data_type, year))


def status_column(metric: str) -> str:
    """Name of the status column that accompanies a metric."""
    return f"{metric}{KEY_SEP}Status"


def metric_names(series: pd.DataFrame) -> List[str]:
    """Distinct metric names in first-seen order."""
    return [m for m in pd.unique(series[METRIC_COL]) if not is_blank(m)]


def metric_years(metrics: pd.DataFrame) -> List[str]:
    """Sorted distinct years present in the metrics table."""
    years = pd.to_numeric(metrics[YEAR_COL], errors="coerce").dropna().unique()
    return [format_id(y) for y in sorted(years)]


def as_status(values: pd.Series) -> pd.Categorical:
    """Coerce status labels to the ordered Red < Amber < Green scale; others become NA."""
    cleaned = values.map(lambda v: v.strip() if isinstance(v, str) else v)
    return pd.Categorical(cleaned, categories=STATUS_LEVELS, ordered=True)


def reshape_metrics(
    series: pd.DataFrame,
    diagnostics: Optional[Diagnostics] = None,
) -> pd.DataFrame:
    """
    Put all metrics in columns, each with an associated '<metric>.Status' column.

    One row is produced per distinct (CU_ID, DataType, Year) of the input.
    Metrics missing for a row are left NA. If the same (CU_ID, DataType, Year,
    Metric) occurs more than once the last observation wins; this is reported
    but not fatal.

    Args:
        series: Long-form metric observations with canonical CU_ID
        diagnostics: Collector for key collision reports

    Returns:
        Wide metrics table indexed by Metric_Key (also kept as a column)
    """
    keyed = series.copy()
    keyed[METRIC_KEY_COL] = [
        metric_key(cu, dt, yr)
        for cu, dt, yr in zip(keyed[CU_ID_COL], keyed[DATATYPE_COL], keyed[YEAR_COL])
    ]

    # Every (CU_ID, DataType, Year) gets a row, even if none of its metrics is named
    wide = keyed[[CU_ID_COL, DATATYPE_COL, YEAR_COL, METRIC_KEY_COL]].drop_duplicates(METRIC_KEY_COL)
    wide = wide.set_index(METRIC_KEY_COL, drop=False)
    wide.index.name = None

    named = keyed[METRIC_COL].notna() & (keyed[METRIC_COL].astype(str).str.strip() != "")
    obs = keyed[named]

    dup = obs.duplicated([METRIC_KEY_COL, METRIC_COL], keep=False)
    if dup.any():
        message = (
            f"CU metrics: {int(dup.sum())} observations share a (CU_ID, DataType, Year, Metric) key; "
            "keeping the last of each"
        )
        if diagnostics is not None:
            diagnostics.warn("metric_collision", message, dataset="cu_metrics_series", rows=obs[dup])
        else:
            logger.warning(message)
        obs = obs.drop_duplicates([METRIC_KEY_COL, METRIC_COL], keep="last")

    names = metric_names(obs)
    if names:
        values = obs.pivot(index=METRIC_KEY_COL, columns=METRIC_COL, values=VALUE_COL)
        statuses = obs.pivot(index=METRIC_KEY_COL, columns=METRIC_COL, values=STATUS_COL)
        for m in names:
            wide[m] = pd.to_numeric(values[m].reindex(wide.index), errors="coerce").to_numpy()
            wide[status_column(m)] = as_status(statuses[m].reindex(wide.index))

    logger.info(f"Reshaped {len(series)} metric observations into {len(wide)} rows x {len(names)} metrics")
    return wide
