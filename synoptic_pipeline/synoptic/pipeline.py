#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Pipeline
Puts together the reconciled data set from the raw input tables.
"""

import logging
from typing import Any, Dict, Optional

import pandas as pd

from .attributes import attach_attributes
from .availability import annotate_availability
from .config import (
    ATTRIB_LEVELS,
    CU_ID_COL,
    CU_SPATIAL_KEEP,
    INPUT_FILES,
    POP_UID_COL,
    VALUE_COL,
    YEAR_COL,
)
from .dataset import SynopticDataset
from .diagnostics import Diagnostics
from .keys import unify_keys
from .metrics import metric_names, metric_years, reshape_metrics
from .populations import (
    attach_ts_names,
    match_population_series,
    report_duplicate_years,
    select_spatial_populations,
)
from .streams import reduce_stream_network
from .transforms import coerce_numeric_columns

logger = logging.getLogger(__name__)


def drop_unresolved(
    df: pd.DataFrame,
    key_col: str,
    table: str,
    diagnostics: Diagnostics,
) -> pd.DataFrame:
    """Eliminate rows whose key could not be resolved (not selectable)."""
    missing = df[key_col].isna()
    if missing.any():
        diagnostics.warn(
            "unresolved_identifier",
            f"{table}: {int(missing.sum())} of {len(df)} rows have no {key_col} in the current scheme and were dropped",
            dataset=table,
            n_rows=int(missing.sum()),
        )
    return df[~missing]


def dedupe_pop_lookup(pop_lookup: pd.DataFrame, diagnostics: Diagnostics) -> pd.DataFrame:
    """Keep the first lookup row for each Pop_UID."""
    dup = pop_lookup.duplicated(POP_UID_COL, keep="first")
    if dup.any():
        diagnostics.warn(
            "duplicate_pop_uid",
            f"pop_lookup: {int(dup.sum())} rows repeat an existing Pop_UID, keeping first occurrence",
            dataset="pop_lookup",
            rows=pop_lookup[pop_lookup.duplicated(POP_UID_COL, keep=False)],
        )
    return pop_lookup[~dup]


def build_dataset(
    tables: Dict[str, pd.DataFrame],
    params: Optional[Dict[str, Any]] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> SynopticDataset:
    """
    Build the reconciled data set from the raw input tables.

    Stages run in a fixed order: key unification, population matching,
    metric reshaping, attribute joining, stream network reduction and
    finally availability annotation over the filtered tables.

    Args:
        tables: Raw tables keyed by input table name (see config.INPUT_FILES)
        params: Pipeline parameters (attrib_levels overrides ATTRIB_LEVELS)
        diagnostics: Collector for recoverable findings

    Returns:
        SynopticDataset snapshot
    """
    params = params or {}
    if diagnostics is None:
        diagnostics = Diagnostics()

    missing = [name for name in INPUT_FILES if name not in tables]
    if missing:
        raise ValueError(f"Cannot build data set, input tables missing: {missing}")

    # ** Make CU IDs consistent across files and add Pop_UID
    logger.info("Unifying CU and population keys...")
    unified = unify_keys(tables, diagnostics)
    cu_lookup = unified["cu_lookup"]
    pop_lookup = drop_unresolved(unified["pop_lookup"], POP_UID_COL, "pop_lookup", diagnostics)
    pop_lookup = dedupe_pop_lookup(pop_lookup, diagnostics)

    # ** Population time series: match to lookup, collect series names
    logger.info("Matching population time series...")
    pop_time_series = match_population_series(unified["pop_time_series"], pop_lookup, diagnostics)
    pop_lookup = attach_ts_names(pop_lookup, pop_time_series)
    report_duplicate_years(pop_time_series, diagnostics)

    # ** Eliminate data not selectable
    cu_time_series = drop_unresolved(unified["cu_time_series"], CU_ID_COL, "cu_time_series", diagnostics)
    cu_metrics_series = drop_unresolved(unified["cu_metrics_series"], CU_ID_COL, "cu_metrics_series", diagnostics)
    cu_metrics_series = coerce_numeric_columns(cu_metrics_series, [YEAR_COL, VALUE_COL])
    cu_spatial = drop_unresolved(unified["cu_spatial"], CU_ID_COL, "cu_spatial", diagnostics)
    keep_cols = [c for c in CU_SPATIAL_KEEP if c in cu_spatial.columns]
    if "geometry" in cu_spatial.columns:
        keep_cols.append("geometry")
    cu_spatial = cu_spatial[keep_cols]
    pop_spatial = select_spatial_populations(unified["pop_spatial"], pop_lookup, diagnostics)

    # ** Metrics in columns, with CU attributes attached
    logger.info("Reshaping CU metrics...")
    cu_metrics = reshape_metrics(cu_metrics_series, diagnostics)
    cu_metrics = attach_attributes(
        cu_metrics,
        cu_lookup,
        attrib_levels=params.get("attrib_levels") or ATTRIB_LEVELS,
        diagnostics=diagnostics,
    )

    # ** Stream selector network restricted to current CUs and populations
    logger.info("Reducing stream network...")
    streams = reduce_stream_network(unified["streams"], cu_lookup[CU_ID_COL], pop_lookup[POP_UID_COL])

    # ** Availability of metrics and time series data
    cu_lookup, pop_lookup = annotate_availability(
        cu_lookup, pop_lookup, cu_metrics, cu_time_series, pop_time_series
    )

    if diagnostics.count():
        logger.warning(f"{diagnostics.count()} data issues reported while building the data set")

    return SynopticDataset(
        cu_lookup=cu_lookup.reset_index(drop=True),
        pop_lookup=pop_lookup.reset_index(drop=True),
        cu_metrics=cu_metrics,
        cu_metrics_series=cu_metrics_series.reset_index(drop=True),
        cu_time_series=cu_time_series.reset_index(drop=True),
        pop_time_series=pop_time_series,
        cu_spatial=cu_spatial.reset_index(drop=True),
        pop_spatial=pop_spatial.reset_index(drop=True),
        streams=streams.reset_index(drop=True),
        metric_names=tuple(metric_names(cu_metrics_series)),
        metric_years=tuple(metric_years(cu_metrics)),
        diagnostics=diagnostics.to_frame(),
    )
