"""
Attribute joining for Synoptic.
Pulls CU attributes onto the metrics table and applies the declared category orderings.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from .config import ATTRIB_COLUMNS, ATTRIB_LEVELS, CU_ID_COL, NA_CATEGORY
from .diagnostics import Diagnostics
from .transforms import format_id, is_blank

logger = logging.getLogger(__name__)


def coerce_ordered(
    values: pd.Series,
    levels: List[str],
    name: str = "",
    diagnostics: Optional[Diagnostics] = None,
) -> pd.Categorical:
    """
    Turn an attribute into a categorical with the specified ordering.

    Missing values become the literal "NA" category first. Values outside the
    declared levels end up NA; they are reported as drift, not raised.
    """
    text = values.map(lambda v: NA_CATEGORY if is_blank(v) else format_id(v))
    outside = sorted(set(text) - set(levels) - {NA_CATEGORY})
    if outside:
        message = f"Attribute {name}: values {outside} not in declared levels {levels}, set to NA"
        if diagnostics is not None:
            diagnostics.warn("attribute_drift", message, dataset="cu_metrics", key=name,
                             n_rows=int(text.isin(outside).sum()))
        else:
            logger.warning(message)
    return pd.Categorical(text, categories=levels, ordered=True)


def attach_attributes(
    metrics: pd.DataFrame,
    cu_lookup: pd.DataFrame,
    attrib_levels: Optional[Dict[str, List[str]]] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> pd.DataFrame:
    """
    Left-join CU attributes onto the wide metrics table and order them.

    Rows without a matching CU keep NA attributes. Row order and index are
    preserved.

    Args:
        metrics: Wide metrics table
        cu_lookup: Canonical CU lookup
        attrib_levels: Declared ordering per attribute (defaults to ATTRIB_LEVELS)
        diagnostics: Collector for drift reports

    Returns:
        Metrics table with attribute columns
    """
    if attrib_levels is None:
        attrib_levels = ATTRIB_LEVELS

    attrib_cols = [c for c in ATTRIB_COLUMNS if c in cu_lookup.columns]
    attribs = cu_lookup[[CU_ID_COL] + attrib_cols].drop_duplicates(CU_ID_COL)
    existing = [c for c in attrib_cols if c in metrics.columns]

    merged = metrics.drop(columns=existing).merge(attribs, on=CU_ID_COL, how="left")
    merged.index = metrics.index

    for attrib in merged.columns:
        if attrib in attrib_levels:
            merged[attrib] = coerce_ordered(merged[attrib], attrib_levels[attrib], attrib, diagnostics)

    logger.info(f"Attached {len(attrib_cols)} CU attributes to {len(merged)} metric rows")
    return merged
