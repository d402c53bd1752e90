#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Identifier Translation
Maps identifiers from a source's legacy column onto the current scheme via a lookup table.
"""

import logging
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from .diagnostics import Diagnostics
from .transforms import format_id

logger = logging.getLogger(__name__)


def build_translation(
    lookup: pd.DataFrame,
    old: str,
    new: str,
    dataset: str = "",
    diagnostics: Optional[Diagnostics] = None,
) -> Dict[str, Optional[str]]:
    """
    Build an old -> new identifier index from a lookup table.

    Rows with a blank old value are ignored. If one old value maps to more than
    one distinct new value, the collision is reported once for that old value
    and the first occurrence in lookup row order is kept.

    Args:
        lookup: Lookup table holding both identifier columns
        old: Column with the outdated identifiers
        new: Column with the current identifiers
        dataset: Name of the dataset being translated (for reporting)
        diagnostics: Collector for collision reports

    Returns:
        Dict of old identifier -> new identifier (None if the new value is blank)
    """
    pairs = pd.DataFrame({
        "old": lookup[old].map(format_id),
        "new": lookup[new].map(format_id),
    }, index=lookup.index)
    pairs = pairs[pairs["old"].notna()].drop_duplicates()

    collided = pairs.loc[pairs.duplicated("old", keep=False), "old"].unique()
    for old_value in collided:
        kept = pairs.loc[pairs["old"] == old_value, "new"].iloc[0]
        message = (
            f"Duplicate values in column {old} of the lookup table while translating "
            f"{dataset or 'values'} from {old} to {new}: '{old_value}'; using first occurrence '{kept}'"
        )
        offending = lookup.loc[pairs.index[pairs["old"] == old_value], [old, new]]
        if diagnostics is not None:
            diagnostics.warn("translation_collision", message, dataset=dataset, key=old_value, rows=offending)
        else:
            logger.warning(message)

    pairs = pairs.drop_duplicates("old", keep="first")
    return dict(zip(pairs["old"], pairs["new"]))


def substitute_values(
    old: str,
    new: str,
    lookup: pd.DataFrame,
    old_vals: Iterable[Any],
    dataset: str = "",
    diagnostics: Optional[Diagnostics] = None,
) -> pd.Series:
    """
    Replace outdated identifiers with their current equivalents.

    Use this to make fields like CU_ID consistent across files. The result has
    the same length and order as old_vals; values absent from the lookup come
    back as None.

    Args:
        old: Lookup column with the outdated identifiers
        new: Lookup column with the current identifiers
        lookup: Lookup table
        old_vals: Values to translate
        dataset: Name of the dataset being translated (for reporting)
        diagnostics: Collector for collision reports

    Returns:
        Series of translated identifiers (object dtype)
    """
    translation = build_translation(lookup, old, new, dataset=dataset, diagnostics=diagnostics)
    index = old_vals.index if isinstance(old_vals, pd.Series) else None
    values = [translation.get(format_id(v)) for v in old_vals]
    return pd.Series(values, index=index, dtype=object)
