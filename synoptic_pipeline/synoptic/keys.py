#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Key Unification
Rewrites CU identifiers of every source into the canonical scheme and derives Pop_UID.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional

import pandas as pd

from .config import (
    CU_ID_COL,
    CU_ID_TRANSLATIONS,
    KEY_SEP,
    POP_ID_COL,
    POP_UID_COL,
    SPATIAL_POP_ID_COL,
)
from .diagnostics import Diagnostics
from .transforms import format_id
from .translate import substitute_values

logger = logging.getLogger(__name__)


class PopKey(NamedTuple):
    """Composite population key: canonical CU identifier plus local population ID."""

    cu_id: str
    pop_id: str

    @property
    def uid(self) -> str:
        return f"{self.cu_id}{KEY_SEP}{self.pop_id}"


def pop_key(cu_id: Any, pop_id: Any) -> Optional[PopKey]:
    """Build a PopKey, or None if either part is blank."""
    cu, pop = format_id(cu_id), format_id(pop_id)
    if cu is None or pop is None:
        return None
    return PopKey(cu, pop)


def make_pop_uid(cu_id: Any, pop_id: Any) -> Optional[str]:
    """Serialized Pop_UID ("<CU_ID>.<Pop_ID>"), or None if either part is blank."""
    key = pop_key(cu_id, pop_id)
    return None if key is None else key.uid


def add_pop_uid(df: pd.DataFrame, pop_id_col: str) -> pd.DataFrame:
    """
    Add the Pop_UID column built from CU_ID and the given population ID column.

    Args:
        df: Table with CU_ID already in the canonical scheme
        pop_id_col: Column holding the local population ID

    Returns:
        Copy of df with Pop_UID added
    """
    result = df.copy()
    if result.empty:
        result[POP_UID_COL] = pd.Series(dtype=object)
        return result
    result[POP_UID_COL] = [
        make_pop_uid(cu, pop) for cu, pop in zip(result[CU_ID_COL], result[pop_id_col])
    ]
    return result


def canonical_cu_lookup(cu_lookup: pd.DataFrame, diagnostics: Optional[Diagnostics] = None) -> pd.DataFrame:
    """Normalise the CU lookup's own CU_ID and drop rows without one."""
    result = cu_lookup.copy()
    result[CU_ID_COL] = result[CU_ID_COL].map(format_id)
    missing = result[CU_ID_COL].isna()
    if missing.any():
        message = f"CU lookup: {int(missing.sum())} rows without a CU_ID dropped"
        if diagnostics is not None:
            diagnostics.warn("unresolved_identifier", message, dataset="cu_lookup", rows=cu_lookup[missing])
        else:
            logger.warning(message)
    return result[~missing]


def unify_keys(
    tables: Dict[str, pd.DataFrame],
    diagnostics: Optional[Diagnostics] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Make CU identifiers consistent across all tables and add Pop_UID.

    The CU lookup is finalised first because every other table is translated
    against its CU_ID column. Rows whose CU_ID fails to translate keep a
    missing CU_ID here; dropping them is up to the caller.

    Args:
        tables: Raw tables keyed by input table name
        diagnostics: Collector for collision reports

    Returns:
        New dict of tables with canonical CU_ID (and Pop_UID where applicable)
    """
    unified = dict(tables)
    cu_lookup = canonical_cu_lookup(tables["cu_lookup"], diagnostics)
    unified["cu_lookup"] = cu_lookup

    for table, old_col, value_col in CU_ID_TRANSLATIONS:
        df = unified.get(table)
        if df is None:
            logger.debug(f"Table {table} not loaded, skipping CU_ID translation")
            continue
        df = df.copy()
        df[CU_ID_COL] = substitute_values(
            old_col, CU_ID_COL, cu_lookup, df[value_col],
            dataset=table, diagnostics=diagnostics,
        )
        unresolved = int(df[CU_ID_COL].isna().sum())
        logger.info(f"Translated CU_ID for {table}: {len(df) - unresolved} resolved, {unresolved} unresolved")
        unified[table] = df

    if "pop_lookup" in unified:
        unified["pop_lookup"] = add_pop_uid(unified["pop_lookup"], POP_ID_COL)
    if "pop_spatial" in unified:
        unified["pop_spatial"] = add_pop_uid(unified["pop_spatial"], SPATIAL_POP_ID_COL)

    return unified
