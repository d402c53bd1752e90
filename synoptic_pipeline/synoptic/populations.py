#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Population Matching
Resolves population time series records and map sites to canonical Pop_UIDs.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .config import (
    CU_ID_COL,
    MAP_POP_NAME_COL,
    POP_ID_COL,
    POP_NAME_COL,
    POP_SPATIAL_KEEP,
    POP_UID_COL,
    SITE_NAME_COL,
    SPATIAL_RENAMES,
    TS_DATASET_COL,
    TS_NAME_COL,
    TS_NAMES_COL,
    TS_NAMES_SEP,
    TS_POP_NAME_COL,
    TS_SPECIES_COL,
    YEAR_COL,
)
from .diagnostics import Diagnostics
from .keys import PopKey, pop_key
from .transforms import is_blank, to_number

logger = logging.getLogger(__name__)

# Pop_UID assigned to records that match no lookup row
UNMATCHED = ""
UNMATCHED_KEY = PopKey("", "")

MatchIndex = Dict[str, Dict[Tuple[str, Any], PopKey]]
MatchStrategy = Callable[[Mapping[str, Any], MatchIndex], Optional[PopKey]]


def _text(value: Any) -> str:
    return "" if is_blank(value) else str(value).strip()


def build_match_index(pop_lookup: pd.DataFrame) -> MatchIndex:
    """
    Index the population lookup by (data set, numeric Pop_ID) and by (data set, name).

    Rows are visited in lookup order and only the first PopKey per index key
    is kept, so a lookup through the index returns the first matching row.

    Args:
        pop_lookup: Unified population lookup (canonical CU_ID and Pop_ID)

    Returns:
        Dict with "id" and "name" sub-indexes
    """
    index: MatchIndex = {"id": {}, "name": {}}
    for row in pop_lookup.to_dict("records"):
        key = pop_key(row.get(CU_ID_COL), row.get(POP_ID_COL))
        if key is None:
            continue
        species = _text(row.get(TS_SPECIES_COL))
        pop_id = to_number(row.get(POP_ID_COL))
        if pop_id is not None:
            index["id"].setdefault((species, pop_id), key)
        name = _text(row.get(TS_POP_NAME_COL))
        if name:
            index["name"].setdefault((species, name), key)
    return index


def match_by_id(record: Mapping[str, Any], index: MatchIndex) -> Optional[PopKey]:
    """Match on data set and numeric population ID; None if the record has no usable ID."""
    pop_id = to_number(record.get(POP_ID_COL))
    if pop_id is None:
        return None
    return index["id"].get((_text(record.get(TS_DATASET_COL)), pop_id), UNMATCHED_KEY)


def match_by_name(record: Mapping[str, Any], index: MatchIndex) -> Optional[PopKey]:
    """Match on data set and population name; None if the record has no name."""
    name = _text(record.get(POP_NAME_COL))
    if not name:
        return None
    return index["name"].get((_text(record.get(TS_DATASET_COL)), name), UNMATCHED_KEY)


# Tried in order; the first strategy that applies to a record decides it
MATCH_STRATEGIES: List[MatchStrategy] = [match_by_id, match_by_name]


def resolve_pop_key(
    record: Mapping[str, Any],
    index: MatchIndex,
    strategies: Optional[List[MatchStrategy]] = None,
) -> PopKey:
    """
    Resolve one time series record to a population key.

    Args:
        record: Record with DataSet, Pop_ID and Pop_Name
        index: Index from build_match_index
        strategies: Ordered strategies (defaults to MATCH_STRATEGIES)

    Returns:
        PopKey of the matching lookup row, or UNMATCHED_KEY
    """
    for strategy in strategies or MATCH_STRATEGIES:
        result = strategy(record, index)
        if result is not None:
            return result
    return UNMATCHED_KEY


def resolve_pop_uid(
    record: Mapping[str, Any],
    index: MatchIndex,
    strategies: Optional[List[MatchStrategy]] = None,
) -> str:
    """Pop_UID of the matching lookup row, or UNMATCHED."""
    key = resolve_pop_key(record, index, strategies)
    return UNMATCHED if key == UNMATCHED_KEY else key.uid


def match_population_series(
    pop_ts: pd.DataFrame,
    pop_lookup: pd.DataFrame,
    diagnostics: Optional[Diagnostics] = None,
    strategies: Optional[List[MatchStrategy]] = None,
) -> pd.DataFrame:
    """
    Attach Pop_UID to population time series records and drop unmatched ones.

    Matched records get TS_Name (the series' own population name) and their
    Pop_Name replaced by the canonical name from the lookup.

    Args:
        pop_ts: Population time series (long form)
        pop_lookup: Unified population lookup with Pop_UID
        diagnostics: Collector for unmatched-record reports
        strategies: Ordered match strategies

    Returns:
        Matched time series records
    """
    index = build_match_index(pop_lookup)
    result = pop_ts.copy()
    result[POP_UID_COL] = [
        resolve_pop_uid(record, index, strategies)
        for record in result[[TS_DATASET_COL, POP_ID_COL, POP_NAME_COL]].to_dict("records")
    ]

    unmatched = result[result[POP_UID_COL] == UNMATCHED]
    if not unmatched.empty:
        keys = [TS_DATASET_COL, POP_ID_COL, POP_NAME_COL]
        for (data_set, pop_id, pop_name), grp in unmatched.groupby(keys, sort=False, dropna=False):
            message = (
                f"No match found in lookup file for population {data_set} - {pop_name} "
                f"(Pop ID: {pop_id}). This population will not be selectable."
            )
            if diagnostics is not None:
                diagnostics.warn("unmatched_population", message, dataset="pop_time_series",
                                 key=f"{data_set}/{pop_id}/{pop_name}", n_rows=len(grp))
            else:
                logger.warning(message)

    result = result[result[POP_UID_COL] != UNMATCHED].reset_index(drop=True)
    result[TS_NAME_COL] = result[POP_NAME_COL]

    canonical_names = pop_lookup.drop_duplicates(POP_UID_COL).set_index(POP_UID_COL)[POP_NAME_COL]
    result[POP_NAME_COL] = result[POP_UID_COL].map(canonical_names)

    logger.info(f"Matched {len(result)} of {len(pop_ts)} population time series records")
    return result


def attach_ts_names(pop_lookup: pd.DataFrame, pop_ts: pd.DataFrame) -> pd.DataFrame:
    """
    Add the colon-joined names of all time series found for each population.

    Args:
        pop_lookup: Population lookup with Pop_UID
        pop_ts: Matched population time series with TS_Name

    Returns:
        Copy of pop_lookup with tsNames ("" where no series exists)
    """
    result = pop_lookup.copy()
    names = (
        pop_ts[[POP_UID_COL, TS_NAME_COL]]
        .dropna()
        .drop_duplicates()
        .groupby(POP_UID_COL, sort=False)[TS_NAME_COL]
        .agg(lambda s: TS_NAMES_SEP.join(str(x) for x in s))
    )
    result[TS_NAMES_COL] = result[POP_UID_COL].map(names).fillna("")
    return result


def report_duplicate_years(pop_ts: pd.DataFrame, diagnostics: Optional[Diagnostics] = None) -> int:
    """
    Report time series that have more than one record for the same year.

    Records are left in place; only the first duplicated year of each
    (Pop_UID, TS_Name) series is reported, with its rows.

    Args:
        pop_ts: Matched population time series
        diagnostics: Collector for the reports

    Returns:
        Number of series with duplicate years
    """
    keys = [POP_UID_COL, TS_NAME_COL, YEAR_COL]
    dup = pop_ts[pop_ts.duplicated(keys, keep=False)]
    n_series = 0
    for (uid, name), grp in dup.groupby([POP_UID_COL, TS_NAME_COL], sort=False, dropna=False):
        n_series += 1
        year = grp[YEAR_COL].iloc[0]
        rows = grp[grp[YEAR_COL] == year]
        message = f"Population {uid} ({name}) has duplicate entries in time series data for year {year}"
        if diagnostics is not None:
            diagnostics.warn("duplicate_years", message, dataset="pop_time_series", key=str(uid), rows=rows)
        else:
            logger.warning(message)
    return n_series


def select_spatial_populations(
    pop_spatial: pd.DataFrame,
    pop_lookup: pd.DataFrame,
    diagnostics: Optional[Diagnostics] = None,
) -> pd.DataFrame:
    """
    Keep map sites whose Pop_UID and site name agree with the population lookup.

    Some Pop_UIDs occur more than once in the map layer; the site name is used
    as a secondary criterion to pick the one matching the lookup's
    MapData_Pop_Name. Sites whose Pop_UID is not in the lookup are discarded.

    Args:
        pop_spatial: Population map sites with Pop_UID
        pop_lookup: Population lookup with Pop_UID

    Returns:
        Map sites with Lat, Lon, FAZ and Species, restricted to the kept columns
    """
    lookup = pop_lookup.drop_duplicates(POP_UID_COL).set_index(POP_UID_COL)
    expected = pop_spatial[POP_UID_COL].map(lookup[MAP_POP_NAME_COL])
    site_names = pop_spatial[SITE_NAME_COL].map(_text)
    keep = expected.notna() & (site_names == expected.map(_text))

    result = pop_spatial[keep].copy()
    dropped = len(pop_spatial) - len(result)
    if dropped:
        logger.info(f"Discarded {dropped} map sites not matching the population lookup by Pop_UID and site name")

    dup = result.duplicated(POP_UID_COL, keep="first")
    if dup.any():
        message = f"Population map layer: {int(dup.sum())} sites with repeated Pop_UID and site name, keeping first"
        if diagnostics is not None:
            diagnostics.warn("duplicate_site", message, dataset="pop_spatial", rows=result[dup])
        else:
            logger.warning(message)
        result = result[~dup]

    for src, dst in SPATIAL_RENAMES.items():
        if src in result.columns:
            result[dst] = result[src]
    if "Species" in lookup.columns:
        result["Species"] = result[POP_UID_COL].map(lookup["Species"])

    keep_cols = [c for c in POP_SPATIAL_KEEP if c in result.columns]
    if "geometry" in result.columns:
        keep_cols.append("geometry")
    return result[keep_cols]
