"""
Stream selector network reduction for Synoptic.
Prunes the stream network to the current CUs and populations and derives stream order.
"""

import logging
import re
from typing import Any, Iterable, List

import pandas as pd

from .config import (
    SELECTION_SEP,
    SOURCE_LIST_SEP,
    STREAM_CODE_COL,
    STREAM_CUS_COL,
    STREAM_NAME_SRC_COL,
    STREAM_SITES_COL,
    ZERO_SEGMENT,
)
from .transforms import is_blank, join_sorted, split_list

logger = logging.getLogger(__name__)

TRAILING_ZEROS = re.compile(f"(-{ZERO_SEGMENT})*$")


def strip_code(code: Any) -> str:
    """Strip a watershed code to its 'non-zero' portion."""
    if is_blank(code):
        return ""
    return TRAILING_ZEROS.sub("", str(code).strip(), count=1)


def get_segments(code: Any) -> List[str]:
    """Split a stream code into individual segments."""
    stripped = strip_code(code)
    return stripped.split("-") if stripped else []


def stream_order(code: Any) -> int:
    """Number of significant segments of a watershed code (depth in the drainage tree)."""
    return len(get_segments(code))


def selectable_members(value: Any, universe: Iterable[str]) -> str:
    """
    Keep the members of a colon-delimited list that exist in the universe.

    Returns:
        Sorted, comma-joined members; empty string if none survive
    """
    known = set(universe)
    return join_sorted((m for m in split_list(value, SOURCE_LIST_SEP) if m in known), SELECTION_SEP)


def reduce_stream_network(
    streams: pd.DataFrame,
    cus: Iterable[str],
    pops: Iterable[str],
) -> pd.DataFrame:
    """
    Restrict the stream network to segments that can select a current CU.

    Adds CUsSelectable, PopsSelectable, StreamOrder and Name, drops segments
    without any selectable CU and sorts by decreasing stream order, the order
    in which the map layer draws them.

    Args:
        streams: Stream selector network with FWA_WATERSHED_CODE, CUs, SITES, WS_NAME
        cus: CU_IDs in the current database
        pops: Pop_UIDs in the current database

    Returns:
        Reduced stream network
    """
    cus, pops = set(cus), set(pops)
    result = streams.copy()
    result["CUsSelectable"] = [selectable_members(v, cus) for v in result[STREAM_CUS_COL]]
    result["PopsSelectable"] = [selectable_members(v, pops) for v in result[STREAM_SITES_COL]]

    before = len(result)
    result = result[result["CUsSelectable"] != ""].copy()
    logger.info(f"Stream network pruned from {before} to {len(result)} segments")

    result["StreamOrder"] = [stream_order(c) for c in result[STREAM_CODE_COL]]
    result = result.sort_values("StreamOrder", ascending=False, kind="mergesort")

    stripped = result[STREAM_CODE_COL].map(strip_code)
    result["Name"] = [
        code if is_blank(name) else str(name).strip()
        for name, code in zip(result[STREAM_NAME_SRC_COL], stripped)
    ]
    return result
