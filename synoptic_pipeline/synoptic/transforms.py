#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Transforms Module
Shared helpers for identifier formatting, list fields and ordered joins.
"""

import logging
from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from .config import SELECTION_SEP

logger = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    """True for None, NaN/NA and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def format_id(value: Any) -> Optional[str]:
    """
    Render an identifier as text so that values read from different files compare equal.

    Integral floats lose their ".0" suffix (a column with gaps is read as float),
    strings are stripped, and blank values become None.

    Args:
        value: Raw identifier value

    Returns:
        Identifier string, or None if blank
    """
    if is_blank(value):
        return None
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return str(value).strip()


def to_number(value: Any) -> Optional[float]:
    """Parse a value as a number, returning None if it does not parse."""
    if is_blank(value):
        return None
    number = pd.to_numeric(str(value).strip(), errors="coerce")
    if pd.isna(number):
        return None
    return float(number)


def split_list(value: Any, sep: str) -> List[str]:
    """
    Split a delimited list field, strip items and drop empties and repeats.

    Args:
        value: Text value such as "A:B:C"
        sep: Delimiter

    Returns:
        Items in first-seen order
    """
    if is_blank(value):
        return []
    out, seen = [], set()
    for item in str(value).split(sep):
        item = item.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def join_sorted(items: Iterable[str], sep: str = SELECTION_SEP) -> str:
    """Join the distinct items in sorted order; empty string if none."""
    return sep.join(sorted(set(items)))


def unpack(item_list: Any) -> List[str]:
    """Unpack a comma-separated selection string into a list."""
    return split_list(item_list, SELECTION_SEP)


def first_match(df: pd.DataFrame, mask: pd.Series) -> Optional[Any]:
    """
    Return the index label of the first row satisfying mask, in row order.

    Args:
        df: Ordered DataFrame searched
        mask: Boolean Series aligned with df

    Returns:
        Index label of the first matching row, or None
    """
    if df.empty:
        return None
    hits = df.index[mask.fillna(False).to_numpy(dtype=bool)]
    if len(hits) == 0:
        return None
    return hits[0]


def coerce_numeric_columns(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    """
    Coerce specified columns to numeric type.

    Args:
        df: DataFrame to process
        columns: List of column names to convert

    Returns:
        DataFrame with numeric columns
    """
    result = df.copy()
    for col in columns:
        if col in result.columns:
            result[col] = pd.to_numeric(result[col], errors="coerce")
    return result

