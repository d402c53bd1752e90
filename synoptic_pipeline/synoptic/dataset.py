#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Synoptic Dataset Snapshot
The reconciled tables handed to the presentation layer, plus display helpers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .config import (
    CU_ID_COL,
    CU_NAME_COL,
    NA_CATEGORY,
    OUTPUT_TABLES,
    POP_ID_COL,
    POP_NAME_COL,
    POP_UID_COL,
    STREAM_CODE_COL,
)
from .metrics import status_column
from .transforms import first_match, format_id, is_blank


@dataclass(frozen=True, eq=False)
class SynopticDataset:
    """
    Read-only snapshot of the reconciled CU and population data.

    Built once by pipeline.build_dataset and shared by reference; consumers
    must not modify the tables.
    """

    cu_lookup: pd.DataFrame
    pop_lookup: pd.DataFrame
    cu_metrics: pd.DataFrame
    cu_metrics_series: pd.DataFrame
    cu_time_series: pd.DataFrame
    pop_time_series: pd.DataFrame
    cu_spatial: pd.DataFrame
    pop_spatial: pd.DataFrame
    streams: pd.DataFrame
    metric_names: Tuple[str, ...] = ()
    metric_years: Tuple[str, ...] = ()
    diagnostics: pd.DataFrame = field(default_factory=pd.DataFrame)

    # ------------------------------------------------------------------
    # Universes
    # ------------------------------------------------------------------

    @property
    def cus(self) -> List[str]:
        """CUs in the dataset."""
        return list(pd.unique(self.cu_lookup[CU_ID_COL]))

    @property
    def pops(self) -> List[str]:
        """Populations in the dataset."""
        return list(pd.unique(self.pop_lookup[POP_UID_COL]))

    @property
    def watersheds(self) -> List[str]:
        """Watershed codes of the reduced stream network."""
        return list(pd.unique(self.streams[STREAM_CODE_COL]))

    @property
    def status_metric_names(self) -> List[str]:
        return [status_column(m) for m in self.metric_names]

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def _pop_row(self, pop_uid: str) -> Optional[pd.Series]:
        idx = first_match(self.pop_lookup, self.pop_lookup[POP_UID_COL] == pop_uid)
        return None if idx is None else self.pop_lookup.loc[idx]

    def cu_name(self, cu_id: str) -> str:
        """Full name of a CU, e.g. 'Chilko Summer (SEL-19-05)'."""
        idx = first_match(self.cu_lookup, self.cu_lookup[CU_ID_COL] == cu_id)
        name = NA_CATEGORY if idx is None else self.cu_lookup.at[idx, CU_NAME_COL]
        return f"{NA_CATEGORY if is_blank(name) else name} ({cu_id})"

    def pop_name(self, pop_uid: str) -> Optional[str]:
        """Full name of a population: '<CU_ID>: <Pop_Name> (<Pop_ID>)'; None if unknown."""
        row = self._pop_row(pop_uid)
        if row is None:
            return None
        return f"{row[CU_ID_COL]}: {row[POP_NAME_COL]} ({format_id(row[POP_ID_COL])})"

    def pop_name_short(self, pop_uid: str) -> Optional[str]:
        """Name of a population; None if unknown."""
        row = self._pop_row(pop_uid)
        return None if row is None else row[POP_NAME_COL]

    def pops_for_cus(self, cus: Iterable[str]) -> List[str]:
        """Populations associated with the given CUs, in lookup order."""
        cus = set(cus)
        return self.pop_lookup.loc[self.pop_lookup[CU_ID_COL].isin(cus), POP_UID_COL].tolist()

    def tables(self) -> Dict[str, Any]:
        """Output tables keyed by output table name."""
        return {
            OUTPUT_TABLES["cu_lookup"]: self.cu_lookup,
            OUTPUT_TABLES["pop_lookup"]: self.pop_lookup,
            OUTPUT_TABLES["cu_metrics"]: self.cu_metrics,
            OUTPUT_TABLES["cu_metrics_series"]: self.cu_metrics_series,
            OUTPUT_TABLES["cu_time_series"]: self.cu_time_series,
            OUTPUT_TABLES["pop_time_series"]: self.pop_time_series,
            OUTPUT_TABLES["cu_spatial"]: self.cu_spatial,
            OUTPUT_TABLES["pop_spatial"]: self.pop_spatial,
            OUTPUT_TABLES["streams"]: self.streams,
            OUTPUT_TABLES["qa_diagnostics"]: self.diagnostics,
        }
