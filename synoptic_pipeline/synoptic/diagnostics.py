"""
Diagnostics collector for Synoptic.
Recoverable data-quality findings are logged and kept for the QA output table.
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)

DIAGNOSTIC_COLUMNS = ["kind", "dataset", "key", "message", "n_rows"]


class Diagnostics:
    """
    Collects recoverable findings (collisions, unmatched records, drift).

    Nothing here raises: each finding is logged as a warning and recorded so
    the run log and the qa_diagnostics table can list it afterwards.
    """

    def __init__(self):
        self.records: List[Dict[str, Any]] = []

    def warn(
        self,
        kind: str,
        message: str,
        dataset: str = "",
        key: str = "",
        rows: Optional[pd.DataFrame] = None,
        n_rows: Optional[int] = None,
    ) -> None:
        if n_rows is None:
            n_rows = 0 if rows is None else len(rows)
        self.records.append({
            "kind": kind,
            "dataset": dataset,
            "key": key,
            "message": message,
            "n_rows": n_rows,
        })
        logger.warning(message)
        if rows is not None and not rows.empty:
            logger.warning("Offending rows:\n" + rows.to_string())

    def count(self, kind: Optional[str] = None) -> int:
        if kind is None:
            return len(self.records)
        return sum(1 for r in self.records if r["kind"] == kind)

    def messages(self) -> List[str]:
        return [r["message"] for r in self.records]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.records, columns=DIAGNOSTIC_COLUMNS)
