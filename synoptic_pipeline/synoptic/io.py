"""
I/O module for Synoptic.
Input loading, schema validation and output writing functions.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import geopandas as gpd
import pandas as pd

from .config import GIS_TABLES, INPUT_FILES, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    def __init__(self, message, df):
        super().__init__(message)
        self.df = df


def load_table(path: Path, gis: bool = False) -> pd.DataFrame:
    """
    Load one input table.

    Args:
        path: File path
        gis: Read with geopandas (shapefile, GeoPackage) instead of pandas

    Returns:
        DataFrame (GeoDataFrame for GIS layers)
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if gis:
        return gpd.read_file(path)
    return pd.read_csv(path)


def load_inputs(
    data_dir: str,
    files: Optional[Dict[str, str]] = None,
) -> Tuple[Dict[str, pd.DataFrame], List[str]]:
    """
    Load all input tables from a data directory.

    Any missing or unreadable file is fatal: downstream joins assume every
    table exists.

    Args:
        data_dir: Directory with the input files
        files: Overrides for INPUT_FILES (table name -> file name)

    Returns:
        Tuple of (tables dict, warnings list)
    """
    file_map = dict(INPUT_FILES)
    file_map.update(files or {})
    data_path = Path(data_dir)
    tables = {}
    warnings = []

    for name, file_name in file_map.items():
        path = data_path / file_name
        df = load_table(path, gis=name in GIS_TABLES)
        if df.empty:
            warnings.append(f"Input table {name} is empty: {path}")
            logger.warning(f"Input table {name} is empty: {path}")
        tables[name] = df
        logger.info(f"Loaded {name} from {file_name}: {len(df)} rows")

    return tables, warnings


def validate_inputs(tables: Dict[str, pd.DataFrame], strict: bool = True) -> pd.DataFrame:
    """
    Check that every input table carries its required columns.

    Args:
        tables: Loaded input tables
        strict: Raise InputValidationError on any problem

    Returns:
        Schema report with one row per table
    """
    rows = []
    for name, req in REQUIRED_COLUMNS.items():
        if name not in tables:
            rows.append({"table": name, "status": "missing_table", "missing_cols": ",".join(req)})
            continue
        cols = set(tables[name].columns)
        missing = [c for c in req if c not in cols]
        status = "ok" if not missing else "missing_columns"
        rows.append({"table": name, "status": status, "missing_cols": ",".join(missing)})
    out = pd.DataFrame(rows)
    if strict and (out["status"] != "ok").any():
        bad = out[out["status"] != "ok"]
        raise InputValidationError("Input validation failed:\n" + bad.to_string(index=False), bad)
    return out


def get_row_counts(tables: Dict[str, pd.DataFrame]) -> Dict[str, int]:
    return {name: len(df) for name, df in tables.items()}


def _drop_geometry(df: pd.DataFrame) -> pd.DataFrame:
    if "geometry" in df.columns:
        return pd.DataFrame(df.drop(columns="geometry"))
    return df


def create_runlog(
    input_dir: str,
    output_dir: str,
    params: Dict[str, Any],
    input_row_counts: Dict[str, int],
    output_row_counts: Dict[str, int],
    warnings: List[str],
    start_time: datetime,
    end_time: datetime,
) -> Dict[str, Any]:
    """Create a run log dictionary with execution metadata."""
    return {
        "pipeline": "synoptic",
        "version": "1.0.0",
        "input_dir": str(input_dir),
        "output_dir": str(output_dir),
        "params": params,
        "input_row_counts": input_row_counts,
        "output_row_counts": output_row_counts,
        "start_time": start_time.isoformat(),
        "end_time": end_time.isoformat(),
        "duration_seconds": (end_time - start_time).total_seconds(),
        "warnings": warnings,
        "outputs": {
            "tables": list(output_row_counts.keys()),
        },
    }


def write_outputs(
    outdir: str,
    tables_dict: Dict[str, pd.DataFrame],
    runlog: Dict[str, Any],
    write_excel: bool = True,
) -> Dict[str, str]:
    """
    Write all pipeline outputs and return paths.

    Args:
        outdir: Output directory path
        tables_dict: Dict of output tables
        runlog: Run log dictionary
        write_excel: Also write a multi-sheet workbook

    Returns:
        Dict of output type -> path
    """
    outdir_path = Path(outdir)
    outdir_path.mkdir(parents=True, exist_ok=True)
    output_paths = {}

    # 1. Write tables (CSVs)
    tables_dir = outdir_path / "tables"
    tables_dir.mkdir(exist_ok=True)
    for name, df in tables_dict.items():
        csv_path = tables_dir / f"{name}.csv"
        _drop_geometry(df).to_csv(csv_path, index=False)
        logger.debug(f"Wrote table {name} to {csv_path}")
    output_paths["tables_dir"] = str(tables_dir)

    # 2. Write multi-sheet Excel
    if write_excel:
        xlsx_path = outdir_path / "synoptic_outputs.xlsx"
        with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
            for name, df in tables_dict.items():
                # Truncate sheet name to 31 chars (Excel limit)
                _drop_geometry(df).to_excel(writer, sheet_name=name[:31], index=False)
        output_paths["xlsx"] = str(xlsx_path)
        logger.info(f"Wrote Excel output to {xlsx_path}")

    # 3. Runlog
    runlog_path = outdir_path / "runlog.json"
    with open(runlog_path, "w", encoding="utf-8") as f:
        json.dump(runlog, f, indent=2, default=str)
    output_paths["runlog"] = str(runlog_path)
    logger.info(f"Wrote runlog to {runlog_path}")

    return output_paths
