"""
CLI module for Synoptic.
Command-line interface for building the reconciled CU and population tables.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config import ATTRIB_LEVELS, INPUT_FILES, get_params_yaml_path
from .diagnostics import Diagnostics
from .io import create_runlog, get_row_counts, load_inputs, validate_inputs, write_outputs
from .pipeline import build_dataset

logger = logging.getLogger(__name__)


def get_default_params() -> dict:
    """Return default parameters."""
    return {
        "files": dict(INPUT_FILES),
        "attrib_levels": {k: list(v) for k, v in ATTRIB_LEVELS.items()},
        "write_excel": True,
    }


def load_params(config_path: Optional[str] = None) -> dict:
    """Load parameters from YAML file, on top of the defaults."""
    params = get_default_params()
    path = Path(config_path) if config_path else get_params_yaml_path()
    if not os.path.exists(path):
        logger.warning(f"Config file not found: {path}, using defaults")
        return params
    with open(path, "r", encoding="utf-8") as f:
        overrides = yaml.safe_load(f) or {}
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(params.get(key), dict):
            params[key].update(value)
        else:
            params[key] = value
    return params


def run_pipeline(
    input_dir: str,
    outdir: str,
    config_path: Optional[str] = None,
    write_excel: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Run the full pipeline: load, validate, build, write.

    Args:
        input_dir: Directory with the input files
        outdir: Output directory
        config_path: Path to params YAML
        write_excel: Override params' write_excel

    Returns:
        Result dictionary
    """
    start_time = datetime.now()
    params = load_params(config_path)
    if write_excel is not None:
        params["write_excel"] = write_excel

    logger.info(f"Loading inputs from {input_dir}")
    tables, load_warnings = load_inputs(input_dir, params.get("files"))
    validate_inputs(tables)

    diagnostics = Diagnostics()
    dataset = build_dataset(tables, params, diagnostics)

    output_tables = dataset.tables()
    all_warnings = load_warnings + diagnostics.messages()
    end_time = datetime.now()
    runlog = create_runlog(
        input_dir=input_dir,
        output_dir=outdir,
        params=params,
        input_row_counts=get_row_counts(tables),
        output_row_counts=get_row_counts(output_tables),
        warnings=all_warnings,
        start_time=start_time,
        end_time=end_time,
    )

    logger.info("Writing outputs...")
    output_paths = write_outputs(outdir, output_tables, runlog, write_excel=params.get("write_excel", True))

    duration = (end_time - start_time).total_seconds()
    logger.info(f"Pipeline completed in {duration:.1f}s")
    logger.info(f"Outputs written to: {outdir}")

    return {
        "success": True,
        "duration": duration,
        "warnings": all_warnings,
        "outputs": output_paths,
        "tables_count": len(output_tables),
    }


def main(argv: Optional[list] = None):
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Synoptic: reconcile CU and population datasets into consistent tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m synoptic.cli --input data --outdir output
  python -m synoptic.cli --input data --outdir output --config config/params.yaml --no-excel
        """,
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Directory with the input files",
    )
    parser.add_argument(
        "--outdir", "-o",
        required=True,
        help="Output directory path",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to params YAML file (default: bundled config/params.yaml)",
    )
    parser.add_argument(
        "--no-excel",
        action="store_true",
        default=False,
        help="Skip the multi-sheet Excel workbook",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    input_dir = Path(args.input)
    if not input_dir.is_dir():
        logger.error(f"Input directory not found: {input_dir}")
        sys.exit(1)

    try:
        result = run_pipeline(
            input_dir=str(input_dir),
            outdir=args.outdir,
            config_path=args.config,
            write_excel=False if args.no_excel else None,
        )
    except Exception as e:
        logger.exception(f"Pipeline failed: {e}")
        sys.exit(1)

    print(f"\nPipeline completed successfully!")
    print(f"   Duration: {result['duration']:.1f}s")
    print(f"   Tables: {result['tables_count']}")
    print(f"   Warnings: {len(result['warnings'])}")
    print(f"\n   Outputs: {args.outdir}")


if __name__ == "__main__":
    main()
