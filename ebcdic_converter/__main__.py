#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Command Line Interface

Usage:
    e2a <input file> <output file> <catalog file> <schema file> <database> <run id>

Example:
    e2a /data/fivb/fivb_ebcdic /data/fivb/fivb_ascii.txt /data/fivb/fivb.csv \\
        /metadata/fivb.md as400 3b9480f8-0ada-43f0-b943-3f320d1c4f65
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from .pipeline import ConverterPipeline
from .utils import create_default_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='e2a',
        description='EBCDIC (code page 273) to ASCII converter with packed and zoned decimal support',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert an extract and write its ingestion catalog
  e2a fivb_ebcdic fivb_ascii.txt fivb.csv fivb.md as400 3b9480f8-0ada-43f0-b943-3f320d1c4f65
        """
    )
    parser.add_argument('input_file', type=Path, help='name/path of the EBCDIC input file')
    parser.add_argument('output_file', type=Path, help='name/path of the ASCII output file (.txt)')
    parser.add_argument('catalog_file', type=Path, help='name/path of the metadata output file (.csv)')
    parser.add_argument('schema_file', type=Path, help='name/path of the metadata input file (.md)')
    parser.add_argument('database', help='name of the system (e.g. as400)')
    parser.add_argument('run_id', help='identifier used for logging purposes')
    parser.add_argument('--log-level', default='INFO', help='logging level (default: INFO)')
    parser.add_argument('--logs-folder', type=Path, default=Path('logs'), help='folder for the log file')
    parser.add_argument('--no-log-file', action='store_true', help='log to the console only')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point; returns the process exit status."""
    args = build_parser().parse_args(argv)

    config = create_default_config(
        input_file=args.input_file,
        output_file=args.output_file,
        catalog_file=args.catalog_file,
        schema_file=args.schema_file,
        database=args.database,
        run_id=args.run_id,
        log_level=args.log_level,
        logs_folder=args.logs_folder,
        log_to_file=not args.no_log_file,
    )

    result = ConverterPipeline(config).run()
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
