#!/usr/bin/env python3
"""
superdump - CLI Entry Point
===========================
Dumps a MySQL database to a SQL script with per-table customization:
- Column substitutions in SELECT
- WHERE clauses
- Skipped and structure-only tables
- Extended INSERT statements
- Optional table locking
- Compression support
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .runner import DumpRunner
from .utils import print_dry_run_info, setup_logging


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='superdump - MySQL dump tool with per-table customization'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )
    parser.add_argument(
        '-o', '--output',
        help="Output file, '-' for stdout (overrides output.file)"
    )
    parser.add_argument(
        '-z', '--compress',
        action='store_true',
        default=None,
        help='Compress the output with gzip'
    )
    parser.add_argument(
        '-t', '--table',
        action='append',
        dest='tables',
        help='Dump only this table (can be repeated)'
    )
    parser.add_argument(
        '--use-table-lock',
        action='store_true',
        default=None,
        help='Lock each table for reading while its data is dumped'
    )
    parser.add_argument(
        '--extended-insert-rows',
        type=non_negative_int,
        metavar='N',
        help='Rows per INSERT statement, 0 for a single statement per table'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    overrides = {
        'output': args.output,
        'compress': args.compress,
        'tables': args.tables,
        'use_table_lock': args.use_table_lock,
        'extended_insert_rows': args.extended_insert_rows,
    }

    try:
        runner = DumpRunner(config, overrides)
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        sys.exit(1)

    # Dry run mode
    if args.dry_run:
        logging.info("DRY RUN MODE - No data will be dumped")
        print_dry_run_info(runner.settings, runner.tables)
        sys.exit(0)

    # Run dump
    try:
        stats = runner.run()

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {stats.total_tables}")
        logging.info(f"Total Rows: {stats.total_rows}")

    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
