"""
Utility functions for superdump.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .models import DumpSettings, FilterPolicy


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Console output goes to stderr so a dump written to stdout stays clean.
    """
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def print_dry_run_info(settings: DumpSettings, tables: Optional[list[str]] = None) -> None:
    """Log what would be dumped in dry-run mode."""
    logging.info(
        f"Extended insert rows: {settings.extended_insert_rows or 'unbounded'}, "
        f"table locks: {'on' if settings.use_table_lock else 'off'}"
    )

    if tables:
        for table in tables:
            parts = format_settings_display(settings, table)
            logging.info(f"  - {table} ({', '.join(parts)})" if parts else f"  - {table} (full dump)")
        return

    logging.info("  - All base tables")
    configured = sorted(set(settings.select_map) | set(settings.where_map) | set(settings.filter_map))
    for table in configured:
        logging.info(f"  - {table} ({', '.join(format_settings_display(settings, table))})")


def format_settings_display(settings: DumpSettings, table: str) -> list[str]:
    """Format the settings that apply to a table for display in dry-run mode."""
    parts = []
    policy = settings.policy_for(table)
    if policy == FilterPolicy.IGNORE:
        return ["ignored"]
    if policy == FilterPolicy.NODATA:
        parts.append("structure only")

    where = settings.where_for(table)
    if where:
        parts.append(f"where='{where}'")

    for column, expression in settings.select_map.get(table.lower(), {}).items():
        parts.append(f"{column}={expression}")
    return parts
