"""
superdump
=========
A MySQL dump tool with per-table customization:
- Column substitutions in SELECT
- WHERE clauses
- Skipped and structure-only tables
- Extended INSERT statements
- Optional table locking
- Compression support
"""

__version__ = "1.0.0"

from .config import ConfigLoader
from .connection import DatabaseConnection
from .engine import DumpEngine, escape, format_cell, to_cell
from .exceptions import RowDecodeError
from .main import main
from .models import (
    NULL,
    Cell,
    DumpSettings,
    DumpStats,
    FilterPolicy,
    NullCell,
    RawCell,
    TableStats,
)
from .output import open_output
from .runner import DumpRunner
from .utils import format_settings_display, print_dry_run_info, setup_logging

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DumpEngine",
    "DumpRunner",
    # Models
    "Cell",
    "DumpSettings",
    "DumpStats",
    "FilterPolicy",
    "NULL",
    "NullCell",
    "RawCell",
    "TableStats",
    # Errors
    "RowDecodeError",
    # Utilities
    "escape",
    "format_cell",
    "format_settings_display",
    "open_output",
    "print_dry_run_info",
    "setup_logging",
    "to_cell",
]
