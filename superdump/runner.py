"""
Dump orchestration for superdump: config, connection, output and engine.
"""

import logging
from datetime import datetime
from typing import Any, BinaryIO, Optional

from . import __version__
from .config import ConfigLoader
from .connection import DatabaseConnection
from .engine import DumpEngine
from .models import DumpSettings, DumpStats, FilterPolicy, TableStats
from .output import open_output


class DumpRunner:
    """Runs a complete dump as described by a configuration file."""

    def __init__(self, config: ConfigLoader, overrides: Optional[dict[str, Any]] = None):
        self.config = config
        self.overrides = overrides or {}
        self.connection_settings = config.get_connection_settings()
        self.dump_settings = config.get_dump_settings()
        self.output_settings = config.get_output_settings()
        self.settings = build_settings(config, self.overrides)

    @property
    def tables(self) -> Optional[list[str]]:
        """Explicit table list, or None to dump every base table."""
        tables = self.overrides.get('tables') or self.dump_settings.get('tables')
        if not tables:
            return None
        if isinstance(tables, str):
            return [tables]
        return list(tables)

    @property
    def output_path(self) -> Optional[str]:
        return self.overrides.get('output') or self.output_settings.get('file')

    @property
    def compress(self) -> bool:
        return bool(self.overrides.get('compress') or self.output_settings.get('compress', False))

    def run(self) -> DumpStats:
        """Connect, dump and return the stats. Any failure propagates."""
        database = self.connection_settings.get('database')

        with DatabaseConnection.from_settings(self.connection_settings) as conn:
            engine = DumpEngine(conn, self.settings)

            with open_output(self.output_path, self.compress) as (label, sink):
                logging.info(f"Dumping database '{database or 'N/A'}' to {label}")
                self._write_preamble(sink, conn.host, database)
                stats = engine.dump_tables(sink, self.tables)
                self._write_footer(sink)

        for table_stats in stats.tables:
            self._log_table_result(table_stats)

        return stats

    def _write_preamble(self, sink: BinaryIO, host: str, database: Optional[str]) -> None:
        sink.write(
            f"-- superdump {__version__}\n"
            f"--\n"
            f"-- Host: {host}    Database: {database or ''}\n"
            f"-- Generated: {datetime.now().isoformat()}\n"
            f"-- ------------------------------------------------------\n".encode('utf-8')
        )

    def _write_footer(self, sink: BinaryIO) -> None:
        sink.write(f"\n-- Dump completed on {datetime.now().isoformat()}\n".encode('utf-8'))

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table dump."""
        if table_stats.skipped:
            logging.info(f"  - {table_stats.table}: skipped")
        elif table_stats.policy == FilterPolicy.NODATA:
            logging.info(f"  ✓ {table_stats.table}: structure only")
        else:
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")


def build_settings(config: ConfigLoader, overrides: Optional[dict[str, Any]] = None) -> DumpSettings:
    """Build the engine settings from configuration and command-line overrides."""
    return DumpSettings.from_config(
        dump=config.get_dump_settings(),
        select=config.get_select_map(),
        where=config.get_where_map(),
        filters=config.get_filter_map(),
        overrides=overrides
    )
