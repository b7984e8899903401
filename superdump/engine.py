"""
Dump engine for superdump: turns tables into a SQL script.
"""

import logging
import re
from typing import Any, BinaryIO, Callable, Iterable, Optional

from .exceptions import RowDecodeError
from .models import NULL, Cell, DumpSettings, DumpStats, FilterPolicy, NullCell, RawCell, TableStats

BASE_TABLE = 'BASE TABLE'

_ESCAPES = {
    b'\x00': b'\\0',
    b'\n': b'\\n',
    b'\r': b'\\r',
    b'\\': b'\\\\',
    b"'": b"\\'",
    b'\x1a': b'\\Z',
}
_ESCAPE_PATTERN = re.compile(b"[\x00\n\r\\\\'\x1a]")


def escape(data: bytes) -> bytes:
    """Backslash-escape the bytes that can't appear raw in a MySQL string literal."""
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group()], data)


def to_cell(value: Any) -> Cell:
    """Wrap a value read from a cursor as a tagged cell."""
    if value is None:
        return NULL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawCell(bytes(value))
    if isinstance(value, str):
        return RawCell(value.encode('utf-8'))
    return RawCell(str(value).encode('utf-8'))


_cell_formatters: dict[type, Callable[[Any], bytes]] = {
    NullCell: lambda cell: b'NULL',
    RawCell: lambda cell: b"'" + escape(cell.data) + b"'",
}


def format_cell(cell: Cell) -> bytes:
    """Render a cell as a SQL value."""
    return _cell_formatters[type(cell)](cell)


def format_row(row: Iterable[Any]) -> bytes:
    """Render a row as a parenthesized VALUES tuple."""
    return b'( ' + b', '.join(format_cell(to_cell(value)) for value in row) + b' )'


def _decode_text(value: Any, what: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8')
    raise RowDecodeError(f"Cannot decode {what} from {value!r}")


class DumpEngine:
    """Generates the dump script for the tables of one database.

    The connection is owned by the caller and is never closed here. It must
    provide ``execute``, ``execute_query`` and ``stream`` as implemented by
    :class:`superdump.connection.DatabaseConnection`.
    """

    def __init__(self, connection, settings: Optional[DumpSettings] = None):
        self.connection = connection
        self.settings = settings or DumpSettings()

    def lock_table_reading(self, table: str) -> int:
        """Acquire a read lock on the table for the current session."""
        return self.connection.execute(f"LOCK TABLES `{table}` READ")

    def flush_table(self, table: str) -> int:
        """Force the table to be closed."""
        return self.connection.execute(f"FLUSH TABLES `{table}`")

    def unlock_tables(self) -> int:
        """Release every table lock held by the current session."""
        return self.connection.execute("UNLOCK TABLES")

    def get_tables(self) -> list[str]:
        """Get the base tables of the current database, in server order. Views are left out."""
        results = self.connection.execute_query("SHOW FULL TABLES")
        tables = []
        for row in results:
            if len(row) < 2:
                raise RowDecodeError(f"Expected table name and type, got {row!r}")
            name = _decode_text(row[0], 'table name')
            table_type = _decode_text(row[1], 'table type')
            if table_type == BASE_TABLE:
                tables.append(name)
        return tables

    def get_create_table(self, table: str) -> str:
        """Get CREATE TABLE statement."""
        results = self.connection.execute_query(f"SHOW CREATE TABLE `{table}`")
        if not results or len(results[0]) < 2:
            raise RowDecodeError(f"No CREATE TABLE statement returned for table '{table}'")
        return _decode_text(results[0][1], f"CREATE TABLE statement of '{table}'")

    def get_row_count(self, table: str) -> int:
        """Count the rows the table's WHERE clause lets through."""
        query = f"SELECT COUNT(*) FROM `{table}`"
        where = self.settings.where_for(table)
        if where:
            query += f" WHERE {where}"

        results = self.connection.execute_query(query)
        if not results or not results[0]:
            raise RowDecodeError(f"No row count returned for table '{table}'")

        count = results[0][0]
        if isinstance(count, (bytes, bytearray)):
            count = bytes(count).decode('ascii')
        try:
            return int(count)
        except (TypeError, ValueError) as e:
            raise RowDecodeError(f"Cannot decode row count {count!r} for table '{table}'") from e

    def get_columns_for_select(self, table: str) -> list[str]:
        """Get the SELECT column list, with configured substitutions applied."""
        # Only the column names are needed; the unread row is discarded on close
        # because the connection is opened with consume_results.
        with self.connection.stream(f"SELECT * FROM `{table}` LIMIT 1") as (columns, _):
            pass

        select_columns = []
        for column in columns:
            replacement = self.settings.select_for(table, column)
            if replacement is not None:
                select_columns.append(f"{replacement} AS `{column}`")
            else:
                select_columns.append(f"`{column}`")
        return select_columns

    def get_select_query(self, table: str) -> str:
        """Build the SELECT query that fetches the table's data."""
        columns = self.get_columns_for_select(table)
        query = f"SELECT {', '.join(columns)} FROM `{table}`"

        where = self.settings.where_for(table)
        if where:
            query += f" WHERE {where}"

        return query

    def write_create_table(self, sink: BinaryIO, table: str) -> None:
        """Write the DROP and CREATE TABLE statements for a table."""
        sink.write(f"\n--\n-- Structure for table `{table}`\n--\n\n".encode('utf-8'))
        sink.write(f"DROP TABLE IF EXISTS `{table}`;\n".encode('utf-8'))

        ddl = self.get_create_table(table)
        sink.write(f"{ddl};\n".encode('utf-8'))

    def write_table_header(self, sink: BinaryIO, table: str) -> int:
        """Write the data section comment and return the row count in it."""
        count = self.get_row_count(table)
        sink.write(f"\n--\n-- Data for table `{table}` -- {count} rows\n--\n\n".encode('utf-8'))
        return count

    def write_table_lock_write(self, sink: BinaryIO, table: str) -> None:
        sink.write(f"LOCK TABLES `{table}` WRITE;\n".encode('utf-8'))

    def write_unlock_tables(self, sink: BinaryIO) -> None:
        sink.write(b"UNLOCK TABLES;\n")

    def write_table_data(self, sink: BinaryIO, table: str) -> int:
        """Write the table's rows as extended INSERT statements.

        Returns the number of rows written.
        """
        query = self.get_select_query(table)
        logging.debug(f"Dumping table '{table}' with query: {query[:200]}")

        batch_size = self.settings.extended_insert_rows
        statement = f"INSERT INTO `{table}` VALUES\n".encode('utf-8')
        rows_dumped = 0
        batch: list[bytes] = []

        with self.connection.stream(query) as (_, rows):
            for row in rows:
                batch.append(format_row(row))
                rows_dumped += 1

                if batch_size and len(batch) >= batch_size:
                    self._write_insert_batch(sink, statement, batch)
                    batch = []

        if batch:
            self._write_insert_batch(sink, statement, batch)

        return rows_dumped

    def _write_insert_batch(self, sink: BinaryIO, statement: bytes, batch: list[bytes]) -> None:
        sink.write(statement + b',\n'.join(batch) + b';\n')

    def _run_best_effort(self, action: Callable[..., Any], *args: str) -> bool:
        """Run a locking statement, logging rather than raising on failure unless locking is strict."""
        try:
            action(*args)
            return True
        except Exception as e:
            if self.settings.strict_table_lock:
                raise
            logging.warning(f"{action.__name__}({', '.join(args)}) failed, continuing without it: {e}")
            return False

    def dump_table(self, sink: BinaryIO, table: str) -> TableStats:
        """
        Dump the structure and, unless filtered, the data of one table.

        Args:
            sink: Binary writable receiving the script.
            table: Name of the table to dump.

        Returns:
            TableStats for the table.

        Errors from the database or from decoding results propagate. Output
        written before the failure stays in the sink.
        """
        policy = self.settings.policy_for(table)
        stats = TableStats(table=table, policy=policy)

        if policy == FilterPolicy.IGNORE:
            logging.debug(f"Table '{table}' ignored by filter")
            stats.skipped = True
            return stats

        skip_data = policy == FilterPolicy.NODATA
        locked = False
        try:
            if not skip_data and self.settings.use_table_lock:
                locked = self._run_best_effort(self.lock_table_reading, table)
                self._run_best_effort(self.flush_table, table)

            self.write_create_table(sink, table)

            if skip_data:
                return stats

            stats.row_count = self.write_table_header(sink, table)
            if stats.row_count == 0:
                return stats

            self.write_table_lock_write(sink, table)
            stats.rows_dumped = self.write_table_data(sink, table)
            sink.write(b"\n")
            self.write_unlock_tables(sink)
        finally:
            if locked:
                self._run_best_effort(self.unlock_tables)

        return stats

    def dump_tables(self, sink: BinaryIO, tables: Optional[list[str]] = None) -> DumpStats:
        """Dump every base table, or the given tables, in order.

        The first failing table stops the dump and its error propagates.
        """
        if tables is None:
            tables = self.get_tables()

        logging.info(f"Dumping {len(tables)} table(s)")

        stats = DumpStats()
        for table in tables:
            stats.add(self.dump_table(sink, table))
        return stats
