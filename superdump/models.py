"""
Data models and enums for superdump.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class FilterPolicy(Enum):
    """Per-table dump policy. Tables without a policy are fully dumped."""
    IGNORE = "ignore"
    NODATA = "nodata"


@dataclass(frozen=True)
class NullCell:
    """A NULL cell."""


@dataclass(frozen=True)
class RawCell:
    """A non-NULL cell holding the raw bytes read from the server."""
    data: bytes


Cell = Union[NullCell, RawCell]

NULL = NullCell()


@dataclass(frozen=True)
class DumpSettings:
    """Per-dump configuration, read-only while a dump runs.

    Table and column keys are lower-cased once, when the settings are built,
    so lookups only need to lower-case the name being looked up.
    """
    select_map: dict[str, dict[str, str]] = field(default_factory=dict)
    where_map: dict[str, str] = field(default_factory=dict)
    filter_map: dict[str, FilterPolicy] = field(default_factory=dict)
    use_table_lock: bool = False
    strict_table_lock: bool = False
    extended_insert_rows: int = 100

    def __post_init__(self) -> None:
        if (
            isinstance(self.extended_insert_rows, bool)
            or not isinstance(self.extended_insert_rows, int)
            or self.extended_insert_rows < 0
        ):
            raise ValueError(
                f"extended_insert_rows must be a non-negative integer, "
                f"got {self.extended_insert_rows!r}"
            )

        select_map = {}
        for table, columns in self.select_map.items():
            if not isinstance(columns, dict):
                raise ValueError(f"Select entry for table '{table}' must be a mapping of columns")
            for column, expression in columns.items():
                if expression is None:
                    raise ValueError(f"Select expression for column '{table}.{column}' is empty")
            select_map[str(table).lower()] = {
                str(column).lower(): str(expression) for column, expression in columns.items()
            }

        for table, clause in self.where_map.items():
            if clause is None:
                raise ValueError(f"Where clause for table '{table}' is empty")
        where_map = {str(table).lower(): str(clause) for table, clause in self.where_map.items()}
        filter_map = {
            str(table).lower(): FilterPolicy(policy.lower() if isinstance(policy, str) else policy)
            for table, policy in self.filter_map.items()
        }

        object.__setattr__(self, 'select_map', select_map)
        object.__setattr__(self, 'where_map', where_map)
        object.__setattr__(self, 'filter_map', filter_map)

    def policy_for(self, table: str) -> Optional[FilterPolicy]:
        return self.filter_map.get(table.lower())

    def where_for(self, table: str) -> Optional[str]:
        return self.where_map.get(table.lower())

    def select_for(self, table: str, column: str) -> Optional[str]:
        return self.select_map.get(table.lower(), {}).get(column.lower())

    @classmethod
    def from_config(
        cls,
        dump: dict[str, Any],
        select: dict[str, Any],
        where: dict[str, Any],
        filters: dict[str, Any],
        overrides: Optional[dict[str, Any]] = None
    ) -> "DumpSettings":
        """
        Create DumpSettings from config sections. Non-None overrides win over the dump section.
        """
        settings: dict[str, Any] = {}
        for key in ['use_table_lock', 'strict_table_lock', 'extended_insert_rows']:
            if key in dump:
                settings[key] = dump[key]
            if overrides and overrides.get(key) is not None:
                settings[key] = overrides[key]
        return cls(
            select_map=select or {},
            where_map=where or {},
            filter_map=filters or {},
            **settings
        )


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    policy: Optional[FilterPolicy] = None
    row_count: int = 0
    rows_dumped: int = 0
    skipped: bool = False


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0

    def add(self, table_stats: TableStats) -> None:
        self.tables.append(table_stats)
        if not table_stats.skipped:
            self.total_tables += 1
        self.total_rows += table_stats.rows_dumped
