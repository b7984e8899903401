"""
Unit tests for models.py
"""

import dataclasses

import pytest
from superdump.models import (
    NULL,
    DumpSettings,
    DumpStats,
    FilterPolicy,
    NullCell,
    RawCell,
    TableStats,
)


class TestFilterPolicy:
    """Tests for FilterPolicy enum."""

    def test_values(self):
        assert FilterPolicy.IGNORE.value == "ignore"
        assert FilterPolicy.NODATA.value == "nodata"

    def test_from_string(self):
        assert FilterPolicy("ignore") == FilterPolicy.IGNORE
        assert FilterPolicy("nodata") == FilterPolicy.NODATA

    def test_invalid_policy_raises(self):
        with pytest.raises(ValueError):
            FilterPolicy("skip")


class TestCells:
    """Tests for the tagged cell values."""

    def test_null_singleton(self):
        assert isinstance(NULL, NullCell)
        assert NULL == NullCell()

    def test_raw_cell_equality(self):
        assert RawCell(b"abc") == RawCell(b"abc")
        assert RawCell(b"abc") != RawCell(b"abd")

    def test_cells_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RawCell(b"abc").data = b"x"


class TestDumpSettings:
    """Tests for DumpSettings dataclass."""

    def test_default_values(self):
        settings = DumpSettings()
        assert settings.select_map == {}
        assert settings.where_map == {}
        assert settings.filter_map == {}
        assert settings.use_table_lock is False
        assert settings.strict_table_lock is False
        assert settings.extended_insert_rows == 100

    def test_keys_are_normalized(self):
        settings = DumpSettings(
            select_map={"Users": {"EMAIL": "NULL"}},
            where_map={"ORDERS": "id > 10"},
            filter_map={"Sessions": "ignore", "Audit_Log": "NODATA"}
        )
        assert settings.select_map == {"users": {"email": "NULL"}}
        assert settings.where_map == {"orders": "id > 10"}
        assert settings.filter_map == {
            "sessions": FilterPolicy.IGNORE,
            "audit_log": FilterPolicy.NODATA,
        }

    def test_lookups_are_case_insensitive(self):
        settings = DumpSettings(
            select_map={"users": {"email": "NULL"}},
            where_map={"orders": "id > 10"},
            filter_map={"sessions": FilterPolicy.IGNORE}
        )
        assert settings.select_for("USERS", "Email") == "NULL"
        assert settings.select_for("users", "name") is None
        assert settings.select_for("other", "email") is None
        assert settings.where_for("Orders") == "id > 10"
        assert settings.where_for("users") is None
        assert settings.policy_for("SESSIONS") == FilterPolicy.IGNORE
        assert settings.policy_for("users") is None

    def test_invalid_filter_policy(self):
        with pytest.raises(ValueError):
            DumpSettings(filter_map={"users": "skip"})

    @pytest.mark.parametrize("value", [-1, "100", 1.5, True])
    def test_invalid_extended_insert_rows(self, value):
        with pytest.raises(ValueError):
            DumpSettings(extended_insert_rows=value)

    def test_zero_extended_insert_rows_allowed(self):
        assert DumpSettings(extended_insert_rows=0).extended_insert_rows == 0

    def test_select_entry_must_be_mapping(self):
        with pytest.raises(ValueError) as exc_info:
            DumpSettings(select_map={"users": "NOW()"})
        assert "users" in str(exc_info.value)

    def test_empty_where_clause_rejected(self):
        # `where: {orders: }` in YAML loads as None
        with pytest.raises(ValueError) as exc_info:
            DumpSettings(where_map={"orders": None})
        assert "orders" in str(exc_info.value)

    def test_empty_select_expression_rejected(self):
        with pytest.raises(ValueError) as exc_info:
            DumpSettings(select_map={"users": {"email": None}})
        assert "users.email" in str(exc_info.value)

    def test_settings_are_frozen(self):
        settings = DumpSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.use_table_lock = True

    def test_from_config(self):
        settings = DumpSettings.from_config(
            dump={"extended_insert_rows": 50, "use_table_lock": True, "tables": ["users"]},
            select={"users": {"email": "'x'"}},
            where={"users": "id > 1"},
            filters={"logs": "nodata"}
        )
        assert settings.extended_insert_rows == 50
        assert settings.use_table_lock is True
        assert settings.select_for("users", "email") == "'x'"
        assert settings.where_for("users") == "id > 1"
        assert settings.policy_for("logs") == FilterPolicy.NODATA

    def test_from_config_empty_sections(self):
        settings = DumpSettings.from_config({}, {}, {}, {})
        assert settings == DumpSettings()

    def test_from_config_overrides_win(self):
        settings = DumpSettings.from_config(
            dump={"extended_insert_rows": 50, "use_table_lock": False},
            select={}, where={}, filters={},
            overrides={"extended_insert_rows": 0, "use_table_lock": True}
        )
        assert settings.extended_insert_rows == 0
        assert settings.use_table_lock is True

    def test_from_config_none_overrides_ignored(self):
        settings = DumpSettings.from_config(
            dump={"extended_insert_rows": 50},
            select={}, where={}, filters={},
            overrides={"extended_insert_rows": None, "use_table_lock": None}
        )
        assert settings.extended_insert_rows == 50
        assert settings.use_table_lock is False


class TestTableStats:
    """Tests for TableStats dataclass."""

    def test_default_values(self):
        stats = TableStats(table="users")
        assert stats.table == "users"
        assert stats.policy is None
        assert stats.row_count == 0
        assert stats.rows_dumped == 0
        assert stats.skipped is False


class TestDumpStats:
    """Tests for DumpStats dataclass."""

    def test_default_values(self):
        stats = DumpStats()
        assert stats.tables == []
        assert stats.total_tables == 0
        assert stats.total_rows == 0

    def test_add(self):
        stats = DumpStats()
        stats.add(TableStats(table="users", rows_dumped=100))
        stats.add(TableStats(table="orders", rows_dumped=50))
        stats.add(TableStats(table="sessions", policy=FilterPolicy.IGNORE, skipped=True))

        assert len(stats.tables) == 3
        assert stats.total_tables == 2
        assert stats.total_rows == 150
