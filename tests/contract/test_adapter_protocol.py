"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

from pathlib import Path

import pytest

from proc_mapper.adapters.mysql import MysqlAdapter
from proc_mapper.adapters.oracle import OracleAdapter
from proc_mapper.adapters.postgresql import PostgresqlAdapter
from proc_mapper.adapters.protocol import ProcedureAdapter
from proc_mapper.adapters.sqlite import SqliteAdapter
from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import RowCursor
from proc_mapper.core.enums import ExecuteType
from proc_mapper.core.params import DbParameter


@pytest.mark.parametrize(
    ("adapter_class", "marker"),
    [
        (SqliteAdapter, ":title"),
        (PostgresqlAdapter, "%(title)s"),
        (MysqlAdapter, "%s"),
        (OracleAdapter, ":title"),
    ],
)
class TestProtocolCompliance:
    def test_implements_protocol(self, adapter_class: type, marker: str) -> None:
        assert isinstance(adapter_class(), ProcedureAdapter)

    def test_parameter_marker(self, adapter_class: type, marker: str) -> None:
        assert adapter_class().parameter_marker("title") == marker


def test_fake_adapter_implements_protocol(fake_adapter) -> None:
    assert isinstance(fake_adapter, ProcedureAdapter)


class TestSqliteAdapterLifecycle:
    @pytest.fixture
    def config(self, tmp_path: Path, write_sql, tmp_sql_dir: Path) -> ConnectionConfig:
        write_sql("answer.sql", "SELECT :value AS val")
        return ConnectionConfig(
            driver="sqlite",
            database=str(tmp_path / "app.db"),
            extra={"procedures": str(tmp_sql_dir)},
        )

    def test_lifecycle(self, config: ConnectionConfig) -> None:
        adapter = SqliteAdapter()
        session = adapter.open(config)

        command = adapter.prepare_call(session, "answer")
        bound = adapter.bind_parameter(command, DbParameter.input("value", 42))
        assert bound.marker == ":value"

        cursor = adapter.run(command, ExecuteType.READ_ROWS)
        assert isinstance(cursor, RowCursor)
        assert cursor.next()
        assert cursor.field_name(0) == "val"
        assert cursor.field_value(0) == 42
        cursor.close()

        assert adapter.parameter_value(command, "value") == 42

        adapter.close(session)
        adapter.close(session)
