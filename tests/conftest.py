"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import ListRowCursor
from proc_mapper.core.enums import ExecuteType
from proc_mapper.core.mapper import DatabaseMapper
from proc_mapper.core.params import BoundParameter, Command, DbParameter


class FakeAdapter:
    """Scripted in-memory executor.

    ``results`` maps a procedure name to ``(columns, rows)``,
    ``rowcounts`` to a NON_QUERY count and ``outputs`` to the values its
    output parameters hold after the call.
    """

    def __init__(self) -> None:
        self.results: dict[str, tuple[list[str], list[tuple[Any, ...]]]] = {}
        self.rowcounts: dict[str, int] = {}
        self.outputs: dict[str, dict[str, Any]] = {}
        self.open_error: Exception | None = None
        self.run_error: Exception | None = None
        self.open_sessions: list[object] = []
        self.sessions_opened = 0
        self.calls: list[Command] = []

    def parameter_marker(self, name: str) -> str:
        return f"@{name}"

    def open(self, config: ConnectionConfig) -> object:
        if self.open_error is not None:
            raise self.open_error
        session = object()
        self.open_sessions.append(session)
        self.sessions_opened += 1
        return session

    def close(self, session: object) -> None:
        if session in self.open_sessions:
            self.open_sessions.remove(session)

    def prepare_call(self, session: object, procedure_name: str) -> Command:
        command = Command(session, procedure_name)
        self.calls.append(command)
        return command

    def bind_parameter(self, command: Command, parameter: DbParameter) -> BoundParameter:
        bound = BoundParameter(
            parameter.name,
            self.parameter_marker(parameter.name),
            parameter.direction,
            parameter.value,
        )
        command.parameters.append(bound)
        return bound

    def run(self, command: Command, execute_type: ExecuteType) -> Any:
        if self.run_error is not None:
            raise self.run_error
        name = command.procedure_name
        if execute_type is ExecuteType.NON_QUERY:
            return self.rowcounts[name]
        columns, rows = self.results[name]
        cursor = ListRowCursor(columns, rows)
        if execute_type is ExecuteType.READ_ROWS:
            return cursor
        return cursor.field_value(0) if cursor.next() else None

    def parameter_value(self, command: Command, name: str) -> Any:
        scripted = self.outputs.get(command.procedure_name, {})
        if name in scripted:
            return scripted[name]
        bound = command.find(name)
        return None if bound is None else bound.value


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def fake_mapper(fake_adapter: FakeAdapter) -> DatabaseMapper:
    """DatabaseMapper running on the scripted FakeAdapter."""
    config = ConnectionConfig(driver="fake", database="test")
    return DatabaseMapper(config, adapter=fake_adapter)


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for procedure SQL files."""
    return tmp_path / "procedures"


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write procedure SQL files into the temp directory.

    Usage:
        write_sql("user/get_by_id.sql", "SELECT * FROM users WHERE id = :user_id")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write
