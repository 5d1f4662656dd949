"""SQLite adapter (sqlite3 stdlib).

SQLite has no stored procedures: a procedure is a ``.sql`` file resolved
through a ProcedureRegistry rooted at ``config.extra["procedures"]``.
Each file holds one statement with ``:name`` parameters. Output
parameters are not supported.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import DbapiRowCursor
from proc_mapper.core.enums import ExecuteType, ParameterDirection
from proc_mapper.core.exceptions import ConfigurationError, ParameterBindingError
from proc_mapper.core.params import BoundParameter, Command, DbParameter
from proc_mapper.core.registry import ProcedureRegistry

logger = structlog.get_logger(__name__)


@dataclass
class SqliteSession:
    connection: sqlite3.Connection
    registry: ProcedureRegistry


class SqliteAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    def __init__(self, registry: ProcedureRegistry | None = None) -> None:
        self._registry = registry

    def parameter_marker(self, name: str) -> str:
        return f":{name}"

    def _registry_for(self, config: ConnectionConfig) -> ProcedureRegistry:
        if self._registry is None:
            root = config.extra.get("procedures")
            if not root:
                raise ConfigurationError(
                    "SQLite needs a procedure directory: pass ?procedures=<dir> or a registry"
                )
            self._registry = ProcedureRegistry(root)
        return self._registry

    def open(self, config: ConnectionConfig) -> SqliteSession:
        """Open a connection in autocommit mode."""
        registry = self._registry_for(config)
        connection = sqlite3.connect(config.database, isolation_level=None)
        return SqliteSession(connection, registry)

    def close(self, session: SqliteSession) -> None:
        try:
            session.connection.close()
        except sqlite3.Error as e:
            logger.warning("session_close_failed", driver="sqlite", error=str(e))

    def prepare_call(self, session: SqliteSession, procedure_name: str) -> Command:
        sql = session.registry.get(procedure_name)
        return Command(session, procedure_name, state={"sql": sql})

    def bind_parameter(self, command: Command, parameter: DbParameter) -> BoundParameter:
        if parameter.direction not in (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT):
            raise ParameterBindingError(
                command.procedure_name,
                parameter.name,
                f"SQLite does not support {parameter.direction.value} parameters",
            )
        bound = BoundParameter(
            parameter.name,
            self.parameter_marker(parameter.name),
            parameter.direction,
            parameter.value,
        )
        command.parameters.append(bound)
        return bound

    def run(self, command: Command, execute_type: ExecuteType) -> Any:
        params = {bound.name: bound.value for bound in command.parameters}
        cursor = command.session.connection.execute(command.state["sql"], params)

        if execute_type is ExecuteType.READ_ROWS:
            return DbapiRowCursor(cursor)
        if execute_type is ExecuteType.NON_QUERY:
            return int(cursor.rowcount)

        row = cursor.fetchone()
        cursor.close()
        return None if row is None else row[0]

    def parameter_value(self, command: Command, name: str) -> Any:
        bound = command.find(name)
        return None if bound is None else bound.value
