"""PostgreSQL adapter using psycopg (v3+).

Call shapes:
    READ_ROWS -> SELECT * FROM name(arg => %(arg)s, ...)   (set-returning function)
    NON_QUERY -> CALL name(arg => %(arg)s, out => NULL, ...)
    SCALAR    -> SELECT name(arg => %(arg)s, ...)

OUT and INOUT values are read from the row a ``CALL`` returns.
"""

from __future__ import annotations

from typing import Any

import structlog

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import DbapiRowCursor
from proc_mapper.core.enums import ExecuteType, ParameterDirection
from proc_mapper.core.params import BoundParameter, Command, DbParameter

logger = structlog.get_logger(__name__)


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    for key, value in config.extra.items():
        parts.append(f"{key}={value}")
    return " ".join(parts)


def build_call(command: Command, execute_type: ExecuteType) -> Any:
    """Compose the SQL for a procedure call with psycopg.sql."""
    from psycopg import sql

    procedure = sql.Identifier(*command.procedure_name.split("."))
    arguments = []
    for bound in command.parameters:
        if bound.direction is ParameterDirection.RETURN_VALUE:
            continue
        name = sql.Identifier(bound.name)
        if bound.direction is ParameterDirection.OUTPUT:
            # Functions declare OUT parameters as result columns, only CALL takes them.
            if execute_type is ExecuteType.NON_QUERY:
                arguments.append(sql.SQL("{} => NULL").format(name))
            continue
        arguments.append(sql.SQL("{} => {}").format(name, sql.Placeholder(bound.name)))

    template = {
        ExecuteType.READ_ROWS: "SELECT * FROM {}({})",
        ExecuteType.NON_QUERY: "CALL {}({})",
        ExecuteType.SCALAR: "SELECT {}({})",
    }[execute_type]
    return sql.SQL(template).format(procedure, sql.SQL(", ").join(arguments))


class PostgresqlAdapter:
    """Synchronous PostgreSQL adapter using psycopg (v3+)."""

    def parameter_marker(self, name: str) -> str:
        return f"%({name})s"

    def open(self, config: ConnectionConfig) -> Any:
        import psycopg
        import psycopg.rows

        return psycopg.connect(
            _build_conninfo(config), autocommit=True, row_factory=psycopg.rows.dict_row
        )

    def close(self, session: Any) -> None:
        import psycopg

        try:
            session.close()
        except psycopg.Error as e:
            logger.warning("session_close_failed", driver="postgresql", error=str(e))

    def prepare_call(self, session: Any, procedure_name: str) -> Command:
        return Command(session, procedure_name)

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
        values = {
            bound.name: bound.value
            for bound in command.parameters
            if bound.direction.is_input
        }
        cursor = command.session.execute(build_call(command, execute_type), values)

        if execute_type is ExecuteType.READ_ROWS:
            return DbapiRowCursor(cursor)

        if execute_type is ExecuteType.NON_QUERY:
            if cursor.description is not None:
                command.state["outputs"] = cursor.fetchone() or {}
            return int(cursor.rowcount)

        row = cursor.fetchone()
        if row is None:
            return None
        value = next(iter(row.values()))
        command.state["return_value"] = value
        return value

    def parameter_value(self, command: Command, name: str) -> Any:
        bound = command.find(name)
        if bound is None:
            return None
        if bound.direction is ParameterDirection.RETURN_VALUE:
            return command.state.get("return_value")
        outputs = command.state.get("outputs", {})
        return outputs.get(name, bound.value)
