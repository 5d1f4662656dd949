"""MySQL adapter using mysql-connector-python.

Row-returning calls run through ``cursor.callproc`` and read the first
result set from ``stored_results()``. Non-query calls issue a plain
``CALL`` so the affected-row count comes from the server. Arguments are
positional, so parameters must be bound in the order the procedure
declares them.
"""

from __future__ import annotations

from typing import Any

import structlog

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import ListRowCursor
from proc_mapper.core.enums import ExecuteType, ParameterDirection
from proc_mapper.core.exceptions import ParameterBindingError
from proc_mapper.core.params import BoundParameter, Command, DbParameter

logger = structlog.get_logger(__name__)


class MysqlAdapter:
    """Synchronous MySQL adapter using mysql-connector-python."""

    def parameter_marker(self, name: str) -> str:
        return "%s"

    def open(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            autocommit=True,
            **config.extra,
        )

    def close(self, session: Any) -> None:
        import mysql.connector

        try:
            session.close()
        except mysql.connector.Error as e:
            logger.warning("session_close_failed", driver="mysql", error=str(e))

    def prepare_call(self, session: Any, procedure_name: str) -> Command:
        return Command(session, procedure_name, state={"cursor": session.cursor()})

    def bind_parameter(self, command: Command, parameter: DbParameter) -> BoundParameter:
        if parameter.direction is ParameterDirection.RETURN_VALUE:
            raise ParameterBindingError(
                command.procedure_name,
                parameter.name,
                "MySQL procedures have no return value",
            )
        bound = BoundParameter(
            parameter.name,
            self.parameter_marker(parameter.name),
            parameter.direction,
            parameter.value,
            handle=len(command.parameters),
        )
        command.parameters.append(bound)
        return bound

    def run(self, command: Command, execute_type: ExecuteType) -> Any:
        cursor = command.state["cursor"]
        if execute_type is ExecuteType.NON_QUERY:
            return self._call(command, cursor)

        args = tuple(bound.value for bound in command.parameters)
        command.state["result_args"] = cursor.callproc(command.procedure_name, args)

        first = next(iter(cursor.stored_results()), None)
        rows = ListRowCursor([], []) if first is None else ListRowCursor.from_dbapi(first)
        if execute_type is ExecuteType.READ_ROWS:
            return rows
        return rows.field_value(0) if rows.next() else None

    def _call(self, command: Command, cursor: Any) -> int:
        """Issue a plain CALL so the OK packet's affected-row count reaches the cursor.

        ``callproc`` runs the CALL on an internal cursor and leaves ``rowcount``
        describing its own @_arg SELECT instead. OUT and INOUT arguments go
        through session variables and are read back after the call.
        """
        markers: list[str] = []
        inputs: list[Any] = []
        variables: list[str] = []
        for index, bound in enumerate(command.parameters, start=1):
            if bound.direction is ParameterDirection.INPUT:
                markers.append("%s")
                inputs.append(bound.value)
                continue
            variable = f"@_proc_arg{index}"
            seed = bound.value if bound.direction.is_input else None
            cursor.execute(f"SET {variable} = %s", (seed,))
            markers.append(variable)
            variables.append(variable)

        cursor.execute(f"CALL {command.procedure_name}({', '.join(markers)})", tuple(inputs))
        affected = int(cursor.rowcount)

        result_args = [bound.value for bound in command.parameters]
        if variables:
            cursor.execute(f"SELECT {', '.join(variables)}")
            values = iter(cursor.fetchone() or ())
            for position, bound in enumerate(command.parameters):
                if bound.direction is not ParameterDirection.INPUT:
                    result_args[position] = next(values, None)
        command.state["result_args"] = tuple(result_args)
        return affected

    def parameter_value(self, command: Command, name: str) -> Any:
        bound = command.find(name)
        if bound is None:
            return None
        result_args = command.state.get("result_args")
        if result_args is None or not bound.direction.is_output:
            return bound.value
        return result_args[bound.handle]
