"""Oracle adapter using oracledb.

Procedures run through ``callproc`` with keyword parameters; a bound
RETURN_VALUE parameter turns the call into ``callfunc``. OUT and IN OUT
parameters are bound as ``cursor.var`` variables typed after the value
the caller supplied (``str`` when it is None). Rows come from the first
implicit result (``DBMS_SQL.RETURN_RESULT``).
"""

from __future__ import annotations

from typing import Any

import structlog

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.cursor import ListRowCursor
from proc_mapper.core.enums import ExecuteType, ParameterDirection
from proc_mapper.core.params import BoundParameter, Command, DbParameter

logger = structlog.get_logger(__name__)


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle DSN string from config fields (host:port/database)."""
    if config.port is None:
        return f"{config.host}/{config.database}"
    return f"{config.host}:{config.port}/{config.database}"


def _value_type(value: Any) -> type:
    return str if value is None else type(value)


class OracleAdapter:
    """Synchronous Oracle adapter using oracledb."""

    def parameter_marker(self, name: str) -> str:
        return f":{name}"

    def open(self, config: ConnectionConfig) -> Any:
        import oracledb

        connection = oracledb.connect(
            user=config.user, password=config.password, dsn=_build_dsn(config)
        )
        connection.autocommit = True
        return connection

    def close(self, session: Any) -> None:
        import oracledb

        try:
            session.close()
        except oracledb.Error as e:
            logger.warning("session_close_failed", driver="oracle", error=str(e))

    def prepare_call(self, session: Any, procedure_name: str) -> Command:
        return Command(session, procedure_name, state={"cursor": session.cursor()})

    def bind_parameter(self, command: Command, parameter: DbParameter) -> BoundParameter:
        cursor = command.state["cursor"]
        handle: Any = None
        if parameter.direction is ParameterDirection.RETURN_VALUE:
            handle = _value_type(parameter.value)
        elif parameter.direction.is_output:
            handle = cursor.var(_value_type(parameter.value))
            if parameter.direction is ParameterDirection.INPUT_OUTPUT:
                handle.setvalue(0, parameter.value)

        bound = BoundParameter(
            parameter.name,
            self.parameter_marker(parameter.name),
            parameter.direction,
            parameter.value,
            handle=handle,
        )
        command.parameters.append(bound)
        return bound

    def run(self, command: Command, execute_type: ExecuteType) -> Any:
        cursor = command.state["cursor"]
        keyword_parameters: dict[str, Any] = {}
        return_parameter: BoundParameter | None = None
        for bound in command.parameters:
            if bound.direction is ParameterDirection.RETURN_VALUE:
                return_parameter = bound
            elif bound.direction is ParameterDirection.INPUT:
                keyword_parameters[bound.name] = bound.value
            else:
                keyword_parameters[bound.name] = bound.handle

        if return_parameter is not None:
            command.state["return_value"] = cursor.callfunc(
                command.procedure_name,
                return_parameter.handle,
                keyword_parameters=keyword_parameters,
            )
        else:
            cursor.callproc(command.procedure_name, keyword_parameters=keyword_parameters)

        if execute_type is ExecuteType.NON_QUERY:
            return int(cursor.rowcount)
        if execute_type is ExecuteType.SCALAR and return_parameter is not None:
            return command.state["return_value"]

        implicit = cursor.getimplicitresults()
        rows = ListRowCursor.from_dbapi(implicit[0]) if implicit else ListRowCursor([], [])
        if execute_type is ExecuteType.READ_ROWS:
            return rows
        return rows.field_value(0) if rows.next() else None

    def parameter_value(self, command: Command, name: str) -> Any:
        bound = command.find(name)
        if bound is None:
            return None
        if bound.direction is ParameterDirection.RETURN_VALUE:
            return command.state.get("return_value")
        if bound.direction.is_output:
            return bound.handle.getvalue()
        return bound.value
