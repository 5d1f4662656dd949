"""Stored-procedure execution facade.

The DatabaseMapper opens a fresh session per call, binds parameters,
runs the procedure through the adapter and materialises the result onto
caller-supplied types.

Usage::

    mapper = DatabaseMapper("mysql://app:secret@db/blog")
    categories = mapper.execute_list(
        Category, "GetCategories", [DbParameter.input("postID", 123)]
    )
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import structlog

from proc_mapper.core.connection import ConnectionConfig, SessionManager, load_adapter
from proc_mapper.core.enums import ExecuteType
from proc_mapper.core.exceptions import ExecutionError, ParameterBindingError, ProcMapperError
from proc_mapper.core.params import Command, DbParameter, collect_output_parameters
from proc_mapper.mapping.model import RowMapper
from proc_mapper.mapping.protocol import Mapper

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class DatabaseMapper:
    """Maps stored-procedure results onto objects.

    Column names of the result and member names of the target type have
    to be identical.

    Args:
        connection: Connection string (``driver://user:pw@host:port/db``)
            or a ConnectionConfig.
        adapter: Adapter to run calls on; defaults to the one registered
            for the config's driver.

    Attributes:
        output_parameters: OUTPUT parameters of the most recent call that
            bound any parameters, with their post-execution values.
    """

    def __init__(
        self,
        connection: str | ConnectionConfig,
        *,
        adapter: Any | None = None,
    ) -> None:
        if isinstance(connection, ConnectionConfig):
            config = connection
        else:
            config = ConnectionConfig.from_url(connection)
        if adapter is None:
            adapter = load_adapter(config.driver)
        self._session_manager = SessionManager(config, adapter)
        self.output_parameters: list[DbParameter] = []

    @property
    def config(self) -> ConnectionConfig:
        return self._session_manager.config

    def execute_single(
        self,
        target_class: type[T],
        procedure_name: str,
        parameters: Sequence[DbParameter] | None = None,
    ) -> T:
        """Map the first row of the procedure's result onto one instance.

        Every column is assigned, nulls included. Remaining rows are
        ignored; with no rows a default-constructed instance is returned.
        """
        row_mapper: Mapper[T] = RowMapper(target_class)
        return self._execute(
            procedure_name, ExecuteType.READ_ROWS, parameters, consume=row_mapper.map_first
        )

    def execute_list(
        self,
        target_class: type[T],
        procedure_name: str,
        parameters: Sequence[DbParameter] | None = None,
    ) -> list[T]:
        """Map every row of the procedure's result, in order.

        Null columns are skipped and keep the constructed default.
        """
        row_mapper: Mapper[T] = RowMapper(target_class)
        results = self._execute(
            procedure_name, ExecuteType.READ_ROWS, parameters, consume=row_mapper.map_all
        )
        logger.debug("rows_mapped", procedure=procedure_name, rows=len(results))
        return results

    def execute_non_query(
        self,
        procedure_name: str,
        parameters: Sequence[DbParameter] | None = None,
    ) -> int:
        """Run the procedure and return the affected-row count."""
        return int(self._execute(procedure_name, ExecuteType.NON_QUERY, parameters))

    def execute_scalar(
        self,
        procedure_name: str,
        parameters: Sequence[DbParameter] | None = None,
    ) -> Any:
        """Run the procedure and return the first column of the first row."""
        return self._execute(procedure_name, ExecuteType.SCALAR, parameters)

    def _prepare(
        self,
        session: Any,
        procedure_name: str,
        parameters: Sequence[DbParameter] | None,
    ) -> Command:
        adapter = self._session_manager.adapter
        try:
            command = adapter.prepare_call(session, procedure_name)
        except ProcMapperError:
            raise
        except Exception as e:
            raise ExecutionError(procedure_name, str(e)) from e

        for parameter in parameters or ():
            try:
                adapter.bind_parameter(command, parameter)
            except ProcMapperError:
                raise
            except Exception as e:
                raise ParameterBindingError(procedure_name, parameter.name, str(e)) from e
        return command

    def _execute(
        self,
        procedure_name: str,
        execute_type: ExecuteType,
        parameters: Sequence[DbParameter] | None,
        consume: Callable[[Any], Any] | None = None,
    ) -> Any:
        adapter = self._session_manager.adapter
        with self._session_manager.session() as session:
            command = self._prepare(session, procedure_name, parameters)
            logger.debug(
                "procedure_executing",
                procedure=procedure_name,
                execute_type=execute_type.value,
                parameters=[bound.name for bound in command.parameters],
            )
            try:
                result = adapter.run(command, execute_type)
            except ProcMapperError:
                raise
            except Exception as e:
                raise ExecutionError(procedure_name, str(e)) from e

            try:
                if consume is not None:
                    cursor = result
                    try:
                        result = consume(cursor)
                    finally:
                        cursor.close()
                outputs = collect_output_parameters(command, adapter)
            except ProcMapperError:
                raise
            except Exception as e:
                raise ExecutionError(procedure_name, str(e)) from e

            if outputs is not None:
                self.output_parameters = outputs
        return result
