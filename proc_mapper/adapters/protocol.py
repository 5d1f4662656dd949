"""Database adapter protocol.

Every adapter module MUST implement this protocol. An adapter is the
relational executor the mapper runs on: it owns sessions, prepares and
binds procedure calls, runs them and reports output-parameter values.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from proc_mapper.core.connection import ConnectionConfig
from proc_mapper.core.enums import ExecuteType
from proc_mapper.core.params import BoundParameter, Command, DbParameter


@runtime_checkable
class ProcedureAdapter(Protocol):
    """Synchronous stored-procedure executor protocol."""

    def parameter_marker(self, name: str) -> str:
        """Driver-specific placeholder for a named parameter."""
        ...

    def open(self, config: ConnectionConfig) -> Any:
        """Open a new session. Driver errors propagate."""
        ...

    def close(self, session: Any) -> None:
        """Close a session. Idempotent, never raises."""
        ...

    def prepare_call(self, session: Any, procedure_name: str) -> Command:
        """Prepare a call of ``procedure_name`` on ``session``."""
        ...

    def bind_parameter(self, command: Command, parameter: DbParameter) -> BoundParameter:
        """Bind one parameter to the command."""
        ...

    def run(self, command: Command, execute_type: ExecuteType) -> Any:
        """Run the call.

        Returns a ``RowCursor`` for READ_ROWS, the affected-row count for
        NON_QUERY and the first column of the first row for SCALAR.
        """
        ...

    def parameter_value(self, command: Command, name: str) -> Any:
        """Post-execution value of a bound parameter."""
        ...
