"""Backend, execution-mode and parameter-direction enumerations."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class ExecuteType(Enum):
    """Which executor operation a procedure call runs."""

    READ_ROWS = "read_rows"
    NON_QUERY = "non_query"
    SCALAR = "scalar"


class ParameterDirection(Enum):
    """Direction of a stored-procedure parameter."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"

    @property
    def is_input(self) -> bool:
        return self in (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT)

    @property
    def is_output(self) -> bool:
        return self is not ParameterDirection.INPUT
