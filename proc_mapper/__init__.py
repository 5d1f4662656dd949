"""ProcMapper - map stored-procedure results onto Python objects."""

from __future__ import annotations

from proc_mapper.core.connection import ConnectionConfig, SessionManager, load_adapter
from proc_mapper.core.cursor import DbapiRowCursor, ListRowCursor, RowCursor
from proc_mapper.core.enums import DatabaseBackend, ExecuteType, ParameterDirection
from proc_mapper.core.exceptions import (
    AdapterError,
    ConfigurationError,
    ConnectionError,  # noqa: A004
    DuplicateProcedureError,
    ExecutionError,
    MappingError,
    MemberNotFoundError,
    ParameterBindingError,
    ProcedureNotFoundError,
    ProcMapperError,
    TypeMismatchError,
)
from proc_mapper.core.mapper import DatabaseMapper
from proc_mapper.core.params import BoundParameter, Command, DbParameter
from proc_mapper.core.registry import ProcedureRegistry
from proc_mapper.mapping.model import RowMapper

__all__ = [
    # Mapper
    "DatabaseMapper",
    # Parameters
    "DbParameter",
    "BoundParameter",
    "Command",
    # Connection
    "ConnectionConfig",
    "SessionManager",
    "load_adapter",
    # Cursors
    "RowCursor",
    "DbapiRowCursor",
    "ListRowCursor",
    # Registry
    "ProcedureRegistry",
    # Mapping
    "RowMapper",
    # Enums
    "DatabaseBackend",
    "ExecuteType",
    "ParameterDirection",
    # Exceptions
    "ProcMapperError",
    "ConfigurationError",
    "ExecutionError",
    "ParameterBindingError",
    "ProcedureNotFoundError",
    "DuplicateProcedureError",
    "MappingError",
    "MemberNotFoundError",
    "TypeMismatchError",
    "AdapterError",
    "ConnectionError",
]
