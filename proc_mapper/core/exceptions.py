"""ProcMapper exception hierarchy.

All exceptions are ProcMapper-specific. Raw driver exceptions are never
exposed to callers; they are chained as ``__cause__``.
"""

from __future__ import annotations


class ProcMapperError(Exception):
    """Base exception for all ProcMapper errors."""


class ConfigurationError(ProcMapperError):
    """Raised for an invalid connection string or configuration."""


# --- Execution ---


class ExecutionError(ProcMapperError):
    """Raised when the executor rejects a procedure call."""

    def __init__(self, procedure_name: str, detail: str) -> None:
        self.procedure_name = procedure_name
        super().__init__(f"Execution of '{procedure_name}' failed: {detail}")


class ParameterBindingError(ExecutionError):
    """Raised on parameter binding failures."""

    def __init__(self, procedure_name: str, parameter_name: str, detail: str) -> None:
        self.parameter_name = parameter_name
        super().__init__(procedure_name, f"cannot bind parameter '{parameter_name}': {detail}")


class ProcedureNotFoundError(ExecutionError):
    """Raised when a procedure cannot be found in the registry."""

    def __init__(self, procedure_name: str) -> None:
        super().__init__(procedure_name, "procedure not found")


class DuplicateProcedureError(ExecutionError):
    """Raised when two SQL files resolve to the same procedure name."""

    def __init__(self, procedure_name: str, path_a: str, path_b: str) -> None:
        super().__init__(procedure_name, f"defined twice: {path_a} and {path_b}")


# --- Mapping ---


class MappingError(ProcMapperError):
    """Base for row-to-object mapping errors."""


class MemberNotFoundError(MappingError):
    """Raised when a result column has no writable member on the target."""

    def __init__(self, target_class: str, column: str) -> None:
        self.target_class = target_class
        self.column = column
        super().__init__(f"Cannot map column '{column}': {target_class} has no writable member '{column}'")


class TypeMismatchError(MappingError):
    """Raised when a column value is incompatible with the member's declared type."""

    def __init__(self, target_class: str, member: str, expected: object, value: object) -> None:
        self.target_class = target_class
        self.member = member
        self.expected = expected
        self.value = value
        super().__init__(
            f"Cannot assign {type(value).__name__} value to "
            f"{target_class}.{member} (declared {_type_name(expected)})"
        )


def _type_name(tp: object) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


# --- Adapter ---


class AdapterError(ProcMapperError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised when a session cannot be opened."""
