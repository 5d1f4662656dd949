"""Procedure parameters and the per-call command they are bound to.

``DbParameter`` is what callers build. Adapters turn each one into a
``BoundParameter`` carrying the driver-specific marker, and keep them on
the ``Command`` for the lifetime of a single call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from proc_mapper.core.enums import ParameterDirection


@dataclass
class DbParameter:
    """A named value passed to a stored procedure.

    ``name`` carries no marker prefix; adapters add their own.
    """

    name: str
    direction: ParameterDirection = ParameterDirection.INPUT
    value: Any = None

    @classmethod
    def input(cls, name: str, value: Any) -> DbParameter:
        return cls(name, ParameterDirection.INPUT, value)

    @classmethod
    def output(cls, name: str, value: Any = None) -> DbParameter:
        return cls(name, ParameterDirection.OUTPUT, value)


@dataclass
class BoundParameter:
    """A parameter as bound to a command by an adapter."""

    name: str
    marker: str
    direction: ParameterDirection
    value: Any = None
    # Adapter-owned handle, e.g. an oracledb bind variable.
    handle: Any = None


@dataclass
class Command:
    """One prepared procedure call.

    Holds the session it runs on and every parameter bound to it. Adapters
    may stash driver state (cursor, result args, generated SQL) in
    ``state``.
    """

    session: Any
    procedure_name: str
    parameters: list[BoundParameter] = field(default_factory=list)
    state: dict[str, Any] = field(default_factory=dict)

    def find(self, name: str) -> BoundParameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None


def collect_output_parameters(command: Command, adapter: Any) -> list[DbParameter] | None:
    """Copy post-execution values of OUTPUT parameters into a fresh list.

    Returns None when nothing was bound to the command, so the caller can
    leave its previous list untouched.
    """
    if not command.parameters:
        return None
    return [
        DbParameter(
            bound.name,
            ParameterDirection.OUTPUT,
            adapter.parameter_value(command, bound.name),
        )
        for bound in command.parameters
        if bound.direction is ParameterDirection.OUTPUT
    ]
