"""Row-to-object mapper.

Materialises target instances from a ``RowCursor`` by assigning each
column to the identically-named member. Supports plain classes,
dataclasses and Pydantic models, as long as they can be constructed
without arguments.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from proc_mapper.core.cursor import RowCursor
from proc_mapper.core.exceptions import MappingError, MemberNotFoundError
from proc_mapper.mapping.members import MemberInfo, assign, describe_member

T = TypeVar("T")


class RowMapper(Generic[T]):
    """Map cursor rows onto ``target_class`` instances.

    A RowMapper lives for one call: member lookups are remembered for the
    columns of that call's result set only.

    Args:
        target_class: The class to populate. Must be constructible
            with no arguments.
    """

    def __init__(self, target_class: type[T]) -> None:
        self._target_class = target_class
        self._members: dict[str, MemberInfo] = {}

    def new_instance(self) -> T:
        try:
            return self._target_class()
        except (TypeError, ValueError) as e:
            raise MappingError(
                f"{self._target_class.__name__} must be constructible without arguments: {e}"
            ) from e

    def _member(self, instance: T, column: str) -> MemberInfo:
        member = self._members.get(column)
        if member is None:
            member = describe_member(self._target_class, instance, column)
            if member is None:
                raise MemberNotFoundError(self._target_class.__name__, column)
            self._members[column] = member
        return member

    def populate(self, instance: T, cursor: RowCursor, *, skip_nulls: bool) -> T:
        """Assign every column of the cursor's current row to ``instance``."""
        for index in range(cursor.field_count):
            value = cursor.field_value(index)
            if skip_nulls and value is None:
                continue
            column = cursor.field_name(index)
            assign(instance, self._member(instance, column), value)
        return instance

    def map_first(self, cursor: RowCursor) -> T:
        """Populate one instance from the first row; later rows are ignored.

        Null columns are assigned (the member becomes None). With no rows
        the default-constructed instance is returned untouched.
        """
        instance = self.new_instance()
        if cursor.next():
            self.populate(instance, cursor, skip_nulls=False)
        return instance

    def map_all(self, cursor: RowCursor) -> list[T]:
        """One instance per row, in result order.

        Null columns are skipped, leaving the member at its constructed
        default.
        """
        results: list[T] = []
        while cursor.next():
            results.append(self.populate(self.new_instance(), cursor, skip_nulls=True))
        return results
