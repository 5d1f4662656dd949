"""Mapper protocol.

The DatabaseMapper calls map_first for single-object calls and map_all
for list calls.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from proc_mapper.core.cursor import RowCursor

T = TypeVar("T")


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_first(self, cursor: RowCursor) -> T:
        """Map the first row of the cursor to a target object."""
        ...

    def map_all(self, cursor: RowCursor) -> list[T]:
        """Map every row of the cursor to a list of target objects."""
        ...
