"""Forward-only row cursors.

The mapper reads result sets through the small ``RowCursor`` protocol.
``DbapiRowCursor`` wraps any DB-API cursor; ``ListRowCursor`` serves rows
a driver has already fetched (MySQL ``stored_results``, Oracle implicit
results).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RowCursor(Protocol):
    """Forward-only view over a result set."""

    @property
    def field_count(self) -> int: ...

    def next(self) -> bool:
        """Advance to the next row. Returns False when exhausted."""
        ...

    def field_name(self, index: int) -> str: ...

    def field_value(self, index: int) -> Any: ...

    def close(self) -> None: ...


def _column_names(description: Any) -> list[str]:
    if description is None:
        return []
    return [desc[0] for desc in description]


class DbapiRowCursor:
    """RowCursor over a DB-API 2.0 cursor.

    Handles both tuple-like rows and dict-like rows (psycopg ``dict_row``,
    MySQL dictionary cursors).
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._columns = _column_names(cursor.description)
        self._row: Any = None

    @property
    def field_count(self) -> int:
        return len(self._columns)

    def next(self) -> bool:
        if not self._columns:
            return False
        self._row = self._cursor.fetchone()
        return self._row is not None

    def field_name(self, index: int) -> str:
        return self._columns[index]

    def field_value(self, index: int) -> Any:
        if isinstance(self._row, dict):
            return self._row[self._columns[index]]
        return self._row[index]

    def close(self) -> None:
        self._cursor.close()


class ListRowCursor:
    """RowCursor over rows that are already in memory."""

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        self._columns = list(columns)
        self._rows = rows
        self._position = -1

    @classmethod
    def from_dbapi(cls, cursor: Any) -> ListRowCursor:
        """Drain a DB-API cursor into memory."""
        columns = _column_names(cursor.description)
        rows = cursor.fetchall() if columns else []
        return cls(columns, rows)

    @property
    def field_count(self) -> int:
        return len(self._columns)

    def next(self) -> bool:
        if self._position + 1 >= len(self._rows):
            self._position = len(self._rows)
            return False
        self._position += 1
        return True

    def field_name(self, index: int) -> str:
        return self._columns[index]

    def field_value(self, index: int) -> Any:
        row = self._rows[self._position]
        if isinstance(row, dict):
            return row[self._columns[index]]
        return row[index]

    def close(self) -> None:
        self._rows = []
