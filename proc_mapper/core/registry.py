"""Procedure registry for backends without stored procedures.

SQLite resolves procedure names against a directory of ``.sql`` files.
The file's path below the root, dots for separators, is the name it is
called by:

    procedures/user/get_by_id.sql        -> "user.get_by_id"
    procedures/billing/invoice/list.sql  -> "billing.invoice.list"
"""

from __future__ import annotations

from pathlib import Path

import structlog

from proc_mapper.core.exceptions import (
    ConfigurationError,
    DuplicateProcedureError,
    ProcedureNotFoundError,
)

logger = structlog.get_logger(__name__)


def procedure_name_for(root_dir: Path, sql_file: Path) -> str:
    """Dotted procedure name of ``sql_file`` relative to ``root_dir``."""
    *package, filename = sql_file.relative_to(root_dir).parts
    return ".".join([*package, filename.removesuffix(".sql")])


class ProcedureRegistry:
    """Procedure bodies read once from a directory tree.

    Args:
        root_dir: Directory holding the ``.sql`` files.

    Raises:
        ConfigurationError: If ``root_dir`` is not an existing directory.
        DuplicateProcedureError: If two files resolve to the same name.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self._root_dir = Path(root_dir)
        if not self._root_dir.is_dir():
            raise ConfigurationError(
                f"Procedure directory '{self._root_dir}' does not exist or is not a directory"
            )
        self._procedures: dict[str, tuple[str, Path]] = {}
        for sql_file in sorted(self._root_dir.rglob("*.sql")):
            self._add(sql_file)
        logger.debug("procedures_loaded", root=str(self._root_dir), count=len(self._procedures))

    def _add(self, sql_file: Path) -> None:
        name = procedure_name_for(self._root_dir, sql_file)
        existing = self._procedures.get(name)
        if existing is not None:
            raise DuplicateProcedureError(name, str(existing[1]), str(sql_file))
        self._procedures[name] = (sql_file.read_text(encoding="utf-8").strip(), sql_file)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def get(self, procedure_name: str) -> str:
        """SQL body of ``procedure_name``.

        Raises:
            ProcedureNotFoundError: If no file defines it.
        """
        if procedure_name not in self._procedures:
            raise ProcedureNotFoundError(procedure_name)
        return self._procedures[procedure_name][0]

    def path(self, procedure_name: str) -> Path:
        if procedure_name not in self._procedures:
            raise ProcedureNotFoundError(procedure_name)
        return self._procedures[procedure_name][1]

    def has(self, procedure_name: str) -> bool:
        return procedure_name in self._procedures

    __contains__ = has

    @property
    def procedure_names(self) -> list[str]:
        return sorted(self._procedures)

    def __len__(self) -> int:
        return len(self._procedures)
