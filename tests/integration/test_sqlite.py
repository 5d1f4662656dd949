"""Integration test for the SQLite backend.

Covers: procedure registry loading, single/list mapping, non-query and
scalar calls, and error propagation against a real SQLite database file.
"""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path

import pytest

from proc_mapper import (
    ConfigurationError,
    ConnectionError,
    DatabaseMapper,
    DbParameter,
    ExecutionError,
    MemberNotFoundError,
    ParameterBindingError,
    ProcedureNotFoundError,
    TypeMismatchError,
)

# --- Test models ---


@dataclass
class User:
    id: int = 0
    name: str = ""
    email: str | None = "n/a"


@dataclass
class Score:
    id: int = 0
    points: int = 0


# --- Fixtures ---


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "app.db"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, "
        "email TEXT, points REAL NOT NULL DEFAULT 0)"
    )
    conn.executemany(
        "INSERT INTO users (id, name, email, points) VALUES (?, ?, ?, ?)",
        [
            (1, "Alice", "alice@example.com", 10.5),
            (2, "Bob", None, 3.0),
            (3, "Carol", "carol@example.com", 0.0),
        ],
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def procedures(write_sql, tmp_sql_dir: Path) -> Path:
    write_sql("user/list.sql", "SELECT id, name, email FROM users ORDER BY id")
    write_sql("user/get_by_id.sql", "SELECT id, name, email FROM users WHERE id = :id")
    write_sql("user/insert.sql", "INSERT INTO users (id, name, email) VALUES (:id, :name, :email)")
    write_sql("user/rename.sql", "UPDATE users SET name = :name WHERE id = :id")
    write_sql("user/count.sql", "SELECT COUNT(*) FROM users")
    write_sql("user/list_upper.sql", "SELECT id AS ID, name FROM users")
    write_sql("user/points.sql", "SELECT id, points FROM users ORDER BY id")
    write_sql("user/broken.sql", "SELECT * FROM no_such_table")
    return tmp_sql_dir


@pytest.fixture
def mapper(db_path: Path, procedures: Path) -> DatabaseMapper:
    return DatabaseMapper(f"sqlite:///{db_path}?procedures={procedures}")


# --- Tests ---


class TestSqliteMapping:
    def test_execute_list(self, mapper: DatabaseMapper) -> None:
        users = mapper.execute_list(User, "user.list")
        assert [u.name for u in users] == ["Alice", "Bob", "Carol"]
        assert users[0] == User(1, "Alice", "alice@example.com")

    def test_execute_list_skips_nulls(self, mapper: DatabaseMapper) -> None:
        users = mapper.execute_list(User, "user.list")
        assert users[1].email == "n/a"

    def test_execute_single_assigns_nulls(self, mapper: DatabaseMapper) -> None:
        bob = mapper.execute_single(User, "user.get_by_id", [DbParameter.input("id", 2)])
        assert bob.name == "Bob"
        assert bob.email is None

    def test_execute_single_no_rows(self, mapper: DatabaseMapper) -> None:
        nobody = mapper.execute_single(User, "user.get_by_id", [DbParameter.input("id", 99)])
        assert nobody == User()

    def test_execute_list_no_rows(self, mapper: DatabaseMapper) -> None:
        assert mapper.execute_list(User, "user.get_by_id", [DbParameter.input("id", 99)]) == []

    def test_non_query_and_scalar(self, mapper: DatabaseMapper) -> None:
        inserted = mapper.execute_non_query(
            "user.insert",
            [
                DbParameter.input("name", "Dave"),
                DbParameter.input("id", 4),
                DbParameter.input("email", None),
            ],
        )
        assert inserted == 1
        assert mapper.execute_scalar("user.count") == 4

    def test_non_query_reports_zero(self, mapper: DatabaseMapper) -> None:
        affected = mapper.execute_non_query(
            "user.rename", [DbParameter.input("id", 99), DbParameter.input("name", "x")]
        )
        assert affected == 0

    def test_column_case_must_match(self, mapper: DatabaseMapper) -> None:
        with pytest.raises(MemberNotFoundError, match="ID"):
            mapper.execute_list(User, "user.list_upper")

    def test_real_column_into_int_member(self, mapper: DatabaseMapper) -> None:
        with pytest.raises(TypeMismatchError, match="points"):
            mapper.execute_list(Score, "user.points")


class TestSqliteErrors:
    def test_unknown_procedure(self, mapper: DatabaseMapper) -> None:
        with pytest.raises(ProcedureNotFoundError):
            mapper.execute_list(User, "user.missing")

    def test_driver_error_is_wrapped(self, mapper: DatabaseMapper) -> None:
        with pytest.raises(ExecutionError, match="no_such_table") as exc_info:
            mapper.execute_list(User, "user.broken")
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)

    def test_output_parameters_are_rejected(self, mapper: DatabaseMapper) -> None:
        with pytest.raises(ParameterBindingError, match="total"):
            mapper.execute_scalar("user.count", [DbParameter.output("total")])

    def test_unopenable_database(self, tmp_path: Path, procedures: Path) -> None:
        missing = tmp_path / "no" / "such" / "dir" / "app.db"
        mapper = DatabaseMapper(f"sqlite:///{missing}?procedures={procedures}")
        with pytest.raises(ConnectionError):
            mapper.execute_scalar("user.count")

    def test_missing_procedure_directory(self, db_path: Path, tmp_path: Path) -> None:
        mapper = DatabaseMapper(f"sqlite:///{db_path}?procedures={tmp_path / 'absent'}")
        with pytest.raises(ConfigurationError, match="absent"):
            mapper.execute_scalar("user.count")


class TestSqliteIsolation:
    def test_concurrent_mappers(self, db_path: Path, procedures: Path) -> None:
        url = f"sqlite:///{db_path}?procedures={procedures}"
        results: list[list[str]] = []
        errors: list[BaseException] = []

        def worker() -> None:
            mapper = DatabaseMapper(url)
            try:
                for _ in range(10):
                    results.append([u.name for u in mapper.execute_list(User, "user.list")])
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == 40
        assert all(names == ["Alice", "Bob", "Carol"] for names in results)
