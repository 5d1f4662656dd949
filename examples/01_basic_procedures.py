"""
Example 01: Basic Procedure Calls

This example maps SQLite "procedures" (SQL files) onto dataclasses with
DatabaseMapper.
"""

from proc_mapper import DatabaseMapper, DbParameter
from dataclasses import dataclass
import tempfile
import sqlite3
from pathlib import Path


@dataclass
class Category:
    """Target type: every field needs a default."""
    id: int = 0
    name: str = ""
    description: str | None = "(no description)"


def main():
    # Create a temporary database
    workdir = Path(tempfile.mkdtemp())
    db_path = workdir / "blog.db"

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE categories (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT
        )
    """)
    conn.execute("INSERT INTO categories (name, description) VALUES ('News', 'Daily news')")
    conn.execute("INSERT INTO categories (name) VALUES ('Sport')")
    conn.commit()
    conn.close()

    # One SQL file per procedure
    proc_dir = workdir / "procedures"
    (proc_dir / "category").mkdir(parents=True)
    (proc_dir / "category" / "list.sql").write_text("SELECT id, name, description FROM categories")
    (proc_dir / "category" / "get.sql").write_text(
        "SELECT id, name, description FROM categories WHERE id = :id"
    )
    (proc_dir / "category" / "add.sql").write_text(
        "INSERT INTO categories (name) VALUES (:name)"
    )
    (proc_dir / "category" / "count.sql").write_text("SELECT COUNT(*) FROM categories")

    mapper = DatabaseMapper(f"sqlite:///{db_path}?procedures={proc_dir}")

    print("=== Basic Procedure Calls ===\n")

    # execute_list: nulls are skipped, so Sport keeps the default description
    for category in mapper.execute_list(Category, "category.list"):
        print(f"  - {category.name}: {category.description}")
    print()

    # execute_single: nulls are assigned
    sport = mapper.execute_single(Category, "category.get", [DbParameter.input("id", 2)])
    print(f"execute_single result: {sport}\n")

    # execute_non_query: affected-row count
    added = mapper.execute_non_query("category.add", [DbParameter.input("name", "Tech")])
    print(f"execute_non_query added {added} row(s)")

    # execute_scalar: first column of the first row
    print(f"execute_scalar result: {mapper.execute_scalar('category.count')} categories")


if __name__ == "__main__":
    main()
