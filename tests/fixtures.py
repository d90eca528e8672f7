"""Shared test helpers: the model configuration most tests build on."""

from typing import Any

from sqlite_model.models import ModelOptions

CREATE_DB_SQL = ["CREATE TABLE IF NOT EXISTS test (value INTEGER NOT NULL);"]

QUERIES = {
    "checkTable": "SELECT name FROM sqlite_master WHERE type='table' AND name = ?",
    "getAll": "SELECT value FROM test ORDER BY rowid",
    "getGt": "SELECT value FROM test WHERE value > ? ORDER BY value",
    "insert": "INSERT INTO test(value) VALUES(?)",
    "delete": "DELETE FROM test WHERE value = ?",
}


def make_options(db_path: str, **overrides: Any) -> ModelOptions:
    """Build ModelOptions for the test table, with any field overridden."""
    fields: dict[str, Any] = {
        "db_path": db_path,
        "create_db_sql": CREATE_DB_SQL,
        "queries": QUERIES,
    }
    fields.update(overrides)
    return ModelOptions(**fields)
