"""Key/value store model: a minimal SqliteModel subclass.

Values are stored JSON-encoded, so anything json.dumps accepts round-trips.
"""

import json
from typing import Any

import aiosqlite

from sqlite_model.db.model import SqliteModel
from sqlite_model.models import ModelOptions

CREATE_SQL = """
CREATE TABLE IF NOT EXISTS example (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL
);
"""

QUERIES = {
    "set": "INSERT INTO example VALUES (?, ?)",
    "get": "SELECT value FROM example WHERE key = ?",
    "update": "UPDATE example SET value = ? WHERE key = ?",
}


class KeyValueModel(SqliteModel):
    def __init__(self, db_path: str) -> None:
        super().__init__(ModelOptions(db_path=db_path, create_db_sql=[CREATE_SQL], queries=QUERIES))

    async def set(self, key: str, data: Any) -> None:
        """Store data under key, replacing any previous value."""
        await self.is_ready()
        try:
            encoded = json.dumps(data)
        except (TypeError, ValueError) as error:
            raise ValueError(f"Cannot serialize value for {key!r}") from error

        try:
            await self.stmt["set"].run(key, encoded)
        except aiosqlite.IntegrityError:
            # Key already present
            await self.stmt["update"].run(encoded, key)

    async def get(self, key: str) -> Any:
        """Return the value stored under key, or None."""
        await self.is_ready()
        result = await self.stmt["get"].get(key)
        if result.row is None:
            return None
        return json.loads(result.row["value"])
