"""SQL for the internal bookkeeping table and helpers for init SQL text.

The bookkeeping table holds a single ("version", "1") row. It is created the
first time a database is opened by a model and never touched afterwards.
"""

import math
import re

VERSION_KEY = "version"
INITIAL_SCHEMA_VERSION = 1

TABLE_EXISTS_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name = ?"

_LINE_COMMENT_RE = re.compile(r"--[^\n]*")


def internal_table_sql(table: str) -> str:
    """DDL creating the bookkeeping table and seeding the version row."""
    return f"""
CREATE TABLE IF NOT EXISTS "{table}" (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL
);

INSERT INTO "{table}" (key, value) VALUES ('{VERSION_KEY}', '{INITIAL_SCHEMA_VERSION}');
"""


def internal_value_sql(table: str) -> str:
    return f'SELECT value FROM "{table}" WHERE key = ?'


def strip_sql_comments(sql: str) -> str:
    """Remove ``--`` line comments, keeping line breaks.

    Some drivers choke on comments when several statements are batched in
    one script. Comment markers inside string literals are not special-cased.
    """
    return _LINE_COMMENT_RE.sub("", sql)


def parse_schema_version(value: object) -> int | float | None:
    """Parse a stored version value. Returns None unless it is a finite nonzero number."""
    try:
        number = float(str(value))
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return int(number) if number.is_integer() else number
