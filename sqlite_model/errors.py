"""Exceptions raised by the model lifecycle.

Each wrapper error keeps the native aiosqlite/sqlite3 error as ``__cause__``.
Errors raised while a statement executes are never wrapped.
"""


class SqliteModelError(Exception):
    """Base class for every error raised by sqlite_model itself."""


class DatabaseOpenError(SqliteModelError):
    """The database file could not be opened with the requested mode."""


class InternalTableError(SqliteModelError):
    """The bookkeeping table could not be checked or created."""


class SqlExecutionError(SqliteModelError):
    """A SQL script failed while executing."""


class SqlFileError(SqliteModelError):
    """A SQL file could not be read."""


class StatementPrepareError(SqliteModelError):
    """A query could not be compiled into a statement."""

    def __init__(self, message: str, *, sql: str, name: str | None = None) -> None:
        super().__init__(message)
        self.sql = sql
        self.name = name


class StatementFinalizedError(SqliteModelError):
    pass


class SchemaVersionError(SqliteModelError):
    """The schema version marker is missing or unreadable."""


class DatabaseCloseError(SqliteModelError):
    pass


class DatabaseClosedError(SqliteModelError):
    """The model's connection was used after close_db() or a failed open."""
