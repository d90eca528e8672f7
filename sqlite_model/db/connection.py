"""Open aiosqlite connections from a path and SQLite open-mode flags."""

import logging
import sqlite3
from pathlib import Path

import aiosqlite

from sqlite_model.errors import DatabaseOpenError
from sqlite_model.models import DEFAULT_OPEN_MODE, OpenMode

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def uri_mode(mode: OpenMode) -> str:
    """Translate open flags into the ``mode`` query parameter of a SQLite URI.

    Raises ValueError for combinations SQLite rejects: read-only together
    with read-write or create, or create without read-write.
    """
    if mode & OpenMode.READONLY:
        if mode & (OpenMode.READWRITE | OpenMode.CREATE):
            raise ValueError("OPEN_READONLY cannot be combined with OPEN_READWRITE or OPEN_CREATE")
        return "ro"
    if not mode & OpenMode.READWRITE:
        raise ValueError("one of OPEN_READONLY or OPEN_READWRITE is required")
    return "rwc" if mode & OpenMode.CREATE else "rw"


def build_uri(path: str, mode: OpenMode) -> str:
    return f"{Path(path).resolve().as_uri()}?mode={uri_mode(mode)}"


def _trace_statement(statement: str) -> None:
    logger.debug("sqlite: %s", statement)


def enable_verbose() -> None:
    """Report exceptions raised inside sqlite3 callbacks.

    This is process-wide: it affects every sqlite3 connection, not only the
    ones opened here.
    """
    sqlite3.enable_callback_tracebacks(True)


async def connect(
    path: str,
    mode: OpenMode = DEFAULT_OPEN_MODE,
    *,
    verbose: bool = False,
) -> aiosqlite.Connection:
    """Open (or create, per mode) the database with foreign keys and a busy timeout.

    The containing directory is created first. Connections run in autocommit
    mode so other connections see each write once its statement completes.
    """
    try:
        if path == MEMORY_PATH:
            if uri_mode(mode) == "ro":
                raise ValueError("an in-memory database cannot be opened read-only")
            conn = await aiosqlite.connect(MEMORY_PATH, isolation_level=None)
        else:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(build_uri(path, mode), uri=True, isolation_level=None)
    except (aiosqlite.Error, OSError, ValueError) as error:
        raise DatabaseOpenError(f"sqlite: error opening the database: {error}") from error

    conn.row_factory = aiosqlite.Row
    try:
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute("PRAGMA busy_timeout=5000")
        if verbose:
            enable_verbose()
            await conn.set_trace_callback(_trace_statement)
    except aiosqlite.Error as error:
        await conn.close()
        raise DatabaseOpenError(f"sqlite: error opening the database: {error}") from error
    return conn
