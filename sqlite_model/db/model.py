"""SqliteModel: base class for data models backed by one SQLite file.

Constructing a model schedules the whole setup on the running event loop:

    open -> new database? -> (bookkeeping table + init SQL) -> prepare queries

``is_ready()`` resolves once that finishes, or raises whatever stopped it.
Subclasses declare their schema and queries through ModelOptions and use the
prepared statements in ``self.stmt``.
"""

import asyncio
import logging
import os
from pathlib import Path
from types import TracebackType
from typing import Self

import aiosqlite

from sqlite_model.db.connection import connect
from sqlite_model.db.schema import (
    TABLE_EXISTS_SQL,
    VERSION_KEY,
    internal_table_sql,
    internal_value_sql,
    parse_schema_version,
    strip_sql_comments,
)
from sqlite_model.db.statement import Statement
from sqlite_model.errors import (
    DatabaseCloseError,
    DatabaseClosedError,
    InternalTableError,
    SchemaVersionError,
    SqlExecutionError,
    SqlFileError,
    StatementPrepareError,
)
from sqlite_model.models import ModelOptions
from sqlite_model.utils.aio import run_parallel, run_sequential

logger = logging.getLogger(__name__)


class SqliteModel:
    """Owns a database connection and the statements prepared on it.

    Must be constructed inside a running event loop. Every public method
    waits for readiness first.
    """

    def __init__(self, options: ModelOptions) -> None:
        self.model_options = options
        self.stmt: dict[str, Statement] = {}
        self._db: aiosqlite.Connection | None = None
        self._ready = asyncio.get_running_loop().create_task(self._open_db())
        self._ready.add_done_callback(self._log_ready_outcome)

    @classmethod
    async def open(cls, options: ModelOptions) -> Self:
        """Construct a model and wait until it is ready."""
        model = cls(options)
        await model.is_ready()
        return model

    async def __aenter__(self) -> Self:
        await self.is_ready()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close_db()

    async def is_ready(self) -> None:
        """Wait until the database is open, initialized and every query prepared.

        Safe to await any number of times; always gives the same outcome.
        """
        await asyncio.shield(self._ready)

    async def get_current_schema_version(self) -> int | float:
        """Read the schema version from the bookkeeping table.

        A missing table, a missing row and an unparsable value all raise the
        same SchemaVersionError.
        """
        await self.is_ready()
        sql = internal_value_sql(self.model_options.internal_table)
        try:
            cursor = await self._conn.execute(sql, (VERSION_KEY,))
            row = await cursor.fetchone()
            await cursor.close()
        except (aiosqlite.Error, DatabaseClosedError) as error:
            raise SchemaVersionError("Error while retrieving current schema version") from error

        version = parse_schema_version(row["value"]) if row is not None else None
        if version is None:
            raise SchemaVersionError("Error while retrieving current schema version")
        return version

    async def close_db(self) -> None:
        """Finalize every prepared statement, then close the connection.

        Closing an already closed model does nothing.
        """
        await self.is_ready()
        if self._db is None:
            return
        await run_parallel(self.stmt.values(), Statement.finalize)
        try:
            await self._db.close()
        except aiosqlite.Error as error:
            raise DatabaseCloseError(f"Error closing the database: {error}") from error
        self._db = None

    # ------------------------------------------------------------------
    # Subclass helpers
    # ------------------------------------------------------------------

    async def exec_sql(self, sql: str) -> None:
        """Execute a SQL script (one or more statements)."""
        try:
            await self._conn.executescript(sql)
        except aiosqlite.Error as error:
            raise SqlExecutionError(f"Error while executing sql: {sql} ({error})") from error

    async def get_sql_from_file(self, file: str | os.PathLike[str]) -> str:
        """Read SQL from a file with its ``--`` comments stripped."""
        try:
            sql = await asyncio.to_thread(Path(file).read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise SqlFileError(f"Error while reading sql from {file} ({error})") from error
        return strip_sql_comments(sql)

    async def prepare_stmt(self, sql: str) -> Statement:
        """Compile sql into a Statement bound to this model's connection."""
        return await Statement.prepare(self._conn, sql)

    @property
    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise DatabaseClosedError(f"database {self.model_options.db_path} is not open")
        return self._db

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _open_db(self) -> None:
        options = self.model_options
        self._db = await connect(options.db_path, options.db_mode, verbose=options.verbose)
        try:
            if await self._is_new():
                logger.info("Initializing new database at %s", options.db_path)
                await self._create_internal_table()
                await self._create_model_tables()
            await self._prepare_stmts()
        except BaseException:
            await self._db.close()
            self._db = None
            raise

    async def _is_new(self) -> bool:
        try:
            cursor = await self._conn.execute(TABLE_EXISTS_SQL, (self.model_options.internal_table,))
            row = await cursor.fetchone()
            await cursor.close()
        except aiosqlite.Error as error:
            raise InternalTableError(f"Error while checking for internal table ({error})") from error
        return row is None

    async def _create_internal_table(self) -> None:
        try:
            await self._conn.executescript(internal_table_sql(self.model_options.internal_table))
        except aiosqlite.Error as error:
            raise InternalTableError(f"Error while creating internal table ({error})") from error

    async def _create_model_tables(self) -> None:
        # Sequential: later units may depend on tables created by earlier ones
        await run_sequential(self.model_options.create_db_sql, self._run_init_unit)

    async def _run_init_unit(self, file_or_sql: str) -> None:
        if os.path.isfile(file_or_sql):
            logger.debug("Running init SQL from %s", file_or_sql)
            sql = await self.get_sql_from_file(file_or_sql)
        else:
            logger.debug("Running inline init SQL")
            sql = file_or_sql
        await self.exec_sql(sql)

    async def _prepare_stmts(self) -> None:
        await run_parallel(self.model_options.queries.items(), self._prepare_named)

    async def _prepare_named(self, item: tuple[str, str]) -> None:
        name, sql = item
        try:
            self.stmt[name] = await self.prepare_stmt(sql)
        except StatementPrepareError as error:
            raise StatementPrepareError(
                f"Error preparing query {name}: {sql} ({error.__cause__})",
                sql=sql,
                name=name,
            ) from error.__cause__
        logger.debug("Prepared query %s", name)

    def _log_ready_outcome(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Database %s failed to open: %s", self.model_options.db_path, error)
