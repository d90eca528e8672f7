"""Awaitable prepared-statement wrapper over an aiosqlite connection."""

import inspect
import re
from collections.abc import Awaitable, Callable
from typing import Any

import aiosqlite

from sqlite_model.errors import StatementFinalizedError, StatementPrepareError
from sqlite_model.models import MultipleResult, RunResult, SingleResult, StatementResult

Params = tuple[Any, ...] | dict[str, Any]
RowCallback = Callable[[dict[str, Any]], Awaitable[None] | None]

# Leading whitespace and comments, then the EXPLAIN keyword
_EXPLAIN_RE = re.compile(r"(?:\s+|--[^\n]*|/\*.*?\*/)*EXPLAIN\b", re.IGNORECASE | re.DOTALL)


def normalize_params(params: tuple[Any, ...]) -> Params:
    """Accept ``f(1, 2)``, ``f([1, 2])``, ``f((1, 2))`` and ``f({"a": 1})`` alike."""
    if len(params) == 1 and isinstance(params[0], (list, tuple, dict)):
        only = params[0]
        return dict(only) if isinstance(only, dict) else tuple(only)
    return tuple(params)


def _is_explain(sql: str) -> bool:
    """True if sql is itself an EXPLAIN, which compiles without running anything."""
    return _EXPLAIN_RE.match(sql) is not None


def _is_binding_count_error(error: aiosqlite.ProgrammingError) -> bool:
    return "Incorrect number of bindings" in str(error)


class Statement:
    """One query, prepared once and executed any number of times.

    Passing bind parameters to run/get/all/each replaces the previous
    bindings and resets the row cursor; calling them without parameters
    reuses whatever was bound last. Execution errors are raised as the
    native aiosqlite exceptions.
    """

    def __init__(self, conn: aiosqlite.Connection, sql: str) -> None:
        self._conn = conn
        self.sql = sql
        self._params: Params = ()
        self._cursor: aiosqlite.Cursor | None = None
        self._last = RunResult()
        self._finalized = False

    @classmethod
    async def prepare(cls, conn: aiosqlite.Connection, sql: str) -> "Statement":
        """Compile sql against conn without executing it.

        Raises StatementPrepareError for syntax errors, unknown tables or
        columns, and scripts holding more than one statement.
        """
        try:
            cursor = await conn.execute(sql if _is_explain(sql) else f"EXPLAIN {sql}")
            await cursor.close()
        except aiosqlite.ProgrammingError as error:
            # Compiled fine but has placeholders: bound on each execution
            if not _is_binding_count_error(error):
                raise StatementPrepareError(f"Error preparing query {sql} ({error})", sql=sql) from error
        except aiosqlite.Error as error:
            raise StatementPrepareError(f"Error preparing query {sql} ({error})", sql=sql) from error
        return cls(conn, sql)

    @property
    def finalized(self) -> bool:
        return self._finalized

    async def bind(self, *params: Any) -> StatementResult:
        """Replace all bound parameters and reset the row cursor."""
        self._check_open()
        self._params = normalize_params(params)
        await self._release_cursor()
        return StatementResult(result=self._last)

    async def reset(self) -> StatementResult:
        """Reset the row cursor, keeping the bound parameters. Never fails."""
        await self._release_cursor()
        return StatementResult(result=self._last)

    async def finalize(self) -> StatementResult:
        """Release the statement. Any later use raises StatementFinalizedError."""
        await self._release_cursor()
        self._finalized = True
        return StatementResult(result=self._last)

    async def run(self, *params: Any) -> StatementResult:
        """Execute without reading rows. Returns changes and the last inserted rowid."""
        cursor = await self._start(params)
        try:
            return StatementResult(result=self._record(cursor))
        finally:
            await cursor.close()

    async def get(self, *params: Any) -> SingleResult:
        """Return the next row of the current execution, or row=None once exhausted.

        The first call executes the query. Further calls without parameters
        walk the same cursor; a partially read cursor keeps SQLite's read
        lock until the statement is reset, finalized or read to the end.
        """
        self._check_open()
        if params:
            self._params = normalize_params(params)
            await self._release_cursor()
        if self._cursor is None:
            self._cursor = await self._conn.execute(self.sql, self._params)
            self._record(self._cursor)
        row = await self._cursor.fetchone()
        if row is None:
            await self._release_cursor()
            return SingleResult(result=self._last)
        return SingleResult(result=self._last, row=dict(row))

    async def all(self, *params: Any) -> MultipleResult:
        """Return every row, in order. Empty list for an empty result."""
        cursor = await self._start(params)
        try:
            rows = await cursor.fetchall()
            return MultipleResult(result=self._record(cursor), rows=[dict(row) for row in rows])
        finally:
            await cursor.close()

    async def each(self, callback: RowCallback, *params: Any) -> StatementResult:
        """Call callback once per row, in result order, then return.

        The callback may be a coroutine function; each call is awaited before
        the next row is read.
        """
        cursor = await self._start(params)
        try:
            async for row in cursor:
                outcome = callback(dict(row))
                if inspect.isawaitable(outcome):
                    await outcome
            return StatementResult(result=self._record(cursor))
        finally:
            await cursor.close()

    async def _start(self, params: tuple[Any, ...]) -> aiosqlite.Cursor:
        self._check_open()
        if params:
            self._params = normalize_params(params)
        await self._release_cursor()
        return await self._conn.execute(self.sql, self._params)

    def _record(self, cursor: aiosqlite.Cursor) -> RunResult:
        self._last = RunResult(last_id=cursor.lastrowid, changes=max(cursor.rowcount, 0))
        return self._last

    async def _release_cursor(self) -> None:
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            await cursor.close()

    def _check_open(self) -> None:
        if self._finalized:
            raise StatementFinalizedError(f"Statement is finalized: {self.sql}")

    def __repr__(self) -> str:
        return f"Statement({self.sql!r})"
