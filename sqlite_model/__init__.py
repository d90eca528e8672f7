"""Base class for SQLite-backed data models with awaitable statements."""

from sqlite_model.db.model import SqliteModel
from sqlite_model.db.statement import Statement
from sqlite_model.models import (
    ModelOptions,
    MultipleResult,
    OpenMode,
    RunResult,
    SingleResult,
    StatementResult,
)

__all__ = [
    "ModelOptions",
    "MultipleResult",
    "OpenMode",
    "RunResult",
    "SingleResult",
    "SqliteModel",
    "Statement",
    "StatementResult",
]
