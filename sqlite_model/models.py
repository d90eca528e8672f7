"""Configuration and result data structures for sqlite_model.

Defined once here, referenced everywhere else. ModelOptions is the immutable
record a model is built from; the result models are the uniform shapes every
Statement operation returns.
"""

import enum
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class OpenMode(enum.IntFlag):
    """Open flags, using SQLite's own SQLITE_OPEN_* values."""

    READONLY = 0x1
    READWRITE = 0x2
    CREATE = 0x4


DEFAULT_OPEN_MODE = OpenMode.READWRITE | OpenMode.CREATE


class ModelOptions(BaseModel):
    """Everything a SqliteModel needs to open and initialize its database."""

    model_config = ConfigDict(frozen=True)

    db_path: str
    db_mode: OpenMode = DEFAULT_OPEN_MODE
    # Inline SQL or paths to .sql files, run in order on a new database only
    create_db_sql: list[str] = Field(default_factory=list)
    # Logical query name -> SQL, prepared into model.stmt
    queries: dict[str, str] = Field(default_factory=dict)
    verbose: bool = False
    internal_table: str = "_model"

    @field_validator("internal_table")
    @classmethod
    def _check_internal_table(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"internal_table must be a plain SQL identifier, got {value!r}")
        return value


# ---------------------------------------------------------------------------
# Statement results
# ---------------------------------------------------------------------------


class RunResult(BaseModel):
    last_id: int | None = None  # rowid of the last successful INSERT
    changes: int = 0


class StatementResult(BaseModel):
    result: RunResult = Field(default_factory=RunResult)


class SingleResult(StatementResult):
    row: dict[str, Any] | None = None


class MultipleResult(StatementResult):
    rows: list[dict[str, Any]] = Field(default_factory=list)
