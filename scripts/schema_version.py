"""
Print the schema version recorded in a model database.

The database is opened read-only, so running this never creates or modifies
a file. The path defaults to SQLITE_MODEL_DB, read from the environment or a
.env file in the project root.

Usage:
    python scripts/schema_version.py [DB_PATH] [--table NAME]
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from sqlite_model.db.model import SqliteModel
from sqlite_model.errors import SqliteModelError
from sqlite_model.models import ModelOptions, OpenMode


async def read_version(db_path: str, internal_table: str) -> int | float:
    options = ModelOptions(db_path=db_path, db_mode=OpenMode.READONLY, internal_table=internal_table)
    async with await SqliteModel.open(options) as model:
        return await model.get_current_schema_version()


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")

    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("db_path", nargs="?", default=os.environ.get("SQLITE_MODEL_DB"))
    parser.add_argument("--table", default="_model", help="name of the bookkeeping table")
    args = parser.parse_args(argv)

    if not args.db_path:
        print("No database given and SQLITE_MODEL_DB is not set.", file=sys.stderr)
        return 1

    try:
        version = asyncio.run(read_version(args.db_path, args.table))
    except (SqliteModelError, ValueError) as error:
        print(f"{args.db_path}: {error}", file=sys.stderr)
        return 1

    print(version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
