"""Shared pytest fixtures for sqlite_model tests."""

import pytest

from sqlite_model.db.model import SqliteModel
from sqlite_model.errors import SqliteModelError
from tests.fixtures import make_options


@pytest.fixture
def db_path(tmp_path) -> str:
    """Path of a database file that does not exist yet."""
    return str(tmp_path / "tester.db")


@pytest.fixture
async def make_model(db_path):
    """Factory for models on db_path. Every model it built is closed afterwards."""
    models: list[SqliteModel] = []

    def _make(**overrides) -> SqliteModel:
        overrides.setdefault("db_path", db_path)
        model = SqliteModel(make_options(**overrides))
        models.append(model)
        return model

    yield _make

    for model in models:
        try:
            await model.close_db()
        except SqliteModelError:
            pass  # never became ready


@pytest.fixture
async def model(make_model):
    """A ready model on a fresh database."""
    model = make_model()
    await model.is_ready()
    return model
