"""Tests for KeyValueModel, the example SqliteModel subclass."""

import pytest

from sqlite_model.kv_store import KeyValueModel


@pytest.fixture
async def kv(tmp_path):
    model = KeyValueModel(str(tmp_path / "example.db"))
    await model.is_ready()
    yield model
    await model.close_db()


class TestKeyValueModel:
    async def test_ready_and_versioned(self, kv):
        assert await kv.get_current_schema_version() == 1

    @pytest.mark.parametrize(
        "value",
        [123, 123.456, "(ಠ_ಠ)", ["a", 1], {"a": 1, "b": "str"}, True],
    )
    async def test_set_then_get(self, kv, value):
        assert await kv.get("key") is None
        await kv.set("key", value)
        assert await kv.get("key") == value

    async def test_set_existing_key_updates(self, kv):
        await kv.set("key", "value1")
        await kv.set("key", "value2")
        assert await kv.get("key") == "value2"

    async def test_keys_are_independent(self, kv):
        await kv.set("a", 1)
        await kv.set("b", 2)
        assert await kv.get("a") == 1
        assert await kv.get("b") == 2

    async def test_unserializable_value_raises(self, kv):
        with pytest.raises(ValueError, match="Cannot serialize"):
            await kv.set("key", object())
        assert await kv.get("key") is None

    async def test_values_persist_across_instances(self, tmp_path):
        path = str(tmp_path / "persist.db")
        async with KeyValueModel(path) as first:
            await first.set("k", {"nested": [1, 2]})
        async with KeyValueModel(path) as second:
            assert await second.get("k") == {"nested": [1, 2]}
