"""
Tests for index-set validation checks and their ordering
"""
import pytest

from app.services.index_sets.errors import ErrorKind
from app.services.index_sets.validation import (
    check_id,
    check_id_name_existence,
    check_index_config,
    check_unique_index_names,
    validate_index_set,
)
from tests.helpers import COLLECTION_KEY, MAPPING, SETTINGS, make_index_set


@pytest.mark.parametrize("bad_id", [0, -1, "3", 2.5, True, None])
def test_check_id_rejects_non_positive_or_non_integer(bad_id):
    failure = check_id(make_index_set(index_set_id=bad_id))

    assert failure is not None
    assert failure.kind is ErrorKind.INVALID_DATA
    assert "not a positive integer" in failure.message


def test_check_id_accepts_positive_integer():
    assert check_id(make_index_set(index_set_id=12)) is None


def test_failure_message_embeds_definition():
    failure = check_id(make_index_set(index_set_id=-4))

    assert '"coll1"' in failure.message
    assert '"Test"' in failure.message


@pytest.mark.parametrize("index_set_id, name", [(None, "Test"), (3, None), (3, "")])
def test_check_id_name_existence(index_set_id, name):
    failure = check_id_name_existence(make_index_set(index_set_id=index_set_id, name=name))

    assert failure is not None
    assert failure.kind is ErrorKind.INVALID_DATA


@pytest.mark.parametrize(
    "group",
    [
        {"indexes": [{"name": "coll1", "settings": SETTINGS}]},
        {"mapping": MAPPING, "indexes": [{"name": "coll1"}]},
        {"mapping": MAPPING, "indexes": [{"settings": SETTINGS}]},
    ],
)
def test_check_index_config_requires_name_settings_and_mapping(group):
    failure = check_index_config(make_index_set(collection=group))

    assert failure is not None
    assert failure.kind is ErrorKind.INVALID_DATA


def test_check_index_config_accepts_empty_settings():
    index_set = make_index_set(collection={"mapping": {}, "indexes": [{"name": "coll1", "settings": {}}]})

    assert check_index_config(index_set) is None


def test_check_unique_index_names_catches_dash_underscore_collision():
    index_set = make_index_set(
        collection={
            "mapping": MAPPING,
            "indexes": [{"name": "a-b", "settings": SETTINGS}, {"name": "a_b", "settings": SETTINGS}],
        }
    )

    failure = check_unique_index_names(index_set)

    assert failure is not None
    assert "3_a_b" in failure.message


@pytest.mark.asyncio
async def test_create_validation_reports_conflict_first(store):
    await store.put(COLLECTION_KEY, "3", {"index_set_id": 3})

    failure = await validate_index_set(store, COLLECTION_KEY, make_index_set(name=None), allow_update=False)

    assert failure.kind is ErrorKind.CONFLICT


@pytest.mark.asyncio
async def test_create_validation_checks_presence_before_id_format(store):
    failure = await validate_index_set(
        store, COLLECTION_KEY, make_index_set(index_set_id=-1, name=None), allow_update=False
    )

    assert failure.kind is ErrorKind.INVALID_DATA
    assert "missing id or name" in failure.message


@pytest.mark.asyncio
async def test_update_validation_skips_existence_and_presence(store):
    await store.put(COLLECTION_KEY, "3", {"index_set_id": 3})

    assert await validate_index_set(store, COLLECTION_KEY, make_index_set(name=None), allow_update=True) is None


@pytest.mark.asyncio
async def test_update_validation_still_checks_id_and_config(store):
    bad_id = await validate_index_set(store, COLLECTION_KEY, make_index_set(index_set_id=0), allow_update=True)
    bad_config = await validate_index_set(
        store, COLLECTION_KEY, make_index_set(collection={"indexes": [{"name": "x", "settings": {}}]}), allow_update=True
    )

    assert "not a positive integer" in bad_id.message
    assert "missing index name, settings or mapping" in bad_config.message
