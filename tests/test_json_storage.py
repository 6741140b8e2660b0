from __future__ import annotations

import json

import pytest

from potluck.repositories.base import StorageError
from potluck.repositories.json_storage import JsonFileStorage


def test_ensure_schema_creates_file_once(tmp_path):
    path = tmp_path / "data" / "potluck.json"
    storage = JsonFileStorage(path)
    storage.ensure_schema()
    assert json.loads(path.read_text(encoding="utf-8")) == {"next_id": 1, "rsvps": []}

    storage.insert("Ana", True, None)
    storage.ensure_schema()
    assert len(storage.query_all()) == 1


def test_records_survive_a_new_handle(json_storage):
    created = json_storage.insert("Ana", True, "Salad")

    reopened = JsonFileStorage(json_storage.path)
    record = reopened.find_by_name_case_insensitive("aNa")
    assert record == created


def test_next_id_is_kept_after_wipe(json_storage):
    json_storage.insert("Ana", True, None)
    json_storage.insert("Bo", True, None)
    json_storage.delete_all()

    data = json.loads(json_storage.path.read_text(encoding="utf-8"))
    assert data["rsvps"] == []
    assert data["next_id"] == 3


def test_corrupt_file_raises_storage_error(tmp_path):
    path = tmp_path / "potluck.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)

    with pytest.raises(StorageError):
        storage.ensure_schema()
    with pytest.raises(StorageError):
        storage.query_all()


def test_attending_is_stored_as_boolean(json_storage):
    json_storage.insert("Ana", 1, None)
    data = json.loads(json_storage.path.read_text(encoding="utf-8"))
    assert data["rsvps"][0]["attending"] is True


@pytest.mark.parametrize("content", ["[]", '"text"', '{"rsvps": {"id": 1}}', '{"rsvps": [1, 2]}'])
def test_unexpected_document_shape_raises_storage_error(tmp_path, content):
    path = tmp_path / "potluck.json"
    path.write_text(content, encoding="utf-8")
    storage = JsonFileStorage(path)

    with pytest.raises(StorageError):
        storage.query_all()
    with pytest.raises(StorageError):
        storage.find_by_name_case_insensitive("Ana")


def test_row_missing_fields_raises_storage_error(tmp_path):
    path = tmp_path / "potluck.json"
    path.write_text('{"next_id": 2, "rsvps": [{"id": 1}]}', encoding="utf-8")
    storage = JsonFileStorage(path)

    with pytest.raises(StorageError):
        storage.find_by_name_case_insensitive("Ana")
    with pytest.raises(StorageError):
        storage.insert("Ana", True, None)
    with pytest.raises(StorageError):
        storage.query_all()

    path.write_text('{"next_id": 2, "rsvps": [{"name": "Ana"}]}', encoding="utf-8")
    with pytest.raises(StorageError):
        storage.update(1, False, None)
    with pytest.raises(StorageError):
        storage.find_by_name_case_insensitive("ana")
