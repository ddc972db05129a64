"""Tests for the JSON file label store."""
import json

import pytest

from face_identity.core.exceptions import LabelStoreError
from face_identity.infrastructure.label_store import JsonFileLabelStore, json_file

from tests.factories import make_label


class TestJsonFileLabelStore:
    """Test suite for JsonFileLabelStore persistence."""

    def test_labels_survive_reopening(self, tmp_path):
        path = tmp_path / "labels.json"
        label = make_label("c1")
        JsonFileLabelStore(path).put("c1", label)

        reopened = JsonFileLabelStore(path)

        assert reopened.get("c1").id == label.id
        assert reopened.get("c1").created_at == label.created_at

    def test_delete_is_persisted(self, tmp_path):
        path = tmp_path / "labels.json"
        store = JsonFileLabelStore(path)
        store.put("c1", make_label("c1"))
        store.delete("c1")

        assert JsonFileLabelStore(path).values() == []

    def test_file_is_keyed_by_cluster_id(self, tmp_path):
        path = tmp_path / "labels.json"
        JsonFileLabelStore(path).put("c1", make_label("c1", "Alice"))

        document = json.loads(path.read_text())

        assert list(document) == ["c1"]
        assert document["c1"]["name"] == "Alice"
        assert not path.with_suffix(".json.tmp").exists()

    def test_missing_parent_directory_is_created(self, tmp_path):
        path = tmp_path / "nested" / "labels.json"

        JsonFileLabelStore(path).put("c1", make_label("c1"))

        assert path.exists()

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "labels.json"
        path.write_text("{not json")

        with pytest.raises(LabelStoreError) as exc_info:
            JsonFileLabelStore(path)

        assert exc_info.value.details["path"] == str(path)

    def test_failed_put_leaves_store_unchanged(self, tmp_path, monkeypatch):
        path = tmp_path / "labels.json"
        store = JsonFileLabelStore(path)
        store.put("c1", make_label("c1", "Alice"))

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(json_file.os, "replace", failing_replace)

        with pytest.raises(LabelStoreError):
            store.put("c2", make_label("c2", "Bob"))

        assert store.get("c2") is None
        assert [label.name for label in store.values()] == ["Alice"]
        assert not path.with_suffix(".json.tmp").exists()

    def test_failed_delete_keeps_label(self, tmp_path, monkeypatch):
        path = tmp_path / "labels.json"
        store = JsonFileLabelStore(path)
        store.put("c1", make_label("c1", "Alice"))

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(json_file.os, "replace", failing_replace)

        with pytest.raises(LabelStoreError):
            store.delete("c1")

        assert store.get("c1").name == "Alice"

    def test_stores_sharing_a_file_keep_each_others_labels(self, tmp_path):
        path = tmp_path / "labels.json"
        first = JsonFileLabelStore(path)
        second = JsonFileLabelStore(path)

        first.put("c1", make_label("c1", "Alice"))
        second.put("c2", make_label("c2", "Bob"))

        reopened = JsonFileLabelStore(path)
        assert sorted(label.name for label in reopened.values()) == ["Alice", "Bob"]
        assert second.lock_path.exists()
