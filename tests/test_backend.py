"""Tests for MemoryBackend and FileBackend."""

import json
import os
from pathlib import Path

import pytest

from stashx import Backend, BackendReadError, BackendWriteError, FileBackend, MemoryBackend


class TestMemoryBackend:
    def test_absent_is_none(self):
        assert MemoryBackend().get("nope") is None

    def test_set_get(self):
        b = MemoryBackend()
        b.set("k", "1")
        assert b.get("k") == "1"
        b.set("k", "2")
        assert b.get("k") == "2"

    def test_seeded(self):
        b = MemoryBackend({"k": "true"})
        assert b.get("k") == "true"

    def test_namespace(self):
        b = MemoryBackend(namespace="radicle.")
        b.set("hint", "false")
        assert b._data == {"radicle.hint": "false"}
        assert list(b.keys()) == ["hint"]

    def test_delete(self):
        b = MemoryBackend({"k": "1"})
        b.delete("k")
        b.delete("k")
        assert b.get("k") is None

    def test_is_a_backend(self):
        assert isinstance(MemoryBackend(), Backend)


class TestFileBackend:
    def test_missing_file_is_empty(self, tmp_path):
        b = FileBackend(tmp_path / "store.json")
        assert b.get("k") is None
        assert list(b.keys()) == []

    def test_set_creates_parents(self, tmp_path):
        path = tmp_path / "a" / "b" / "store.json"
        FileBackend(path).set("k", "true")
        assert json.loads(path.read_text()) == {"k": "true"}

    def test_survives_new_instance(self, tmp_path):
        path = tmp_path / "store.json"
        FileBackend(path).set("k", '"v"')
        assert FileBackend(path).get("k") == '"v"'

    def test_keeps_other_keys(self, tmp_path):
        b = FileBackend(tmp_path / "store.json")
        b.set("a", "1")
        b.set("b", "2")
        assert b.get("a") == "1"
        assert sorted(b.keys()) == ["a", "b"]

    def test_namespace_prefix(self, tmp_path):
        path = tmp_path / "store.json"
        FileBackend(path, namespace="radicle.").set("hint", "false")
        FileBackend(path, namespace="other.").set("hint", "true")
        assert json.loads(path.read_text()) == {"radicle.hint": "false", "other.hint": "true"}
        assert FileBackend(path, namespace="radicle.").get("hint") == "false"
        assert list(FileBackend(path, namespace="radicle.").keys()) == ["hint"]

    def test_non_string_entry_is_reencoded(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"k": False}))
        assert FileBackend(path).get("k") == "false"

    def test_corrupt_file_read_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{oops")
        with pytest.raises(BackendReadError) as info:
            FileBackend(path).get("k")
        assert info.value.key == "k"

    def test_non_object_document_read_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        with pytest.raises(BackendReadError):
            FileBackend(path).get("k")

    def test_set_replaces_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text("{oops")
        b = FileBackend(path)
        b.set("k", "1")
        assert b.get("k") == "1"
        assert "Discarding unreadable store file" in caplog.text

    def test_read_failure_does_not_wipe_other_keys(self, tmp_path, monkeypatch):
        path = tmp_path / "store.json"
        b = FileBackend(path)
        b.set("a", "1")

        def _denied(self):
            raise PermissionError("permission denied")

        monkeypatch.setattr(Path, "read_bytes", _denied)
        with pytest.raises(BackendWriteError) as info:
            b.set("b", "2")
        assert info.value.key == "b"
        monkeypatch.undo()

        assert json.loads(path.read_text()) == {"a": "1"}

    def test_undecodable_file_read_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_bytes(b"\xff\xfe{")
        with pytest.raises(BackendReadError):
            FileBackend(path).get("k")

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        b = FileBackend(blocker / "store.json")
        with pytest.raises(BackendWriteError) as info:
            b.set("k", "1")
        assert info.value.key == "k"

    def test_no_temp_files_left(self, tmp_path):
        b = FileBackend(tmp_path / "store.json")
        for i in range(5):
            b.set("k", str(i))
        assert os.listdir(tmp_path) == ["store.json"]

    def test_delete(self, tmp_path):
        b = FileBackend(tmp_path / "store.json")
        b.set("a", "1")
        b.set("b", "2")
        b.delete("a")
        assert b.get("a") is None
        assert b.get("b") == "2"
