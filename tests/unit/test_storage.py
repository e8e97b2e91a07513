"""Unit tests for key-value store backends."""

import os

import pytest

from store_sanitizer.core.config import StoreConfig
from store_sanitizer.core.exceptions import StoreUnreadableError, StoreWriteError, ValidationError
from store_sanitizer.storage import (
    InMemoryStore,
    JsonFileStore,
    SharedPreferencesStore,
    build_store,
)

ANDROID_PREFS = b"""<?xml version='1.0' encoding='utf-8' standalone='yes' ?>
<map>
    <string name="flutter.token">abc123</string>
    <boolean name="flutter.onboarded" value="true" />
    <int name="flutter.launch_count" value="42" />
    <long name="flutter.last_sync_ms" value="1718000000000" />
    <float name="flutter.ratio" value="0.75" />
    <set name="flutter.tags">
        <string>beta</string>
        <string>alpha</string>
    </set>
    <null name="flutter.cleared" />
    <string name="flutter.empty"></string>
</map>
"""


class TestInMemoryStore:
    """Tests for the in-memory store."""

    def test_set_get_remove(self):
        store = InMemoryStore("prefs")
        store.set("a", 1)
        assert store.get("a") == 1
        assert "a" in store
        assert len(store) == 1
        assert store.remove("a")
        assert not store.remove("a")
        assert store.get("a", "fallback") == "fallback"

    def test_initial_entries_are_validated(self):
        with pytest.raises(ValidationError):
            InMemoryStore("prefs", {"bad": {"nested": 1}})

    def test_tuple_normalized_to_list(self):
        store = InMemoryStore("prefs")
        store.set("seq", ("a", "b"))
        assert store.get("seq") == ["a", "b"]

    def test_rejects_empty_key(self):
        with pytest.raises(ValidationError):
            InMemoryStore("prefs").set("", "x")

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            InMemoryStore("")

    def test_load_returns_copy(self, populated_store):
        entries = populated_store.load()
        entries.clear()
        assert len(populated_store) == 6

    def test_snapshot(self, populated_store):
        snapshot = populated_store.snapshot()
        assert snapshot.store_name == "FlutterSharedPreferences"
        assert snapshot.entry_count == 6
        assert snapshot.approx_size_bytes > 0
        assert not snapshot.load_failed

    def test_clear_all(self, populated_store):
        populated_store.clear_all()
        assert len(populated_store) == 0
        assert populated_store.snapshot().is_empty
        populated_store.clear_all()
        assert len(populated_store) == 0


class TestJsonFileStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty(self, temp_dir):
        store = JsonFileStore(temp_dir / "prefs.json")
        assert store.name == "prefs"
        assert store.load() == {}
        snapshot = store.snapshot()
        assert snapshot.entry_count == 0
        assert snapshot.approx_size_bytes == 0

    def test_persists_across_instances(self, temp_dir, sample_entries):
        path = temp_dir / "nested" / "prefs.json"
        store = JsonFileStore(path)
        for key, value in sample_entries.items():
            store.set(key, value)

        reopened = JsonFileStore(path)
        assert reopened.load() == sample_entries
        assert reopened.snapshot().approx_size_bytes == path.stat().st_size

    def test_remove(self, temp_dir):
        store = JsonFileStore(temp_dir / "prefs.json")
        store.set("a", "x")
        assert store.remove("a")
        assert not store.remove("a")
        assert store.keys() == []

    def test_corrupt_file_is_unreadable(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text('{"truncated": ')
        store = JsonFileStore(path)

        with pytest.raises(StoreUnreadableError) as exc_info:
            store.snapshot()
        assert exc_info.value.store_name == "prefs"
        assert exc_info.value.operation == "decode"
        assert exc_info.value.cause is not None

    @pytest.mark.parametrize("content", ['["a", "b"]', '{"a": {"nested": true}}', '{"a": null}'])
    def test_unexpected_shape_is_unreadable(self, temp_dir, content):
        path = temp_dir / "prefs.json"
        path.write_text(content)
        with pytest.raises(StoreUnreadableError):
            JsonFileStore(path).load()

    def test_clear_corrupt_file(self, temp_dir):
        """Test that a store that cannot be parsed can still be cleared."""
        path = temp_dir / "prefs.json"
        path.write_bytes(b"\xff\xfe garbage")
        store = JsonFileStore(path)

        store.clear_all()
        assert store.load() == {}
        assert store.snapshot().entry_count == 0

    def test_clear_missing_file(self, temp_dir):
        store = JsonFileStore(temp_dir / "absent" / "prefs.json")
        store.clear_all()
        assert not store.path.exists()

    def test_failed_commit_keeps_old_content(self, temp_dir, monkeypatch):
        """Test that a failed clear leaves the store unchanged.

        Verifies that the temporary file is removed as well.
        """
        store = JsonFileStore(temp_dir / "prefs.json")
        store.set("keep", "me")

        def broken_replace(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StoreWriteError) as exc_info:
            store.clear_all()

        assert exc_info.value.operation == "clear_all"
        monkeypatch.undo()
        assert store.load() == {"keep": "me"}
        assert sorted(p.name for p in temp_dir.iterdir()) == ["prefs.json"]


class TestSharedPreferencesStore:
    """Tests for the SharedPreferences XML store."""

    def test_reads_android_document(self, temp_dir):
        path = temp_dir / "FlutterSharedPreferences.xml"
        path.write_bytes(ANDROID_PREFS)
        store = SharedPreferencesStore(path)

        assert store.name == "FlutterSharedPreferences"
        assert store.load() == {
            "flutter.token": "abc123",
            "flutter.onboarded": True,
            "flutter.launch_count": 42,
            "flutter.last_sync_ms": 1718000000000,
            "flutter.ratio": 0.75,
            "flutter.tags": ["alpha", "beta"],
            "flutter.empty": "",
        }
        snapshot = store.snapshot()
        assert snapshot.entry_count == 7
        assert snapshot.approx_size_bytes == len(ANDROID_PREFS)

    def test_writes_android_document(self, temp_dir, sample_entries):
        path = temp_dir / "FlutterSharedPreferences.xml"
        store = SharedPreferencesStore(path)
        for key, value in sample_entries.items():
            store.set(key, value)

        text = path.read_text(encoding="utf-8")
        assert text.startswith("<?xml version='1.0' encoding='utf-8' standalone='yes' ?>")
        assert '<boolean name="flutter.onboarded" value="true" />' in text
        assert '<int name="flutter.launch_count" value="42" />' in text
        assert '<long name="flutter.last_sync_ms" value="1718000000000" />' in text
        assert '<float name="flutter.ratio" value="0.75" />' in text
        assert '<string name="flutter.token">abc123</string>' in text
        assert SharedPreferencesStore(path).load() == sample_entries

    def test_sequences_are_sets(self, temp_dir):
        """Test that sequences follow platform string-set semantics."""
        store = SharedPreferencesStore(temp_dir / "prefs.xml")
        store.set("tags", ["b", "a", "b"])
        assert store.get("tags") == ["a", "b"]

    def test_escapes_markup(self, temp_dir):
        store = SharedPreferencesStore(temp_dir / "prefs.xml")
        store.set("html", '<b>"bold" & more</b>')
        assert SharedPreferencesStore(store.path).get("html") == '<b>"bold" & more</b>'

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("flutter.k", "a\x01b"),
            ("flutter.k", ["ok", "bell\x07"]),
            ("flutter.\x00k", "value"),
        ],
    )
    def test_rejects_characters_illegal_in_xml(self, temp_dir, key, value):
        store = SharedPreferencesStore(temp_dir / "prefs.xml")
        store.set("flutter.kept", "value")

        with pytest.raises(ValidationError):
            store.set(key, value)
        assert store.load() == {"flutter.kept": "value"}

    def test_accepts_whitespace_and_unicode(self, temp_dir):
        store = SharedPreferencesStore(temp_dir / "prefs.xml")
        store.set("flutter.note", "line one\n\tline two é\U0001f600")
        assert SharedPreferencesStore(store.path).get("flutter.note") == (
            "line one\n\tline two é\U0001f600"
        )

    @pytest.mark.parametrize(
        "content",
        [
            b"<map><string name='a'>unterminated",
            b"<preferences />",
            b"<map><int name='a' value='one' /></map>",
            b"<map><boolean name='a' value='yes' /></map>",
            b"<map><string>no name</string></map>",
            b"<map><double name='a' value='1.0' /></map>",
            b"<map><int name='a' /></map>",
        ],
    )
    def test_malformed_document_is_unreadable(self, temp_dir, content):
        path = temp_dir / "prefs.xml"
        path.write_bytes(content)
        with pytest.raises(StoreUnreadableError):
            SharedPreferencesStore(path).snapshot()

    def test_clear_writes_empty_map(self, temp_dir):
        path = temp_dir / "prefs.xml"
        path.write_bytes(ANDROID_PREFS)
        store = SharedPreferencesStore(path)

        store.clear_all()
        assert "<map />" in path.read_text(encoding="utf-8")
        assert store.snapshot().entry_count == 0

    def test_clear_corrupt_document(self, temp_dir):
        path = temp_dir / "prefs.xml"
        path.write_bytes(b"<map><string name='a'>" + b"x" * 1000)
        store = SharedPreferencesStore(path)

        store.clear_all()
        assert store.load() == {}


class TestBuildStore:
    """Tests for building stores from configuration."""

    def test_shared_prefs_default(self, temp_dir):
        store = build_store(StoreConfig(base_path=temp_dir))
        assert isinstance(store, SharedPreferencesStore)
        assert store.path == temp_dir / "FlutterSharedPreferences.xml"
        assert store.name == "FlutterSharedPreferences"

    def test_json(self, temp_dir):
        store = build_store(StoreConfig(name="app", backend="json", base_path=temp_dir))
        assert isinstance(store, JsonFileStore)
        assert store.path == temp_dir / "app.json"

    def test_memory(self):
        store = build_store(StoreConfig(backend="memory"))
        assert isinstance(store, InMemoryStore)
        assert store.name == "FlutterSharedPreferences"

    @pytest.mark.parametrize("backend", ["json", "shared_prefs"])
    def test_file_backends_get_a_path(self, temp_dir, backend):
        store = build_store(StoreConfig(backend=backend, base_path=temp_dir))
        assert store.path.parent == temp_dir
