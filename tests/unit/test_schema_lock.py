"""Schema lock files and digest checks."""

from __future__ import annotations

import pytest
import yaml

from infohash import (
    RecordSchema,
    SchemaChangedError,
    SchemaLock,
    SchemaLockError,
    check_schema,
    item,
    load_schema_lock,
    save_schema_lock,
)

PAIR = RecordSchema([item("left"), item("right")])
TRIPLE = RecordSchema([item("left"), item("middle"), item("right")])


class TestSchemaLock:
    def test_record_and_check(self):
        lock = SchemaLock().record("Pair", PAIR)
        lock.check("Pair", PAIR)
        assert lock.records["Pair"].fields == ("left", "right")

    def test_record_returns_new_lock(self):
        empty = SchemaLock()
        empty.record("Pair", PAIR)
        assert empty.records == {}

    def test_detects_added_field(self):
        lock = SchemaLock().record("Pair", PAIR)
        with pytest.raises(SchemaChangedError, match="added middle") as excinfo:
            lock.check("Pair", TRIPLE)
        assert excinfo.value.added == ("middle",)
        assert excinfo.value.removed == ()

    def test_detects_removed_field(self):
        lock = SchemaLock().record("Triple", TRIPLE)
        with pytest.raises(SchemaChangedError, match="removed middle"):
            lock.check("Triple", PAIR)

    def test_detects_rename(self):
        lock = SchemaLock().record("Pair", PAIR)
        renamed = RecordSchema([item("left"), item("Right")])
        with pytest.raises(SchemaChangedError) as excinfo:
            lock.check("Pair", renamed)
        assert excinfo.value.added == ("Right",)
        assert excinfo.value.removed == ("right",)

    def test_unknown_name(self):
        with pytest.raises(SchemaLockError, match="No lock entry for 'Missing'"):
            SchemaLock().check("Missing", PAIR)


class TestLockFile:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "infohash.lock.yaml"
        lock = SchemaLock().record("Pair", PAIR).record("Triple", TRIPLE)
        save_schema_lock(path, lock)
        assert load_schema_lock(path) == lock

    def test_written_layout(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        save_schema_lock(path, SchemaLock().record("Pair", PAIR))
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data == {
            "schema": "infohash.lock.v1",
            "records": {"Pair": {"digest": PAIR.hexdigest(), "fields": ["left", "right"]}},
        }

    def test_missing_file_is_empty(self, tmp_path):
        assert load_schema_lock(tmp_path / "absent.yaml") == SchemaLock()

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text("", encoding="utf-8")
        assert load_schema_lock(path) == SchemaLock()

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(SchemaLockError, match="not a file"):
            load_schema_lock(tmp_path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(SchemaLockError, match="must be a YAML mapping"):
            load_schema_lock(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text("records: [unclosed\n", encoding="utf-8")
        with pytest.raises(SchemaLockError, match="Cannot read lock file"):
            load_schema_lock(path)

    def test_wrong_schema_version(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text("schema: infohash.lock.v0\n", encoding="utf-8")
        with pytest.raises(SchemaLockError, match="field 'schema'"):
            load_schema_lock(path)

    def test_bad_digest(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text(
            "records:\n  Pair:\n    digest: nothex\n    fields: [left]\n",
            encoding="utf-8",
        )
        with pytest.raises(SchemaLockError, match="records.Pair.digest"):
            load_schema_lock(path)

    def test_unknown_keys_are_rejected(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        path.write_text("records: {}\nextra: 1\n", encoding="utf-8")
        with pytest.raises(SchemaLockError, match="extra"):
            load_schema_lock(path)

    def test_digest_is_normalized(self, tmp_path):
        path = tmp_path / "infohash.lock.yaml"
        digest = PAIR.hexdigest().upper()
        path.write_text(
            f"records:\n  Pair:\n    digest: '{digest}'\n    fields: [left, right]\n",
            encoding="utf-8",
        )
        load_schema_lock(path).check("Pair", PAIR)


class TestCheckSchema:
    def test_matching_digest(self):
        check_schema(PAIR, PAIR.hexdigest())

    def test_case_insensitive(self):
        check_schema(PAIR, PAIR.hexdigest().upper())

    def test_mismatch(self):
        with pytest.raises(SchemaChangedError, match="does not match"):
            check_schema(TRIPLE, PAIR.hexdigest())
