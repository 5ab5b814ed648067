"""Tests for the sync engine, change reports and the fingerprint store."""

import json
import os
import stat
import tempfile
from pathlib import Path

import pytest

from agen.adapters.tree import AntigravityAdapter
from agen.catalog.models import AgentEntry, Catalog
from agen.errors import SyncError, TargetDirectoryError
from agen.sync.engine import (
    Action,
    InstallOptions,
    PlannedFile,
    SyncEngine,
    UpdateOptions,
)
from agen.sync.files import write_file
from agen.sync.fingerprint import FingerprintStore, SyncRecord, fingerprint
from agen.sync.report import ChangeReport


def _engine(tmpdir: str) -> SyncEngine:
    return SyncEngine(Path(tmpdir) / "out", "test", FingerprintStore(tmpdir))


def _reviewer_catalog(body: str = "# Reviewer\n") -> Catalog:
    agent = AgentEntry(name="reviewer", content=body)
    return Catalog(version="1.0.0", agents={"reviewer": agent})


# --- Fingerprint Tests ---


def test_fingerprint_is_stable_and_short():
    assert fingerprint("abc") == fingerprint(b"abc")
    assert len(fingerprint("abc")) == 16
    assert fingerprint("abc") != fingerprint("abd")


def test_store_round_trip_keeps_other_adapters():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FingerprintStore(tmpdir)
        store.save("cursor", SyncRecord(version="1", files={".cursorrules": "aa"}))
        store.save("zed", SyncRecord(version="2", files={"x": "bb"}))

        cursor = store.load("cursor")
        assert cursor.version == "1"
        assert cursor.files == {".cursorrules": "aa"}
        assert cursor.synced_at
        assert store.load("zed").files == {"x": "bb"}
        assert store.load("missing") == SyncRecord()


def test_store_save_failure_keeps_previous_record(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FingerprintStore(tmpdir)
        store.save("cursor", SyncRecord(version="1", files={".cursorrules": "aa"}))
        before = store.store_file.read_bytes()

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("agen.sync.files.os.replace", fail_replace)
        with pytest.raises(OSError):
            store.save("cursor", SyncRecord(version="2", files={".cursorrules": "bb"}))

        assert store.store_file.read_bytes() == before
        assert [p.name for p in Path(tmpdir).iterdir()] == [FingerprintStore.STORE_FILE]


def test_store_ignores_corrupt_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FingerprintStore(tmpdir)
        store.store_file.write_text("{not json")
        assert store.load("cursor") == SyncRecord()

        # A save replaces the corrupt content
        store.save("cursor", SyncRecord(version="1"))
        data = json.loads(store.store_file.read_text())
        assert data["adapters"]["cursor"]["version"] == "1"


# --- Engine Classification Tests ---


def test_engine_adds_then_keeps():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        planned = [PlannedFile("a.md", "A\n"), PlannedFile("sub/b.md", "B\n")]

        report = engine.run(planned, UpdateOptions(target_dir=tmpdir))
        assert report.added == ["a.md", "sub/b.md"]
        assert (Path(tmpdir) / "out" / "sub" / "b.md").read_text() == "B\n"

        again = engine.run(planned, UpdateOptions(target_dir=tmpdir))
        assert again.is_empty
        assert not again.has_changes


def test_engine_verbose_lists_unchanged():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        planned = [PlannedFile("a.md", "A\n")]
        engine.run(planned, UpdateOptions(target_dir=tmpdir))

        report = engine.run(planned, UpdateOptions(target_dir=tmpdir, verbose=True))
        assert report.unchanged == ["a.md"]
        assert report.is_empty


def test_engine_updates_untouched_file_when_catalog_changes():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        engine.run([PlannedFile("a.md", "v1\n")], UpdateOptions(target_dir=tmpdir))

        report = engine.run([PlannedFile("a.md", "v2\n")], UpdateOptions(target_dir=tmpdir))
        assert report.updated == ["a.md"]
        assert (Path(tmpdir) / "out" / "a.md").read_text() == "v2\n"


def test_engine_skips_locally_modified_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        engine.run([PlannedFile("a.md", "v1\n")], UpdateOptions(target_dir=tmpdir))
        dest = Path(tmpdir) / "out" / "a.md"
        dest.write_text("mine\n")

        report = engine.run([PlannedFile("a.md", "v2\n")], UpdateOptions(target_dir=tmpdir))
        assert report.skipped_labels() == ["a.md (modified locally)"]
        assert dest.read_text() == "mine\n"

        forced = engine.run(
            [PlannedFile("a.md", "v2\n")], UpdateOptions(target_dir=tmpdir, force=True)
        )
        assert forced.updated == ["a.md"]
        assert dest.read_text() == "v2\n"


def test_engine_skips_unrecorded_existing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        dest = Path(tmpdir) / "out" / "a.md"
        dest.parent.mkdir()
        dest.write_text("pre-existing\n")

        report = _engine(tmpdir).run([PlannedFile("a.md", "new\n")], UpdateOptions(target_dir=tmpdir))
        assert [s.path for s in report.skipped] == ["a.md"]
        assert dest.read_text() == "pre-existing\n"


def test_engine_classify_does_not_write():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        action = engine.classify(PlannedFile("a.md", "A"), SyncRecord(), force=False)
        assert action is Action.ADD
        assert not (Path(tmpdir) / "out").exists()


def test_engine_dry_run_writes_nothing():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = _engine(tmpdir)
        engine.run([PlannedFile("a.md", "v1\n")], UpdateOptions(target_dir=tmpdir))
        store_before = (Path(tmpdir) / FingerprintStore.STORE_FILE).read_bytes()

        report = engine.run(
            [PlannedFile("a.md", "v2\n"), PlannedFile("b.md", "B\n")],
            UpdateOptions(target_dir=tmpdir, dry_run=True),
        )
        assert report.dry_run
        assert report.updated == ["a.md"]
        assert report.added == ["b.md"]
        assert (Path(tmpdir) / "out" / "a.md").read_text() == "v1\n"
        assert not (Path(tmpdir) / "out" / "b.md").exists()
        assert (Path(tmpdir) / FingerprintStore.STORE_FILE).read_bytes() == store_before


def test_engine_marks_scripts_executable():
    with tempfile.TemporaryDirectory() as tmpdir:
        _engine(tmpdir).run(
            [PlannedFile("run.sh", "#!/bin/sh\n", executable=True)],
            UpdateOptions(target_dir=tmpdir),
        )
        mode = os.stat(Path(tmpdir) / "out" / "run.sh").st_mode
        assert mode & stat.S_IXUSR


def test_engine_wraps_io_errors():
    with tempfile.TemporaryDirectory() as tmpdir:
        out = Path(tmpdir) / "out"
        out.mkdir()
        # A file where a directory is needed makes the second write fail
        (out / "blocker").write_text("x")
        planned = [PlannedFile("a.md", "A\n"), PlannedFile("blocker/b.md", "B\n")]

        with pytest.raises(SyncError) as excinfo:
            _engine(tmpdir).run(planned, UpdateOptions(target_dir=tmpdir))

        assert excinfo.value.report.added == ["a.md"]
        assert (out / "a.md").read_text() == "A\n"


def test_write_file_replaces_atomically():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "f.txt"
        write_file(path, b"one")
        write_file(path, b"two")
        assert path.read_bytes() == b"two"
        assert [p.name for p in Path(tmpdir).iterdir()] == ["f.txt"]


# --- Report Tests ---


def test_report_rejects_duplicate_paths():
    report = ChangeReport()
    report.add("a.md")
    with pytest.raises(ValueError):
        report.skip("a.md")


def test_report_summary():
    report = ChangeReport(dry_run=True)
    report.add("a")
    report.update("b")
    report.skip("c")
    assert report.summary() == "(dry run) +1 added, ~1 updated, -1 skipped"


# --- Install / Update Scenario ---


def test_reviewer_edit_scenario():
    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = AntigravityAdapter()
        catalog = _reviewer_catalog()
        dest = Path(tmpdir) / ".agent" / "agents" / "reviewer.md"

        report = adapter.install(catalog, InstallOptions(target_dir=tmpdir))
        assert report.added == ["agents/reviewer.md"]
        assert report.updated == [] and report.skipped == []
        assert dest.read_text() == "# Reviewer\n"

        dest.write_text("# Reviewer (edited)\n")

        report = adapter.update(catalog, UpdateOptions(target_dir=tmpdir))
        assert report.skipped_labels() == ["agents/reviewer.md (modified locally)"]
        assert report.added == [] and report.updated == []
        assert dest.read_text() == "# Reviewer (edited)\n"

        report = adapter.update(catalog, UpdateOptions(target_dir=tmpdir, force=True))
        assert report.updated == ["agents/reviewer.md"]
        assert dest.read_text() == "# Reviewer\n"


def test_update_is_idempotent():
    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = AntigravityAdapter()
        catalog = _reviewer_catalog()
        adapter.install(catalog, InstallOptions(target_dir=tmpdir))

        first = adapter.update(catalog, UpdateOptions(target_dir=tmpdir))
        second = adapter.update(catalog, UpdateOptions(target_dir=tmpdir))
        assert first.is_empty
        assert second.is_empty


def test_update_follows_catalog_changes():
    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = AntigravityAdapter()
        adapter.install(_reviewer_catalog(), InstallOptions(target_dir=tmpdir))

        report = adapter.update(_reviewer_catalog("# Reviewer v2\n"), UpdateOptions(target_dir=tmpdir))
        assert report.updated == ["agents/reviewer.md"]


def test_missing_target_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        missing = Path(tmpdir) / "nope"
        with pytest.raises(TargetDirectoryError):
            AntigravityAdapter().update(_reviewer_catalog(), UpdateOptions(target_dir=missing))
