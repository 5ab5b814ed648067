"""Sync engine — classify each planned destination file and act on it.

For every file an adapter wants to exist:

1. Missing on disk -> add it.
2. Identical bytes -> nothing to do.
3. Different bytes:
   - ``force`` -> overwrite.
   - bytes still match the fingerprint recorded when we last wrote the
     file -> nobody touched it, the catalog moved on -> overwrite.
   - otherwise -> the file was modified locally -> skip.

Dry-run runs the full classification and reports the plan without writing
anything. Each file is replaced atomically on its own; there is no
multi-file transaction, so an interrupted run leaves earlier files written
and later ones as they were. Two concurrent runs against the same target
directory are not coordinated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from agen.errors import SyncError, TargetDirectoryError
from agen.sync.files import write_file
from agen.sync.fingerprint import FingerprintStore, SyncRecord, fingerprint
from agen.sync.report import MODIFIED_LOCALLY, ChangeReport

logger = logging.getLogger(__name__)


class Action(Enum):
    """What the engine decided for one file."""

    ADD = "add"
    UPDATE = "update"
    SKIP = "skip"
    KEEP = "keep"  # Already identical


@dataclass
class SyncOptions:
    target_dir: str | Path
    dry_run: bool = False
    force: bool = False
    verbose: bool = False

    @property
    def target_path(self) -> Path:
        return Path(self.target_dir)

    def check_target(self) -> Path:
        """Return the target directory, raising if it does not exist."""
        path = self.target_path
        if not path.is_dir():
            raise TargetDirectoryError(f"Target directory does not exist: {path}")
        return path


@dataclass
class InstallOptions(SyncOptions):
    """Options for a fresh install. ``force`` overwrites an existing destination."""


@dataclass
class UpdateOptions(SyncOptions):
    """Options for an update. ``force`` overwrites locally modified files."""


@dataclass(frozen=True)
class PlannedFile:
    """A file an adapter wants at its destination."""

    path: str  # Relative to the adapter's destination root, "/" separated
    content: str
    executable: bool = False

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


class SyncEngine:
    """Applies a list of planned files to one adapter's destination."""

    def __init__(
        self,
        root: str | Path,
        adapter_key: str,
        store: FingerprintStore | None = None,
    ):
        self.root = Path(root)
        self.adapter_key = adapter_key
        self.store = store

    def run(
        self,
        planned: list[PlannedFile],
        options: SyncOptions,
        version: str = "",
    ) -> ChangeReport:
        """Classify and apply ``planned``; return what was (or would be) done.

        Raises :class:`SyncError` carrying the partial report if reading or
        writing a file fails.
        """
        report = ChangeReport(dry_run=options.dry_run)
        record = self.store.load(self.adapter_key) if self.store else SyncRecord()
        files = dict(record.files)
        current = ""

        try:
            for item in planned:
                current = item.path
                action = self.classify(item, record, options.force)
                self._log(item.path, action, options)

                if action is Action.KEEP:
                    files[item.path] = fingerprint(item.data)
                    if options.verbose:
                        report.keep(item.path)
                    continue

                if action is Action.SKIP:
                    report.skip(item.path, MODIFIED_LOCALLY)
                    continue

                if not options.dry_run:
                    write_file(self.root / item.path, item.data, item.executable)
                files[item.path] = fingerprint(item.data)

                if action is Action.ADD:
                    report.add(item.path)
                else:
                    report.update(item.path)

            current = FingerprintStore.STORE_FILE
            self._save(record, files, version, options)
        except OSError as e:
            raise SyncError(f"Sync failed at {current}: {e}", report) from e

        return report

    def classify(self, item: PlannedFile, record: SyncRecord, force: bool) -> Action:
        """Decide what to do with one planned file. Reads, never writes."""
        dest = self.root / item.path
        if not dest.exists():
            return Action.ADD

        existing = dest.read_bytes()
        if existing == item.data:
            return Action.KEEP
        if force:
            return Action.UPDATE

        recorded = record.files.get(item.path)
        if recorded and recorded == fingerprint(existing):
            return Action.UPDATE
        return Action.SKIP

    def _save(
        self,
        record: SyncRecord,
        files: dict[str, str],
        version: str,
        options: SyncOptions,
    ) -> None:
        if options.dry_run or self.store is None:
            return
        if files == record.files and version == record.version:
            return
        self.store.save(self.adapter_key, SyncRecord(version=version, files=files))

    def _log(self, path: str, action: Action, options: SyncOptions) -> None:
        level = logging.INFO if options.verbose else logging.DEBUG
        logger.log(level, "%s %s: %s", self.adapter_key, action.value, path)
