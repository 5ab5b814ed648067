"""Adapter contract shared by every destination shape.

An adapter knows three things about its tool: which marker paths show the
tool is in use, where its files live, and how to render a catalog into those
files (:meth:`Adapter.plan`). Install and update are the same sync run over
that plan; install additionally refuses to overwrite an existing destination
unless forced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from agen.adapters.rules import RulesLayout, parse_rules
from agen.catalog.models import Catalog
from agen.errors import AlreadyExistsError
from agen.sync.engine import (
    InstallOptions,
    PlannedFile,
    SyncEngine,
    UpdateOptions,
)
from agen.sync.fingerprint import FingerprintStore
from agen.sync.report import ChangeReport, InstalledInfo


class Adapter(ABC):
    """Base class for destination adapters."""

    key: str = ""  # Registry key, e.g. "cursor"
    name: str = ""  # Display name, e.g. "Cursor"
    root: str = ""  # Destination root relative to the project; report paths are relative to it
    markers: tuple[str, ...] = ()  # Paths whose presence means "in use"; trailing "/" = directory
    rules_file: str = ""  # Most significant file, relative to the project
    install_guard: str = ""  # Existing path that makes install refuse without force
    layout: RulesLayout | None = None  # Headings of the generated index file

    def detect(self, project_path: str | Path) -> bool:
        """Return True if the project already uses this destination. Never writes."""
        project = Path(project_path)
        return any(_marker_exists(project, marker) for marker in self.markers)

    def rules_path(self) -> str:
        return self.rules_file

    @abstractmethod
    def plan(self, catalog: Catalog) -> list[PlannedFile]:
        """Render ``catalog`` into the files this destination should contain."""

    def install(self, catalog: Catalog, options: InstallOptions) -> ChangeReport:
        """Write a fresh destination.

        Raises :class:`AlreadyExistsError` if the destination exists and
        ``options.force`` is not set, dry-run included. Other planned files
        that already exist with different content are skipped unless forced.
        """
        target = options.check_target()
        guard = target / (self.install_guard or self.rules_file)
        if guard.exists() and not options.force:
            raise AlreadyExistsError(guard)

        if not options.dry_run:
            self.prepare(target)

        # Planned files outside the guard may already exist; without force they
        # are kept like any locally modified file.
        sync_options = UpdateOptions(
            target_dir=target,
            dry_run=options.dry_run,
            force=options.force,
            verbose=options.verbose,
        )
        return self.engine(target).run(self.plan(catalog), sync_options, catalog.version)

    def update(self, catalog: Catalog, options: UpdateOptions) -> ChangeReport:
        """Bring an existing destination in line with ``catalog``."""
        target = options.check_target()
        return self.engine(target).run(self.plan(catalog), options, catalog.version)

    def prepare(self, target: Path) -> None:
        """Create empty directories the tool expects. Called by install only."""

    def engine(self, target: Path) -> SyncEngine:
        return SyncEngine(target / self.root, self.key, FingerprintStore(target))

    def installed_info(
        self, project_path: str | Path, catalog: Catalog | None = None
    ) -> InstalledInfo:
        """Describe what is installed right now. Re-reads the destination every call."""
        project = Path(project_path)
        info = InstalledInfo(adapter=self.name, version=self.installed_version(project))

        index = project / self.index_file()
        if index.is_file():
            sections = parse_rules(
                index.read_text(encoding="utf-8", errors="replace"), self.layout
            )
            info.agents = sections.agents
            info.skills = sections.skills
            info.workflows = sections.workflows

        if catalog is not None:
            info.modified_files = self.count_modified(project, catalog)
        return info

    def installed_version(self, project: Path) -> str:
        record = FingerprintStore(project).load(self.key)
        return record.version or "unknown"

    def count_modified(self, project: Path, catalog: Catalog) -> int:
        """Count existing destination files whose bytes differ from the catalog's rendering."""
        root = project / self.root
        count = 0
        for item in self.plan(catalog):
            dest = root / item.path
            if dest.is_file() and dest.read_bytes() != item.data:
                count += 1
        return count

    def stale_paths(self, catalog: Catalog, project_path: str | Path) -> list[str]:
        """Destination files with no counterpart in ``catalog``. Read-only.

        Single-file destinations regenerate everything, so nothing goes stale.
        """
        return []

    def index_file(self) -> str:
        """The generated markdown file that lists installed entries."""
        return self.rules_file

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


def _marker_exists(project: Path, marker: str) -> bool:
    if marker.endswith("/"):
        return (project / marker.rstrip("/")).is_dir()
    return (project / marker).is_file()
