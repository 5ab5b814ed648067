"""Reports produced by install/update and by destination inspection."""

from __future__ import annotations

from dataclasses import dataclass, field

MODIFIED_LOCALLY = "modified locally"


@dataclass(frozen=True)
class SkippedItem:
    """A destination file left alone, with the reason why."""

    path: str
    reason: str = MODIFIED_LOCALLY

    def __str__(self) -> str:
        return f"{self.path} ({self.reason})"


@dataclass
class ChangeReport:
    """What an install or update did (or, in dry-run, would do).

    Paths are relative to the adapter's destination root. A path is recorded
    in at most one list.
    """

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)  # Only filled in verbose mode
    dry_run: bool = False

    def add(self, path: str) -> None:
        self._claim(path)
        self.added.append(path)

    def update(self, path: str) -> None:
        self._claim(path)
        self.updated.append(path)

    def skip(self, path: str, reason: str = MODIFIED_LOCALLY) -> None:
        self._claim(path)
        self.skipped.append(SkippedItem(path=path, reason=reason))

    def keep(self, path: str) -> None:
        self._claim(path)
        self.unchanged.append(path)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.updated)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.skipped)

    def skipped_labels(self) -> list[str]:
        return [str(item) for item in self.skipped]

    def paths(self) -> set[str]:
        return (
            set(self.added)
            | set(self.updated)
            | {s.path for s in self.skipped}
            | set(self.unchanged)
        )

    def summary(self) -> str:
        prefix = "(dry run) " if self.dry_run else ""
        return (
            f"{prefix}+{len(self.added)} added, ~{len(self.updated)} updated, "
            f"-{len(self.skipped)} skipped"
        )

    def _claim(self, path: str) -> None:
        if path in self.paths():
            raise ValueError(f"Path already recorded in change report: {path}")


@dataclass
class InstalledInfo:
    """Snapshot of what currently exists at a destination."""

    adapter: str
    version: str = "unknown"
    agents: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    workflows: list[str] = field(default_factory=list)
    modified_files: int = 0

    @property
    def agent_count(self) -> int:
        return len(self.agents)

    @property
    def skill_count(self) -> int:
        return len(self.skills)

    @property
    def workflow_count(self) -> int:
        return len(self.workflows)

    @property
    def is_installed(self) -> bool:
        return bool(self.agents or self.skills or self.workflows)
