"""Error types raised by the catalog loader, the sync engine and the adapters."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agen.sync.report import ChangeReport


class AgenError(Exception):
    """Base class for every error raised by agen."""


class LoadError(AgenError):
    """A catalog source is unreadable or structurally invalid."""


class ConfigError(AgenError):
    """The configuration file exists but cannot be parsed."""


class TargetDirectoryError(AgenError):
    """The target directory of an install/update does not exist."""


class UnknownAdapterError(AgenError):
    """No adapter is registered under the requested name."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(
            f"Unknown destination '{name}'. Known destinations: {', '.join(known)}"
        )


class AlreadyExistsError(AgenError):
    """Install was called against an existing destination without force."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(
            f"{self.path} already exists (use --force to overwrite, or run update)"
        )


class SyncError(AgenError):
    """An I/O error interrupted an install or update.

    Files written before the failure are kept. ``report`` holds whatever was
    classified up to that point; re-running the same call is safe.
    """

    def __init__(self, message: str, report: ChangeReport):
        self.report = report
        super().__init__(message)
