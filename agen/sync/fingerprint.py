"""Fingerprints — short content hashes and the record of what was last written.

The store lives at ``<target>/.agen-sync.json`` and remembers, per adapter,
the fingerprint of every file the engine wrote. Comparing a file's current
fingerprint with the recorded one tells "untouched since we wrote it" apart
from "edited locally".
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from agen.sync.files import write_file

logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 16


def fingerprint(data: bytes | str) -> str:
    """Return a short hex digest of ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()[:FINGERPRINT_LENGTH]


@dataclass
class SyncRecord:
    """What the engine last wrote for one adapter in one project."""

    version: str = ""
    synced_at: str = ""
    files: dict[str, str] = field(default_factory=dict)  # relative path -> fingerprint


class FingerprintStore:
    """Reads and writes the per-project sync record file."""

    STORE_FILE = ".agen-sync.json"

    def __init__(self, target_dir: str | Path):
        self.target_dir = Path(target_dir)
        self.store_file = self.target_dir / self.STORE_FILE

    def load(self, adapter_key: str) -> SyncRecord:
        """Return the record for ``adapter_key``; empty if none exists."""
        data = self._read_all().get(adapter_key)
        if not isinstance(data, dict):
            return SyncRecord()
        files = data.get("files", {})
        return SyncRecord(
            version=data.get("version", ""),
            synced_at=data.get("synced_at", ""),
            files=dict(files) if isinstance(files, dict) else {},
        )

    def save(self, adapter_key: str, record: SyncRecord) -> None:
        """Persist ``record`` for ``adapter_key``, keeping other adapters' records."""
        if not record.synced_at:
            record.synced_at = datetime.now(timezone.utc).isoformat()

        adapters = self._read_all()
        adapters[adapter_key] = {
            "version": record.version,
            "synced_at": record.synced_at,
            "files": dict(sorted(record.files.items())),
        }

        text = json.dumps({"adapters": adapters}, indent=2) + "\n"
        write_file(self.store_file, text.encode("utf-8"))

    def _read_all(self) -> dict[str, dict]:
        if not self.store_file.exists():
            return {}
        try:
            with open(self.store_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable sync record %s: %s", self.store_file, e)
            return {}
        adapters = data.get("adapters") if isinstance(data, dict) else None
        return adapters if isinstance(adapters, dict) else {}
