"""Adapter registry — look adapters up by name and detect which one a project uses.

``DETECTION_ORDER`` is part of the public contract. Several tools can be
configured in one project at the same time (a ``.cursorrules`` next to an
``.agent/`` tree, say); the first adapter in this order whose markers are
present wins. Tool-specific marker files come first, the generic ``.agent/``
tree last. Reordering it changes which destination existing projects sync
to.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from agen.adapters.base import Adapter
from agen.adapters.companion import (
    AiderAdapter,
    ContinueAdapter,
    EmacsAdapter,
    JetBrainsAdapter,
    NeovimAdapter,
)
from agen.adapters.single_file import (
    ClaudeCodeAdapter,
    ClineAdapter,
    CopilotWorkspaceAdapter,
    CursorAdapter,
    WindsurfAdapter,
)
from agen.adapters.tree import AntigravityAdapter
from agen.adapters.zed import ZedAdapter
from agen.errors import UnknownAdapterError

logger = logging.getLogger(__name__)

DETECTION_ORDER = (
    "cursor",
    "windsurf",
    "cline",
    "continue",
    "claudecode",
    "copilotworkspace",
    "aider",
    "jetbrains",
    "zed",
    "neovim",
    "emacs",
    "antigravity",
)

DEFAULT_ADAPTER = "antigravity"

BUILTIN_ADAPTERS = (
    AntigravityAdapter,
    CursorAdapter,
    WindsurfAdapter,
    ZedAdapter,
    ContinueAdapter,
    ClineAdapter,
    JetBrainsAdapter,
    NeovimAdapter,
    EmacsAdapter,
    AiderAdapter,
    ClaudeCodeAdapter,
    CopilotWorkspaceAdapter,
)


class AdapterRegistry:
    """A set of adapters plus the priority used to auto-detect among them.

    Adapters registered under keys that are not in ``detection_order`` are
    tried after it, in registration order.
    """

    def __init__(
        self,
        adapters: Iterable[Adapter] = (),
        detection_order: Iterable[str] = DETECTION_ORDER,
        default: str = DEFAULT_ADAPTER,
    ):
        self._adapters: dict[str, Adapter] = {}
        self.detection_order = tuple(detection_order)
        self.default = default
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: Adapter, key: str | None = None) -> None:
        """Add ``adapter`` under ``key`` (its own key by default), replacing any previous one."""
        self._adapters[(key or adapter.key).lower()] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name.lower())

    def require(self, name: str) -> Adapter:
        adapter = self.get(name)
        if adapter is None:
            raise UnknownAdapterError(name, self.names())
        return adapter

    def names(self) -> list[str]:
        return list(self._adapters)

    def adapters(self) -> list[Adapter]:
        return list(self._adapters.values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    def priority(self) -> list[str]:
        """Registered keys in the order ``detect`` tries them."""
        ordered = [k for k in self.detection_order if k in self._adapters]
        ordered.extend(k for k in self._adapters if k not in self.detection_order)
        return ordered

    def detect(self, project_path: str | Path) -> Adapter | None:
        """Return the highest-priority adapter already in use in the project, if any."""
        for key in self.priority():
            adapter = self._adapters[key]
            if adapter.detect(project_path):
                logger.debug("Detected %s in %s", adapter.name, project_path)
                return adapter
        return None

    def detect_all(self, project_path: str | Path) -> list[Adapter]:
        """Every adapter in use in the project, highest priority first."""
        return [
            self._adapters[key]
            for key in self.priority()
            if self._adapters[key].detect(project_path)
        ]

    def resolve(self, project_path: str | Path, name: str | None = None) -> Adapter:
        """Pick the adapter for a project.

        An explicit ``name`` wins; otherwise detection; otherwise the default.
        """
        if name:
            return self.require(name)
        detected = self.detect(project_path)
        if detected is not None:
            return detected
        logger.debug("No destination detected in %s, using %s", project_path, self.default)
        return self.require(self.default)


def default_registry(default: str = DEFAULT_ADAPTER) -> AdapterRegistry:
    """Build a registry holding every built-in adapter."""
    return AdapterRegistry(
        adapters=(cls() for cls in BUILTIN_ADAPTERS),
        default=default,
    )
