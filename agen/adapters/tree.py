"""Directory-tree adapter — one file per catalog entry under ``.agent/``.

Layout::

    .agent/
    ├── agents/<name>.md
    ├── skills/<name>/SKILL.md
    ├── skills/<name>/scripts/...
    ├── workflows/<name>.md
    └── rules/

Every file is classified on its own, so a locally edited agent is kept
while its neighbours are refreshed.
"""

from __future__ import annotations

from pathlib import Path

from agen.adapters.base import Adapter
from agen.catalog.loader import SKILL_FILE
from agen.catalog.models import Catalog
from agen.sync.engine import PlannedFile
from agen.sync.report import InstalledInfo


class AntigravityAdapter(Adapter):
    key = "antigravity"
    name = "Antigravity"
    root = ".agent"
    markers = (".agent/", "GEMINI.md")
    rules_file = ".agent/rules/GEMINI.md"
    install_guard = ".agent"

    SUBDIRS = ("agents", "skills", "workflows", "rules")

    def plan(self, catalog: Catalog) -> list[PlannedFile]:
        files = [
            PlannedFile(f"agents/{agent.name}.md", agent.content)
            for agent in catalog.sorted_agents()
        ]
        for skill in catalog.sorted_skills():
            files.append(PlannedFile(f"skills/{skill.name}/{SKILL_FILE}", skill.content))
            for script in skill.scripts:
                files.append(
                    PlannedFile(
                        f"skills/{skill.name}/scripts/{script.path}",
                        script.content,
                        executable=True,
                    )
                )
        files.extend(
            PlannedFile(f"workflows/{workflow.name}.md", workflow.content)
            for workflow in catalog.sorted_workflows()
        )
        return files

    def prepare(self, target: Path) -> None:
        for subdir in self.SUBDIRS:
            (target / self.root / subdir).mkdir(parents=True, exist_ok=True)

    def installed_info(
        self, project_path: str | Path, catalog: Catalog | None = None
    ) -> InstalledInfo:
        project = Path(project_path)
        base = project / self.root
        info = InstalledInfo(adapter=self.name, version=self.installed_version(project))

        info.agents = _names(base / "agents", suffix=".md")
        info.workflows = _names(base / "workflows", suffix=".md")
        skills_dir = base / "skills"
        if skills_dir.is_dir():
            info.skills = sorted(p.name for p in skills_dir.iterdir() if p.is_dir())

        if catalog is not None:
            info.modified_files = self.count_modified(project, catalog)
        return info

    def stale_paths(self, catalog: Catalog, project_path: str | Path) -> list[str]:
        """Installed agents, skills and workflows the catalog no longer has."""
        base = Path(project_path) / self.root
        stale = [
            f"agents/{name}.md"
            for name in _names(base / "agents", suffix=".md")
            if name not in catalog.agents
        ]
        skills_dir = base / "skills"
        if skills_dir.is_dir():
            stale.extend(
                f"skills/{p.name}/"
                for p in sorted(skills_dir.iterdir())
                if p.is_dir() and p.name not in catalog.skills
            )
        stale.extend(
            f"workflows/{name}.md"
            for name in _names(base / "workflows", suffix=".md")
            if name not in catalog.workflows
        )
        return stale


def _names(directory: Path, suffix: str) -> list[str]:
    if not directory.is_dir():
        return []
    return sorted(
        p.name[: -len(suffix)]
        for p in directory.iterdir()
        if p.is_file() and p.name.endswith(suffix)
    )
