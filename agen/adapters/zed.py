"""Zed adapter — settings.json plus one prompt file per agent under .zed/prompts/."""

from __future__ import annotations

import json
from pathlib import Path

from agen.adapters.base import Adapter
from agen.adapters.rules import RulesLayout, render_rules
from agen.catalog import frontmatter as fm
from agen.catalog.models import AgentEntry, Catalog
from agen.sync.engine import PlannedFile


class ZedAdapter(Adapter):
    key = "zed"
    name = "Zed"
    markers = (".zed/",)
    rules_file = ".zed/settings.json"
    install_guard = ".zed/settings.json"
    layout = RulesLayout(title="AGEN Assistant Prompt")

    PROMPTS_DIR = ".zed/prompts"
    MAIN_PROMPT = ".zed/prompts/main.md"

    def plan(self, catalog: Catalog) -> list[PlannedFile]:
        files = [
            PlannedFile(self.rules_file, self.build_settings()),
            PlannedFile(self.MAIN_PROMPT, self.build_main_prompt(catalog)),
        ]
        for agent in catalog.sorted_agents():
            files.append(
                PlannedFile(
                    f"{self.PROMPTS_DIR}/{agent.name}.md",
                    self.build_prompt_content(agent.name, agent),
                )
            )
        return files

    def prepare(self, target: Path) -> None:
        (target / self.PROMPTS_DIR).mkdir(parents=True, exist_ok=True)

    def build_settings(self) -> str:
        settings = {
            "assistant": {
                "enabled": True,
                "version": "2",
            },
            "agen": {
                "prompts_dir": self.PROMPTS_DIR,
                "main_prompt": self.MAIN_PROMPT,
            },
        }
        return json.dumps(settings, indent=2) + "\n"

    def build_main_prompt(self, catalog: Catalog) -> str:
        return render_rules(catalog, self.layout)

    def build_prompt_content(self, name: str, agent: AgentEntry) -> str:
        _, body = fm.parse(agent.content)
        lines = [f"# {name}", ""]
        if agent.description:
            lines += [agent.description, ""]
        lines.append(body.strip())
        return "\n".join(lines).rstrip("\n") + "\n"

    def index_file(self) -> str:
        return self.MAIN_PROMPT

    def stale_paths(self, catalog: Catalog, project_path: str | Path) -> list[str]:
        prompts = Path(project_path) / self.PROMPTS_DIR
        if not prompts.is_dir():
            return []
        wanted = {f"{name}.md" for name in catalog.agents} | {"main.md"}
        return sorted(
            f"{self.PROMPTS_DIR}/{p.name}"
            for p in prompts.iterdir()
            if p.is_file() and p.suffix == ".md" and p.name not in wanted
        )
