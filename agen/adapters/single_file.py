"""Concatenated-file adapters — the whole catalog rendered into one rules file.

The rules file is classified as a single unit: unchanged, untouched since
the last sync (regenerated), or modified locally (skipped unless forced).
"""

from __future__ import annotations

from agen.adapters.base import Adapter
from agen.adapters.rules import RulesLayout, render_rules
from agen.catalog.models import Catalog
from agen.sync.engine import PlannedFile


class RulesFileAdapter(Adapter):
    """An adapter whose destination is one generated rules file plus optional companions."""

    layout: RulesLayout = RulesLayout(title="AGEN Rules")

    def plan(self, catalog: Catalog) -> list[PlannedFile]:
        files = [PlannedFile(self.rules_file, self.build_rules_content(catalog))]
        files.extend(self.companion_files(catalog))
        return files

    def build_rules_content(self, catalog: Catalog) -> str:
        return render_rules(catalog, self.layout)

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        """Extra tool configuration written next to the rules file."""
        return []


class CursorAdapter(RulesFileAdapter):
    key = "cursor"
    name = "Cursor"
    markers = (".cursorrules",)
    rules_file = ".cursorrules"
    layout = RulesLayout(title="Cursor Rules")


class WindsurfAdapter(RulesFileAdapter):
    key = "windsurf"
    name = "Windsurf"
    markers = (".windsurfrules",)
    rules_file = ".windsurfrules"
    layout = RulesLayout(title="Windsurf Rules")


class ClineAdapter(RulesFileAdapter):
    key = "cline"
    name = "Cline"
    markers = (".clinerules", ".cline/")
    rules_file = ".clinerules"
    layout = RulesLayout(title="Cline Rules")


class ClaudeCodeAdapter(RulesFileAdapter):
    key = "claudecode"
    name = "ClaudeCode"
    markers = ("CLAUDE.md", "claude.md")
    rules_file = "CLAUDE.md"
    layout = RulesLayout(
        title="CLAUDE.md",
        intro=(
            "Project guidance for Claude Code. Delegate to the agent whose "
            "description fits the task and load the matching skills."
        ),
    )


class CopilotWorkspaceAdapter(RulesFileAdapter):
    key = "copilotworkspace"
    name = "CopilotWorkspace"
    markers = (".github/copilot-instructions.md",)
    rules_file = ".github/copilot-instructions.md"
    layout = RulesLayout(
        title="Copilot Instructions",
        agents_heading="Available Personas",
        workflows_heading="Workflow Commands",
    )
