"""Rules-file adapters whose tool also needs a small configuration file.

The configuration points the tool at the generated rules file. Each file is
synced as its own unit, so a hand-tuned config survives an update while the
rules file is refreshed.
"""

from __future__ import annotations

import json

import yaml

from agen.adapters.rules import RulesLayout
from agen.adapters.single_file import RulesFileAdapter
from agen.catalog.models import Catalog
from agen.sync.engine import PlannedFile


class ContinueAdapter(RulesFileAdapter):
    key = "continue"
    name = "Continue"
    markers = (".continue/", ".continuerules")
    rules_file = ".continuerules"
    install_guard = ".continue"
    layout = RulesLayout(title="Continue Rules")

    CONFIG_FILE = ".continue/config.json"
    SCHEMA_URL = "https://continue.dev/schemas/config.json"

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        return [PlannedFile(self.CONFIG_FILE, self.build_config(catalog))]

    def build_config(self, catalog: Catalog) -> str:
        config = {
            "$schema": self.SCHEMA_URL,
            "contextProviders": [
                {"name": "file", "params": {"path": self.rules_file}},
                {"name": "codebase", "params": {}},
            ],
            "customCommands": [
                {
                    "name": wf.name,
                    "description": wf.description,
                    "prompt": f"Follow the /{wf.name} workflow described in {self.rules_file}.",
                }
                for wf in catalog.sorted_workflows()
            ],
        }
        return json.dumps(config, indent=2) + "\n"


class AiderAdapter(RulesFileAdapter):
    key = "aider"
    name = "Aider"
    markers = (".aider.conf.yml", ".aider/")
    rules_file = ".aider-context.md"
    install_guard = ".aider.conf.yml"
    layout = RulesLayout(title="Aider Context")

    CONFIG_FILE = ".aider.conf.yml"

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        return [PlannedFile(self.CONFIG_FILE, self.build_config())]

    def build_config(self) -> str:
        settings = {
            "auto-commits": False,
            "read": [self.rules_file],
        }
        header = "# Aider Configuration\n# Generated by AGEN; context lives in .aider-context.md\n"
        return header + yaml.safe_dump(settings, default_flow_style=False, sort_keys=False)


_JETBRAINS_CONFIG_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<!-- Generated by AGEN -->
<project version="4">
  <component name="AIAssistantSettings">
    <option name="enableCodeCompletion" value="true" />
    <option name="projectRulesFile" value="$PROJECT_DIR$/{rules_file}" />
  </component>
</project>
"""


class JetBrainsAdapter(RulesFileAdapter):
    key = "jetbrains"
    name = "JetBrains"
    markers = (".idea/",)
    rules_file = ".jbrules.md"
    install_guard = ".idea/ai-assistant.xml"
    layout = RulesLayout(title="Project Rules")

    CONFIG_FILE = ".idea/ai-assistant.xml"

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        return [PlannedFile(self.CONFIG_FILE, self.build_config())]

    def build_config(self) -> str:
        return _JETBRAINS_CONFIG_TEMPLATE.format(rules_file=self.rules_file)


_NEOVIM_LUA_TEMPLATE = """\
-- Generated by AGEN
-- Exposes the project's AI rules to assistant plugins.
vim.g.ai_rules = vim.fn.getcwd() .. "/{rules_file}"
"""


class NeovimAdapter(RulesFileAdapter):
    key = "neovim"
    name = "Neovim"
    markers = (".nvim/", ".nvim.lua", ".exrc")
    rules_file = ".nvim/ai-rules.md"
    install_guard = ".nvim"
    layout = RulesLayout(title="Neovim AI Rules")

    LUA_FILE = ".nvim.lua"

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        return [PlannedFile(self.LUA_FILE, self.build_lua_config())]

    def build_lua_config(self) -> str:
        return _NEOVIM_LUA_TEMPLATE.format(rules_file=self.rules_file)


_DIR_LOCALS_TEMPLATE = """\
;;; .dir-locals.el --- Generated by AGEN
;;; Points gptel at the project's AI context.
((nil . ((gptel-context-file . "{rules_file}"))))
"""


class EmacsAdapter(RulesFileAdapter):
    key = "emacs"
    name = "Emacs"
    markers = (".dir-locals.el", ".emacs.d/")
    rules_file = ".emacs-project/ai-context.md"
    install_guard = ".emacs-project"
    layout = RulesLayout(title="Emacs AI Context")

    DIR_LOCALS_FILE = ".dir-locals.el"

    def companion_files(self, catalog: Catalog) -> list[PlannedFile]:
        return [PlannedFile(self.DIR_LOCALS_FILE, self.build_dir_locals())]

    def build_dir_locals(self) -> str:
        return _DIR_LOCALS_TEMPLATE.format(rules_file=self.rules_file)
