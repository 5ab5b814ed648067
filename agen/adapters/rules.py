"""Rules file rendering — the catalog as one generated markdown document.

Entries are sorted by name inside each section so that repeated renders of
the same catalog are byte-identical. Nothing time-dependent is written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from agen.catalog.models import Catalog

GENERATED_NOTE = (
    "<!-- Generated by AGEN (AI Agent Template Manager). "
    "Run `agen update` to refresh; local edits are kept unless --force is used. -->"
)

_ENTRY_RE = re.compile(r"^- \*\*/?([^*]+)\*\*")


@dataclass(frozen=True)
class RulesLayout:
    """Headings used by one tool's rules file."""

    title: str
    intro: str = ""
    agents_heading: str = "Available Agents"
    skills_heading: str = "Available Skills"
    workflows_heading: str = "Workflows"


DEFAULT_INTRO = (
    "Use the specialist agent that best matches the task, apply the listed "
    "skills, and follow the workflows when the user invokes them."
)


def render_rules(catalog: Catalog, layout: RulesLayout) -> str:
    lines = [f"# {layout.title}", "", GENERATED_NOTE, ""]
    lines += [layout.intro or DEFAULT_INTRO, ""]

    if catalog.agents:
        lines += [f"## {layout.agents_heading}", ""]
        for agent in catalog.sorted_agents():
            line = _entry(agent.name, agent.description)
            if agent.skills:
                line += f" (skills: {', '.join(agent.skills)})"
            lines.append(line)
        lines.append("")

    if catalog.skills:
        lines += [f"## {layout.skills_heading}", ""]
        for skill in catalog.sorted_skills():
            lines.append(_entry(skill.name, skill.description))
        lines.append("")

    if catalog.workflows:
        lines += [f"## {layout.workflows_heading}", ""]
        for workflow in catalog.sorted_workflows():
            lines.append(_entry("/" + workflow.name, workflow.description))
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


@dataclass
class RulesSections:
    agents: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    workflows: list[str] = field(default_factory=list)


def parse_rules(text: str, layout: RulesLayout | None = None) -> RulesSections:
    """Recover entry names from a rendered rules file. Best effort."""
    layout = layout or RulesLayout(title="")
    headings = {
        layout.agents_heading: "agents",
        layout.skills_heading: "skills",
        layout.workflows_heading: "workflows",
    }
    sections = RulesSections()
    current: list[str] | None = None

    for line in text.splitlines():
        if line.startswith("## "):
            attr = headings.get(line[3:].strip())
            current = getattr(sections, attr) if attr else None
            continue
        if current is None:
            continue
        match = _ENTRY_RE.match(line)
        if match:
            current.append(match.group(1).strip())

    return sections


def _entry(label: str, description: str) -> str:
    description = " ".join(description.split())
    if description:
        return f"- **{label}**: {description}"
    return f"- **{label}**"
