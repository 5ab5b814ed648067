"""Catalog data models — agents, skills, workflows and the catalog that owns them.

Entries are frozen: a filtered catalog shares entry objects with the catalog
it was derived from.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AgentEntry:
    """A specialist agent persona."""

    name: str
    content: str  # Full installable text, metadata block included
    description: str = ""
    skills: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()


@dataclass(frozen=True)
class SkillScript:
    """An auxiliary file shipped inside a skill's ``scripts/`` directory."""

    path: str  # Relative to the scripts/ directory, "/" separated
    content: str


@dataclass(frozen=True)
class SkillEntry:
    """A domain skill: a SKILL.md body plus optional scripts."""

    name: str
    content: str
    description: str = ""
    scripts: tuple[SkillScript, ...] = ()


@dataclass(frozen=True)
class WorkflowEntry:
    """A slash-command workflow."""

    name: str
    content: str
    description: str = ""


@dataclass(frozen=True)
class Catalog:
    """An immutable collection of template entries, keyed by name per category."""

    version: str = ""
    agents: dict[str, AgentEntry] = field(default_factory=dict)
    skills: dict[str, SkillEntry] = field(default_factory=dict)
    workflows: dict[str, WorkflowEntry] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.agents or self.skills or self.workflows)

    def sorted_agents(self) -> list[AgentEntry]:
        return [self.agents[name] for name in sorted(self.agents)]

    def sorted_skills(self) -> list[SkillEntry]:
        return [self.skills[name] for name in sorted(self.skills)]

    def sorted_workflows(self) -> list[WorkflowEntry]:
        return [self.workflows[name] for name in sorted(self.workflows)]

    def filter(
        self,
        agent_names: list[str] | None = None,
        skill_names: list[str] | None = None,
    ) -> Catalog:
        from agen.catalog.selector import filter_catalog

        return filter_catalog(self, agent_names or [], skill_names or [])

    def summary(self) -> str:
        return (
            f"{len(self.agents)} agents, {len(self.skills)} skills, "
            f"{len(self.workflows)} workflows"
        )
