"""Selector — narrow a catalog to the agents and skills a user asked for."""

from __future__ import annotations

from agen.catalog.models import Catalog


def filter_catalog(
    catalog: Catalog,
    agent_names: list[str],
    skill_names: list[str],
) -> Catalog:
    """Return a new catalog holding only the requested agents and skills.

    An empty name list lets that category through unfiltered. Requested
    names that are not in the catalog are dropped without error. Workflows
    are never filtered.
    """
    if agent_names:
        agents = {n: catalog.agents[n] for n in agent_names if n in catalog.agents}
    else:
        agents = dict(catalog.agents)

    if skill_names:
        skills = {n: catalog.skills[n] for n in skill_names if n in catalog.skills}
    else:
        skills = dict(catalog.skills)

    return Catalog(
        version=catalog.version,
        agents=agents,
        skills=skills,
        workflows=dict(catalog.workflows),
    )


def unknown_names(
    catalog: Catalog,
    agent_names: list[str],
    skill_names: list[str],
) -> list[str]:
    """List requested names that ``filter_catalog`` would silently drop."""
    missing = [f"agent:{n}" for n in agent_names if n not in catalog.agents]
    missing.extend(f"skill:{n}" for n in skill_names if n not in catalog.skills)
    return missing
