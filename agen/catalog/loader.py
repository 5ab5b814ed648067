"""Catalog loader — build a Catalog from a directory, a zip archive or the embedded bundle.

A catalog source is laid out as::

    agents/<name>.md
    skills/<name>/SKILL.md
    skills/<name>/scripts/...
    workflows/<name>.md
    VERSION                  # optional

Every source is first reduced to a mapping of relative paths to text, then
parsed the same way. Sources are never modified.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from collections import Counter
from importlib import resources
from pathlib import Path, PurePosixPath

from agen.catalog import frontmatter as fm
from agen.catalog.models import (
    AgentEntry,
    Catalog,
    SkillEntry,
    SkillScript,
    WorkflowEntry,
)
from agen.errors import LoadError

logger = logging.getLogger(__name__)

CATEGORY_DIRS = ("agents", "skills", "workflows")
SKILL_FILE = "SKILL.md"
VERSION_FILE = "VERSION"
UNKNOWN_VERSION = "unknown"
CACHE_SUBDIR = "templates"


def load(source: str | Path | None = None) -> Catalog:
    """Load a catalog from a directory, a zip archive, or the embedded bundle when ``source`` is empty."""
    if not source:
        return load_embedded()
    path = Path(source)
    if path.is_dir():
        return load_directory(path)
    if path.is_file() and zipfile.is_zipfile(path):
        return load_archive(path)
    raise LoadError(f"Catalog source is neither a directory nor a zip archive: {path}")


def load_directory(path: str | Path) -> Catalog:
    """Load a catalog from a directory on disk."""
    root = Path(path)
    if not root.is_dir():
        raise LoadError(f"Catalog source is not a directory: {root}")

    present = [c for c in CATEGORY_DIRS if (root / c).is_dir()]
    if not present:
        raise LoadError(
            f"Catalog source {root} contains none of: {', '.join(CATEGORY_DIRS)}"
        )

    files: dict[str, str] = {}
    try:
        for category in present:
            for item in sorted((root / category).rglob("*")):
                if not item.is_file():
                    continue
                rel = item.relative_to(root).as_posix()
                text = _decode(item.read_bytes(), rel)
                if text is not None:
                    files[rel] = text

        version_file = root / VERSION_FILE
        if version_file.is_file():
            files[VERSION_FILE] = version_file.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Cannot read catalog source {root}: {e}") from e

    return _build_catalog(files, source=str(root))


def load_archive(path: str | Path, prefix: str | None = None) -> Catalog:
    """Load a catalog from a zip archive.

    Archives downloaded from code hosts wrap everything in a top-level
    directory (``agen-main/...``). When ``prefix`` is not given, the
    directory that most member paths have in front of a category directory
    is used.
    """
    archive = Path(path)
    try:
        with zipfile.ZipFile(archive) as zf:
            names = [n for n in zf.namelist() if not n.endswith("/")]
            if prefix is None:
                prefix = _detect_prefix(names)
            prefix = prefix.strip("/")
            files: dict[str, str] = {}
            for name in names:
                rel = _strip_prefix(name, prefix)
                if rel is None:
                    continue
                top = rel.split("/", 1)[0]
                if top not in CATEGORY_DIRS and rel != VERSION_FILE:
                    continue
                text = _decode(zf.read(name), rel)
                if text is not None:
                    files[rel] = text
    except (OSError, zipfile.BadZipFile) as e:
        raise LoadError(f"Cannot read catalog archive {archive}: {e}") from e

    if not any(rel.split("/", 1)[0] in CATEGORY_DIRS for rel in files):
        raise LoadError(
            f"Catalog archive {archive} contains none of: {', '.join(CATEGORY_DIRS)}"
        )

    return _build_catalog(files, source=str(archive))


def load_embedded() -> Catalog:
    """Load the catalog bundled with the package."""
    with resources.as_file(resources.files("agen") / "data") as data_dir:
        return load_directory(data_dir)


def save_cache(catalog: Catalog, cache_dir: str | Path) -> Path:
    """Write a catalog to ``<cache_dir>/templates`` for offline reuse.

    Any previously cached catalog is replaced.
    """
    target = Path(cache_dir) / CACHE_SUBDIR
    if target.exists():
        shutil.rmtree(target)
    for category in CATEGORY_DIRS:
        (target / category).mkdir(parents=True, exist_ok=True)

    for rel, content in catalog_files(catalog).items():
        dest = target / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(content.encode("utf-8"))

    (target / VERSION_FILE).write_text(catalog.version + "\n", encoding="utf-8")
    return target


def load_cache(cache_dir: str | Path) -> Catalog:
    """Load a catalog previously written by :func:`save_cache`."""
    target = Path(cache_dir) / CACHE_SUBDIR
    if not target.is_dir():
        raise LoadError(f"No cached templates found in {cache_dir}")
    return load_directory(target)


def catalog_files(catalog: Catalog) -> dict[str, str]:
    """Render a catalog back to its source layout (relative path -> text)."""
    files: dict[str, str] = {}
    for agent in catalog.sorted_agents():
        files[f"agents/{agent.name}.md"] = agent.content
    for skill in catalog.sorted_skills():
        files[f"skills/{skill.name}/{SKILL_FILE}"] = skill.content
        for script in skill.scripts:
            files[f"skills/{skill.name}/scripts/{script.path}"] = script.content
    for workflow in catalog.sorted_workflows():
        files[f"workflows/{workflow.name}.md"] = workflow.content
    return files


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_agent(name: str, content: str) -> AgentEntry:
    metadata, body = fm.parse(content)
    return AgentEntry(
        name=name,
        content=content,
        description=fm.get_description(metadata, body),
        skills=fm.get_list(metadata, "skills"),
        tools=fm.get_list(metadata, "tools"),
    )


def parse_skill(name: str, content: str, scripts: tuple[SkillScript, ...] = ()) -> SkillEntry:
    metadata, body = fm.parse(content)
    return SkillEntry(
        name=name,
        content=content,
        description=fm.get_description(metadata, body),
        scripts=scripts,
    )


def parse_workflow(name: str, content: str) -> WorkflowEntry:
    metadata, body = fm.parse(content)
    return WorkflowEntry(
        name=name,
        content=content,
        description=fm.get_description(metadata, body),
    )


def _build_catalog(files: dict[str, str], source: str) -> Catalog:
    agents: dict[str, AgentEntry] = {}
    workflows: dict[str, WorkflowEntry] = {}
    skill_bodies: dict[str, str] = {}
    skill_scripts: dict[str, list[SkillScript]] = {}
    skill_dirs: set[str] = set()

    for rel in sorted(files):
        parts = PurePosixPath(rel).parts
        content = files[rel]

        if parts[0] == "skills" and len(parts) >= 3:
            skill_dirs.add(parts[1])

        if parts[0] == "agents" and len(parts) == 2 and rel.endswith(".md"):
            name = parts[1][: -len(".md")]
            agents[name] = parse_agent(name, content)

        elif parts[0] == "workflows" and len(parts) == 2 and rel.endswith(".md"):
            name = parts[1][: -len(".md")]
            workflows[name] = parse_workflow(name, content)

        elif parts[0] == "skills" and len(parts) == 3 and parts[2] == SKILL_FILE:
            skill_bodies[parts[1]] = content

        elif parts[0] == "skills" and len(parts) >= 4 and parts[2] == "scripts":
            script = SkillScript(path="/".join(parts[3:]), content=content)
            skill_scripts.setdefault(parts[1], []).append(script)

    skills: dict[str, SkillEntry] = {}
    for name, content in skill_bodies.items():
        skills[name] = parse_skill(name, content, tuple(skill_scripts.get(name, [])))

    for name in sorted(skill_dirs - set(skill_bodies)):
        logger.debug("Skipping skills/%s: no %s", name, SKILL_FILE)

    version = files.get(VERSION_FILE, "").strip() or UNKNOWN_VERSION
    catalog = Catalog(version=version, agents=agents, skills=skills, workflows=workflows)
    logger.debug("Loaded catalog from %s: %s", source, catalog.summary())
    return catalog


def _decode(data: bytes, rel: str) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Skipping %s: not valid UTF-8 text", rel)
        return None


def _detect_prefix(names: list[str]) -> str:
    counts: Counter[str] = Counter()
    for name in sorted(names):
        parts = name.split("/")
        for i, part in enumerate(parts[:-1]):
            if part in CATEGORY_DIRS:
                counts["/".join(parts[:i])] += 1
                break
    if not counts:
        return ""
    return counts.most_common(1)[0][0]


def _strip_prefix(name: str, prefix: str) -> str | None:
    if not prefix:
        return name
    if not name.startswith(prefix + "/"):
        return None
    return name[len(prefix) + 1:]
