"""agen CLI — install and sync agent templates into a project."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from agen import __version__

console = Console()
logger = logging.getLogger(__name__)


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/] {message}")
    raise SystemExit(1)


def _load_catalog(source: str | None):
    """Explicit or configured source (then cached), else the last cache, else the embedded bundle."""
    from agen.catalog.loader import CACHE_SUBDIR, load, load_cache, load_embedded, save_cache
    from agen.config import load_config

    config = load_config()
    cache_dir = config.get_cache_dir()
    source = source or config.catalog_source

    if not source:
        if (cache_dir / CACHE_SUBDIR).is_dir():
            logger.debug("Using cached catalog in %s", cache_dir)
            return load_cache(cache_dir)
        return load_embedded()

    catalog = load(source)
    try:
        save_cache(catalog, cache_dir)
    except OSError as e:
        logger.warning("Could not cache catalog in %s: %s", cache_dir, e)
    return catalog


def _registry():
    from agen.adapters.registry import default_registry
    from agen.config import load_config

    return default_registry(default=load_config().default_adapter)


def _print_report(report, verbose: bool = False) -> None:
    if report.dry_run:
        console.print("[yellow]DRY RUN: no files were written[/]")

    if report.added:
        console.print(f"\n[bold]Added {len(report.added)} file(s):[/]")
        for path in report.added:
            console.print(f"  [green]+[/] {path}")

    if report.updated:
        console.print(f"\n[bold]Updated {len(report.updated)} file(s):[/]")
        for path in report.updated:
            console.print(f"  [yellow]~[/] {path}")

    if report.skipped:
        console.print(f"\n[bold]Skipped {len(report.skipped)} file(s):[/]")
        for item in report.skipped:
            console.print(f"  [cyan]-[/] {item}")
        console.print("  [dim]Re-run with --force to overwrite them.[/]")

    if verbose and report.unchanged:
        console.print(f"\n[dim]{len(report.unchanged)} file(s) already up to date[/]")

    if not report.has_changes:
        console.print("\n[green]Already up to date.[/]")


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", help="Logging level for library output")
def main(log_level: str):
    """AGEN — AI agent template manager.

    Installs agents, skills and workflows into a project in the layout your
    AI coding tool expects, and keeps them in sync without overwriting
    your local edits.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# ── Init ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("path", default=".")
@click.option("--ide", "ide_name", default=None, help="Destination to install for (default: detect)")
@click.option("--agents", default=None, help="Comma-separated agents to install (default: all)")
@click.option("--skills", default=None, help="Comma-separated skills to install (default: all)")
@click.option("--source", default=None, help="Catalog directory or zip archive")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing installation")
@click.option("--dry-run", is_flag=True, help="Show what would be written")
@click.option("--verbose", "-v", is_flag=True, help="Show unchanged files too")
def init(
    path: str,
    ide_name: str | None,
    agents: str | None,
    skills: str | None,
    source: str | None,
    force: bool,
    dry_run: bool,
    verbose: bool,
):
    """Install templates into the project at PATH."""
    from agen.catalog.selector import unknown_names
    from agen.errors import AgenError, SyncError
    from agen.sync.engine import InstallOptions

    target = Path(path).resolve()
    console.print(f"\n[bold blue]AGEN[/] — Installing into: {target}\n")

    try:
        catalog = _load_catalog(source)
        agent_names, skill_names = _split(agents), _split(skills)
        for missing in unknown_names(catalog, agent_names, skill_names):
            console.print(f"  [yellow]![/] Not in catalog, ignored: {missing}")
        catalog = catalog.filter(agent_names, skill_names)

        adapter = _registry().resolve(target, ide_name)
        console.print(f"  Destination: [cyan]{adapter.name}[/] ({adapter.rules_path()})")

        report = adapter.install(
            catalog,
            InstallOptions(target_dir=target, dry_run=dry_run, force=force, verbose=verbose),
        )
    except SyncError as e:
        _print_report(e.report, verbose)
        _fail(str(e))
        return
    except AgenError as e:
        _fail(str(e))
        return

    _print_report(report, verbose)


# ── Update ───────────────────────────────────────────────────────────


@main.command()
@click.argument("path", default=".")
@click.option("--ide", "ide_name", default=None, help="Destination to update (default: detect)")
@click.option("--source", default=None, help="Catalog directory or zip archive")
@click.option("--force", "-f", is_flag=True, help="Overwrite locally modified files")
@click.option("--dry-run", is_flag=True, help="Show what would change")
@click.option("--verbose", "-v", is_flag=True, help="Show unchanged files too")
def update(
    path: str,
    ide_name: str | None,
    source: str | None,
    force: bool,
    dry_run: bool,
    verbose: bool,
):
    """Sync installed templates at PATH with the catalog."""
    from agen.errors import AgenError, SyncError
    from agen.sync.engine import UpdateOptions

    target = Path(path).resolve()
    console.print(f"\n[bold blue]AGEN[/] — Updating: {target}\n")

    try:
        catalog = _load_catalog(source)
        registry = _registry()
        adapter = registry.require(ide_name) if ide_name else registry.detect(target)
        if adapter is None:
            _fail("No AGEN installation found. Run 'agen init' first.")
            return
        console.print(f"  Destination: [cyan]{adapter.name}[/]")

        report = adapter.update(
            catalog,
            UpdateOptions(target_dir=target, dry_run=dry_run, force=force, verbose=verbose),
        )
    except SyncError as e:
        _print_report(e.report, verbose)
        _fail(str(e))
        return
    except AgenError as e:
        _fail(str(e))
        return

    _print_report(report, verbose)


# ── Status ───────────────────────────────────────────────────────────


@main.command()
@click.argument("path", default=".")
@click.option("--source", default=None, help="Catalog to compare against")
def status(path: str, source: str | None):
    """Show what is installed at PATH."""
    from agen.errors import AgenError

    target = Path(path).resolve()
    console.print(f"\n[bold blue]AGEN[/] — Status: {target}\n")

    try:
        adapter = _registry().detect(target)
        if adapter is None:
            console.print("[yellow]No installation detected.[/] Run 'agen init' to set one up.")
            return
        info = adapter.installed_info(target, _load_catalog(source))
    except AgenError as e:
        _fail(str(e))
        return

    console.print(f"  [green]v[/] Destination: {info.adapter} ({adapter.rules_path()})")
    table = Table(show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Agents", str(info.agent_count))
    table.add_row("Skills", str(info.skill_count))
    table.add_row("Workflows", str(info.workflow_count))
    table.add_row("Version", info.version)
    console.print(table)

    if info.modified_files:
        console.print(f"  [yellow]![/] {info.modified_files} file(s) differ from the catalog")


# ── Diff ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("path", default=".")
@click.option("--source", default=None, help="Catalog to compare against")
def diff(path: str, source: str | None):
    """Preview what 'agen update' would change at PATH."""
    from agen.errors import AgenError
    from agen.sync.engine import UpdateOptions

    target = Path(path).resolve()
    console.print(f"\n[bold blue]AGEN[/] — Diff: {target}\n")

    try:
        adapter = _registry().detect(target)
        if adapter is None:
            _fail("No AGEN installation found.")
            return
        catalog = _load_catalog(source)
        report = adapter.update(catalog, UpdateOptions(target_dir=target, dry_run=True))
        stale = adapter.stale_paths(catalog, target)
    except AgenError as e:
        _fail(str(e))
        return

    _print_report(report)
    for path_ in stale:
        console.print(f"  [red]x[/] {path_} (removed from catalog)")


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.option("--source", default=None, help="Catalog directory or zip archive")
def list_entries(source: str | None):
    """List the agents, skills and workflows in the catalog."""
    from agen.errors import AgenError

    try:
        catalog = _load_catalog(source)
    except AgenError as e:
        _fail(str(e))
        return

    if catalog.is_empty:
        console.print("[yellow]The catalog has no agents, skills or workflows.[/]")
        return

    for title, entries in (
        ("Agents", catalog.sorted_agents()),
        ("Skills", catalog.sorted_skills()),
        ("Workflows", catalog.sorted_workflows()),
    ):
        table = Table(title=f"{title} ({len(entries)})")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for entry in entries:
            table.add_row(entry.name, entry.description[:70])
        console.print(table)


# ── Adapters ─────────────────────────────────────────────────────────


@main.command()
def adapters():
    """List supported destinations in detection priority order."""
    from agen.errors import AgenError

    try:
        registry = _registry()
    except AgenError as e:
        _fail(str(e))
        return

    table = Table(title="Destinations (detection order)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Rules file")

    for i, key in enumerate(registry.priority()):
        adapter = registry.require(key)
        table.add_row(str(i + 1), key, adapter.name, adapter.rules_path())

    console.print(table)
    console.print(f"\nDefault when nothing is detected: [cyan]{registry.default}[/]")


if __name__ == "__main__":
    main()
