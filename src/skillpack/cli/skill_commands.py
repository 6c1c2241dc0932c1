"""CLI commands for searching, installing and inspecting skills."""

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.markup import escape
from rich.table import Table

from skillpack.cli.constants import ExitCodes
from skillpack.cli.utils import get_console
from skillpack.config.schema import SkillpackSettings
from skillpack.skills.errors import SkillError, ValidationError
from skillpack.skills.hub import SkillHub
from skillpack.skills.installer import (
    REGISTRY_SOURCE_PREFIX,
    CatalogInstallRequest,
    InstalledSkill,
    RegistryInstallRequest,
    SkillInstaller,
    SourceInstallRequest,
)
from skillpack.skills.manager import SkillManager, render_skill

console = get_console()
logger = logging.getLogger(__name__)


def build_hub(settings: SkillpackSettings) -> SkillHub:
    """Create a registry client from hub settings."""
    return SkillHub(
        registry_url=settings.hub.registry_url,
        catalog_url=settings.hub.catalog_url,
        timeout=settings.hub.timeout,
    )


def _fail(error: Exception) -> NoReturn:
    logger.error(f"Command failed: {error}")
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(ExitCodes.GENERAL_ERROR)


def _manager_for(settings: SkillpackSettings, workspace: Path | None) -> SkillManager:
    if workspace is not None:
        return SkillManager.from_workspace_dir(workspace)
    return SkillManager.from_settings(settings)


def search_skills(
    settings: SkillpackSettings, query: str, limit: int | None, catalog: bool
) -> None:
    """Search the registry (or the community catalog) and print a results table."""
    hub = build_hub(settings)
    limit = limit if limit is not None else settings.hub.search_limit

    try:
        if catalog:
            catalog_results = hub.search_catalog(query, limit)
        else:
            registry_results = hub.search_registry(query, limit)
    except SkillError as e:
        _fail(e)

    if catalog:
        if not catalog_results:
            console.print(f"[yellow]No catalog results for '{escape(query)}'[/yellow]")
            return
        table = Table(title="Catalog Skills", show_header=True, header_style="bold cyan")
        table.add_column("Slug", style="cyan")
        table.add_column("Name")
        table.add_column("Source", style="dim")
        table.add_column("Installs", justify="right")
        for item in catalog_results:
            table.add_row(
                escape(item.slug), escape(item.name), escape(item.source), str(item.installs)
            )
    else:
        if not registry_results:
            console.print(f"[yellow]No registry results for '{escape(query)}'[/yellow]")
            return
        table = Table(title="Registry Skills", show_header=True, header_style="bold cyan")
        table.add_column("Slug", style="cyan")
        table.add_column("Name")
        table.add_column("Version")
        table.add_column("Score", justify="right")
        table.add_column("Summary", style="dim")
        for item in registry_results:
            table.add_row(
                escape(item.slug),
                escape(item.display_name or ""),
                escape(item.version or ""),
                f"{item.score:.2f}",
                escape(item.summary or ""),
            )

    console.print(table)


def _check_install_options(
    source: str,
    skill_filters: list[str],
    version: str | None,
    tag: str | None,
    catalog: bool,
) -> None:
    """Reject option combinations that the chosen install mode would ignore."""
    from_registry = not catalog and source.strip().startswith(REGISTRY_SOURCE_PREFIX)
    if skill_filters and catalog:
        raise ValidationError("--skill cannot be used with --catalog")
    if skill_filters and from_registry:
        raise ValidationError("--skill cannot be used with registry installs")
    if (version or tag) and not from_registry:
        raise ValidationError("--version and --tag only apply to registry: installs")


def install_skills(
    settings: SkillpackSettings,
    source: str,
    skill_filters: list[str],
    root: Path | None,
    force: bool,
    version: str | None,
    tag: str | None,
    catalog: bool,
) -> list[InstalledSkill]:
    """Install skills and print where they landed.

    `registry:SLUG` installs from the registry, `--catalog` resolves SOURCE
    through the community catalog, anything else is a source address.
    """
    try:
        _check_install_options(source, skill_filters, version, tag, catalog)
    except ValidationError as e:
        _fail(e)

    skills_root = root or settings.install_path
    installer = SkillInstaller(build_hub(settings))

    console.print(f"\n[bold]Installing from:[/bold] {escape(source)}\n")
    try:
        if catalog:
            installed = installer.install_from_catalog(
                CatalogInstallRequest(slug_or_query=source, skills_root=skills_root, force=force)
            )
        elif source.strip().startswith(REGISTRY_SOURCE_PREFIX):
            slug = source.strip()[len(REGISTRY_SOURCE_PREFIX) :]
            installed = [
                installer.install_from_registry(
                    RegistryInstallRequest(
                        slug=slug, version=version, tag=tag, skills_root=skills_root, force=force
                    )
                )
            ]
        else:
            installed = installer.install_from_source(
                SourceInstallRequest(
                    source=source,
                    skill_filters=skill_filters,
                    skills_root=skills_root,
                    force=force,
                )
            )
    except SkillError as e:
        _fail(e)
    except KeyboardInterrupt:
        console.print("\n[yellow]Install interrupted[/yellow]")
        raise typer.Exit(ExitCodes.INTERRUPTED)

    for skill in installed:
        console.print(f"[green]✓[/green] Installed skill: {skill.install_name}")
        console.print(f"  [dim]{skill.path}[/dim]")
    console.print()
    return installed


def list_source(source: str) -> None:
    """Print the skills a source contains without installing them."""
    try:
        skills = SkillInstaller().list_from_source(source)
    except SkillError as e:
        _fail(e)

    table = Table(title=f"Skills in {escape(source)}", show_header=True, header_style="bold cyan")
    table.add_column("Directory", style="cyan")
    table.add_column("Name")
    for skill in skills:
        table.add_row(escape(skill.directory), escape(skill.name) if skill.name else "[dim]-[/dim]")
    console.print(table)


def list_skills(settings: SkillpackSettings, workspace: Path | None) -> None:
    """Print skills available to an agent in the workspace."""
    manager = _manager_for(settings, workspace)
    skills = manager.discover_skills()
    if not skills:
        console.print("[yellow]No skills are currently available.[/yellow]")
        return

    table = Table(title="Available Skills", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Source", style="dim")
    for skill in skills:
        table.add_row(escape(skill.name), escape(skill.description), escape(skill.source))
    console.print(table)


def show_skill(settings: SkillpackSettings, name: str, workspace: Path | None) -> None:
    """Print the activation text of a skill."""
    manager = _manager_for(settings, workspace)
    try:
        metadata, body = manager.load_skill_checked(name)
    except SkillError as e:
        _fail(e)

    console.print(render_skill(metadata, body), markup=False, highlight=False, soft_wrap=True)
