"""CLI entry point for skillpack."""

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.markup import escape

from skillpack import __version__
from skillpack.cli.constants import ExitCodes
from skillpack.cli.utils import get_console, setup_logging
from skillpack.config import ConfigurationError, SkillpackSettings, load_settings

app = typer.Typer(help="skillpack - Install and activate agent skills")

console = get_console()

logger = logging.getLogger(__name__)


def _settings(ctx: typer.Context) -> SkillpackSettings:
    return ctx.obj["settings"]


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", help="Show version"),
    config: Path = typer.Option(
        None, "--config", help="Settings file (default: ~/.skillpack/settings.json)"
    ),
) -> None:
    """skillpack - search, install and activate agent skills.

    \b
    Examples:
        skillpack search weather                          # Search the registry
        skillpack install registry:weather                # Install from the registry
        skillpack install vercel-labs/agent-skills@web-design
        skillpack install https://github.com/o/r/tree/main/skills --skill pdf
        skillpack list                                    # Skills available here
        skillpack show web-design                         # Print activation text
    """
    if version_flag:
        console.print(f"skillpack version {__version__}")
        raise typer.Exit(ExitCodes.SUCCESS)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        return

    load_dotenv()
    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    setup_logging(settings)
    ctx.obj = {"settings": settings}


@app.command("search")
def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search keywords"),
    limit: int = typer.Option(None, "--limit", "-n", help="Maximum results (1-100)"),
    catalog: bool = typer.Option(
        False, "--catalog", help="Search the community catalog instead of the registry"
    ),
) -> None:
    """Search for skills.

    Examples:
        skillpack search weather
        skillpack search "pdf tools" --catalog --limit 5
    """
    from skillpack.cli.skill_commands import search_skills

    search_skills(_settings(ctx), query, limit, catalog)


@app.command("install")
def install_command(
    ctx: typer.Context,
    source: str = typer.Argument(
        ..., help="registry:SLUG, owner/repo[@skill], GitHub URL, git URL or local path"
    ),
    skill: list[str] = typer.Option(None, "--skill", "-s", help="Only install matching skills"),
    root: Path = typer.Option(
        None, "--root", help="Install directory (default: <workspace>/skills)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing skills"),
    version: str = typer.Option(None, "--version", help="Registry version to install"),
    tag: str = typer.Option(None, "--tag", help="Registry tag to install"),
    catalog: bool = typer.Option(
        False, "--catalog", help="Treat SOURCE as a community catalog slug or query"
    ),
) -> None:
    """Install skills into the workspace.

    Examples:
        skillpack install registry:weather --version 1.2.0
        skillpack install vercel-labs/agent-skills --skill web-design
        skillpack install ./my-skills --force
        skillpack install frontend-design --catalog
    """
    from skillpack.cli.skill_commands import install_skills

    install_skills(_settings(ctx), source, skill or [], root, force, version, tag, catalog)


@app.command("list-source")
def list_source_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="owner/repo, GitHub URL, git URL or local path"),
) -> None:
    """List the skills a source contains without installing them."""
    from skillpack.cli.skill_commands import list_source

    list_source(source)


@app.command("list")
def list_command(
    ctx: typer.Context,
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace directory"),
) -> None:
    """List skills available on this machine."""
    from skillpack.cli.skill_commands import list_skills

    list_skills(_settings(ctx), workspace)


@app.command("show")
def show_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Skill name"),
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace directory"),
) -> None:
    """Print a skill's activation text."""
    from skillpack.cli.skill_commands import show_skill

    show_skill(_settings(ctx), name, workspace)


if __name__ == "__main__":
    app()
