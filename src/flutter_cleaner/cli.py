"""CLI interface for flutter-cleaner."""

from pathlib import Path
from typing import Optional

import typer

from flutter_cleaner import __version__
from flutter_cleaner.config import Config, ConfigManager, find_config_file
from flutter_cleaner.dependencies import deep_clean_index
from flutter_cleaner.display import (
    confirm_action,
    confirm_deep_clean,
    console,
    show_cleaning_progress,
    show_cleanup_result,
    show_deep_clean_warning,
    show_global_plan,
    show_global_results,
    show_outcome,
    show_project_header,
    show_project_preview,
    show_projects,
    show_restore_instructions,
    show_summary,
)
from flutter_cleaner.engine import GlobalCacheCleanupEngine
from flutter_cleaner.exceptions import ConfigError
from flutter_cleaner.log import setup_logging
from flutter_cleaner.models import CleanLevel, CleanupPlan, GlobalCleanupResult
from flutter_cleaner.projects import clean_project, detect_project, find_projects, preview_project

# Create Typer app
app = typer.Typer(
    name="flutter-cleaner",
    help="Free disk space used by Flutter build artifacts and dependency caches",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage registered projects and options.", no_args_is_help=True)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"flutter-cleaner version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """flutter-cleaner - clean Flutter build artifacts and unused global caches."""
    setup_logging(verbose)


def _config_manager(config_path: Optional[Path]) -> Optional[ConfigManager]:
    path = config_path or find_config_file(Path.cwd())
    return ConfigManager(path) if path else None


@app.command()
def clean(
    project: Path = typer.Option(
        Path("."), "--project", "-p", help="Flutter project path (default: current directory)"
    ),
    fast: bool = typer.Option(False, "--fast", "-f", help="Clean build directories only"),
    standard: bool = typer.Option(False, "--standard", "-s", help="Clean build output and tool caches"),
    deep: bool = typer.Option(
        False, "--deep", "-D", help="Also remove unused entries from global Gradle/Pub/CocoaPods caches"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show what would be cleaned without deleting"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Clean a Flutter project, and with --deep the global caches."""
    if fast and standard:
        console.print("[red]Error: --fast and --standard are mutually exclusive[/red]")
        raise typer.Exit(1)

    info = detect_project(project)
    if info is None:
        console.print(f"[red]Not a Flutter project: {project.resolve()}[/red]")
        console.print("[dim]Make sure the directory contains pubspec.yaml[/dim]")
        raise typer.Exit(1)

    level = CleanLevel.FAST if fast else CleanLevel.STANDARD
    manager = _config_manager(config_path)
    config = manager.load() if manager else Config()

    show_project_header(info, level, deep, dry_run)
    preview = preview_project(info.path, level, config.clean_options)

    if not preview and not deep:
        console.print("[green]✓ No cache files found to clean![/green]")
        raise typer.Exit(0)

    if preview:
        show_project_preview(preview, info.path)

    engine = None
    plan = None
    if deep:
        if manager:
            console.print(f"[cyan]Using config:[/cyan] {manager.config_path}")
        project_paths = manager.enabled_project_paths() if manager else []
        index = deep_clean_index(project_paths, fallback_project=info.path)
        if not index.all_packages:
            # An empty index would mark every cache entry unused
            console.print("[red]No locked packages found in any project; refusing to deep clean.[/red]")
            console.print("[dim]Run [bold]flutter pub get[/bold] in your projects first[/dim]")
            raise typer.Exit(1)
        console.print(
            f"[dim]Keeping {len(index.all_packages)} package versions "
            f"used by {len(index.projects)} project(s)[/dim]"
        )

        engine = GlobalCacheCleanupEngine(index, options=config.global_cache)
        with show_cleaning_progress() as progress:
            progress.add_task("Scanning global caches...", total=None)
            plan = engine.plan()
        console.print()
        show_global_plan(plan)

    def ask(global_plan: CleanupPlan | None = None) -> bool:
        if global_plan is not None:
            show_deep_clean_warning(global_plan)
            return confirm_deep_clean(info.name)
        console.print()
        return confirm_action("Proceed with cleanup?")

    needs_confirm = not dry_run and not yes

    global_result: Optional[GlobalCleanupResult] = None
    if engine is not None and plan is not None:
        global_result = engine.execute(plan, dry_run=dry_run, confirm=ask if needs_confirm else None)
        if global_result.cancelled:
            show_outcome(global_result)
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)
    elif needs_confirm and not ask():
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    console.print("\n[bold]Cleaning...[/bold]")
    project_results = clean_project(info.path, level, config.clean_options, dry_run=dry_run)
    for platform, result in project_results.items():
        show_cleanup_result(result, platform.label)

    if global_result is not None:
        show_global_results(global_result)
        show_outcome(global_result)

    show_summary(project_results, global_result, dry_run)

    if not dry_run:
        show_restore_instructions(list(project_results), deep)

    has_errors = any(r.errors for r in project_results.values()) or bool(
        global_result and global_result.errors
    )
    if has_errors:
        raise typer.Exit(1)


@app.command()
def scan(
    root: Path = typer.Argument(Path("."), help="Directory to search"),
    depth: int = typer.Option(3, "--depth", help="Maximum directory depth"),
    register: bool = typer.Option(False, "--register", help="Register found projects in the config"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Find Flutter projects under a directory."""
    projects = list(find_projects(root.resolve(), max_depth=depth))
    if not projects:
        console.print("[yellow]No Flutter projects found.[/yellow]")
        raise typer.Exit(0)

    for found in projects:
        platforms = [name for name, present in (("android", found.has_android), ("ios", found.has_ios)) if present]
        console.print(f"  • [bold]{found.name}[/bold] {found.path} [dim]{' '.join(platforms)}[/dim]")

    if register:
        manager = ConfigManager(config_path)
        try:
            for found in projects:
                manager.add_project(found.name, found.path)
        except ConfigError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        console.print(f"\n[green]Registered {len(projects)} project(s) in {manager.config_path}[/green]")


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Write a default config file."""
    manager = ConfigManager(config_path)
    if manager.exists() and not force:
        console.print(f"[yellow]Config already exists: {manager.config_path}[/yellow]")
        raise typer.Exit(1)
    try:
        manager.initialize()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Config initialized at: {manager.config_path}[/green]")


@config_app.command("add")
def config_add(
    project: Path = typer.Argument(..., help="Project to register"),
    name: Optional[str] = typer.Option(None, "--name", help="Display name (default: pubspec name)"),
    disabled: bool = typer.Option(False, "--disabled", help="Register without enabling"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Register a project whose dependencies deep clean must keep."""
    info = detect_project(project)
    if info is None:
        console.print(f"[red]Not a Flutter project: {project.resolve()}[/red]")
        raise typer.Exit(1)

    manager = ConfigManager(config_path)
    try:
        manager.add_project(name or info.name, info.path, enabled=not disabled)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Registered {name or info.name}[/green]")


@config_app.command("remove")
def config_remove(
    project: Path = typer.Argument(..., help="Project to unregister"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Unregister a project."""
    manager = ConfigManager(config_path)
    try:
        removed = manager.remove_project(project)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if not removed:
        console.print(f"[yellow]Not registered: {project.resolve()}[/yellow]")
        raise typer.Exit(1)
    console.print("[green]Removed[/green]")


@config_app.command("list")
def config_list(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """List registered projects."""
    manager = ConfigManager(config_path)
    config = manager.load()
    if not config.projects:
        console.print("[yellow]No projects registered.[/yellow]")
        console.print("[dim]Run [bold]flutter-cleaner config add <path>[/bold] to register one[/dim]")
        return
    show_projects(config.projects)


if __name__ == "__main__":
    app()
