"""Rich terminal display for flutter-cleaner."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from flutter_cleaner.config import ProjectConfig
from flutter_cleaner.models import (
    CleanLevel,
    CleanupOutcome,
    CleanupPlan,
    CleanupResult,
    GlobalCleanupResult,
    PathStat,
    Platform,
    ProjectInfo,
    StoreKind,
)

console = Console()

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

RESTORE_COMMANDS = {
    Platform.FLUTTER: "flutter pub get",
    Platform.ANDROID: "cd android && ./gradlew build",
    Platform.IOS: "cd ios && pod install",
}


def format_size(size_bytes: int, decimals: int = 2) -> str:
    """Format bytes to human-readable string (binary units)."""
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, decimals):g} {SIZE_UNITS[unit]}"


def relative_to(path: Path, base: Path) -> str:
    """Path relative to base for display, or the full path if outside it."""
    try:
        return str(path.relative_to(base)) or "."
    except ValueError:
        return str(path)


def show_project_header(project: ProjectInfo, level: CleanLevel, deep: bool, dry_run: bool) -> None:
    mode = "Deep" if deep else level.value.capitalize()
    console.print(f"[cyan]Project:[/cyan] {project.name}")
    console.print(f"[cyan]Path:[/cyan] {project.path}")
    console.print(f"[cyan]Mode:[/cyan] {mode}")
    if dry_run:
        console.print("\n[yellow]DRY RUN - No files will be deleted[/yellow]")
    console.print()


def show_project_preview(preview: dict[Platform, list[PathStat]], project_root: Path) -> int:
    """Display the project's clean targets. Returns the total size."""
    table = Table(title="Clean Targets", show_header=True, header_style="bold")
    table.add_column("Platform", style="yellow")
    table.add_column("Path")
    table.add_column("Size", justify="right")

    total = 0
    for platform, stats in preview.items():
        for stat in stats:
            table.add_row(platform.label, relative_to(stat.path, project_root), format_size(stat.size_bytes))
            total += stat.size_bytes

    console.print(table)
    console.print(f"[bold]Total: {format_size(total)}[/bold]")
    return total


def show_global_plan(plan: CleanupPlan) -> None:
    """Display unused global cache entries per store."""
    table = Table(title="Global Cache Preview", show_header=True, header_style="bold")
    table.add_column("Store")
    table.add_column("Unused entries", justify="right")
    table.add_column("Size", justify="right")

    for store, store_plan in plan.stores.items():
        if store_plan.error:
            table.add_row(store.label, "[dim]-[/dim]", f"[dim]{store_plan.error}[/dim]")
        else:
            table.add_row(store.label, str(store_plan.candidate_count), format_size(store_plan.estimated_bytes))

    console.print(table)
    console.print(f"[bold]Total: {format_size(plan.total_bytes)}[/bold]")


def show_cleanup_result(result: CleanupResult, label: str) -> None:
    """Display result of one cleanup batch."""
    if result.unavailable:
        console.print(f"  [dim]-[/dim] {label}: {result.unavailable}")
    elif result.success and not result.warnings:
        console.print(f"  [green]✓[/green] {label}: {format_size(result.freed_bytes)} freed")
    elif result.success:
        console.print(
            f"  [yellow]![/yellow] {label}: {format_size(result.freed_bytes)} freed, "
            f"{len(result.warnings)} skipped"
        )
    else:
        console.print(
            f"  [red]✗[/red] {label}: {format_size(result.freed_bytes)} freed, "
            f"{len(result.errors)} failed"
        )


def show_global_results(result: GlobalCleanupResult) -> None:
    for store, store_result in result.stores.items():
        show_cleanup_result(store_result, store_label(store))


def show_summary(
    project_results: dict[Platform, CleanupResult],
    global_result: GlobalCleanupResult | None,
    dry_run: bool,
) -> None:
    """Display the overall outcome of a run."""
    batches = list(project_results.values())
    if global_result is not None:
        batches.extend(global_result.stores.values())

    freed = sum(r.freed_bytes for r in batches)
    deleted = sum(len(r.deleted_paths) for r in batches)
    errors = [e for r in batches for e in r.errors]
    warnings = [w for r in batches for w in r.warnings]

    if dry_run:
        title, style = "Dry Run Complete", "yellow"
    elif errors or warnings:
        title, style = "Cleanup Finished With Issues", "yellow"
    else:
        title, style = "Cleanup Complete!", "green"

    lines = [
        f"[bold]{'Would free' if dry_run else 'Space freed'}:[/bold] {format_size(freed)}",
        f"[bold]Paths {'selected' if dry_run else 'removed'}:[/bold] {deleted}",
    ]
    if warnings:
        lines.append(f"[yellow]Skipped (already gone or no permission):[/yellow] {len(warnings)}")
    if errors:
        lines.append(f"[red]Failed:[/red] {len(errors)}")
        for error in errors[:10]:
            lines.append(f"  [red]✗[/red] {error.path}: {error.message}")

    console.print()
    console.print(Panel("\n".join(lines), title=title, border_style=style))


def show_outcome(result: GlobalCleanupResult) -> None:
    labels = {
        CleanupOutcome.CLEAN: "[green]All unused global cache entries removed[/green]",
        CleanupOutcome.PARTIAL: "[yellow]Some global cache entries could not be removed[/yellow]",
        CleanupOutcome.ABORTED: "[dim]Global cache cleanup cancelled[/dim]",
    }
    console.print(labels[result.outcome])


def show_restore_instructions(platforms: list[Platform], deep: bool) -> None:
    """Tell the user how to get the removed artifacts back."""
    if not platforms and not deep:
        return
    lines = [f"  {p.label}: [bold]{RESTORE_COMMANDS[p]}[/bold]" for p in platforms]
    if deep:
        lines.append("  Global caches are restored automatically on the next build.")
    console.print()
    console.print(Panel("\n".join(lines), title="Restore", border_style="cyan"))


def show_cleaning_progress() -> Progress:
    """Create a spinner for cleanup."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def show_projects(projects: list[ProjectConfig], title: str = "Registered Projects") -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Path")
    table.add_column("Enabled", justify="center")
    for project in projects:
        enabled = "[green]✓[/green]" if project.enabled else "[dim]-[/dim]"
        table.add_row(project.name, str(project.path), enabled)
    console.print(table)


def store_label(store: StoreKind) -> str:
    return f"{store.label} cache"


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)


def show_deep_clean_warning(plan: CleanupPlan) -> None:
    """Warn that a deep clean touches caches shared by every project."""
    lines = ["[yellow]This will clean global caches that may be used by other projects:[/yellow]"]
    for store, store_plan in plan.stores.items():
        if store_plan.error:
            continue
        location = store_plan.root or "-"
        lines.append(f"  • {location} [dim]({store.label})[/dim]")
    lines.append("")
    lines.append("[yellow]Removed packages are downloaded again on the next build.[/yellow]")
    lines.append("[yellow]This may take significant time.[/yellow]")

    console.print()
    console.print(Panel("\n".join(lines), title="WARNING: Deep Clean Mode", border_style="red"))


def confirm_deep_clean(project_name: str) -> bool:
    """Ask for the project name, then a final confirmation defaulting to no."""
    from rich.prompt import Confirm, Prompt

    typed = Prompt.ask(f"To confirm, please enter the project name ({project_name})")
    if typed.strip() != project_name:
        console.print("[red]Project name does not match[/red]")
        return False

    return Confirm.ask(
        "[red]Are you absolutely sure you want to perform a deep clean?[/red]",
        default=False,
    )
