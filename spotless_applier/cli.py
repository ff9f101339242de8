"""
Spotless Applier CLI.

Command-line interface for reformatting projects, modules and files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, get_config
from .core.logging import clear_context, setup_logging
from .host import (
    ConsoleModuleSelector,
    ConsoleNotificationSink,
    FilesystemProject,
    GradleVersionResolver,
    ModuleSelector,
    StaticModuleSelector,
    SubprocessLauncher,
    find_project_root,
)
from .services import ModuleResolver, ReformatService, TaskRunner
from .storage import LocalSelectionStore

app = typer.Typer(
    name="spotless-applier",
    help="Run spotless formatting through the project's Gradle or Maven build",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"spotless-applier v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Spotless Applier: spotlessApply / spotless:apply from the command line."""
    pass


def _prepare(verbose: bool) -> Config:
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)
    return config


def build_service(project_dir: Path, config: Config, selector: ModuleSelector) -> ReformatService:
    """Wire the filesystem host into a ReformatService."""
    notifier = ConsoleNotificationSink(console)
    return ReformatService(
        project=FilesystemProject(project_dir, config.discovery),
        runner=TaskRunner(SubprocessLauncher(config), notifier),
        version_resolver=GradleVersionResolver(config.gradle.executable),
        notifier=notifier,
        selector=selector,
    )


async def _reformat(service: ReformatService, file: Path | None = None) -> int:
    try:
        return await _report(service, file)
    finally:
        clear_context()


async def _report(service: ReformatService, file: Path | None) -> int:
    result = await service.run(file)
    if not result.success:
        console.print(f"[red]{result.error}[/red]")
        return 1
    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    executions = result.data or []
    if not executions:
        console.print("[dim]Nothing to reformat[/dim]")
        return 0

    outcomes = await asyncio.gather(*(execution.wait() for execution in executions))

    table = Table(title="Spotless Results")
    table.add_column("Module", style="cyan")
    table.add_column("Build Tool")
    table.add_column("Status")
    for execution, success in zip(executions, outcomes):
        table.add_row(
            execution.label,
            execution.spec.build_tool.value,
            "[green]OK[/green]" if success else "[red]FAILED[/red]",
        )
    console.print(table)

    return 0 if all(outcomes) else 1


@app.command()
def apply(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Project directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    module: Optional[list[str]] = typer.Option(
        None,
        "--module",
        "-m",
        help="Module to reformat (repeatable); skips the interactive prompt. Unknown names are an error",
    ),
    root: bool = typer.Option(
        False,
        "--root",
        help="Reformat the root project only",
    ),
    all_modules: bool = typer.Option(
        False,
        "--all",
        help="Reformat every non-root module",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Reformat the whole project or selected modules."""
    config = _prepare(verbose)

    selector: ModuleSelector
    if module or root or all_modules:
        selector = StaticModuleSelector(module or [], apply_to_root=root, select_all=all_modules)
    else:
        selector = ConsoleModuleSelector(
            project_dir.as_posix(),
            LocalSelectionStore(config.state.path),
            console,
        )

    service = build_service(project_dir, config, selector)
    if module:
        _check_requested_modules(service, module)

    exit_code = asyncio.run(_reformat(service))
    if exit_code:
        raise typer.Exit(exit_code)


def _check_requested_modules(service: ReformatService, requested: list[str]) -> None:
    resolved = service.resolver.resolve()
    unknown = [name for name in requested if name not in resolved]
    if unknown:
        console.print(f"[red]Unknown module(s): {escape(', '.join(unknown))}[/red]")
        raise typer.Exit(1)

    if len(resolved) > 1:
        roots = [name for name in requested if resolved[name].is_root_module]
        if roots:
            console.print(f"[red]{escape(roots[0])} is the root project, use --root for it[/red]")
            raise typer.Exit(1)


@app.command()
def file(
    path: Path = typer.Argument(
        ...,
        help="File to reformat",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (defaults to the outermost build directory above the file)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Reformat a single file."""
    config = _prepare(verbose)

    project_dir = project or find_project_root(path)
    if project_dir is None:
        console.print("[red]Unable to resolve build tool[/red]")
        raise typer.Exit(1)

    service = build_service(project_dir, config, StaticModuleSelector())
    exit_code = asyncio.run(_reformat(service, path))
    if exit_code:
        raise typer.Exit(exit_code)


@app.command()
def modules(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Project directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
) -> None:
    """List the modules spotless can run on."""
    config = _prepare(False)
    resolved = ModuleResolver(FilesystemProject(project_dir, config.discovery)).resolve()

    if not resolved:
        console.print("[yellow]No Gradle or Maven modules found[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Build Tool")
    table.add_column("Path")
    table.add_column("Root")
    for name, info in resolved.items():
        table.add_row(name, info.build_tool.value, info.root_path, "yes" if info.is_root_module else "")
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Log Format", cfg.log_format)
    table.add_row("Gradle Executable", cfg.gradle.executable)
    table.add_row("Gradle Prefer Wrapper", str(cfg.gradle.prefer_wrapper))
    table.add_row("Maven Executable", cfg.maven.executable)
    table.add_row("Maven Prefer Wrapper", str(cfg.maven.prefer_wrapper))
    table.add_row("Maven Batch Mode", str(cfg.maven.batch_mode))
    table.add_row("Discovery Depth", str(cfg.discovery.max_depth))
    table.add_row("Source Set Modules", str(cfg.discovery.source_set_modules))
    table.add_row("State Path", str(cfg.state.path))

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  SPOTLESS_LOG_LEVEL, SPOTLESS_LOG_FORMAT, SPOTLESS_GRADLE_EXECUTABLE")
    console.print("  SPOTLESS_MAVEN_EXECUTABLE, SPOTLESS_DISCOVERY_MAX_DEPTH, SPOTLESS_STATE_PATH")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
