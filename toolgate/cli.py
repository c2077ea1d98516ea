"""CLI entry point for toolgate."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from toolgate import __version__
from toolgate import config as config_module
from toolgate.config import create_default_config, get_settings, load_settings
from toolgate.engine import AccessControlEngine
from toolgate.errors import InvalidConfigError, RoleNotFoundError
from toolgate.roles import RoleCatalog
from toolgate.tools import ToolRegistry, list_focus_modes, register_builtin_tools
from toolgate.utils.logging import setup_logging

app = typer.Typer(
    name="toolgate",
    help="Inspect which WordPress tools an agent session would be allowed to use",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]toolgate[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """toolgate - tool access control for WordPress agent sessions."""
    try:
        settings = load_settings(config_path=config, force_reload=config is not None)
    except InvalidConfigError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.resolved_file,
        verbose=verbose,
    )


def _build_engine(
    role: Optional[str] = None, capabilities: Optional[list[str]] = None
) -> AccessControlEngine:
    """Engine over the built-in catalog, bundled roles and current settings."""
    settings = get_settings()
    registry = register_builtin_tools(ToolRegistry())
    engine = AccessControlEngine.from_settings(
        settings,
        registry,
        RoleCatalog.with_bundled(),
        capabilities=capabilities,
    )
    if role:
        try:
            engine.load_role(role, source="cli")
        except RoleNotFoundError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)
    return engine


def _print_warnings(warnings: list[str]) -> None:
    if not warnings:
        return
    console.print("\n[bold yellow]Warnings:[/bold yellow]")
    for warning in warnings:
        console.print(f"  [yellow]![/yellow] {escape(warning)}", highlight=False)


@app.command()
def tools(
    role: Optional[str] = typer.Option(None, "--role", "-r", help="Role to switch to"),
    cap: Optional[list[str]] = typer.Option(
        None, "--cap", help="WordPress capability of the current user (repeatable)"
    ),
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Show disabled tools as well"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the MCP tools/list payload instead of a table"
    ),
) -> None:
    """List the tools that would be exposed."""
    engine = _build_engine(role, cap)
    tool_filter = engine.filter

    if as_json:
        console.print_json(data={"tools": engine.list_tools()})
        return

    table = Table(title="Tools" if show_all else "Enabled Tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Category", style="blue")
    table.add_column("Flag", style="dim")
    if show_all:
        table.add_column("Status", justify="center")

    listed = engine.registry.tools() if show_all else tool_filter.enabled_tool_objects()
    for tool in listed:
        row = [tool.name, tool.category.value, tool.feature_flag or "-"]
        if show_all:
            enabled = tool_filter.is_enabled(tool.name)
            row.append("[green]enabled[/green]" if enabled else "[red]disabled[/red]")
        table.add_row(*row)

    console.print(table)

    stats = tool_filter.stats()
    console.print(
        f"\n{stats['enabled_tools']} of {stats['total_tools']} tools enabled, "
        f"{engine.resolution.describe()}"
    )
    _print_warnings(engine.warnings)


@app.command()
def roles() -> None:
    """List available roles."""
    catalog = RoleCatalog.with_bundled()

    table = Table(title="Roles")
    table.add_column("Role", style="cyan", no_wrap=True)
    table.add_column("Source", style="blue")
    table.add_column("Allowed", justify="right")
    table.add_column("Denied", justify="right")
    table.add_column("Description")

    for role in catalog.roles():
        allowed = role.tools.allowed
        table.add_row(
            role.name,
            role.source.value,
            str(len(allowed)) if allowed is not None else "all",
            str(len(role.tools.denied or ())),
            role.description,
        )

    console.print(table)


@app.command()
def explain(
    role: Optional[str] = typer.Option(None, "--role", "-r", help="Role to switch to"),
    cap: Optional[list[str]] = typer.Option(
        None, "--cap", help="WordPress capability of the current user (repeatable)"
    ),
) -> None:
    """Show how the enabled tool set was derived."""
    engine = _build_engine(role, cap)
    resolution = engine.resolution
    tool_filter = engine.filter

    lines = [f"[bold]Role:[/bold] {resolution.slug or '(none)'}"]
    lines.append(f"[bold]Source:[/bold] {resolution.source.value}")
    if resolution.tools.allowed is not None:
        lines.append(f"[bold]Allowed:[/bold] {escape(', '.join(resolution.tools.allowed))}")
    if resolution.tools.denied:
        lines.append(f"[bold]Denied:[/bold] {escape(', '.join(resolution.tools.denied))}")
    console.print(Panel("\n".join(lines), title="Effective Role", border_style="blue"))

    table = Table(title="Filter Steps")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Source", style="blue")
    table.add_column("Action", justify="center")
    table.add_column("Pattern", style="cyan")
    table.add_column("Matched", justify="right")

    for index, step in enumerate(tool_filter.steps, start=1):
        action = "[green]allow[/green]" if step.action == "allow" else "[red]deny[/red]"
        table.add_row(
            str(index), step.source, action, escape(step.pattern), str(len(step.matched_tools))
        )

    if tool_filter.steps:
        console.print(table)
    else:
        console.print("[dim]No filter steps applied; every unflagged tool is enabled.[/dim]")

    stats = tool_filter.stats()
    console.print(f"\n{stats['enabled_tools']} of {stats['total_tools']} tools enabled")
    _print_warnings(engine.warnings)


@app.command("focus-modes")
def focus_modes() -> None:
    """List focus mode presets."""
    table = Table(title="Focus Modes")
    table.add_column("Mode", style="cyan", no_wrap=True)
    table.add_column("Tokens", style="yellow")
    table.add_column("Description")

    for mode in list_focus_modes():
        table.add_row(mode["name"], mode["token_estimate"], mode["description"])

    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    console.print("\n[bold]Feature flags:[/bold]")
    if settings.feature_flags:
        for key, enabled in settings.feature_flags.items():
            console.print(f"  {key}: {'on' if enabled else 'off'}")
    else:
        console.print("  [dim](none set)[/dim]")

    console.print("\n[bold]Tools:[/bold]")
    console.print(f"  Focus: {settings.tools.focus}")
    console.print(f"  Enabled categories: {', '.join(settings.tools.enabled) or '-'}")
    console.print(f"  Disabled categories: {', '.join(settings.tools.disabled) or '-'}")
    console.print(f"  Overrides: {len(settings.tools.overrides)}")

    console.print("\n[bold]Roles:[/bold]")
    console.print(f"  Active: {settings.roles.active or '-'}")
    console.print(f"  Auto-detect: {settings.roles.auto_detect}")
    if settings.roles.tools_allow is not None:
        console.print(f"  Tools allow: {escape(', '.join(settings.roles.tools_allow)) or '-'}")
    if settings.roles.tools_deny is not None:
        console.print(f"  Tools deny: {escape(', '.join(settings.roles.tools_deny)) or '-'}")


@app.command()
def init() -> None:
    """Write a commented config template to ~/.toolgate/config.yaml."""
    if create_default_config():
        console.print(f"[green]Created[/green] {config_module.CONFIG_FILE}")
    else:
        console.print(f"[dim]Config already exists:[/dim] {config_module.CONFIG_FILE}")
