"""
Typer CLI for the course builder.

Commands:
    course-builder outline                     - Show modules and items in export order
    course-builder search TERM                 - Search modules by name
    course-builder search TERM --deep          - Also match item names and URLs
    course-builder module add NAME             - Create a module
    course-builder module rename ID NAME       - Rename a module
    course-builder module remove ID            - Delete a module and its items
    course-builder item link NAME URL          - Add a link (root level unless --module)
    course-builder item file PATH              - Add a file (root level unless --module)
    course-builder item edit ID                - Rename an item or replace its URL/file
    course-builder item remove ID              - Delete an item
    course-builder move SOURCE TARGET          - Apply a drag gesture

Drag identifiers are "module-<id>", "item-<id>" or "root-drop-zone".
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from config import get_settings
from course_builder.authoring.builder import CommandResult, CourseBuilder
from course_builder.content.models import FileItem, LinkItem, Module
from course_builder.storage.blobs import describe_file
from course_builder.storage.state_store import StateStore

app = typer.Typer(
    help="Course builder: author modules, links and files from the terminal",
    no_args_is_help=True,
)
module_app = typer.Typer(help="Module commands", no_args_is_help=True)
item_app = typer.Typer(help="Item commands", no_args_is_help=True)
app.add_typer(module_app, name="module")
app.add_typer(item_app, name="item")

console = Console()


def configure_logging(level: str, log_file: str | None = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="1 MB")


@app.callback()
def main_callback(
    ctx: typer.Context,
    state_file: Optional[Path] = typer.Option(
        None, "--state-file", "-s", help="Course state JSON file (defaults to settings)"
    ),
):
    """Load settings and logging before any command runs."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    ctx.obj = {"state_file": state_file or settings.state_file}


def _builder(ctx: typer.Context) -> CourseBuilder:
    settings = get_settings()
    store = StateStore(ctx.obj["state_file"], settings.storage_key)
    return CourseBuilder.from_store(store, settings)


def _report(result: CommandResult) -> None:
    if result.ok:
        console.print(f"[green]{result.message}[/green]")
        return
    for reason in result.reasons:
        console.print(f"[red]Error: {reason}[/red]")
    raise typer.Exit(1)


def format_file_size(size: int) -> str:
    """Human-readable size: "0 Bytes", "512 Bytes", "1.5 KB", "2 MB"."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(units) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {units[unit]}"


def _describe_item(item) -> str:
    if isinstance(item, LinkItem):
        return f"[cyan]{item.name}[/cyan] [dim]({item.id})[/dim] -> {item.url}"
    if isinstance(item, FileItem):
        return f"[cyan]{item.name}[/cyan] [dim]({item.id})[/dim] {item.file_name} ({format_file_size(item.file_size)})"
    return str(item)


# =============================================================================
# Read commands
# =============================================================================


@app.command("outline")
def outline(ctx: typer.Context):
    """Show the course in export order: modules first, then root-level items."""
    builder = _builder(ctx)
    content = builder.ordered_content()
    if not content:
        console.print("[yellow]Course is empty.[/yellow]")
        return

    tree = Tree("[bold cyan]Course[/bold cyan]")
    for entry in content:
        if isinstance(entry, Module):
            branch = tree.add(
                f"[bold]{entry.name}[/bold] [dim](module-{entry.id}, "
                f"{builder.item_count(entry.id)} items)[/dim]"
            )
            for item in builder.module_items(entry.id):
                branch.add(_describe_item(item))
        else:
            tree.add(_describe_item(entry))
    console.print(tree)


@app.command("search")
def search(
    ctx: typer.Context,
    term: str = typer.Argument(..., help="Substring to look for (case-insensitive)"),
    deep: bool = typer.Option(False, "--deep", "-d", help="Also match item names and URLs"),
):
    """Search modules by name."""
    builder = _builder(ctx)
    matches = builder.filter_modules(term) if deep else builder.search(term)

    if not matches:
        console.print(f"[yellow]No modules match '{term}'.[/yellow]")
        return

    table = Table(title=f"{len(matches)} module(s) matching '{term}'")
    table.add_column("ID", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("Items", justify="right", style="green")
    for module in matches:
        table.add_row(module.id, module.name, str(builder.item_count(module.id)))
    console.print(table)


# =============================================================================
# Module commands
# =============================================================================


@module_app.command("add")
def module_add(ctx: typer.Context, name: str = typer.Argument(..., help="Module name")):
    """Create a module."""
    result = _builder(ctx).create_module(name)
    _report(result)
    console.print(f"  id: {result.record.data['module'].id}")


@module_app.command("rename")
def module_rename(
    ctx: typer.Context,
    module_id: str = typer.Argument(..., help="Module ID"),
    name: str = typer.Argument(..., help="New module name"),
):
    """Rename a module."""
    _report(_builder(ctx).edit_module(module_id, name))


@module_app.command("remove")
def module_remove(ctx: typer.Context, module_id: str = typer.Argument(..., help="Module ID")):
    """Delete a module and every item inside it."""
    result = _builder(ctx).delete_module(module_id)
    _report(result)
    removed = len(result.record.data["items"])
    if removed:
        console.print(f"  removed {removed} item(s)")


# =============================================================================
# Item commands
# =============================================================================


@item_app.command("link")
def item_link(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Link title"),
    url: str = typer.Argument(..., help="Link URL"),
    module_id: Optional[str] = typer.Option(None, "--module", "-m", help="Target module ID"),
):
    """Add a link item."""
    result = _builder(ctx).add_link(name, url, module_id)
    _report(result)
    console.print(f"  id: {result.record.data['item'].id}")


@item_app.command("file")
def item_file(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to attach"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Item title (defaults to file name)"),
    module_id: Optional[str] = typer.Option(None, "--module", "-m", help="Target module ID"),
):
    """Add a file item."""
    try:
        blob = describe_file(path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    result = _builder(ctx).add_file(name or path.stem, blob, module_id)
    _report(result)
    console.print(f"  id: {result.record.data['item'].id}")


@item_app.command("edit")
def item_edit(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Item ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New title"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="New URL (links only)"),
    path: Optional[Path] = typer.Option(None, "--file", "-f", help="Replacement file (files only)"),
):
    """Rename an item, or replace its URL or file."""
    blob = None
    if path is not None:
        try:
            blob = describe_file(path)
        except FileNotFoundError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    _report(_builder(ctx).edit_item(item_id, name=name, url=url, blob=blob))


@item_app.command("remove")
def item_remove(ctx: typer.Context, item_id: str = typer.Argument(..., help="Item ID")):
    """Delete an item."""
    _report(_builder(ctx).delete_item(item_id))


# =============================================================================
# Drag and drop
# =============================================================================


@app.command("move")
def move(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Dragged element: module-<id> or item-<id>"),
    target: str = typer.Argument(..., help="Drop target: module-<id>, item-<id> or root-drop-zone"),
):
    """Apply a completed drag gesture."""
    _report(_builder(ctx).move(source, target))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
