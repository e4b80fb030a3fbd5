"""CLI entry point for kanbanflow.

Invoked as::

    kanbanflow [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m kanbanflow.cli.main

Commands
--------
show        Render the board, optionally filtered
view        Show one card with its movement history
add         Create a card
edit        Change fields of a card
move        Move a card to another column or position
delete      Delete a card
clear       Delete every card of a column
export      Write the board as JSON, YAML or CSV
import      Replace the board from a JSON, YAML or CSV file
smart-add   Extract tasks from free text with the configured AI provider
validate    Check a board against its structural invariants
settings    Show or change provider settings
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from kanbanflow.config.providers import ProviderId
from kanbanflow.errors import KanbanError
from kanbanflow.extract.errors import ExtractionError
from kanbanflow.model.defaults import DEFAULT_COLUMN_ID
from kanbanflow.model.entities import BoardState, CardDraft, Priority, Tag
from kanbanflow.storage.store import DEFAULT_BOARD_KEY, BoardStore

console = Console()
err_console = Console(stderr=True)

_PRIORITY_COLORS = {
    Priority.NONE: "dim",
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "dark_orange",
    Priority.URGENT: "bold red",
}

_PRIORITY_CHOICE = click.Choice([p.value for p in Priority], case_sensitive=False)
_TAG_CHOICE = click.Choice([t.value for t in Tag], case_sensitive=False)


@dataclass
class _Context:
    store: BoardStore
    key: str

    @property
    def settings_path(self) -> Path:
        from kanbanflow.config.settings import SETTINGS_FILENAME

        return self.store.directory / SETTINGS_FILENAME

    def load(self) -> BoardState:
        return self.store.load(self.key)

    def save(self, board: BoardState) -> None:
        self.store.save(self.key, board)


pass_context = click.make_pass_decorator(_Context)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    """Attach a single RichHandler to the ``kanbanflow`` logger."""
    logger = logging.getLogger("kanbanflow")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=verbose, markup=False)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _render_board(board: BoardState, title: str = "Board") -> Table:
    table = Table(title=title, show_lines=True, expand=False)
    columns = board.ordered_columns()
    for column in columns:
        table.add_column(f"{column.title} ({len(column)})", vertical="top", min_width=18)

    cells = []
    for column in columns:
        lines = []
        for card in board.cards_in(column.id):
            color = _PRIORITY_COLORS[card.priority]
            line = f"[bold]{card.title}[/bold]\n[{color}]{card.priority.value}[/{color}] · {card.tag.value}"
            if card.due_date:
                line += f" · due {card.due_date}"
            line += f"\n[dim]{card.id}[/dim]"
            lines.append(line)
        cells.append("\n\n".join(lines) or "[dim]empty[/dim]")
    if columns:
        table.add_row(*cells)
    return table


def _run(operation, *args, **kwargs):  # type: ignore[no-untyped-def]
    """Call an engine operation, turning library errors into a CLI failure."""
    try:
        return operation(*args, **kwargs)
    except (KanbanError, ExtractionError) as exc:
        _fail(str(exc))


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="kanbanflow")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="KANBANFLOW_HOME",
    default=None,
    help="Directory holding the board and settings (default: ~/.local/share/kanbanflow).",
)
@click.option("--board", "key", default=DEFAULT_BOARD_KEY, show_default=True, help="Board key")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, key: str, verbose: bool) -> None:
    """Kanban board engine with AI-assisted task capture."""
    _configure_logging(verbose)
    try:
        store = BoardStore(data_dir)
        store.path_for(key)
    except ValueError as exc:
        _fail(str(exc))
    ctx.obj = _Context(store=store, key=key)


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from kanbanflow import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]kanbanflow[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# board commands
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.option("--search", "-s", default="", help="Case-insensitive text in title or description")
@click.option("--priority", type=_PRIORITY_CHOICE, default=None, help="Only cards with this priority")
@click.option("--tag", type=_TAG_CHOICE, default=None, help="Only cards with this tag")
@pass_context
def show_command(obj: _Context, search: str, priority: str | None, tag: str | None) -> None:
    """Render the board as a table of columns."""
    from kanbanflow.engine.filters import BoardQuery, filter_board

    board = obj.load()
    query = BoardQuery(
        text=search,
        priority=Priority.parse(priority) if priority else None,
        tag=Tag.parse(tag) if tag else None,
    )
    title = f"Board: {obj.key}"
    if not query.is_empty:
        board = filter_board(board, query)
        title += " (filtered)"
    console.print(_render_board(board, title))


@cli.command(name="view")
@click.argument("card_id")
@pass_context
def view_command(obj: _Context, card_id: str) -> None:
    """Show every field of CARD_ID and where it has been, newest move first."""
    from kanbanflow.engine.moves import locate_card

    board = obj.load()
    card = board.cards.get(card_id)
    if card is None:
        _fail(f"Card {card_id!r} does not exist on this board.")

    def column_title(column_id: str) -> str:
        column = board.columns.get(column_id)
        return column.title if column is not None else column_id

    location = locate_card(board, card_id)
    color = _PRIORITY_COLORS[card.priority]
    fields = Table(show_header=False, box=None)
    fields.add_row("[bold]Id[/bold]", card.id)
    fields.add_row("[bold]Column[/bold]", column_title(location[0]) if location else "[dim]none[/dim]")
    fields.add_row("[bold]Priority[/bold]", f"[{color}]{card.priority.value}[/{color}]")
    fields.add_row("[bold]Tag[/bold]", card.tag.value)
    fields.add_row("[bold]Due[/bold]", card.due_date or "[dim]none[/dim]")
    fields.add_row("[bold]Created[/bold]", card.created_at or "[dim]unknown[/dim]")
    if card.description:
        fields.add_row("[bold]Description[/bold]", card.description)
    console.print(Panel(fields, title=card.title, expand=False))

    history = Table(title="History")
    history.add_column("Column")
    history.add_column("Entered at")
    for column_id, timestamp in sorted(card.moved_to.items(), key=lambda item: item[1], reverse=True):
        history.add_row(column_title(column_id), timestamp)
    if not card.moved_to:
        history.add_row("[dim]never moved[/dim]", "")
    console.print(history)


@cli.command(name="add")
@click.argument("title")
@click.option("--column", "-c", "column_id", default=DEFAULT_COLUMN_ID, show_default=True)
@click.option("--description", "-d", default="")
@click.option("--priority", "-p", type=_PRIORITY_CHOICE, default=Priority.NONE.value, show_default=True)
@click.option("--tag", "-t", type=_TAG_CHOICE, default=Tag.FEATURE.value, show_default=True)
@click.option("--due", "due_date", default="", help="Due date (YYYY-MM-DD)")
@pass_context
def add_command(
    obj: _Context,
    title: str,
    column_id: str,
    description: str,
    priority: str,
    tag: str,
    due_date: str,
) -> None:
    """Create a card titled TITLE at the end of a column."""
    from kanbanflow.engine.mutations import create_card

    board = obj.load()
    draft = _run(
        CardDraft,
        title=title,
        description=description,
        priority=Priority.parse(priority),
        tag=Tag.parse(tag),
        due_date=due_date,
    )
    updated = _run(create_card, board, column_id, draft)
    obj.save(updated)
    new_id = updated.columns[column_id].card_ids[-1]
    console.print(f"[green]Added[/green] {new_id} to {updated.columns[column_id].title}")


@cli.command(name="edit")
@click.argument("card_id")
@click.option("--title", default=None)
@click.option("--description", "-d", default=None)
@click.option("--priority", "-p", type=_PRIORITY_CHOICE, default=None)
@click.option("--tag", "-t", type=_TAG_CHOICE, default=None)
@click.option("--due", "due_date", default=None, help="Due date (YYYY-MM-DD); empty string clears it")
@pass_context
def edit_command(
    obj: _Context,
    card_id: str,
    title: str | None,
    description: str | None,
    priority: str | None,
    tag: str | None,
    due_date: str | None,
) -> None:
    """Change fields of CARD_ID; unspecified fields keep their value."""
    from kanbanflow.engine.mutations import update_card

    board = obj.load()
    card = board.cards.get(card_id)
    if card is None:
        _fail(f"Card {card_id!r} does not exist on this board.")
    current = card.to_draft()
    draft = _run(
        replace,
        current,
        title=title if title is not None else current.title,
        description=description if description is not None else current.description,
        priority=Priority.parse(priority) if priority else current.priority,
        tag=Tag.parse(tag) if tag else current.tag,
        due_date=due_date if due_date is not None else current.due_date,
    )
    obj.save(_run(update_card, board, card_id, draft))
    console.print(f"[green]Updated[/green] {card_id}")


@cli.command(name="move")
@click.argument("card_id")
@click.argument("dest_column")
@click.option("--index", "-i", type=int, default=None, help="Target position (default: end of column)")
@pass_context
def move_command(obj: _Context, card_id: str, dest_column: str, index: int | None) -> None:
    """Move CARD_ID into DEST_COLUMN."""
    from kanbanflow.engine.moves import locate_card, move

    board = obj.load()
    location = locate_card(board, card_id)
    if location is None:
        _fail(f"Card {card_id!r} is not on any column.")
    source_column, source_index = location
    if dest_column not in board.columns:
        _fail(f"Column {dest_column!r} does not exist on this board.")
    if index is None:
        index = len(board.columns[dest_column])
        if dest_column == source_column:
            index -= 1

    updated = _run(move, board, source_column, source_index, dest_column, index, card_id)
    if updated is board:
        console.print(f"[dim]{card_id} is already there[/dim]")
        return
    obj.save(updated)
    console.print(f"[green]Moved[/green] {card_id} to {board.columns[dest_column].title}")


@cli.command(name="delete")
@click.argument("card_id")
@pass_context
def delete_command(obj: _Context, card_id: str) -> None:
    """Delete CARD_ID."""
    from kanbanflow.engine.mutations import delete_card

    board = obj.load()
    updated = delete_card(board, card_id)
    if updated is board:
        console.print(f"[yellow]Nothing to delete:[/yellow] {card_id} is not on the board")
        return
    obj.save(updated)
    console.print(f"[green]Deleted[/green] {card_id}")


@cli.command(name="clear")
@click.argument("column_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation")
@pass_context
def clear_command(obj: _Context, column_id: str, yes: bool) -> None:
    """Delete every card of COLUMN_ID."""
    from kanbanflow.engine.mutations import clear_column

    board = obj.load()
    if column_id not in board.columns:
        _fail(f"Column {column_id!r} does not exist on this board.")
    count = len(board.columns[column_id])
    if count and not yes:
        click.confirm(f"Delete {count} card(s) from {board.columns[column_id].title}?", abort=True)
    updated = _run(clear_column, board, column_id)
    if updated is not board:
        obj.save(updated)
    console.print(f"[green]Cleared[/green] {count} card(s) from {board.columns[column_id].title}")


# ---------------------------------------------------------------------------
# export / import
# ---------------------------------------------------------------------------


_FORMATS = click.Choice(["json", "yaml", "csv"], case_sensitive=False)


def _format_from_path(path: Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    return {"yml": "yaml"}.get(suffix, suffix)


@cli.command(name="export")
@click.option("--format", "output_format", type=_FORMATS, default="json", help="Output format")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Output file path (defaults to stdout)")
@pass_context
def export_command(obj: _Context, output_format: str, output: Path | None) -> None:
    """Write the board as JSON, YAML (lossless) or CSV (cards only)."""
    from kanbanflow.codec.structured import BoardSerializer
    from kanbanflow.codec.tabular import export_csv

    board = obj.load()
    output_format = output_format.lower()
    if output_format == "json":
        text = BoardSerializer().to_json(board)
    elif output_format == "yaml":
        text = BoardSerializer().to_yaml(board)
    else:
        text = export_csv(board)

    if output:
        output.write_text(text, encoding="utf-8")
        err_console.print(f"[green]Board written to[/green] {output}")
    else:
        click.echo(text, nl=not text.endswith("\n"))


@cli.command(name="import")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--format", "input_format", type=_FORMATS, default=None,
              help="Input format (default: inferred from the file extension)")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask before replacing the board")
@pass_context
def import_command(obj: _Context, file: Path, input_format: str | None, yes: bool) -> None:
    """Replace the board with the contents of FILE."""
    from kanbanflow.codec.structured import BoardSerializer
    from kanbanflow.codec.tabular import import_csv

    fmt = (input_format or _format_from_path(file)).lower()
    if fmt not in ("json", "yaml", "csv"):
        _fail(f"Cannot infer the format of {file}; pass --format")
    try:
        text = file.read_text(encoding="utf-8")
    except FileNotFoundError:
        _fail(f"File not found: {file}")
    except OSError as exc:
        _fail(f"Cannot read {file}: {exc}")

    if fmt == "json":
        board = _run(BoardSerializer().from_json, text)
    elif fmt == "yaml":
        board = _run(BoardSerializer().from_yaml, text)
    else:
        board = _run(import_csv, text)

    if obj.store.exists(obj.key) and not yes:
        click.confirm("This replaces the current board. Continue?", abort=True)
    obj.save(board)
    console.print(f"[green]Imported[/green] {board.card_count} card(s) from {file}")


# ---------------------------------------------------------------------------
# smart-add
# ---------------------------------------------------------------------------


@cli.command(name="smart-add")
@click.argument("text")
@click.option("--column", "-c", "column_id", default=DEFAULT_COLUMN_ID, show_default=True)
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Request timeout in seconds")
@pass_context
def smart_add_command(obj: _Context, text: str, column_id: str, timeout: float) -> None:
    """Extract tasks from TEXT with the configured AI provider and add them.

    Examples:

    \b
        kanbanflow smart-add "Fix the login bug asap, then write the release notes"
        kanbanflow smart-add "$(cat meeting-notes.txt)" --column todo
    """
    from kanbanflow.config.settings import SettingsError, load_settings
    from kanbanflow.extract.extractor import TaskExtractor

    try:
        settings = load_settings(obj.settings_path)
    except SettingsError as exc:
        _fail(str(exc))

    board = obj.load()
    extractor = TaskExtractor(settings, timeout=timeout)
    with console.status(f"Asking {extractor.provider_name}..."):
        updated = _run(extractor.smart_add, board, text, column_id)
    obj.save(updated)

    added = [cid for cid in updated.columns[column_id].card_ids if cid not in board.cards]
    table = Table(title=f"Added {len(added)} task(s) to {updated.columns[column_id].title}")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Tag")
    for card_id in added:
        card = updated.cards[card_id]
        color = _PRIORITY_COLORS[card.priority]
        table.add_row(card.id, card.title, f"[{color}]{card.priority.value}[/{color}]", card.tag.value)
    console.print(table)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path), required=False)
@pass_context
def validate_command(obj: _Context, file: Path | None) -> None:
    """Check the saved board, or a JSON/YAML board FILE, for invariant violations."""
    from kanbanflow.codec.structured import BoardSerializer
    from kanbanflow.validator.validator import validate_board

    if file is None:
        board = obj.load()
        label = obj.key
    else:
        serializer = BoardSerializer(check_invariants=False)
        try:
            text = file.read_text(encoding="utf-8")
        except OSError as exc:
            _fail(f"Cannot read {file}: {exc}")
        loader = serializer.from_yaml if _format_from_path(file) == "yaml" else serializer.from_json
        board = _run(loader, text)
        label = str(file)

    diagnostics = validate_board(board)
    if not diagnostics:
        console.print(f"[green]OK[/green] {label}: no issues found")
        return

    table = Table(title=f"Validation: {label}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Location", min_width=10)
    table.add_column("Message")
    for d in diagnostics:
        color = "red" if d.is_error else "yellow"
        table.add_row(f"[{color}]{d.severity.name}[/{color}]", d.code, d.location, d.message)
    console.print(table)

    errors = [d for d in diagnostics if d.is_error]
    console.print(f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(diagnostics) - len(errors)} warning(s)")
    if errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# settings
# ---------------------------------------------------------------------------


def _mask(api_key: str) -> str:
    key = api_key.strip()
    if not key:
        return "[dim]not set[/dim]"
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}…{key[-4:]}"


@cli.group(name="settings")
def settings_group() -> None:
    """Show or change AI provider settings."""


@settings_group.command(name="show")
@pass_context
def settings_show_command(obj: _Context) -> None:
    """Show the configured providers; API keys are masked."""
    from kanbanflow.config.providers import PROVIDERS
    from kanbanflow.config.settings import SettingsError, load_settings

    try:
        settings = load_settings(obj.settings_path)
    except SettingsError as exc:
        _fail(str(exc))

    table = Table(title="Providers")
    table.add_column("Active")
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("API key")
    table.add_column("Endpoint", overflow="fold")
    for pid, provider_settings in settings.providers.items():
        table.add_row(
            "[green]*[/green]" if pid is settings.provider else "",
            PROVIDERS[pid].name,
            provider_settings.effective_model,
            _mask(provider_settings.api_key),
            provider_settings.effective_endpoint,
        )
    console.print(table)
    console.print(Panel(str(obj.settings_path), title="Settings file", expand=False))


@settings_group.command(name="set")
@click.option("--provider", type=click.Choice([p.value for p in ProviderId]), default=None,
              help="Provider to configure (default: the active one)")
@click.option("--activate/--no-activate", default=True, show_default=True,
              help="Make the configured provider the active one")
@click.option("--api-key", default=None)
@click.option("--model", default=None)
@click.option("--endpoint", default=None)
@pass_context
def settings_set_command(
    obj: _Context,
    provider: str | None,
    activate: bool,
    api_key: str | None,
    model: str | None,
    endpoint: str | None,
) -> None:
    """Change settings of a provider."""
    from kanbanflow.config.settings import SettingsError, load_settings, save_settings

    try:
        settings = load_settings(obj.settings_path)
    except SettingsError as exc:
        _fail(str(exc))

    pid = ProviderId(provider) if provider else settings.provider
    current = settings.providers[pid]
    changes = {
        name: value
        for name, value in (("api_key", api_key), ("model", model), ("endpoint", endpoint))
        if value is not None
    }
    settings = settings.with_settings(replace(current, **changes))
    if activate:
        settings = settings.with_provider(pid)
    path = save_settings(settings, obj.settings_path)
    console.print(f"[green]Saved[/green] {pid.value} settings to {path}")


if __name__ == "__main__":
    cli()
