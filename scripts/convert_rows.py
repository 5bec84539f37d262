"""CLI entry point for converting CSV rows into entities.

Usage::

    python scripts/convert_rows.py --input orders.csv --entity shop.models:Order
    python scripts/convert_rows.py --input orders.csv --entity shop.models:Order \\
        --profile orders.yaml --limit 20 --log-level DEBUG
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rowbind.adapters.formats.csv_adapter import CSVAdapter
from rowbind.adapters.rows import RowAdapter
from rowbind.config.profile import MappingProfile
from rowbind.conversion.properties import get_property_table
from rowbind.exceptions import RowBindError
from rowbind.logger import set_log_level

app = typer.Typer(help="rowbind row conversion CLI.")
console = Console()


def _load_entity_type(path: str) -> type[Any]:
    """Import an entity class from a ``module:Class`` path.

    Args:
        path: Module path and class name separated by a colon.

    Returns:
        The entity class.

    Raises:
        typer.BadParameter: If the path is malformed or cannot be imported.
    """
    module_name, sep, class_name = path.partition(":")
    if not sep or not module_name or not class_name:
        raise typer.BadParameter(f"Entity must be given as module:Class, got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {exc}") from exc

    entity_type = getattr(module, class_name, None)
    if not isinstance(entity_type, type):
        raise typer.BadParameter(f"'{class_name}' is not a class in '{module_name}'")
    return entity_type


def _print_entities(entity_type: type[Any], entities: list[Any]) -> None:
    """Print converted entities as a rich table.

    Args:
        entity_type: Entity class, used for the column set.
        entities: Converted entities.
    """
    columns = list(get_property_table(entity_type))
    table = Table(title=f"{entity_type.__name__} ({len(entities)})")
    table.add_column("#", justify="right")
    for column in columns:
        table.add_column(column)

    for index, entity in enumerate(entities, start=1):
        table.add_row(
            str(index), *[repr(getattr(entity, column, None)) for column in columns]
        )

    console.print(table)


@app.callback(invoke_without_command=True)
def convert(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, dir_okay=False, help="CSV file with a header row."
    ),
    entity: str = typer.Option(
        ..., "--entity", help="Entity class as module:Class."
    ),
    profile_path: Path | None = typer.Option(
        None, "--profile", exists=True, dir_okay=False, help="Optional mapping profile YAML."
    ),
    limit: int | None = typer.Option(
        None, "--limit", min=1, help="Convert at most this many rows."
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."
    ),
) -> None:
    """Convert the rows of a CSV file into entities and print them."""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        console.print(f"[red]Invalid log level: {escape(log_level)}[/red]")
        raise SystemExit(1)
    set_log_level(log_level.upper())

    try:
        entity_type = _load_entity_type(entity)
    except typer.BadParameter as exc:
        console.print(f"[red]Invalid entity: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    profile: MappingProfile | None = None
    if profile_path is not None:
        try:
            profile = MappingProfile.from_yaml(profile_path)
        except Exception as exc:
            console.print(f"[red]Invalid profile: {escape(str(exc))}[/red]")
            raise SystemExit(1) from exc

    try:
        rows = CSVAdapter().read(input_path)
    except ValueError as exc:
        console.print(f"[red]Failed to read rows: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    if not rows:
        console.print("[red]No rows found in file.[/red]")
        raise SystemExit(2)

    if limit is not None:
        rows = rows[:limit]

    adapter = RowAdapter(entity_type, profile=profile)
    entities: list[Any] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            entities.append(adapter.adapt(row))
        except RowBindError as exc:
            console.print(f"[red]Row {row_number}: {escape(str(exc))}[/red]")
            raise SystemExit(1) from exc

    _print_entities(entity_type, entities)


if __name__ == "__main__":
    app()
