"""Output dispatch: every command result goes through `output()`."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

import typer
from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from .models import OutputFormat

Renderer = Callable[[Any], RenderableType]


def resolve_format(json_flag: bool = False, table_flag: bool = False,
                   default: str = OutputFormat.PRETTY) -> OutputFormat:
    """--json wins over --table, both win over the configured default."""
    if json_flag:
        return OutputFormat.JSON
    if table_flag:
        return OutputFormat.TABLE
    return OutputFormat(default)


def to_jsonable(data: Any) -> Any:
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    if isinstance(data, Enum):
        return data.value
    return data


def dump_json(data: Any) -> str:
    return json.dumps(to_jsonable(data), indent=2, ensure_ascii=False, default=str)


def output(
    data: Any,
    fmt: OutputFormat,
    pretty: Renderer | None = None,
    table: Renderer | None = None,
    console: Console | None = None,
) -> None:
    """Render `data` in the requested format.

    JSON goes to stdout unstyled so it stays pipeable. Without a renderer
    for the chosen format the data is shown as JSON.
    """
    if fmt == OutputFormat.JSON:
        typer.echo(dump_json(data))
        return

    console = console or Console()
    renderer = table if fmt == OutputFormat.TABLE else pretty
    if renderer is None:
        console.print_json(dump_json(data))
    else:
        console.print(renderer(data))


def cell(value: Any) -> Text:
    """Table cell as plain Text so API strings are never parsed as markup."""
    if isinstance(value, Text):
        return value
    return Text("" if value is None else str(value))


def make_table(headers: Iterable[str], rows: Iterable[Iterable[Any]]) -> Table:
    table = Table(*headers)
    for row in rows:
        table.add_row(*(cell(value) for value in row))
    return table


def kv_table(rows: Iterable[tuple[str, Any]]) -> Table:
    """Two-column key/value table."""
    table = Table(show_header=False)
    table.add_column(style="bold")
    table.add_column()
    for key, value in rows:
        table.add_row(key, cell(value))
    return table
