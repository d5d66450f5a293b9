"""Product search and search suggestions."""

from __future__ import annotations

import typer
from rich.text import Text

from ..errors import handle_errors
from ..output import make_table
from ..state import get_state
from ..utils import format_price


@handle_errors
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search term"),
) -> None:
    """Search for products."""
    state = get_state(ctx)
    with state.status("Searching…"):
        results = state.client().search(query)

    def pretty(data: list[dict]):
        if not data:
            return Text("No results found.", style="yellow")
        return Text("\n\n").join(
            Text.assemble(
                (r.get("name", ""), "bold"), "  ", (str(r.get("id", "")), "dim"),
                f"\n  {format_price(r.get('display_price'))}  ·  {r.get('unit_quantity', '')}",
            )
            for r in data
        )

    def table(data: list[dict]):
        if not data:
            return Text("No results found.")
        return make_table(
            ["ID", "Name", "Price", "Unit Qty"],
            ([r.get("id"), r.get("name"), format_price(r.get("display_price")), r.get("unit_quantity")] for r in data),
        )

    state.emit(results, pretty=pretty, table=table)


@handle_errors
def suggest(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Partial search term"),
) -> None:
    """Get search suggestions."""
    state = get_state(ctx)
    with state.status("Fetching suggestions…"):
        results = state.client().get_suggestions(query) or []

    def pretty(data: list[dict]):
        if not data:
            return Text("No suggestions found.", style="yellow")
        return Text("\n").join(
            Text.assemble("  ", (f"{i}.", "dim"), f" {s.get('suggestion', '')}")
            for i, s in enumerate(data, 1)
        )

    def table(data: list[dict]):
        if not data:
            return Text("No suggestions found.")
        return make_table(["#", "Suggestion"], ([i, s.get("suggestion")] for i, s in enumerate(data, 1)))

    state.emit(results, pretty=pretty, table=table)


def register(app: typer.Typer) -> None:
    app.command("search")(search)
    app.command("suggest")(suggest)
