"""Category browsing."""

from __future__ import annotations

import typer
from rich.console import Group
from rich.text import Text

from ..errors import handle_errors
from ..models import Category, CategoryListing
from ..output import make_table
from ..picnic.pages import extract_categories, extract_category_listing
from ..state import get_state
from ..utils import format_price


def category_line(category: Category) -> Text:
    return Text.assemble("  ", (category.name, "bold"), "  ", (category.id, "dim"))


@handle_errors
def categories(ctx: typer.Context) -> None:
    """Browse product categories."""
    state = get_state(ctx)
    with state.status("Fetching categories…"):
        page = state.client().get_categories_page()
    cats = extract_categories(page)

    def pretty(data: list[Category]):
        if not data:
            return Text("No categories found.", style="dim")
        return Text("\n").join(category_line(c) for c in data)

    def table(data: list[Category]):
        if not data:
            return Text("No categories found.")
        return make_table(["ID", "Name"], ([c.id, c.name] for c in data))

    state.emit(cats, pretty=pretty, table=table)


def listing_pretty(listing: CategoryListing):
    out = Text()
    if listing.subcategories:
        out.append("Subcategories:", style="bold")
        for sub in listing.subcategories:
            out.append("\n")
            out.append_text(category_line(sub))
    if listing.products:
        if out:
            out.append("\n\n")
        out.append(f"Products ({len(listing.products)}):", style="bold")
        for p in listing.products:
            price = format_price(p.price) if p.price is not None else ""
            out.append("\n  ")
            out.append(p.name, style="bold")
            out.append(f"  {price}  {p.unit_quantity}  ")
            out.append(p.id, style="dim")
    if not out:
        return Text("This is a leaf category. Use 'picnic search <query>' to find products.", style="dim")
    return out


def listing_table(listing: CategoryListing):
    parts = []
    if listing.subcategories:
        parts.append(make_table(["ID", "Subcategory"], ([s.id, s.name] for s in listing.subcategories)))
    if listing.products:
        parts.append(make_table(
            ["ID", "Name", "Price", "Unit"],
            ([p.id, p.name, format_price(p.price), p.unit_quantity] for p in listing.products),
        ))
    if not parts:
        return Text("No data found.")
    return Group(*parts)


@handle_errors
def category(
    ctx: typer.Context,
    category_id: str = typer.Argument(..., metavar="ID", help="Category ID"),
) -> None:
    """Browse a category (shows subcategories and/or products)."""
    state = get_state(ctx)
    with state.status("Fetching category…"):
        page = state.client().get_category_page(category_id)
    state.emit(extract_category_listing(page), pretty=listing_pretty, table=listing_table)


def register(app: typer.Typer) -> None:
    app.command("categories")(categories)
    app.command("category")(category)
