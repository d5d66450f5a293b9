"""Shopping cart commands."""

from __future__ import annotations

import typer
from rich.console import Group
from rich.text import Text

from ..errors import handle_errors
from ..output import kv_table, make_table
from ..state import CliState, get_state
from ..utils import format_price

cart_app = typer.Typer(help="Shopping cart commands", no_args_is_help=True)


def first_article(line: dict) -> dict:
    """An order line wraps its article(s) in `items`; the first one describes it."""
    articles = line.get("items") or []
    return articles[0] if articles else {}


def cart_pretty(order: dict):
    lines = order.get("items") or []
    if not lines:
        return Text("Your cart is empty.", style="dim")

    out = Text("\n").join(
        Text.assemble(
            "  ", (first_article(line).get("name", line.get("id", "")), "bold"),
            "  ", (first_article(line).get("unit_quantity", ""), "dim"),
            f"  {format_price(line.get('price'))}",
        )
        for line in lines
    )
    out.append("\n\n")
    out.append(f"Items: {order.get('total_count', 0)}\n", style="bold")
    out.append(f"Total: {format_price(order.get('total_price'))}", style="bold")
    if order.get("total_savings"):
        out.append(f"\nSavings: {format_price(order['total_savings'])}", style="green")
    if order.get("total_deposit"):
        out.append(f"\nDeposit: {format_price(order['total_deposit'])}", style="dim")
    return out


def cart_table(order: dict):
    items = make_table(
        ["ID", "Name", "Unit Qty", "Price"],
        (
            [first_article(line).get("id"), first_article(line).get("name"),
             first_article(line).get("unit_quantity"), format_price(line.get("price"))]
            for line in order.get("items") or []
        ),
    )
    summary = kv_table([
        ("Total items", order.get("total_count", 0)),
        ("Total price", format_price(order.get("total_price"))),
        ("Savings", format_price(order.get("total_savings"))),
        ("Deposit", format_price(order.get("total_deposit"))),
    ])
    return Group(items, summary)


def render_cart(state: CliState, order: dict) -> None:
    state.emit(order, pretty=cart_pretty, table=cart_table)


@cart_app.command("show")
@handle_errors
def show(ctx: typer.Context) -> None:
    """Show current shopping cart."""
    state = get_state(ctx)
    with state.status("Fetching cart…"):
        order = state.client().get_cart()
    render_cart(state, order)


@cart_app.command("add")
@handle_errors
def add(
    ctx: typer.Context,
    product_id: str = typer.Argument(..., help="Product ID"),
    quantity: int = typer.Argument(1, min=1, help="Quantity to add"),
) -> None:
    """Add a product to the cart."""
    state = get_state(ctx)
    with state.status("Adding to cart…"):
        order = state.client().add_product(product_id, quantity)
    state.note(Text(f"Added {quantity}× {product_id} to cart.", style="green"))
    render_cart(state, order)


@cart_app.command("remove")
@handle_errors
def remove(
    ctx: typer.Context,
    product_id: str = typer.Argument(..., help="Product ID"),
    qty: int = typer.Option(1, "--qty", min=1, help="Quantity to remove"),
) -> None:
    """Remove a product from the cart."""
    state = get_state(ctx)
    with state.status("Removing from cart…"):
        order = state.client().remove_product(product_id, qty)
    state.note(Text(f"Removed {qty}× {product_id} from cart.", style="green"))
    render_cart(state, order)


@cart_app.command("clear")
@handle_errors
def clear(ctx: typer.Context) -> None:
    """Clear the entire shopping cart."""
    state = get_state(ctx)
    with state.status("Clearing cart…"):
        order = state.client().clear_cart()
    state.note(Text("Cart cleared.", style="green"))
    render_cart(state, order)


def register(app: typer.Typer) -> None:
    app.add_typer(cart_app, name="cart")
