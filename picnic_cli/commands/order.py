"""Order status."""

from __future__ import annotations

import typer
from rich.text import Text

from ..errors import handle_errors
from ..output import kv_table
from ..state import get_state
from ..utils import STATUS_STYLES

order_app = typer.Typer(help="Order commands", no_args_is_help=True)


@order_app.command("status")
@handle_errors
def status(
    ctx: typer.Context,
    order_id: str = typer.Argument(..., help="Order ID"),
) -> None:
    """Check order status."""
    state = get_state(ctx)
    with state.status("Fetching order status…"):
        result = state.client().get_order_status(order_id)

    def pretty(data: dict):
        checkout = data.get("checkout_status", "")
        return Text.assemble(
            (f"Order {order_id}", "bold"),
            "\n  Checkout status: ",
            (checkout, STATUS_STYLES.get(checkout, "blue")),
        )

    def table(data: dict):
        return kv_table([("Order ID", order_id), ("Checkout Status", data.get("checkout_status", ""))])

    state.emit(result, pretty=pretty, table=table)


def register(app: typer.Typer) -> None:
    app.add_typer(order_app, name="order")
