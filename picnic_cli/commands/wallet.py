"""Wallet and payment commands."""

from __future__ import annotations

import typer
from rich.console import Group
from rich.text import Text

from ..errors import handle_errors
from ..output import kv_table, make_table
from ..state import get_state
from ..utils import format_price, format_timestamp
from .cart import first_article

wallet_app = typer.Typer(help="Wallet and payment commands", no_args_is_help=True)


@wallet_app.command("show")
@handle_errors
def show(ctx: typer.Context) -> None:
    """Show payment profile."""
    state = get_state(ctx)
    with state.status("Fetching payment profile…"):
        profile = state.client().get_payment_profile()

    def options(data: dict) -> list[dict]:
        return data.get("stored_payment_options") or []

    def preferred(data: dict, opt: dict) -> bool:
        return opt.get("id") == data.get("preferred_payment_option_id")

    def pretty(data: dict):
        if not options(data):
            return Text("No payment options found.", style="dim")
        out = Text("Payment Options\n", style="bold")
        for opt in options(data):
            is_preferred = preferred(data, opt)
            details = " · ".join(
                str(v) for v in (opt.get("brand"), opt.get("payment_method"), opt.get("account")) if v
            )
            out.append("\n")
            out.append("★ " if is_preferred else "  ", style="green")
            out.append(opt.get("display_name", ""), style="bold" if is_preferred else "")
            out.append(f"  {details}", style="dim")
        return out

    def table(data: dict):
        if not options(data):
            return Text("No payment options found.")
        return make_table(
            ["ID", "Name", "Brand", "Method", "Account", "Preferred"],
            (
                [opt.get("id"), opt.get("display_name"), opt.get("brand"), opt.get("payment_method"),
                 opt.get("account") or "", "Yes" if preferred(data, opt) else ""]
                for opt in options(data)
            ),
        )

    state.emit(profile, pretty=pretty, table=table)


@wallet_app.command("transactions")
@handle_errors
def transactions(
    ctx: typer.Context,
    page: int = typer.Option(0, "--page", min=0, help="Page number"),
) -> None:
    """List wallet transactions."""
    state = get_state(ctx)
    with state.status("Fetching transactions…"):
        result = state.client().get_wallet_transactions(page) or []

    def when(t: dict) -> str:
        return format_timestamp(t.get("timestamp"), lang=state.lang)

    def pretty(data: list[dict]):
        if not data:
            return Text("No transactions found.", style="dim")
        return Text("\n").join(
            Text.assemble(
                "  ", (str(t.get("id", "")), "dim"),
                f"  {when(t)}  {format_price(t.get('amount_in_cents'))}"
                f"  {t.get('status', '')}  {t.get('display_name', '')}",
            )
            for t in data
        )

    def table(data: list[dict]):
        if not data:
            return Text("No transactions found.")
        return make_table(
            ["ID", "Date", "Amount", "Status", "Method"],
            ([t.get("id"), when(t), format_price(t.get("amount_in_cents")), t.get("status"),
              t.get("transaction_method")] for t in data),
        )

    state.emit(result, pretty=pretty, table=table)


def _item_row(line: dict) -> list:
    article = first_article(line)
    return [article.get("name") or line.get("id", ""), article.get("unit_quantity", ""), format_price(line.get("price"))]


@wallet_app.command("transaction")
@handle_errors
def transaction(
    ctx: typer.Context,
    transaction_id: str = typer.Argument(..., metavar="ID", help="Transaction ID"),
) -> None:
    """Show transaction details."""
    state = get_state(ctx)
    with state.status("Fetching transaction details…"):
        details = state.client().get_wallet_transaction_details(transaction_id)

    def pretty(data: dict):
        out = Text.assemble(
            ("Transaction Details", "bold"),
            "\n  Delivery ID:   ", (str(data.get("delivery_id", "")), "cyan"),
        )
        if data.get("shop_items"):
            out.append("\n\n  Items:", style="bold")
            for line in data["shop_items"]:
                name, unit, price = _item_row(line)
                out.append(f"\n    {name}  ")
                out.append(unit, style="dim")
                out.append(f"  {price}")
        if data.get("deposits"):
            out.append("\n\n  Deposits:", style="bold")
            for d in data["deposits"]:
                out.append(f"\n    {d.get('type', '')}  ×{d.get('count', 0)}  {format_price(d.get('value'))}")
        if data.get("returned_containers"):
            out.append("\n\n  Returned Containers:", style="bold")
            for c in data["returned_containers"]:
                out.append(f"\n    {c.get('localized_name', '')}  ×{c.get('quantity', 0)}  {format_price(c.get('price'))}")
        return out

    def table(data: dict):
        parts = [kv_table([("Delivery ID", data.get("delivery_id", ""))])]
        if data.get("shop_items"):
            parts.append(make_table(["Name", "Unit Qty", "Price"], (_item_row(line) for line in data["shop_items"])))
        if data.get("deposits"):
            parts.append(make_table(
                ["Type", "Count", "Value"],
                ([d.get("type"), d.get("count"), format_price(d.get("value"))] for d in data["deposits"]),
            ))
        if data.get("returned_containers"):
            parts.append(make_table(
                ["Name", "Quantity", "Price"],
                ([c.get("localized_name"), c.get("quantity"), format_price(c.get("price"))]
                 for c in data["returned_containers"]),
            ))
        return Group(*parts)

    state.emit(details, pretty=pretty, table=table)


def register(app: typer.Typer) -> None:
    app.add_typer(wallet_app, name="wallet")
