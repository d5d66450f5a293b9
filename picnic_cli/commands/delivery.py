"""Delivery listing, details, tracking and follow-up commands."""

from __future__ import annotations

import json

import typer
from rich.console import Group
from rich.text import Text

from ..errors import EXIT_INVALID_INPUT, CliError, handle_errors
from ..models import DeliveryStatus
from ..output import kv_table, make_table
from ..state import get_state
from ..utils import format_price, format_status, format_window
from .cart import first_article

delivery_app = typer.Typer(help="Delivery detail commands", no_args_is_help=True)


def delivery_window(delivery: dict, lang: str = "nl") -> str:
    """Actual delivery time when known, else the booked slot."""
    if delivery.get("delivery_time"):
        t = delivery["delivery_time"]
        return format_window(t.get("start"), t.get("end"), lang)
    if delivery.get("slot"):
        s = delivery["slot"]
        return format_window(s.get("window_start"), s.get("window_end"), lang)
    return "-"


@handle_errors
def deliveries(
    ctx: typer.Context,
    status: DeliveryStatus | None = typer.Option(None, "--status", help="Filter by status", case_sensitive=False),
) -> None:
    """List deliveries."""
    state = get_state(ctx)
    with state.status("Fetching deliveries…"):
        result = state.client().get_deliveries([status.value] if status else None) or []

    def pretty(data: list[dict]):
        if not data:
            return Text("No deliveries found.", style="dim")
        return Text("\n").join(
            Text.assemble(
                "  ", (str(d.get("delivery_id", "")), "bold"),
                "  ", format_status(d.get("status")),
                f"  {delivery_window(d, state.lang)}  ",
                (str(d.get("creation_time", "")), "dim"),
            )
            for d in data
        )

    def table(data: list[dict]):
        if not data:
            return Text("No deliveries found.")
        return make_table(
            ["ID", "Status", "Window", "Creation Time"],
            ([d.get("delivery_id"), format_status(d.get("status")), delivery_window(d, state.lang),
              d.get("creation_time")] for d in data),
        )

    state.emit(result, pretty=pretty, table=table)


@delivery_app.command("show")
@handle_errors
def show(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
) -> None:
    """Show delivery details."""
    state = get_state(ctx)
    with state.status("Fetching delivery…"):
        delivery = state.client().get_delivery(delivery_id)

    def pretty(data: dict):
        out = Text.assemble(
            (f"Delivery {data.get('delivery_id', delivery_id)}", "bold"),
            "\n  Status:        ", format_status(data.get("status")),
            f"\n  Window:        {delivery_window(data, state.lang)}",
            f"\n  Created:       {data.get('creation_time', '')}",
        )
        orders = data.get("orders") or []
        if orders:
            out.append("\n\n  Orders:", style="bold")
            for order in orders:
                out.append("\n    Order ")
                out.append(str(order.get("id", "")), style="cyan")
                for line in order.get("items") or []:
                    article = first_article(line)
                    out.append(f"\n      {article.get('name', '')}  ")
                    out.append(article.get("unit_quantity", ""), style="dim")
                    out.append(f"  {format_price(line.get('price'))}")
        containers = data.get("returned_containers") or []
        if containers:
            out.append("\n\n  Returned containers:", style="bold")
            for container in containers:
                out.append(f"\n    {json.dumps(container, ensure_ascii=False)}")
        return out

    def table(data: dict):
        parts = [kv_table([
            ("Delivery ID", data.get("delivery_id", delivery_id)),
            ("Status", format_status(data.get("status"))),
            ("Window", delivery_window(data, state.lang)),
            ("Created", data.get("creation_time", "")),
        ])]
        orders = data.get("orders") or []
        if orders:
            parts.append(make_table(
                ["Order ID", "Item", "Unit Qty", "Price"],
                (
                    [order.get("id"), first_article(line).get("name"), first_article(line).get("unit_quantity"),
                     format_price(line.get("price"))]
                    for order in orders
                    for line in order.get("items") or []
                ),
            ))
        return Group(*parts)

    state.emit(delivery, pretty=pretty, table=table)


@delivery_app.command("track")
@handle_errors
def track(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
) -> None:
    """Track delivery position."""
    state = get_state(ctx)
    with state.status("Tracking delivery…"):
        position = state.client().get_delivery_position(delivery_id)

    state.emit(
        position,
        pretty=lambda data: Text.assemble(
            ("Delivery Position", "bold"),
            "\n  Scenario timestamp: ", (str(data.get("scenario_ts", "")), "cyan"),
        ),
        table=lambda data: kv_table([("Scenario TS", data.get("scenario_ts", ""))]),
    )


@delivery_app.command("route")
@handle_errors
def route(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
) -> None:
    """Get delivery route scenario."""
    state = get_state(ctx)
    with state.status("Fetching delivery route…"):
        scenario = state.client().get_delivery_scenario(delivery_id)

    def pretty(data: dict):
        out = Text()
        vehicle = data.get("vehicle")
        if vehicle:
            out.append("Vehicle\n", style="bold")
            out.append("  Image: ")
            out.append(str(vehicle.get("image", "")), style="dim")
            out.append("\n\n")
        out.append("Waypoints", style="bold")
        for wp in data.get("scenario") or []:
            out.append("\n  ")
            out.append(str(wp.get("ts", "")), style="dim")
            out.append(f"  {wp.get('lat')}, {wp.get('lng')}")
        return out

    def table(data: dict):
        parts = []
        if data.get("vehicle"):
            parts.append(kv_table([("Image", data["vehicle"].get("image", ""))]))
        parts.append(make_table(
            ["Timestamp", "Latitude", "Longitude"],
            ([wp.get("ts"), wp.get("lat"), wp.get("lng")] for wp in data.get("scenario") or []),
        ))
        return Group(*parts)

    state.emit(scenario, pretty=pretty, table=table)


@delivery_app.command("cancel")
@handle_errors
def cancel(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
) -> None:
    """Cancel a delivery."""
    state = get_state(ctx)
    with state.status("Cancelling delivery…"):
        result = state.client().cancel_delivery(delivery_id)

    message = f"Delivery {delivery_id} cancelled."
    state.emit(result, pretty=lambda _: Text(message, style="green"), table=lambda _: Text(message))


def parse_rating(value: str) -> int:
    try:
        rating = int(value)
    except ValueError:
        rating = None
    if rating is None or not 0 <= rating <= 10:
        raise CliError("Rating must be an integer between 0 and 10.", exit_code=EXIT_INVALID_INPUT)
    return rating


@delivery_app.command("rate")
@handle_errors
def rate(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
    rating: str = typer.Argument(..., help="Rating from 0 to 10"),
) -> None:
    """Rate a delivery (0–10)."""
    value = parse_rating(rating)
    state = get_state(ctx)
    with state.status("Rating delivery…"):
        result = state.client().set_delivery_rating(delivery_id, value)

    message = f"Delivery {delivery_id} rated {value}/10."
    state.emit(result, pretty=lambda _: Text(message, style="green"), table=lambda _: Text(message))


@delivery_app.command("invoice")
@handle_errors
def invoice(
    ctx: typer.Context,
    delivery_id: str = typer.Argument(..., metavar="ID", help="Delivery ID"),
) -> None:
    """Send delivery invoice email."""
    state = get_state(ctx)
    with state.status("Sending invoice email…"):
        result = state.client().send_delivery_invoice_email(delivery_id)

    state.emit(
        result,
        pretty=lambda _: Text("Invoice email sent.", style="green"),
        table=lambda _: Text("Invoice email sent."),
    )


def register(app: typer.Typer) -> None:
    app.command("deliveries")(deliveries)
    app.add_typer(delivery_app, name="delivery")
