"""Delivery slot commands."""

from __future__ import annotations

import typer
from rich.text import Text

from ..errors import handle_errors
from ..interactive import pick_slot
from ..output import kv_table, make_table
from ..state import CliState, get_state
from ..utils import format_price, format_window

slots_app = typer.Typer(help="Delivery slot commands", no_args_is_help=True)


def _render_selection(state: CliState, slot_id: str, order: dict) -> None:
    state.note(Text(f"Delivery slot {slot_id} selected.", style="green"))

    def pretty(data: dict):
        return Text.assemble(
            (f"Total items: {data.get('total_count', 0)}\n", "bold"),
            (f"Total price: {format_price(data.get('total_price'))}", "bold"),
        )

    def table(data: dict):
        return kv_table([
            ("Total items", data.get("total_count", 0)),
            ("Total price", format_price(data.get("total_price"))),
        ])

    state.emit(order, pretty=pretty, table=table)


@slots_app.command("show")
@handle_errors
def show(ctx: typer.Context) -> None:
    """List available delivery slots."""
    state = get_state(ctx)
    with state.status("Fetching delivery slots…"):
        result = state.client().get_delivery_slots()

    def window(slot: dict) -> str:
        return format_window(slot.get("window_start"), slot.get("window_end"), state.lang)

    def min_order(slot: dict) -> str | None:
        value = slot.get("minimum_order_value")
        return format_price(value) if value is not None else None

    def pretty(data: dict):
        slots = data.get("delivery_slots") or []
        if not slots:
            return Text("No delivery slots available.", style="yellow")
        lines = []
        for s in slots:
            line = Text.assemble("  ", (window(s), "bold"), "  ")
            line.append("available" if s.get("is_available") else "unavailable",
                        style="green" if s.get("is_available") else "dim")
            if s.get("selected"):
                line.append(" [selected]", style="cyan")
            if min_order(s):
                line.append(f"  min {min_order(s)}")
            line.append(f"  {s.get('slot_id', '')}", style="dim")
            lines.append(line)
        return Text("\n").join(lines)

    def table(data: dict):
        slots = data.get("delivery_slots") or []
        if not slots:
            return Text("No delivery slots available.")
        return make_table(
            ["Slot ID", "Window", "Available", "Selected", "Min Order"],
            (
                [
                    s.get("slot_id"),
                    window(s),
                    Text("yes", style="green") if s.get("is_available") else Text("no", style="dim"),
                    Text("yes", style="cyan") if s.get("selected") else "no",
                    min_order(s) or "-",
                ]
                for s in slots
            ),
        )

    state.emit(result, pretty=pretty, table=table)


@slots_app.command("set")
@handle_errors
def set_slot(
    ctx: typer.Context,
    slot_id: str = typer.Argument(..., help="Delivery slot ID"),
) -> None:
    """Select a delivery slot."""
    state = get_state(ctx)
    with state.status("Setting delivery slot…"):
        order = state.client().set_delivery_slot(slot_id)
    _render_selection(state, slot_id, order)


@slots_app.command("pick")
@handle_errors
def pick(ctx: typer.Context) -> None:
    """Interactively pick a delivery slot."""
    state = get_state(ctx)
    client = state.client()
    with state.status("Fetching delivery slots…"):
        result = client.get_delivery_slots()

    # Prompt on stderr so stdout keeps only the result
    slot_id = pick_slot(result.get("delivery_slots") or [], state.err_console, state.lang)

    with state.status("Setting delivery slot…"):
        order = client.set_delivery_slot(slot_id)
    _render_selection(state, slot_id, order)


def register(app: typer.Typer) -> None:
    app.add_typer(slots_app, name="slots")
