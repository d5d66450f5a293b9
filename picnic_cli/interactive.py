"""Interactive prompts (login credentials, delivery slot choice)."""

from __future__ import annotations

import os

import typer
from rich.console import Console
from rich.prompt import IntPrompt
from rich.text import Text

from .errors import CliError
from .utils import format_price, format_window


def prompt_login(username: str | None = None, password: str | None = None) -> tuple[str, str]:
    """Fill in missing credentials from PICNIC_USERNAME/PICNIC_PASSWORD, then by prompting."""
    username = username or os.environ.get("PICNIC_USERNAME") or typer.prompt("Email")
    password = password or os.environ.get("PICNIC_PASSWORD") or typer.prompt("Password", hide_input=True)
    return username, password


def slot_label(slot: dict, lang: str = "nl") -> Text:
    label = Text(format_window(slot.get("window_start"), slot.get("window_end"), lang))
    if slot.get("minimum_order_value") is not None:
        label.append(f"  (min {format_price(slot['minimum_order_value'])})")
    if slot.get("selected"):
        label.append("  currently selected", style="cyan")
    return label


def pick_slot(slots: list[dict], console: Console, lang: str = "nl") -> str:
    """Show the available slots as a numbered list and return the chosen slot id."""
    available = [s for s in slots if s.get("is_available")]
    if not available:
        raise CliError("No delivery slots available")

    console.print(Text("Pick a delivery slot:", style="bold"))
    for i, slot in enumerate(available, 1):
        console.print(Text.assemble((f"  {i:>2}. ", "dim"), slot_label(slot, lang)))

    choice = IntPrompt.ask(
        "Slot",
        console=console,
        choices=[str(i) for i in range(1, len(available) + 1)],
        show_choices=False,
    )
    return available[choice - 1]["slot_id"]
