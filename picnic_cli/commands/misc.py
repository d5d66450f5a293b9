"""Messages, reminders, parcels, support info, raw requests and config."""

from __future__ import annotations

import json

import typer
from rich.text import Text

from ..config import EDITABLE_KEYS, config_path, load_config, set_value
from ..errors import EXIT_INVALID_INPUT, CliError, handle_errors
from ..models import HttpMethod, OutputFormat
from ..output import kv_table, output
from ..state import get_state

config_app = typer.Typer(help="Show or change stored settings", no_args_is_help=True)


@handle_errors
def messages(ctx: typer.Context) -> None:
    """Get messages."""
    state = get_state(ctx)
    with state.status("Fetching messages…"):
        result = state.client().get_messages()
    state.emit(result)


@handle_errors
def reminders(ctx: typer.Context) -> None:
    """Get reminders."""
    state = get_state(ctx)
    with state.status("Fetching reminders…"):
        result = state.client().get_reminders()
    state.emit(result)


@handle_errors
def parcels(ctx: typer.Context) -> None:
    """Get parcels."""
    state = get_state(ctx)
    with state.status("Fetching parcels…"):
        result = state.client().get_parcels()
    state.emit(result)


def format_opening_time(parts: list | None) -> str:
    """[8, 0] -> "08:00"."""
    if not parts:
        return "-"
    return ":".join(f"{int(p):02d}" for p in parts)


@handle_errors
def support(ctx: typer.Context) -> None:
    """Get customer service contact info."""
    state = get_state(ctx)
    with state.status("Fetching support info…"):
        info = state.client().get_customer_service_contact_info()

    def contact_rows(data: dict) -> list[tuple[str, str]]:
        contact = data.get("contact_details") or {}
        return [
            ("Phone", contact.get("phone", "")),
            ("Email", contact.get("email", "")),
            ("WhatsApp", contact.get("whatsapp", "")),
        ]

    def opening_lines(data: dict) -> list[str]:
        return [
            f"  {day}: {format_opening_time(times.get('start'))} – {format_opening_time(times.get('end'))}"
            for day, times in (data.get("opening_times") or {}).items()
        ]

    def pretty(data: dict):
        lines = [f"{k + ':':<10}{v}" for k, v in contact_rows(data)]
        lines += ["", "Opening times:", *opening_lines(data)]
        return Text("\n".join(lines))

    def table(data: dict):
        rows = contact_rows(data)
        rows += [
            (day, f"{format_opening_time(t.get('start'))} – {format_opening_time(t.get('end'))}")
            for day, t in (data.get("opening_times") or {}).items()
        ]
        return kv_table(rows)

    state.emit(info, pretty=pretty, table=table)


def parse_json_data(data: str | None):
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise CliError(f"Invalid JSON in --data: {e.msg}", exit_code=EXIT_INVALID_INPUT) from e


@handle_errors
def raw(
    ctx: typer.Context,
    method: HttpMethod = typer.Argument(..., case_sensitive=False, help="HTTP method"),
    path: str = typer.Argument(..., help="API path, e.g. /cart"),
    data: str | None = typer.Option(None, "--data", help="JSON body"),
) -> None:
    """Send a raw API request (always prints JSON)."""
    body = parse_json_data(data)
    state = get_state(ctx)
    with state.status(f"{method.value} {path}…"):
        result = state.client().send_request(method.value, path, body)
    output(result, OutputFormat.JSON)


@config_app.command("show")
@handle_errors
def config_show(ctx: typer.Context) -> None:
    """Show stored settings (the auth key is masked)."""
    state = get_state(ctx)
    data = load_config().model_dump(by_alias=True)
    if data.get("authKey"):
        data["authKey"] = "***"
    data["path"] = str(config_path())
    state.emit(data, pretty=lambda d: kv_table(d.items()), table=lambda d: kv_table(d.items()))


@config_app.command("set")
@handle_errors
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"One of: {', '.join(EDITABLE_KEYS)}"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change a stored setting."""
    state = get_state(ctx)
    config = set_value(key, value)
    result = {"success": True, key: config.model_dump(by_alias=True)[key]}
    state.emit(
        result,
        pretty=lambda d: Text(f"{key} set to {d[key]}.", style="green"),
        table=lambda d: kv_table([(key, d[key])]),
    )


def register(app: typer.Typer) -> None:
    app.command("messages")(messages)
    app.command("reminders")(reminders)
    app.command("parcels")(parcels)
    app.command("support")(support)
    app.command("raw")(raw)
    app.add_typer(config_app, name="config")
