"""Login, logout, whoami and two-factor authentication commands."""

from __future__ import annotations

import logging

import typer
from rich.text import Text

from ..config import clear_auth, set_auth_key, set_username
from ..errors import handle_errors
from ..interactive import prompt_login
from ..output import kv_table
from ..state import get_state
from ..utils import format_address

logger = logging.getLogger(__name__)

twofa_app = typer.Typer(help="Two-factor authentication commands", no_args_is_help=True)


@handle_errors
def login(
    ctx: typer.Context,
    username: str | None = typer.Option(None, "--username", "-u", help="Account email"),
    password: str | None = typer.Option(None, "--password", "-p", help="Account password"),
) -> None:
    """Log in to your Picnic account."""
    state = get_state(ctx)
    username, password = prompt_login(username, password)

    with state.status("Logging in…"):
        result = state.anon_client().login(username, password)

    set_auth_key(result["auth_key"])
    set_username(username)

    if result.get("second_factor_authentication_required"):
        if state.json:
            state.emit({"success": True, "second_factor_required": True, "user_id": result.get("user_id")})
        else:
            state.console.print(Text("Logged in, but 2FA is required. Run: picnic 2fa generate", style="yellow"))
        return

    if state.json:
        state.emit({"success": True, "user_id": result.get("user_id")})
    else:
        state.console.print(Text("Logged in successfully.", style="green"))


@handle_errors
def logout(ctx: typer.Context) -> None:
    """Clear stored credentials."""
    state = get_state(ctx)
    clear_auth()
    if state.json:
        state.emit({"success": True})
    else:
        state.console.print(Text("Logged out.", style="green"))


@handle_errors
def whoami(ctx: typer.Context) -> None:
    """Show current user details."""
    state = get_state(ctx)
    with state.status("Fetching user details…"):
        user = state.client().get_user_details()

    def rows(data: dict) -> list[tuple[str, str]]:
        return [
            ("Name", f"{data.get('firstname', '')} {data.get('lastname', '')}"),
            ("Email", data.get("contact_email", "")),
            ("Address", format_address(data.get("address"))),
            ("Phone", data.get("phone", "")),
            ("Total deliveries", str(data.get("total_deliveries", 0))),
        ]

    def pretty(data: dict) -> Text:
        return Text("\n").join(Text.assemble((f"{k}:", "bold"), f" {v}") for k, v in rows(data))

    state.emit(user, pretty=pretty, table=lambda data: kv_table(rows(data)))


@twofa_app.command("generate")
@handle_errors
def twofa_generate(ctx: typer.Context) -> None:
    """Request a 2FA code via SMS."""
    state = get_state(ctx)
    with state.status("Requesting 2FA code…"):
        state.client().generate_2fa_code("SMS")

    if state.json:
        state.emit({"success": True, "method": "SMS"})
    else:
        state.console.print(Text("2FA code sent via SMS.", style="green"))


@twofa_app.command("verify")
@handle_errors
def twofa_verify(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Code received by SMS"),
) -> None:
    """Verify a 2FA code."""
    state = get_state(ctx)
    client = state.client()
    with state.status("Verifying 2FA code…"):
        client.verify_2fa_code(code)

    if client.auth_key and client.auth_key != state.config.auth_key:
        set_auth_key(client.auth_key)
        logger.debug("Stored refreshed auth key after 2FA verification")

    if state.json:
        state.emit({"success": True})
    else:
        state.console.print(Text("2FA verified successfully.", style="green"))


def register(app: typer.Typer) -> None:
    app.command("login")(login)
    app.command("logout")(logout)
    app.command("whoami")(whoami)
    app.add_typer(twofa_app, name="2fa")
