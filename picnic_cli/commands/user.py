"""User account commands."""

from __future__ import annotations

import typer
from rich.console import Group
from rich.text import Text

from ..errors import handle_errors
from ..output import kv_table, make_table
from ..state import get_state
from ..utils import format_address, format_price

user_app = typer.Typer(help="User account commands", no_args_is_help=True)


@user_app.command("show")
@handle_errors
def show(ctx: typer.Context) -> None:
    """Show user details."""
    state = get_state(ctx)
    with state.status("Fetching user details…"):
        user = state.client().get_user_details()

    def name(data: dict) -> str:
        return f"{data.get('firstname', '')} {data.get('lastname', '')}"

    def pretty(data: dict):
        return Text.assemble(
            (name(data), "bold"),
            f"\n  Address:       {format_address(data.get('address'), ' ')}",
            f"\n  Phone:         {data.get('phone', '')}",
            f"\n  Email:         {data.get('contact_email', '')}",
            f"\n  Deliveries:    {data.get('completed_deliveries', 0)} completed"
            f" / {data.get('total_deliveries', 0)} total",
        )

    def table(data: dict):
        return kv_table([
            ("Name", name(data)),
            ("Address", format_address(data.get("address"), " ")),
            ("Phone", data.get("phone", "")),
            ("Email", data.get("contact_email", "")),
            ("Total Deliveries", data.get("total_deliveries", 0)),
            ("Completed Deliveries", data.get("completed_deliveries", 0)),
        ])

    state.emit(user, pretty=pretty, table=table)


@user_app.command("info")
@handle_errors
def info(ctx: typer.Context) -> None:
    """Show user info (ID, feature toggles)."""
    state = get_state(ctx)
    with state.status("Fetching user info…"):
        result = state.client().get_user_info()

    def pretty(data: dict):
        out = Text.assemble(
            ("User Info", "bold"),
            f"\n  User ID:       {data.get('user_id', '')}",
            f"\n  Phone:         {data.get('redacted_phone_number', '')}",
        )
        toggles = data.get("feature_toggles") or []
        if toggles:
            out.append("\n\n  Feature Toggles:", style="bold")
            for toggle in toggles:
                out.append(f"\n    - {toggle.get('name', '')}")
        return out

    def table(data: dict):
        parts = [kv_table([
            ("User ID", data.get("user_id", "")),
            ("Phone", data.get("redacted_phone_number", "")),
        ])]
        toggles = data.get("feature_toggles") or []
        if toggles:
            parts.append(make_table(["Feature Toggle"], ([t.get("name")] for t in toggles)))
        return Group(*parts)

    state.emit(result, pretty=pretty, table=table)


@user_app.command("profile")
@handle_errors
def profile(ctx: typer.Context) -> None:
    """Show profile menu."""
    state = get_state(ctx)
    with state.status("Fetching profile…"):
        result = state.client().get_profile_menu()
    state.emit(result)


@user_app.command("mgm")
@handle_errors
def mgm(ctx: typer.Context) -> None:
    """Show referral (MGM) details."""
    state = get_state(ctx)
    with state.status("Fetching referral details…"):
        result = state.client().get_mgm_details()

    def rows(data: dict) -> list[tuple[str, str]]:
        return [
            ("Referral Code", data.get("mgm_code", "")),
            ("Share URL", data.get("share_url", "")),
            ("Amount Earned", format_price(data.get("amount_earned"))),
            ("Invitee Value", format_price(data.get("invitee_value"))),
            ("Inviter Value", format_price(data.get("inviter_value"))),
        ]

    def pretty(data: dict):
        return Text.assemble(
            ("Referral (MGM) Details", "bold"),
            "\n  Code:          ", (str(data.get("mgm_code", "")), "cyan"),
            f"\n  Share URL:     {data.get('share_url', '')}",
            f"\n  Earned:        {format_price(data.get('amount_earned'))}",
            f"\n  Invitee value: {format_price(data.get('invitee_value'))}",
            f"\n  Inviter value: {format_price(data.get('inviter_value'))}",
        )

    state.emit(result, pretty=pretty, table=lambda data: kv_table(rows(data)))


@user_app.command("consent")
@handle_errors
def consent(
    ctx: typer.Context,
    general: bool = typer.Option(False, "--general", help="Show general consent settings"),
) -> None:
    """Show consent settings."""
    state = get_state(ctx)
    with state.status("Fetching consent settings…"):
        settings = state.client().get_consent_settings(general) or []

    def pretty(data: list[dict]):
        if not data:
            return Text("No consent settings found.", style="dim")
        return Text("\n\n").join(
            Text.assemble(
                "  ",
                ("✓", "green") if s.get("established_decision") else ("✗", "red"),
                "  ", ((s.get("text") or {}).get("title", ""), "bold"),
                "\n     ", ((s.get("text") or {}).get("text", ""), "dim"),
            )
            for s in data
        )

    def table(data: list[dict]):
        if not data:
            return Text("No consent settings found.")
        return make_table(
            ["ID", "Title", "Description", "Decision"],
            (
                [s.get("id"), (s.get("text") or {}).get("title"), (s.get("text") or {}).get("text"),
                 "Yes" if s.get("established_decision") else "No"]
                for s in data
            ),
        )

    state.emit(settings, pretty=pretty, table=table)


def register(app: typer.Typer) -> None:
    app.add_typer(user_app, name="user")
