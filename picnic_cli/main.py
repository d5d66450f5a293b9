"""picnic: command-line client for the Picnic online supermarket.

Entry point: builds the command tree, resolves global options and runs it.
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys

import typer

from .commands import auth, cart, categories, delivery, misc, order, product, search, slots, user, wallet
from .models import CountryCode
from .state import CliState

logger = logging.getLogger("picnic_cli")

app = typer.Typer(
    name="picnic",
    help="CLI for Picnic online supermarket",
    no_args_is_help=True,
    add_completion=False,
)

for module in (auth, search, cart, slots, delivery, product, categories, user, order, wallet, misc):
    module.register(app)

# Global flags and whether they take a value; accepted anywhere on the command line
GLOBAL_FLAGS = {
    "--json": False, "-j": False,
    "--table": False, "-t": False,
    "--no-color": False,
    "--verbose": False, "-v": False,
    "--country": True, "-c": True,
}

# Groups that run `show` when no subcommand is given
DEFAULT_SUBCOMMANDS = {
    "cart": "show",
    "slots": "show",
    "user": "show",
    "wallet": "show",
    "delivery": "show",
    "product": "show",
}


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr; stdout is reserved for command output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # urllib3 connection chatter drowns out our own debug lines
    logging.getLogger("urllib3").setLevel(logging.INFO)


def _print_version(value: bool) -> None:
    if not value:
        return
    try:
        version = importlib.metadata.version("picnic-cli")
    except importlib.metadata.PackageNotFoundError:
        version = "unknown"
    typer.echo(f"picnic {version}")
    raise typer.Exit()


def _validate_country(value: str | None) -> str | None:
    if value is None:
        return None
    code = value.upper()
    if code not in CountryCode.__members__:
        raise typer.BadParameter(f"must be one of: {', '.join(CountryCode.__members__)}")
    return code


@app.callback()
def _main(
    ctx: typer.Context,
    json_flag: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
    table_flag: bool = typer.Option(False, "--table", "-t", help="Output as table"),
    country: str | None = typer.Option(
        None, "--country", "-c", metavar="CODE", callback=_validate_country, help="Country code: NL or DE"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colors"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose/debug output"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_print_version, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    setup_logging(verbose)
    ctx.obj = CliState(
        json_flag=json_flag,
        table_flag=table_flag,
        country=country,
        no_color=no_color,
        verbose=verbose,
    )
    logger.debug("Global options: %s", ctx.obj)


def normalize_argv(argv: list[str], groups: dict[str, set[str]] | None = None) -> list[str]:
    """Move global flags in front of the subcommand and fill in default subcommands.

    `groups` maps a command group to its subcommand names; flags after `--`
    are left alone.
    """
    leading: list[str] = []
    rest: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            rest.extend(argv[i:])
            break
        name = arg.split("=", 1)[0]
        if name in GLOBAL_FLAGS:
            leading.append(arg)
            if GLOBAL_FLAGS[name] and "=" not in arg and i + 1 < len(argv):
                leading.append(argv[i + 1])
                i += 1
        else:
            rest.append(arg)
        i += 1

    if groups and rest and rest[0] in DEFAULT_SUBCOMMANDS:
        group = rest[0]
        following = rest[1] if len(rest) > 1 else None
        if following is None or (following not in groups.get(group, set()) and not following.startswith("-")):
            rest.insert(1, DEFAULT_SUBCOMMANDS[group])

    return leading + rest


def command_groups(command) -> dict[str, set[str]]:
    """Subcommand names per group of the click command built from `app`."""
    return {
        name: set(getattr(sub, "commands", {}))
        for name, sub in getattr(command, "commands", {}).items()
    }


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    command = typer.main.get_command(app)
    args = normalize_argv(list(sys.argv[1:] if argv is None else argv), command_groups(command))
    command(args=args, prog_name="picnic")


if __name__ == "__main__":
    main()
