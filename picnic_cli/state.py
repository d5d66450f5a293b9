"""Per-invocation CLI state shared by all commands through `ctx.obj`."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from rich.console import Console

from .config import CliConfig, load_config
from .errors import CliError
from .models import OutputFormat
from .output import Renderer, output, resolve_format
from .picnic.client import PicnicClient
from .utils import lang_for_country

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    json_flag: bool = False
    table_flag: bool = False
    country: str | None = None
    no_color: bool = False
    verbose: bool = False
    _client: PicnicClient | None = field(default=None, repr=False)

    @cached_property
    def config(self) -> CliConfig:
        return load_config()

    @cached_property
    def console(self) -> Console:
        return Console(no_color=self.no_color, highlight=False)

    @cached_property
    def err_console(self) -> Console:
        return Console(stderr=True, no_color=self.no_color, highlight=False)

    @property
    def json(self) -> bool:
        """True for `--json` and for a configured `defaultOutput` of json."""
        return self.format == OutputFormat.JSON

    @cached_property
    def format(self) -> OutputFormat:
        if self.json_flag:
            return OutputFormat.JSON
        return resolve_format(table_flag=self.table_flag, default=self.config.default_output)

    @property
    def country_code(self) -> str:
        return self.country or self.config.country_code

    @property
    def lang(self) -> str:
        return lang_for_country(self.country_code)

    def client(self) -> PicnicClient:
        """Authenticated client, built once per invocation."""
        if self._client is None:
            if not self.config.auth_key:
                raise CliError("Not authenticated. Run: picnic login")
            self._client = PicnicClient.from_config(self.config, country=self.country)
            logger.debug("Using Picnic %s API v%s", self._client.country_code, self._client.api_version)
        return self._client

    def anon_client(self) -> PicnicClient:
        """Unauthenticated client for the login flow only."""
        return PicnicClient(country_code=self.country_code, api_version=self.config.api_version)

    def status(self, message: str):
        """Spinner on stderr; nothing in JSON mode."""
        if self.json:
            return nullcontext()
        return self.err_console.status(message)

    def note(self, text: Any) -> None:
        """Informational line on stdout, suppressed in JSON mode."""
        if not self.json:
            self.console.print(text)

    def emit(self, data: Any, pretty: Renderer | None = None, table: Renderer | None = None) -> None:
        output(data, self.format, pretty=pretty, table=table, console=self.console)


def get_state(ctx) -> CliState:
    """State set up by the root callback; a default one when run standalone."""
    if ctx.obj is None:
        ctx.obj = CliState()
    return ctx.obj
