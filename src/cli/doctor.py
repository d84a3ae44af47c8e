"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import os

import typer
from rich.console import Console
from rich.table import Table

from core.config import (
    DEFAULT_HOST,
    HOST_ENV_VAR,
    TOKEN_ENV_VAR,
    ProviderSettings,
    write_user_env_vars,
)
from core.services.datasources import ReadResult
from core.services.provider import InfisicalProvider

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(ctx_obj: object) -> ReadResult:
    async with InfisicalProvider(transport=getattr(ctx_obj, "transport", None)) as provider:
        configured = provider.configure()
        if not configured.ok:
            return ReadResult(diagnostics=configured.diagnostics)
        return await provider.read_organizations()


def _host_source(settings: ProviderSettings) -> str:
    if "host" not in settings.model_fields_set:
        return "default"
    if os.environ.get(HOST_ENV_VAR):
        return HOST_ENV_VAR
    return ".env file"


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = ProviderSettings()

    table = Table(title="infisical-provider Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Host", "OK", f"{settings.host} ({_host_source(settings)})")
    if settings.api_token and settings.api_token.get_secret_value():
        table.add_row("API token", "OK", f"{TOKEN_ENV_VAR} set")
    else:
        table.add_row("API token", "MISSING", f"Set {TOKEN_ENV_VAR} or run `doctor configure`")

    # Connectivity + credential (one organizations read)
    result = asyncio.run(_check_api(ctx.obj))
    if result.snapshot is not None and not result.diagnostics.has_error():
        count = len(result.snapshot.organizations)
        table.add_row("API access", "OK", f"{count} organization(s) visible")
    else:
        first = result.diagnostics.errors[0]
        table.add_row("API access", "FAIL", f"{first.summary}: {first.detail}")

    _console.print(table)

    if result.diagnostics.has_error():
        raise typer.Exit(code=1)


@app.command()
def configure() -> None:
    """Interactive setup (stores host and token in the user config .env)."""

    host = typer.prompt("Infisical host", default=DEFAULT_HOST, show_default=True).strip()
    api_token = typer.prompt("Infisical API token", hide_input=True, confirmation_prompt=False).strip()

    if not host or not api_token:
        raise typer.BadParameter("host and api token are required")

    env_path = write_user_env_vars({HOST_ENV_VAR: host, TOKEN_ENV_VAR: api_token})

    _console.print(f"[green]Saved Infisical config to:[/green] {env_path}")
