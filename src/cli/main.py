"""CLI de infisical-provider (Typer + Rich).

Por qué una CLI:
- Permite ejecutar las mismas lecturas que el host (organizaciones,
  proyectos) y revisar diagnósticos sin levantar el motor de estado.
- Toda la lógica vive en `core.services`; aquí solo hay presentación.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_snapshot_json, snapshot_to_json
from cli import doctor
from cli.ui_components import build_organizations_table, build_projects_table, print_diagnostics
from core.domain.models import OrganizationsSnapshot, ProjectsSnapshot
from core.services.datasources import ReadResult
from core.services.provider import InfisicalProvider

app = typer.Typer(no_args_is_help=True, help="Read-only Infisical organizations and projects.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class CliContext:
    """Dependencias inyectables (los tests pasan un `MockTransport`)."""

    transport: httpx.AsyncBaseTransport | None = None


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP requests and decisions."),
) -> None:
    _setup_logging(verbose)
    if not isinstance(ctx.obj, CliContext):
        ctx.obj = CliContext()


async def _run_read(
    ctx_obj: CliContext,
    host: str | None,
    api_token: str | None,
    organization_id: str | None,
    extended: bool,
) -> ReadResult:
    async with InfisicalProvider(transport=ctx_obj.transport) as provider:
        configured = provider.configure(host=host, api_token=api_token)
        if not configured.ok:
            return ReadResult(diagnostics=configured.diagnostics)
        if organization_id is None:
            return await provider.read_organizations(include_metadata=extended)
        return await provider.read_projects(organization_id)


def _emit(result: ReadResult, *, as_json: bool, output: Path | None, extended: bool = False) -> None:
    print_diagnostics(_err_console, result.diagnostics)
    snapshot = result.snapshot
    if snapshot is None or result.diagnostics.has_error():
        raise typer.Exit(code=1)

    if output is not None:
        path = export_snapshot_json(snapshot=snapshot, output_path=output)
        _err_console.print(f"[green]Saved snapshot to:[/green] {path}")
    if as_json:
        typer.echo(snapshot_to_json(snapshot), nl=False)
    elif isinstance(snapshot, OrganizationsSnapshot):
        _console.print(build_organizations_table(snapshot, extended=extended))
    elif isinstance(snapshot, ProjectsSnapshot):
        _console.print(build_projects_table(snapshot))


@app.command()
def organizations(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Infisical API URI (default: INFISICAL_HOST)."),
    api_token: Optional[str] = typer.Option(None, help="Infisical API token (default: INFISICAL_API_TOKEN)."),
    extended: bool = typer.Option(False, "--extended", help="Include created_at, updated_at and v."),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the snapshot JSON to a file."),
) -> None:
    """List the organizations of the token owner."""

    result = asyncio.run(_run_read(ctx.obj, host, api_token, None, extended))
    _emit(result, as_json=as_json, output=output, extended=extended)


@app.command()
def projects(
    ctx: typer.Context,
    organization_id: str = typer.Argument(..., help="Identifier of the organization."),
    host: Optional[str] = typer.Option(None, help="Infisical API URI (default: INFISICAL_HOST)."),
    api_token: Optional[str] = typer.Option(None, help="Infisical API token (default: INFISICAL_API_TOKEN)."),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the snapshot JSON to a file."),
) -> None:
    """List the projects of an organization, with their environments."""

    result = asyncio.run(_run_read(ctx.obj, host, api_token, organization_id, False))
    _emit(result, as_json=as_json, output=output)


def run() -> None:
    app()
