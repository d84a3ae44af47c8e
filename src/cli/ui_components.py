"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.diagnostics import Diagnostics
from core.domain.models import OrganizationsSnapshot, ProjectsSnapshot


def build_organizations_table(snapshot: OrganizationsSnapshot, *, extended: bool = False) -> Table:
    table = Table(title=f"Infisical Organizations (id {snapshot.id})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    if extended:
        table.add_column("Created", style="dim")
        table.add_column("Updated", style="dim")
        table.add_column("v", style="dim")
    for org in snapshot.organizations:
        row = [org.id, org.name]
        if extended:
            row += [org.created_at or "", org.updated_at or "", "" if org.v is None else str(org.v)]
        table.add_row(*row)
    return table


def build_projects_table(snapshot: ProjectsSnapshot) -> Table:
    """Un proyecto por fila; los entornos en el orden en que llegaron."""

    table = Table(title=f"Infisical Projects of {snapshot.organization_id} (id {snapshot.id})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Environments", style="magenta")
    for proj in snapshot.projects:
        envs = ", ".join(f"{env.slug} ({env.id})" for env in proj.environments)
        table.add_row(proj.id, proj.name, envs)
    return table


def build_diagnostics_panel(diagnostics: Diagnostics) -> Panel:
    body = Text()
    for diag in diagnostics:
        style = "bold red" if diag.is_error else "bold yellow"
        where = f" [{diag.attribute}]" if diag.attribute else ""
        body.append(f"{diag.severity.value.upper()}{where}: {diag.summary}\n", style=style)
        if diag.detail:
            body.append(f"  {diag.detail}\n", style="dim")
    border = "red" if diagnostics.has_error() else "yellow"
    return Panel(body, title=Text("Diagnostics", style="bold"), border_style=border)


def print_diagnostics(console: Console, diagnostics: Diagnostics) -> None:
    if len(diagnostics):
        console.print(build_diagnostics_panel(diagnostics))
