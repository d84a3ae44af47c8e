"""Data sources de solo lectura: organizaciones y proyectos.

Cada `read()` es un pipeline lineal `fetch -> decode -> project`. Cualquier
error aborta la lectura completa (sin snapshot parcial) y se devuelve como
diagnóstico; los snapshots de lecturas anteriores no se ven afectados.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from adapters.response_decoder import decode_response
from core.domain.diagnostics import Diagnostics
from core.domain.models import (
    OrganizationDetail,
    OrganizationsResponse,
    OrganizationsSnapshot,
    ProjectsSnapshot,
    Snapshot,
    WorkspacesResponse,
)
from core.errors import ProviderError
from core.interfaces.fetcher import ResourceFetcher
from core.projection import FreshnessClock, project_organizations, project_projects

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeSpec:
    """Declaración de un atributo del esquema (provider o data source)."""

    name: str
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False


@dataclass
class ReadResult:
    """Resultado de una lectura: snapshot o diagnósticos de error, nunca ambos."""

    snapshot: Snapshot | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return self.snapshot is not None and not self.diagnostics.has_error()


class OrganizationsDataSource:
    """Lista las organizaciones del usuario dueño del token."""

    type_suffix = "organizations"
    description = "Fetches the list of organizations."
    schema = (
        AttributeSpec("id", "Current Unix timestamp for id.", computed=True),
        AttributeSpec("organizations", "List of organizations.", computed=True),
        AttributeSpec("organizations.id", "Identifier of the organization.", computed=True),
        AttributeSpec("organizations.name", "Name of the organization.", computed=True),
        AttributeSpec("organizations.created_at", "Creation timestamp (extended detail only).", computed=True),
        AttributeSpec("organizations.updated_at", "Last update timestamp (extended detail only).", computed=True),
        AttributeSpec("organizations.v", "Document version (extended detail only).", computed=True),
    )

    def __init__(
        self,
        fetcher: ResourceFetcher,
        clock: FreshnessClock,
        *,
        detail: OrganizationDetail = OrganizationDetail.BASIC,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock
        self._detail = detail

    async def read(self) -> ReadResult:
        result = ReadResult()
        summary = "Unable to Decode Infisical Organizations for User"
        try:
            response = await self._fetcher.fetch_organizations()
            data = await decode_response(
                response, OrganizationsResponse, summary=summary, diagnostics=result.diagnostics
            )
        except ProviderError as exc:
            logger.warning("Organizations read failed: %s", exc)
            result.diagnostics.append(exc.to_diagnostic())
            return result

        snapshot: OrganizationsSnapshot = project_organizations(
            data.organizations,
            freshness_id=self._clock.next_id(),
            detail=self._detail,
        )
        logger.debug("Read %d organizations", len(snapshot.organizations))
        result.snapshot = snapshot
        return result


class ProjectsDataSource:
    """Lista los proyectos (workspaces) de una organización con sus entornos."""

    type_suffix = "projects"
    description = "Fetches the list of projects."
    schema = (
        AttributeSpec("id", "Current Unix timestamp for id.", computed=True),
        AttributeSpec("organization_id", "Identifier of the organization.", required=True),
        AttributeSpec("projects", "List of projects.", computed=True),
        AttributeSpec("projects.id", "Identifier of the project.", computed=True),
        AttributeSpec("projects.name", "Name of the project.", computed=True),
        AttributeSpec("projects.environments", "List of environments.", computed=True),
        AttributeSpec("projects.environments.id", "Identifier of the environment.", computed=True),
        AttributeSpec("projects.environments.name", "Name of the environment.", computed=True),
        AttributeSpec("projects.environments.slug", "Slug of the environment.", computed=True),
    )

    def __init__(self, fetcher: ResourceFetcher, clock: FreshnessClock) -> None:
        self._fetcher = fetcher
        self._clock = clock

    @staticmethod
    def validate(organization_id: str | None) -> Diagnostics:
        """Validación de esquema: `organization_id` es obligatorio y no vacío."""

        diagnostics = Diagnostics()
        if not organization_id:
            diagnostics.add_attribute_error(
                "organization_id",
                "Missing Organization ID",
                "The organization_id attribute is required and must not be empty.",
            )
        return diagnostics

    async def read(self, organization_id: str) -> ReadResult:
        result = ReadResult(diagnostics=self.validate(organization_id))
        if result.diagnostics.has_error():
            return result

        summary = "Unable to Decode Infisical Projects for User"
        try:
            response = await self._fetcher.fetch_projects(organization_id)
            data = await decode_response(
                response, WorkspacesResponse, summary=summary, diagnostics=result.diagnostics
            )
        except ProviderError as exc:
            logger.warning("Projects read for organization %s failed: %s", organization_id, exc)
            result.diagnostics.append(exc.to_diagnostic())
            return result

        snapshot: ProjectsSnapshot = project_projects(
            data.workspaces,
            organization_id=organization_id,
            freshness_id=self._clock.next_id(),
        )
        logger.debug("Read %d projects for organization %s", len(snapshot.projects), organization_id)
        result.snapshot = snapshot
        return result
