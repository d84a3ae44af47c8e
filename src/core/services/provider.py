"""Provider de Infisical: configuración y acceso a los data sources.

Flujo:
- `configure()` resuelve la credencial una vez y construye el cliente HTTP
  compartido (inmutable, seguro para lecturas concurrentes).
- `organizations()` / `projects()` devuelven data sources ligados a ese cliente.

Cada instancia es independiente: no hay registro global de providers, los
tests construyen el suyo (con `transport` y `clock` inyectados).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import httpx
from pydantic import ValidationError

from adapters.http_client import build_api_client
from adapters.infisical_api import InfisicalFetcher
from core.config import ProviderSettings, resolution_errors, resolve_credential
from core.domain.diagnostics import Diagnostics
from core.domain.models import ConfigValue, OrganizationDetail
from core.errors import ProviderError
from core.interfaces.fetcher import ResourceFetcher
from core.projection import FreshnessClock
from core.services.datasources import (
    AttributeSpec,
    OrganizationsDataSource,
    ProjectsDataSource,
    ReadResult,
)

logger = logging.getLogger(__name__)

PROVIDER_SCHEMA = (
    AttributeSpec(
        "host",
        "URI for infisical API. May also be provided via INFISICAL_HOST environment variable.",
        optional=True,
    ),
    AttributeSpec(
        "api_token",
        "API token for infisical API. May also be provided via INFISICAL_API_TOKEN environment variable.",
        optional=True,
        sensitive=True,
    ),
)


@dataclass
class ConfigureResult:
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()


class _UnconfiguredFetcher:
    """Fetcher de un provider sin configurar: falla sin tocar la red."""

    async def fetch_organizations(self) -> httpx.Response:
        raise _not_configured()

    async def fetch_projects(self, organization_id: str) -> httpx.Response:
        raise _not_configured()


def _not_configured() -> ProviderError:
    return ProviderError(
        "Provider Not Configured",
        "The Infisical provider has not been configured successfully; fix the provider "
        "configuration diagnostics and try again.",
    )


class InfisicalProvider:
    """Punto de entrada del host: esquema, configuración y data sources."""

    type_name = "infisical"
    description = "Interact with infisical."

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: FreshnessClock | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock or FreshnessClock()
        self._client: httpx.AsyncClient | None = None
        self._retired: list[httpx.AsyncClient] = []
        self._fetcher: ResourceFetcher = _UnconfiguredFetcher()

    @property
    def configured(self) -> bool:
        return self._client is not None

    def schema(self) -> dict[str, tuple[AttributeSpec, ...]]:
        return {
            self.type_name: PROVIDER_SCHEMA,
            f"{self.type_name}_{OrganizationsDataSource.type_suffix}": OrganizationsDataSource.schema,
            f"{self.type_name}_{ProjectsDataSource.type_suffix}": ProjectsDataSource.schema,
        }

    def configure(self, host: ConfigValue = None, api_token: ConfigValue = None) -> ConfigureResult:
        """Resuelve la credencial y construye el cliente compartido.

        Los errores (valor desconocido, token ausente, fallo al construir el
        cliente) se devuelven como diagnósticos; nunca se lanza.
        """

        logger.info("Configuring Infisical client")
        result = ConfigureResult()
        self._reset()

        unknown = resolution_errors(host, api_token)
        if unknown:
            result.diagnostics.extend(err.to_diagnostic() for err in unknown)
            return result

        try:
            settings = self._settings or ProviderSettings()
            credential = resolve_credential(host, api_token, settings)
            client = build_api_client(credential, settings, transport=self._transport)
        except ProviderError as exc:
            logger.warning("Infisical provider configuration failed: %s", exc.summary)
            result.diagnostics.append(exc.to_diagnostic())
            return result
        except ValidationError as exc:
            logger.warning("Invalid Infisical provider settings: %s", exc)
            result.diagnostics.add_error("Invalid Infisical Provider Settings", str(exc))
            return result

        self._client = client
        self._fetcher = InfisicalFetcher(client)
        logger.info("Configured Infisical client for %s", credential.host)
        return result

    def _reset(self) -> None:
        # El cliente anterior se cierra en aclose(); configure() es síncrono.
        if self._client is not None:
            self._retired.append(self._client)
        self._client = None
        self._fetcher = _UnconfiguredFetcher()

    def data_sources(self) -> dict[str, Callable[[], object]]:
        return {
            f"{self.type_name}_{OrganizationsDataSource.type_suffix}": self.organizations,
            f"{self.type_name}_{ProjectsDataSource.type_suffix}": self.projects,
        }

    def organizations(self, *, include_metadata: bool = False) -> OrganizationsDataSource:
        detail = OrganizationDetail.EXTENDED if include_metadata else OrganizationDetail.BASIC
        return OrganizationsDataSource(self._fetcher, self._clock, detail=detail)

    def projects(self) -> ProjectsDataSource:
        return ProjectsDataSource(self._fetcher, self._clock)

    async def read_organizations(self, *, include_metadata: bool = False) -> ReadResult:
        return await self.organizations(include_metadata=include_metadata).read()

    async def read_projects(self, organization_id: str) -> ReadResult:
        return await self.projects().read(organization_id)

    async def aclose(self) -> None:
        clients, self._retired = self._retired, []
        if self._client is not None:
            clients.append(self._client)
        for client in clients:
            await client.aclose()

    async def __aenter__(self) -> "InfisicalProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
