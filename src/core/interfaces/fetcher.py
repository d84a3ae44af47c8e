"""Contratos del fetcher de recursos de Infisical.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que los data sources se prueben con fetchers en memoria sin
  acoplar el Core a httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResponseStream(Protocol):
    """Cuerpo de respuesta adquirido en el fetch y liberado en el decode."""

    async def aread(self) -> bytes:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class ResourceFetcher(Protocol):
    """Contrato mínimo: un round trip por colección lógica.

    Reglas de diseño:
    - Los métodos son asíncronos porque hacen I/O (HTTP).
    - Devuelven el cuerpo sin leer; quien decodifica es responsable de cerrarlo.
    """

    async def fetch_organizations(self) -> ResponseStream:
        """Organizaciones del usuario actual."""

        ...

    async def fetch_projects(self, organization_id: str) -> ResponseStream:
        """Workspaces (proyectos) de una organización."""

        ...
