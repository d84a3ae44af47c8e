"""Fetcher de la API de Infisical.

Un request por colección:
- `GET /api/v2/users/me/organizations`
- `GET /api/v2/organizations/{organization_id}/workspaces`

Sin reintentos, sin paginación: un round trip fallido falla la lectura.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from core.errors import NetworkError
from core.interfaces.fetcher import ResourceFetcher

ORGANIZATIONS_PATH = "/api/v2/users/me/organizations"
WORKSPACES_PATH = "/api/v2/organizations/{organization_id}/workspaces"

_ERROR_BODY_LIMIT = 512

logger = logging.getLogger(__name__)


class InfisicalFetcher(ResourceFetcher):
    """Emite los GET autenticados sobre el cliente compartido."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch_organizations(self) -> httpx.Response:
        return await self._get(
            ORGANIZATIONS_PATH,
            summary="Unable to Read Infisical Organizations for User",
        )

    async def fetch_projects(self, organization_id: str) -> httpx.Response:
        path = WORKSPACES_PATH.format(organization_id=quote(organization_id, safe=""))
        return await self._get(path, summary="Unable to Read Infisical Projects for User")

    async def _get(self, path: str, *, summary: str) -> httpx.Response:
        request = self._client.build_request("GET", path)
        logger.debug("GET %s", request.url)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", request.url, exc)
            raise NetworkError(summary, f"{type(exc).__name__}: {exc}") from exc

        logger.debug("GET %s -> HTTP %s", request.url, response.status_code)
        if response.is_success:
            return response

        detail = await _error_detail(response)
        logger.warning("GET %s rejected: %s", request.url, detail)
        raise NetworkError(summary, detail, status_code=response.status_code)


async def _error_detail(response: httpx.Response) -> str:
    """Describe una respuesta no exitosa y libera su cuerpo."""

    detail = f"HTTP {response.status_code} {response.reason_phrase}".rstrip()
    try:
        body = (await response.aread())[:_ERROR_BODY_LIMIT].decode("utf-8", errors="replace").strip()
    except httpx.HTTPError:
        body = ""
    finally:
        await response.aclose()
    if body:
        detail = f"{detail}: {body}"
    return detail
