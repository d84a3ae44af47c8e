"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la inyección de la API key en un único sitio.
- Facilita testeo: se puede sustituir el transporte por `httpx.MockTransport`.

El cliente se construye una vez por configuración del provider y se comparte
entre lecturas: no guarda estado mutable por request.
"""

from __future__ import annotations

import logging
from typing import Generator

import httpx

from core.config import ProviderSettings
from core.domain.models import Credential
from core.errors import ClientConstructionError

API_KEY_HEADER = "X-API-Key"

logger = logging.getLogger(__name__)


class ApiKeyAuth(httpx.Auth):
    """Inyecta la API key como header en cada request saliente."""

    def __init__(self, header_name: str, header_value: str) -> None:
        self._header_name = header_name
        self._header_value = header_value

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self._header_name] = self._header_value
        yield request


def build_api_key_auth(token: str, *, header_name: str = API_KEY_HEADER) -> ApiKeyAuth:
    """Valida el token como valor de header y devuelve el `httpx.Auth`.

    Lanza `ClientConstructionError` si el token no puede viajar en un header
    HTTP (no ASCII o con caracteres de control).
    """

    try:
        token.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ClientConstructionError(
            "Unable to Create Infisical API Client",
            "The API token contains non-ASCII characters and cannot be sent in the "
            f"{header_name} header: {exc}",
        ) from exc
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in token):
        raise ClientConstructionError(
            "Unable to Create Infisical API Client",
            f"The API token contains control characters and cannot be sent in the {header_name} header.",
        )
    return ApiKeyAuth(header_name, token)


def build_api_client(
    credential: Credential,
    settings: ProviderSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea el `httpx.AsyncClient` autenticado contra `credential.host`.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las lecturas se comporten igual.
    - Cualquier fallo se devuelve como `ClientConstructionError`, nunca aborta
      el proceso.
    """

    settings = settings or ProviderSettings()

    try:
        base_url = httpx.URL(credential.host)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ClientConstructionError(
            "Unable to Create Infisical API Client",
            f"Invalid Infisical host {credential.host!r}: {exc}",
        ) from exc
    if base_url.scheme not in ("http", "https") or not base_url.host:
        raise ClientConstructionError(
            "Unable to Create Infisical API Client",
            f"Invalid Infisical host {credential.host!r}: expected an http(s) URL.",
        )

    auth = build_api_key_auth(credential.token.get_secret_value())
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }

    logger.debug("Creating Infisical client for %s", base_url)
    return httpx.AsyncClient(
        base_url=base_url,
        auth=auth,
        headers=headers,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        transport=transport,
    )
