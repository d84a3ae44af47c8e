"""Fixtures compartidas.

Cada test construye su propio provider a través de `make_provider`; no hay
estado global de providers entre tests.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Callable

import httpx
import pytest

from core.config import ProviderSettings
from core.projection import FreshnessClock
from core.services.provider import InfisicalProvider

FIXED_NOW = 1_700_000_000.0
TOKEN = "ak.token"
HOST = "https://infisical.test"

Handler = Callable[[httpx.Request], httpx.Response]


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json"},
    )


def raw_response(content: bytes, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, content=content)


class RecordingHandler:
    """Handler de `MockTransport` que responde por path y guarda los requests."""

    def __init__(self, routes: dict[str, httpx.Response] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return json_response({"message": "not found"}, status_code=404)
        return response


@pytest.fixture(autouse=True)
def _clean_infisical_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INFISICAL_HOST", "INFISICAL_API_TOKEN", "INFISICAL_HTTP_TIMEOUT_SECONDS", "INFISICAL_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> ProviderSettings:
    """Settings sin ficheros .env: solo variables de entorno + defaults."""

    return ProviderSettings(_env_file=None)


@pytest.fixture
async def make_provider(settings: ProviderSettings) -> AsyncIterator[Callable[..., InfisicalProvider]]:
    created: list[InfisicalProvider] = []

    def factory(
        handler: Handler,
        *,
        now: Callable[[], float] = lambda: FIXED_NOW,
        provider_settings: ProviderSettings | None = None,
    ) -> InfisicalProvider:
        provider = InfisicalProvider(
            provider_settings or settings,
            transport=httpx.MockTransport(handler),
            clock=FreshnessClock(now),
        )
        created.append(provider)
        return provider

    yield factory

    for provider in created:
        await provider.aclose()
