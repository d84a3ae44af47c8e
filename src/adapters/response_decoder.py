"""Decodificación de respuestas de la API.

Por qué separado del fetcher:
- El cuerpo es un recurso con ámbito: se adquiere en el fetch y se libera
  aquí, en todos los caminos de salida, incluso si la decodificación falla.
- Un cuerpo vacío es "sin datos" (colección vacía), no "datos corruptos".
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from core.domain.diagnostics import Diagnostics
from core.errors import DecodeError, NetworkError, ResourceReleaseError
from core.interfaces.fetcher import ResponseStream

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


def decode_body(body: bytes, model: type[T], *, summary: str) -> T:
    """Parsea `body` como `model`; vacío o solo espacios -> `model()` vacío."""

    if not body.strip():
        return model()
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise DecodeError(summary, exc) from exc


async def decode_response(
    response: ResponseStream,
    model: type[T],
    *,
    summary: str,
    diagnostics: Diagnostics,
) -> T:
    """Consume y libera `response`, y devuelve el cuerpo decodificado.

    Un fallo al cerrar el cuerpo se añade a `diagnostics` como aviso y no
    impide devolver el resultado.
    """

    try:
        body = await response.aread()
    except httpx.HTTPError as exc:
        raise NetworkError(summary, f"{type(exc).__name__}: {exc}") from exc
    finally:
        await _release(response, diagnostics)
    return decode_body(body, model, summary=summary)


async def _release(response: ResponseStream, diagnostics: Diagnostics) -> None:
    try:
        await response.aclose()
    except Exception as exc:
        logger.warning("Unable to close response body: %s", exc)
        diagnostics.append(
            ResourceReleaseError("Unable to close body reader for User", str(exc)).to_diagnostic()
        )
