"""Taxonomía de errores del provider.

Por qué una jerarquía propia:
- Los adaptadores (HTTP, JSON) lanzan excepciones de sus librerías; aquí se
  traducen a categorías estables que la capa de servicios convierte en
  diagnósticos.
- Ningún error de construcción o lectura debe terminar el proceso: todos
  acaban como `Diagnostic` devuelto al llamador.
"""

from __future__ import annotations

from core.domain.diagnostics import Diagnostic, Severity


class ProviderError(Exception):
    """Base de todos los errores que se reportan como diagnóstico."""

    severity = Severity.ERROR

    def __init__(self, summary: str, detail: str = "") -> None:
        super().__init__(f"{summary}: {detail}" if detail else summary)
        self.summary = summary
        self.detail = detail

    @property
    def attribute(self) -> str | None:
        return None

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(self.severity, self.summary, self.detail, attribute=self.attribute)


class ConfigurationError(ProviderError):
    """Host o credencial desconocidos o ausentes."""

    def __init__(self, attribute: str, summary: str, detail: str = "") -> None:
        super().__init__(summary, detail)
        self._attribute = attribute

    @property
    def attribute(self) -> str | None:
        return self._attribute


class UnknownValueError(ConfigurationError):
    """El valor existe pero todavía no se puede determinar."""


class MissingCredentialError(ConfigurationError):
    """Tras aplicar todas las capas, el token queda vacío."""


class MissingHostError(ConfigurationError):
    """El host explícito es una cadena vacía."""


class ClientConstructionError(ProviderError):
    """No se pudo construir la inyección de credenciales del cliente HTTP."""


class NetworkError(ProviderError):
    """Fallo de transporte o respuesta no exitosa."""

    def __init__(self, summary: str, detail: str = "", *, status_code: int | None = None) -> None:
        super().__init__(summary, detail)
        self.status_code = status_code


class DecodeError(ProviderError):
    """El cuerpo de la respuesta no tiene la forma esperada."""

    def __init__(self, summary: str, cause: Exception) -> None:
        super().__init__(summary, str(cause))
        self.cause = cause


class ResourceReleaseError(ProviderError):
    """No se pudo cerrar el cuerpo de la respuesta. No invalida el snapshot."""

    severity = Severity.WARNING
