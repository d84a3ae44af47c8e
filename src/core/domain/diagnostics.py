"""Diagnósticos visibles para el usuario.

Por qué existe:
- Cada lectura devuelve sus fallos como datos (no como excepciones) para que
  el llamador decida cómo presentarlos.
- Un diagnóstico puede apuntar a un atributo de configuración concreto
  (p.ej. `api_token`) o a la operación en general.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """Un error o aviso estructurado."""

    severity: Severity
    summary: str
    detail: str = ""
    attribute: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass
class Diagnostics:
    """Colección ordenada de diagnósticos de una operación."""

    items: list[Diagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def append(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.items.extend(diagnostics)

    def add_error(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_attribute_error(self, attribute: str, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail, attribute=attribute))

    def add_warning(self, summary: str, detail: str = "") -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    def has_error(self) -> bool:
        return any(d.is_error for d in self.items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if not d.is_error]
