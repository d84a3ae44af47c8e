"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Decodificación estricta y tipada de las respuestas de Infisical, con campos
  opcionales declarados explícitamente (sin mapas dinámicos).
- Los snapshots son inmutables (`frozen`) una vez devueltos al llamador.

Nota:
- Los registros `Organization`/`Project`/`Environment` describen la forma del
  wire (aliases `_id`, `__v`, `organization`); los modelos `*State` describen
  la forma que consume el motor de estado del llamador.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.config import ConfigDict


class _Unknown:
    """Marca un valor de configuración presente pero aún no determinable."""

    _instance: "_Unknown | None" = None

    def __new__(cls) -> "_Unknown":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False


UNKNOWN = _Unknown()

# None = ausente, UNKNOWN = desconocido, str = valor conocido.
ConfigValue = Union[str, None, _Unknown]


class Credential(BaseModel):
    """Host + token ya resueltos. Inmutable durante la vida del cliente."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="URL base de la API de Infisical.")
    token: SecretStr = Field(..., description="API key enviada en `X-API-Key`.")


class _WireRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Organization(_WireRecord):
    """Organización devuelta por `GET /api/v2/users/me/organizations`.

    `created_at`, `updated_at` y `version` son la extensión opcional del
    registro canónico (`id`, `name`).
    """

    id: str = Field(..., alias="_id", description="Identificador opaco.")
    name: str = Field(..., description="Nombre de la organización.")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    version: int | None = Field(default=None, alias="__v")


class Environment(_WireRecord):
    id: str = Field(..., alias="_id")
    name: str
    slug: str


class Project(_WireRecord):
    """Workspace de Infisical, con sus entornos en el orden de origen."""

    id: str = Field(..., alias="_id")
    name: str
    organization_id: str = Field(..., alias="organization")
    environments: tuple[Environment, ...] = Field(default=())

    @field_validator("environments", mode="before")
    @classmethod
    def _null_environments(cls, value: Any) -> Any:
        return () if value is None else value


class OrganizationsResponse(_WireRecord):
    organizations: tuple[Organization, ...] = Field(default=())

    @field_validator("organizations", mode="before")
    @classmethod
    def _null_organizations(cls, value: Any) -> Any:
        return () if value is None else value


class WorkspacesResponse(_WireRecord):
    workspaces: tuple[Project, ...] = Field(default=())

    @field_validator("workspaces", mode="before")
    @classmethod
    def _null_workspaces(cls, value: Any) -> Any:
        return () if value is None else value


class OrganizationDetail(str, Enum):
    """Campos de organización proyectados en el snapshot."""

    BASIC = "basic"
    EXTENDED = "extended"


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)


class OrganizationState(_State):
    id: str
    name: str
    created_at: str | None = None
    updated_at: str | None = None
    v: int | None = None


class EnvironmentState(_State):
    id: str
    name: str
    slug: str


class ProjectState(_State):
    id: str
    name: str
    environments: tuple[EnvironmentState, ...] = ()


class OrganizationsSnapshot(_State):
    """Resultado de una lectura de organizaciones.

    `id` es el identificador de frescura, no el de un recurso.
    """

    id: str
    organizations: tuple[OrganizationState, ...] = ()

    def as_state(self) -> dict[str, Any]:
        # Los campos extendidos solo aparecen si el proyector los fijó.
        return self.model_dump(mode="json", exclude_unset=True)


class ProjectsSnapshot(_State):
    """Resultado de una lectura de proyectos de una organización."""

    id: str
    organization_id: str
    projects: tuple[ProjectState, ...] = ()

    def as_state(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


Snapshot = Union[OrganizationsSnapshot, ProjectsSnapshot]
