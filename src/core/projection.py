"""Proyección de registros de dominio al estado que consume el llamador.

Transformación pura: sin I/O y sin camino de fallo. Siempre produce un
snapshot completo (secuencias vacías, nunca campos ausentes).
"""

from __future__ import annotations

import time
from typing import Callable, Iterable

from core.domain.models import (
    EnvironmentState,
    Organization,
    OrganizationDetail,
    OrganizationsSnapshot,
    OrganizationState,
    Project,
    ProjectsSnapshot,
    ProjectState,
)


class FreshnessClock:
    """Genera identificadores de frescura (segundos de reloj, en decimal).

    Nunca devuelve un valor menor que el último emitido por esta instancia,
    aunque el reloj de pared retroceda.
    """

    def __init__(self, now: Callable[[], float] = time.time) -> None:
        self._now = now
        self._last = 0

    def next_id(self) -> str:
        self._last = max(self._last, int(self._now()))
        return str(self._last)


def project_organizations(
    records: Iterable[Organization],
    *,
    freshness_id: str,
    detail: OrganizationDetail = OrganizationDetail.BASIC,
) -> OrganizationsSnapshot:
    organizations = []
    for org in records:
        if detail is OrganizationDetail.EXTENDED:
            state = OrganizationState(
                id=org.id,
                name=org.name,
                created_at=org.created_at,
                updated_at=org.updated_at,
                v=org.version,
            )
        else:
            state = OrganizationState(id=org.id, name=org.name)
        organizations.append(state)
    return OrganizationsSnapshot(id=freshness_id, organizations=tuple(organizations))


def project_projects(
    records: Iterable[Project],
    *,
    organization_id: str,
    freshness_id: str,
) -> ProjectsSnapshot:
    """Proyecta workspaces; `organization_id` es la clave usada en el fetch, sin tocar."""

    projects = tuple(
        ProjectState(
            id=proj.id,
            name=proj.name,
            environments=tuple(
                EnvironmentState(id=env.id, name=env.name, slug=env.slug) for env in proj.environments
            ),
        )
        for proj in records
    )
    return ProjectsSnapshot(id=freshness_id, organization_id=organization_id, projects=projects)
