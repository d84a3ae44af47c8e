"""Exportación JSON de snapshots.

Por qué JSON:
- Interoperabilidad con el motor de estado del llamador y otros pipelines.
- Formato estable (claves ordenadas) para poder comparar exportaciones.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import Snapshot


def snapshot_to_json(snapshot: Snapshot) -> str:
    return json.dumps(snapshot.as_state(), ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_snapshot_json(*, snapshot: Snapshot, output_path: Path) -> Path:
    """Exporta el snapshot a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(snapshot_to_json(snapshot), encoding="utf-8")
    return output_path
