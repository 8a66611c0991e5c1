"""Exportación JSON de la respuesta normalizada.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Persiste la forma wire `{status, statusText, headers, data}` tal cual.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import UploadResponse


def export_response_json(*, response: UploadResponse, output_path: Path) -> Path:
    """Exporta `UploadResponse` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = response.to_wire()
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
