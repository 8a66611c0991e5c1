"""Normalización de campos del formulario.

Convierte el mapping heterogéneo que llega del adaptador de plataforma en una
secuencia ordenada de `CanonicalPart` (texto o binario). El orden es el de
iteración del mapping, para que los tests sean reproducibles.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Mapping

from adapters.bridge import decode_from_bridge, infer_filename, is_data_url
from core.domain.models import (
    DEFAULT_MIME_TYPE,
    BinaryPayload,
    CanonicalPart,
    FieldValue,
    PartKind,
)

logger = logging.getLogger(__name__)


def _json_safe(value: Any, active: set[int]) -> Any:
    """Copia el valor reemplazando floats no finitos por None (como `JSON.stringify`)."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (Mapping, list, tuple)):
        marker = id(value)
        if marker in active:
            raise ValueError("Circular reference detected")
        active.add(marker)
        try:
            if isinstance(value, Mapping):
                return {k: _json_safe(v, active) for k, v in value.items()}
            return [_json_safe(v, active) for v in value]
        finally:
            active.discard(marker)
    return value


def to_json_text(value: Any) -> str:
    """JSON compacto, equivalente a `JSON.stringify` (`{"k":1}`).

    Si el objeto no se puede serializar (referencias circulares, claves no
    escalares) se envía su representación de texto en lugar de fallar.
    """

    try:
        return json.dumps(
            _json_safe(value, set()),
            ensure_ascii=False,
            separators=(",", ":"),
            allow_nan=False,
            default=str,
        )
    except (TypeError, ValueError) as exc:
        logger.debug("Falling back to text for unserializable object: %s", exc)
        return to_text(value)


def to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def _binary_part(key: str, payload: BinaryPayload) -> CanonicalPart:
    return CanonicalPart(
        key=key,
        kind=PartKind.BINARY,
        content=payload.content,
        mime_type=payload.mime_type,
        filename=payload.filename or infer_filename(key, payload.mime_type),
    )


def normalize_field(key: str, value: FieldValue) -> CanonicalPart | None:
    """Normaliza un único campo. Devuelve None si el valor es nulo."""

    if value is None:
        return None

    if isinstance(value, BinaryPayload):
        return _binary_part(key, value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return _binary_part(key, BinaryPayload(content=bytes(value), mime_type=DEFAULT_MIME_TYPE))

    if isinstance(value, str):
        if is_data_url(value):
            return _binary_part(key, decode_from_bridge(value))
        return CanonicalPart(key=key, kind=PartKind.TEXT, content=value)

    if isinstance(value, (Mapping, list, tuple)):
        return CanonicalPart(key=key, kind=PartKind.TEXT, content=to_json_text(value))

    return CanonicalPart(key=key, kind=PartKind.TEXT, content=to_text(value))


def normalize(form_data: Mapping[str, FieldValue]) -> list[CanonicalPart]:
    """Resuelve todos los campos a `CanonicalPart`.

    Solo falla con `MarshalError` (data URL con base64 inválido); en ese caso no
    se devuelve nada parcial.
    """

    parts: list[CanonicalPart] = []
    for key, value in form_data.items():
        part = normalize_field(str(key), value)
        if part is None:
            logger.debug("Skipping null form field %r", key)
            continue
        parts.append(part)
    return parts
