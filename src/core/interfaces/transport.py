"""Contrato del transporte de uploads.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir httpx por un stub en tests sin tocar el servicio.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, runtime_checkable

from core.domain.models import CanonicalPart, UploadResponse


@runtime_checkable
class UploadTransport(Protocol):
    """Contrato mínimo para enviar un formulario multipart.

    Reglas de diseño:
    - `send` es asíncrono porque hace I/O (HTTP).
    - Un status no-2xx NO es error: se devuelve como `UploadResponse`.
    - Los fallos se traducen a `TransportError` / `UploadTimeoutError`.
    """

    async def send(
        self,
        parts: Sequence[CanonicalPart],
        *,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> UploadResponse:
        ...
