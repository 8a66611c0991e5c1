"""Transporte de uploads sobre httpx.

Responsabilidad:
- Construir el body multipart con el encoder nativo de httpx (genera el
  boundary y el Content-Type; nosotros nunca lo fijamos).
- Hacer el POST con los headers del caller tal cual.
- Aplicar el timeout con un scope de cancelación propio de cada llamada.
- Normalizar la respuesta a `UploadResponse` (JSON o texto).

Ciclo de una llamada: Idle -> Building -> Sending -> Completed | TimedOut | Failed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import CanonicalPart, UploadResponse
from core.errors import TransportError, UploadTimeoutError

logger = logging.getLogger(__name__)

MultipartFile = tuple[str, tuple[Any, ...]]


def build_multipart_files(parts: Sequence[CanonicalPart]) -> list[MultipartFile]:
    """Traduce las partes canónicas al formato `files=` de httpx.

    - Texto: `(None, value)` -> parte sin filename ni Content-Type.
    - Binario: `(filename, bytes, mime)`.

    Se usa una lista (no dict) para conservar el orden y permitir claves repetidas.
    """

    files: list[MultipartFile] = []
    for part in parts:
        if part.is_binary:
            files.append((part.key, (part.filename, part.content, part.mime_type)))
        else:
            files.append((part.key, (None, part.content)))
    return files


def normalize_response(response: httpx.Response) -> UploadResponse:
    """Aplana headers (claves en minúscula) y parsea el body.

    Si el Content-Type contiene `application/json` el body debe ser JSON válido;
    si no lo es, es `TransportError`. Cualquier otro tipo se devuelve como texto.
    """

    headers = {key.lower(): value for key, value in response.headers.items()}
    content_type = headers.get("content-type", "")

    data: Any
    if "application/json" in content_type.lower():
        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON response body: {exc}") from exc
    else:
        data = response.text

    return UploadResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=headers,
        data=data,
    )


class HttpxUploadTransport:
    """Implementación de `UploadTransport` con `httpx.AsyncClient`.

    Cada `send` crea y cierra su propio cliente: llamadas concurrentes no
    comparten body, timer ni conexiones.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def _exchange(
        self,
        url: str,
        files: list[MultipartFile],
        headers: Mapping[str, str],
        timeout_seconds: float | None,
    ) -> httpx.Response:
        async with build_async_client(
            self._settings,
            timeout_seconds=timeout_seconds,
            transport=self._transport,
        ) as client:
            logger.debug("Sending multipart POST to %s", url)
            if not files:
                # httpx no genera multipart sin partes: se envía un POST sin body.
                return await client.post(url, headers=dict(headers))
            return await client.post(url, files=files, headers=dict(headers))

    async def send(
        self,
        parts: Sequence[CanonicalPart],
        *,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> UploadResponse:
        logger.debug("Building multipart body for %s (%d parts)", url, len(parts))
        files = build_multipart_files(parts)
        timeout_seconds = timeout_ms / 1000 if timeout_ms else None

        try:
            async with asyncio.timeout(timeout_seconds):
                response = await self._exchange(url, files, headers or {}, timeout_seconds)
        except httpx.TimeoutException as exc:
            logger.debug("Upload to %s timed out in transport: %s", url, exc)
            raise UploadTimeoutError(timeout_ms) from exc
        except TimeoutError as exc:
            logger.debug("Upload to %s cancelled after %s ms", url, timeout_ms)
            raise UploadTimeoutError(timeout_ms) from exc
        except Exception as exc:
            logger.debug("Upload to %s failed: %r", url, exc)
            raise TransportError(str(exc) or None) from exc

        result = normalize_response(response)
        logger.info("Upload to %s completed with status %s", url, result.status)
        return result
