"""Superficie de llamadas que consume el adaptador de plataforma.

Este módulo es la costura entre el registro del plugin (fuera de alcance) y el
Core: recibe las opciones ya resueltas, valida, normaliza los campos y delega
el envío en un `UploadTransport`. No guarda estado entre llamadas.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from adapters.httpx_transport import HttpxUploadTransport
from core.config import AppSettings
from core.domain.models import EchoResult, UploadRequest, UploadResponse
from core.errors import InvalidRequestError
from core.interfaces.transport import UploadTransport
from core.services.field_normalizer import normalize

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: ValidationError) -> str:
    details = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "request"
        details.append(f"{loc}: {err.get('msg')}")
    return "; ".join(details) or "invalid upload request"


def parse_request(options: UploadRequest | Mapping[str, Any]) -> UploadRequest:
    """Valida las opciones del caller (acepta `formData` o `form_data`)."""

    if isinstance(options, UploadRequest):
        return options
    try:
        return UploadRequest.model_validate(dict(options))
    except ValidationError as exc:
        raise InvalidRequestError(_describe_validation_error(exc)) from exc


class FormDataService:
    """Operaciones `echo` y `upload_form_data`."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: UploadTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport or HttpxUploadTransport(self._settings)

    def echo(self, value: str) -> EchoResult:
        """Identidad; solo para diagnóstico del bridge."""

        logger.info("ECHO %s", value)
        return EchoResult(value=value)

    async def upload_form_data(self, options: UploadRequest | Mapping[str, Any]) -> UploadResponse:
        """Envía el formulario y devuelve la respuesta normalizada.

        Lanza siempre una subclase de `UploadError` (mensaje `Upload failed: ...`):
        `InvalidRequestError`, `MarshalError`, `UploadTimeoutError` o
        `TransportError`. Un status 4xx/5xx se devuelve como resultado normal.
        """

        request = parse_request(options)
        timeout_ms = request.timeout or self._settings.default_timeout_ms

        logger.debug("Starting upload to: %s", request.url)
        # MarshalError sale de aquí, antes de cualquier I/O.
        parts = normalize(request.form_data)

        return await self._transport.send(
            parts,
            url=request.url,
            headers=request.headers,
            timeout_ms=timeout_ms,
        )
