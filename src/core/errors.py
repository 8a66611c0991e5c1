"""Errores tipados del Core.

Por qué una jerarquía propia:
- El caller ve una única forma de error (`UploadError`) en vez de la jerarquía
  de httpx/json/base64.
- Las subclases permiten distinguir timeout de fallo de red sin parsear mensajes.
"""

from __future__ import annotations

UNKNOWN_ERROR = "Unknown error occurred"


class UploadError(Exception):
    """Base de todos los fallos de `upload_form_data`."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or UNKNOWN_ERROR
        super().__init__(f"Upload failed: {self.reason}")


class InvalidRequestError(UploadError):
    """La petición no pasa validación (url vacía, timeout <= 0, etc.)."""


class MarshalError(UploadError):
    """Un campo binario trae una codificación base64 inválida."""


class TransportError(UploadError):
    """Fallo de red, JSON inválido en la respuesta o cualquier error de bajo nivel."""


class UploadTimeoutError(UploadError, TimeoutError):
    """El intercambio HTTP no terminó dentro del timeout."""

    def __init__(self, timeout_ms: int | None = None) -> None:
        self.timeout_ms = timeout_ms
        if timeout_ms is None:
            super().__init__("request timed out")
        else:
            super().__init__(f"request timed out after {timeout_ms} ms")
