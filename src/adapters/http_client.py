"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers por defecto para todos los uploads.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    timeout_seconds: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - Un cliente por llamada: no hay pool de conexiones compartido entre uploads.
    """

    settings = settings or AppSettings()
    if timeout_seconds is None:
        timeout_seconds = settings.default_timeout_ms / 1000
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
