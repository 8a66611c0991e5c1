"""Codec de binarios para cruzar el "bridge" de plataforma.

Por qué existe:
- Algunos entornos host no pueden pasar handles binarios (Blob/File) a través
  de su frontera de llamadas; solo aceptan valores planos.
- El adaptador de plataforma codifica los binarios como data URLs
  (`data:<mime>;base64,<payload>`) y el Core los decodifica aquí.

Reglas:
- Solo se reconoce la forma base64 (`;base64,`). Cualquier otro `data:` es texto.
- Un payload base64 mal formado es `MarshalError`, nunca bytes vacíos/basura.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re

from core.domain.models import DEFAULT_MIME_TYPE, BinaryPayload
from core.errors import MarshalError

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*?);base64,(?P<payload>.*)$",
    re.DOTALL | re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")

# Extensiones fijas para los tipos de imagen más comunes.
_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def is_data_url(value: object) -> bool:
    """True si `value` es un string con forma `data:<mime>;base64,<payload>`."""

    return isinstance(value, str) and _DATA_URL_RE.match(value) is not None


def encode_for_bridge(payload: BinaryPayload) -> str:
    """Codifica un `BinaryPayload` como data URL base64 (forma canónica)."""

    encoded = base64.b64encode(payload.content).decode("ascii")
    return f"data:{payload.mime_type};base64,{encoded}"


def decode_from_bridge(value: str) -> BinaryPayload:
    """Decodifica una data URL base64 a `BinaryPayload`.

    Lanza `MarshalError` si el string no es una data URL base64 o si el payload
    no es base64 válido. Los espacios/saltos de línea dentro del payload se
    ignoran (varios encoders parten el base64 en líneas) y el padding `=` es
    opcional, como en `atob`.
    """

    match = _DATA_URL_RE.match(value)
    if match is None:
        raise MarshalError("invalid base64 data URL format")

    mime_type = match.group("mime").strip().lower() or DEFAULT_MIME_TYPE
    payload = _WHITESPACE_RE.sub("", match.group("payload"))
    # Un resto de 1 carácter nunca es base64 válido, con o sin padding.
    if len(payload) % 4 == 1:
        raise MarshalError(f"malformed base64 payload for {mime_type}: truncated input")
    payload += "=" * (-len(payload) % 4)
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MarshalError(f"malformed base64 payload for {mime_type}: {exc}") from exc

    return BinaryPayload(content=content, mime_type=mime_type)


def guess_extension(mime_type: str | None) -> str:
    if not mime_type:
        return "bin"
    mime = mime_type.split(";", 1)[0].strip().lower()
    if mime in _EXTENSIONS:
        return _EXTENSIONS[mime]
    guessed = mimetypes.guess_extension(mime)
    if guessed:
        return guessed.lstrip(".")
    return "bin"


def infer_filename(key: str, mime_type: str | None) -> str:
    """Nombre de archivo para una parte binaria: `<key>.<ext>`."""

    return f"{key}.{guess_extension(mime_type)}"
