"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta en el borde (url, timeout) sin acoplar el Core a
  librerías de I/O.
- `model_dump(by_alias=True)` produce la forma "wire" que espera el adaptador
  de plataforma (`formData`, `statusText`).

Nota:
- Estos modelos describen *qué* viaja, no *cómo* se envía.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

DEFAULT_MIME_TYPE = "application/octet-stream"


class BinaryPayload(BaseModel):
    """Variante canónica para contenido binario.

    Por qué existe:
    - El Core nunca depende de una representación binaria concreta (Blob,
      file handle, etc.); solo de este modelo.
    - Es lo que producen/consumen `encode_for_bridge` y `decode_from_bridge`.
    """

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(
        default=b"",
        description="Bytes crudos del archivo (puede ser vacío).",
    )
    mime_type: str = Field(
        default=DEFAULT_MIME_TYPE,
        min_length=1,
        description="MIME type declarado del contenido.",
    )
    filename: str | None = Field(
        default=None,
        description="Nombre de archivo opcional; si falta se infiere del MIME.",
    )


FieldValue = Union[
    BinaryPayload,
    bytes,
    bytearray,
    memoryview,
    str,
    bool,
    int,
    float,
    Mapping[str, Any],
    list,
    None,
]


class PartKind(str, Enum):
    TEXT = "text"
    BINARY = "binary"


class CanonicalPart(BaseModel):
    """Un campo del formulario ya resuelto a una única forma.

    Vive solo durante una llamada de upload; nunca se cachea.
    """

    key: str
    kind: PartKind
    content: bytes | str
    mime_type: str | None = None
    filename: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.kind is PartKind.BINARY


class UploadRequest(BaseModel):
    """Opciones resueltas que entrega el adaptador de plataforma."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(
        ...,
        min_length=1,
        description="Endpoint destino del POST multipart.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers HTTP opcionales (incluido Authorization), se envían tal cual.",
    )
    form_data: dict[str, Any] = Field(
        ...,
        alias="formData",
        description="Campos del formulario (texto, objetos, binarios o data URLs).",
    )
    timeout: int | None = Field(
        default=None,
        gt=0,
        description="Timeout en milisegundos; None usa el default de settings (30000).",
    )


class UploadResponse(BaseModel):
    """Respuesta normalizada, sea el body JSON o texto plano."""

    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(default="", alias="statusText")
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def to_wire(self) -> dict[str, Any]:
        """Forma `{status, statusText, headers, data}` para el adaptador."""

        return self.model_dump(mode="json", by_alias=True)


class EchoResult(BaseModel):
    value: str
