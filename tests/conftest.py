from __future__ import annotations

from email.parser import BytesParser
from email.policy import HTTP
from typing import Any, Callable

import httpx
import pytest

from adapters.httpx_transport import HttpxUploadTransport
from core.config import AppSettings
from core.services.form_data import FormDataService


def parse_multipart(request: httpx.Request) -> dict[str, dict[str, Any]]:
    """Parse a multipart/form-data request body into {name: {...}}."""

    content_type = request.headers["content-type"]
    raw = b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n" + request.content
    message = BytesParser(policy=HTTP).parsebytes(raw)
    fields: dict[str, dict[str, Any]] = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        fields[name] = {
            "filename": part.get_filename(),
            "content_type": part.get("content-type"),
            "payload": part.get_payload(decode=True) or b"",
        }
    return fields


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Fake server: echoes text fields under `form` and files under `files`."""

    form: dict[str, str] = {}
    files: dict[str, dict[str, Any]] = {}
    for name, part in parse_multipart(request).items():
        if part["filename"] is None:
            form[name] = part["payload"].decode("utf-8")
        else:
            files[name] = {
                "filename": part["filename"],
                "content_type": part["content_type"],
                "size": len(part["payload"]),
            }
    return httpx.Response(
        200,
        json={
            "form": form,
            "files": files,
            "headers": {k.lower(): v for k, v in request.headers.items()},
            "url": str(request.url),
        },
    )


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def make_service(settings: AppSettings) -> Callable[..., FormDataService]:
    def factory(handler: Callable[[httpx.Request], Any] = echo_handler) -> FormDataService:
        transport = HttpxUploadTransport(settings, transport=httpx.MockTransport(handler))
        return FormDataService(settings, transport=transport)

    return factory
