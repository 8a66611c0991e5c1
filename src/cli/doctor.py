"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.bridge import decode_from_bridge, encode_for_bridge
from core.config import AppSettings
from core.domain.models import BinaryPayload
from core.errors import UploadError
from core.services.form_data import FormDataService

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

# Bytes con cabecera PNG, solo para probar el codec.
_SAMPLE_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def _check_bridge() -> tuple[bool, str]:
    """Round-trip de un PNG mínimo por el codec de data URLs."""

    payload = BinaryPayload(content=_SAMPLE_PNG, mime_type="image/png")
    decoded = decode_from_bridge(encode_for_bridge(payload))
    if decoded.content != payload.content or decoded.mime_type != payload.mime_type:
        return False, "data URL round-trip mismatch"
    return True, f"{len(payload.content)} bytes round-tripped"


async def _check_upload(service: FormDataService, url: str) -> tuple[bool, str]:
    try:
        response = await service.upload_form_data(
            {
                "url": url,
                "headers": {"X-Custom-Header": "doctor"},
                "formData": {
                    "text_field": "test text",
                    "number_field": 123,
                    "object_field": {"key": "value"},
                    "image_field": encode_for_bridge(BinaryPayload(content=_SAMPLE_PNG, mime_type="image/png")),
                },
                "timeout": 10_000,
            }
        )
    except UploadError as exc:
        return False, str(exc)
    return response.ok, f"HTTP {response.status} {response.status_text}".strip()


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="formdata-uploader Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Default timeout", "OK", f"{settings.default_timeout_ms} ms")
    table.add_row("User-Agent", "OK", settings.user_agent)

    ok_bridge, detail_bridge = _check_bridge()
    table.add_row("Bridge codec", "OK" if ok_bridge else "FAIL", detail_bridge)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_upload(FormDataService(settings), settings.doctor_url))
    table.add_row("Multipart upload", "OK" if ok_http else "FAIL", f"{settings.doctor_url} -> {detail_http}")

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set FORMDATA_DOCTOR_URL to an echo endpoint reachable from this machine."
        )
