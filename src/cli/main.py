"""CLI de formdata-uploader (Typer).

Por qué una CLI:
- Hace de "adaptador de plataforma" mínimo: resuelve opciones y llama al Core.
- Sirve para probar endpoints reales sin escribir código (`formdata upload ...`).
"""

from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.bridge import encode_for_bridge
from adapters.json_exporter import export_response_json
from cli import doctor
from cli.ui_components import build_body_panel, build_headers_table, print_banner
from core.config import AppSettings
from core.domain.models import BinaryPayload
from core.errors import UploadError
from core.services.form_data import FormDataService

app = typer.Typer(no_args_is_help=True, help="Multipart form-data uploads from the command line.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _split_pair(raw: str, sep: str, option: str) -> tuple[str, str]:
    if sep not in raw:
        raise typer.BadParameter(f"expected KEY{sep}VALUE, got {raw!r}", param_hint=option)
    key, value = raw.split(sep, 1)
    key = key.strip()
    if not key:
        raise typer.BadParameter(f"empty key in {raw!r}", param_hint=option)
    return key, value


def load_file_payload(path: Path) -> BinaryPayload:
    """Lee un archivo local como `BinaryPayload` (MIME por extensión)."""

    if not path.is_file():
        raise typer.BadParameter(f"file not found: {path}", param_hint="--file")
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return BinaryPayload(content=path.read_bytes(), mime_type=mime, filename=path.name)


def build_form_data(
    *,
    fields: list[str],
    json_fields: list[str],
    files: list[str],
    bridge: bool = False,
) -> dict[str, Any]:
    """Arma el mapping `formData` a partir de las opciones de la CLI.

    Con `bridge=True` los archivos viajan como data URLs base64, igual que los
    manda un host que no puede pasar binarios crudos.
    """

    form: dict[str, Any] = {}
    for raw in fields:
        key, value = _split_pair(raw, "=", "--field")
        form[key] = value
    for raw in json_fields:
        key, value = _split_pair(raw, "=", "--json-field")
        try:
            form[key] = json.loads(value)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"invalid JSON for {key!r}: {exc}", param_hint="--json-field") from exc
    for raw in files:
        key, value = _split_pair(raw, "=", "--file")
        payload = load_file_payload(Path(value).expanduser())
        form[key] = encode_for_bridge(payload) if bridge else payload
    return form


def parse_headers(headers: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for raw in headers:
        name, value = _split_pair(raw, ":", "--header")
        out[name] = value.strip()
    return out


@app.command()
def echo(value: str = typer.Argument(..., help="Value to echo back.")) -> None:
    """Echo a value through the service (bridge diagnostics)."""

    result = FormDataService().echo(value)
    _console.print_json(data=result.model_dump())


@app.command()
def upload(
    url: str = typer.Argument(..., help="Target endpoint for the multipart POST."),
    field: List[str] = typer.Option([], "--field", "-f", help="Text field KEY=VALUE (repeatable)."),
    json_field: List[str] = typer.Option(
        [], "--json-field", "-j", help="Structured field KEY=JSON, sent as serialized JSON (repeatable)."
    ),
    file: List[str] = typer.Option([], "--file", help="Binary field KEY=PATH (repeatable)."),
    header: List[str] = typer.Option([], "--header", "-H", help="Request header 'Name: value' (repeatable)."),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", min=1, help="Timeout in milliseconds."),
    bridge: bool = typer.Option(False, "--bridge", help="Send files as base64 data URLs through the bridge codec."),
    as_json: bool = typer.Option(False, "--json", help="Print the normalized response as JSON only."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the response JSON to this path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Upload form fields and files as multipart/form-data."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    form_data = build_form_data(fields=field, json_fields=json_field, files=file, bridge=bridge)
    options = {
        "url": url,
        "headers": parse_headers(header),
        "formData": form_data,
        "timeout": timeout,
    }

    service = FormDataService(settings)
    try:
        response = asyncio.run(service.upload_form_data(options))
    except UploadError as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if output is not None:
        export_response_json(response=response, output_path=output)

    if as_json:
        _console.print_json(data=response.to_wire())
        return

    print_banner(_console)
    _console.print(build_headers_table(response))
    _console.print(build_body_panel(response))
    if output is not None:
        _console.print(f"[green]Saved response to:[/green] {output}")


def run() -> None:
    app()
